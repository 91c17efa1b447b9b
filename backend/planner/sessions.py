import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, TypeVar

from errors import SearchSuperseded

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class SearchSlot:
    task: asyncio.Task | None = None


_slots: dict[str, SearchSlot] = {}


def get_or_create_slot(session_id: str) -> SearchSlot:
    if session_id not in _slots:
        _slots[session_id] = SearchSlot()
    return _slots[session_id]


def remove_slot(session_id: str) -> None:
    _slots.pop(session_id, None)


def cancel_search(session_id: str) -> bool:
    """Cancel the in-flight search for a session. Returns True if one was running."""
    slot = _slots.get(session_id)
    if slot and slot.task and not slot.task.done():
        slot.task.cancel()
        return True
    return False


async def run_superseding(session_id: str, coro: Awaitable[T]) -> T:
    """Run `coro` as the only search for `session_id`.

    Any earlier search still in flight for the same session is cancelled and
    its caller gets SearchSuperseded instead of a stale result.
    """
    if cancel_search(session_id):
        logger.info("Superseding in-flight search for session %s", session_id)

    slot = get_or_create_slot(session_id)
    task = asyncio.ensure_future(coro)
    slot.task = task
    try:
        return await task
    except asyncio.CancelledError:
        if task.cancelled() and slot.task is not task:
            raise SearchSuperseded(f"Search for session {session_id} was superseded")
        raise
    finally:
        if slot.task is task:
            remove_slot(session_id)

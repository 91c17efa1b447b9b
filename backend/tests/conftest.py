import uuid

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.ext.compiler import compiles

from db.models import Base
from planner import sessions

# ---------------------------------------------------------------------------
# SQLite compatibility shims for PostgreSQL-specific column types
# ---------------------------------------------------------------------------

@compiles(JSONB, "sqlite")
def _compile_jsonb_sqlite(type_, compiler, **kw):
    return compiler.visit_JSON(JSON(), **kw)


# UUID(as_uuid=True) → CHAR(36) on SQLite
@compiles(UUID, "sqlite")
def _compile_uuid_sqlite(type_, compiler, **kw):
    return "CHAR(36)"


# ---------------------------------------------------------------------------
# Async SQLite engine + session fixtures
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine("sqlite+aiosqlite://", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    factory = async_sessionmaker(db_engine, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def creator_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest_asyncio.fixture(autouse=True)
async def override_get_db(db_session: AsyncSession, monkeypatch):
    """Monkeypatch db.database.get_db so all production code uses the test session."""
    from contextlib import asynccontextmanager

    @asynccontextmanager
    async def _fake_get_db():
        yield db_session

    import db.database
    import main

    monkeypatch.setattr(db.database, "get_db", _fake_get_db)
    monkeypatch.setattr(main, "get_db", _fake_get_db)


@pytest.fixture(autouse=True)
def clear_search_slots():
    sessions._slots.clear()
    yield
    sessions._slots.clear()


# ---------------------------------------------------------------------------
# Remote service fakes
# ---------------------------------------------------------------------------

def overpass_element(
    element_id,
    name,
    lat=None,
    lon=None,
    center=None,
    **extra_tags,
) -> dict:
    """Build an Overpass element; extra tags use `addr_street` for `addr:street`."""
    tags = {key.replace("addr_", "addr:"): value for key, value in extra_tags.items()}
    if name is not None:
        tags["name"] = name
    element = {"type": "node" if center is None else "way", "id": element_id, "tags": tags}
    if lat is not None:
        element["lat"] = lat
    if lon is not None:
        element["lon"] = lon
    if center is not None:
        element["center"] = {"lat": center[0], "lon": center[1]}
    return element


def mock_http_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def overpass_handler_factory():
    """Returns a factory for MockTransport handlers that answer with `elements`."""

    def factory(elements, status_code=200, requests=None):
        def handler(request: httpx.Request) -> httpx.Response:
            if requests is not None:
                requests.append(request)
            return httpx.Response(status_code, json={"elements": elements})

        return handler

    return factory

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import (
    InterestCategory,
    InterestModel,
    MeetupModel,
    MeetupParticipantModel,
    MeetupStatus,
    MeetupType,
    ParticipantStatus,
)
from errors import DuplicateInterest, InvalidInput


def describe_meeting_point(
    name: str,
    address: str | None = None,
    meetup_type: MeetupType = MeetupType.FRIENDS,
) -> str:
    prefix = (
        "Marketplace exchange at" if meetup_type == MeetupType.MARKETPLACE else "Meeting at"
    )
    if address:
        return f"{prefix} {name} - {address}"
    return f"{prefix} {name}"


# --- Meetups ---


async def create_meetup(
    db: AsyncSession,
    creator_id: uuid.UUID,
    title: str,
    meetup_type: MeetupType,
    meeting_point_lat: float | None = None,
    meeting_point_lng: float | None = None,
    meeting_point_name: str | None = None,
    meeting_point_address: str | None = None,
    description: str | None = None,
    scheduled_date: datetime | None = None,
) -> MeetupModel:
    if description is None and meeting_point_name:
        description = describe_meeting_point(
            meeting_point_name, meeting_point_address, meetup_type
        )
    meetup = MeetupModel(
        creator_id=creator_id,
        title=title.strip(),
        description=description,
        meetup_type=meetup_type,
        meeting_point_lat=meeting_point_lat,
        meeting_point_lng=meeting_point_lng,
        meeting_point_name=meeting_point_name,
        scheduled_date=scheduled_date,
        status=MeetupStatus.PENDING,
    )
    db.add(meetup)
    await db.flush()
    return meetup


async def get_meetup(db: AsyncSession, meetup_id: uuid.UUID) -> MeetupModel | None:
    return await db.get(MeetupModel, meetup_id)


async def list_meetups(
    db: AsyncSession, creator_id: uuid.UUID | None = None
) -> list[MeetupModel]:
    stmt = select(MeetupModel).order_by(MeetupModel.created_at.desc())
    if creator_id is not None:
        stmt = stmt.where(MeetupModel.creator_id == creator_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update_meetup_status(
    db: AsyncSession, meetup_id: uuid.UUID, status: MeetupStatus
) -> MeetupModel | None:
    meetup = await db.get(MeetupModel, meetup_id)
    if meetup:
        meetup.status = status
        await db.flush()
    return meetup


# --- Participants ---


async def add_participant(
    db: AsyncSession,
    meetup_id: uuid.UUID,
    user_id: uuid.UUID,
    location_lat: float | None = None,
    location_lng: float | None = None,
    status: ParticipantStatus = ParticipantStatus.INVITED,
    availability: dict | None = None,
) -> MeetupParticipantModel:
    participant = MeetupParticipantModel(
        meetup_id=meetup_id,
        user_id=user_id,
        location_lat=location_lat,
        location_lng=location_lng,
        status=status,
        availability=availability,
    )
    db.add(participant)
    await db.flush()
    return participant


async def list_participants(
    db: AsyncSession, meetup_id: uuid.UUID
) -> list[MeetupParticipantModel]:
    result = await db.execute(
        select(MeetupParticipantModel)
        .where(MeetupParticipantModel.meetup_id == meetup_id)
        .order_by(MeetupParticipantModel.created_at)
    )
    return list(result.scalars().all())


# --- Interests ---


@dataclass
class InterestMatch:
    user_id: uuid.UUID
    interests: list[str] = field(default_factory=list)


async def list_interests(db: AsyncSession, user_id: uuid.UUID) -> list[InterestModel]:
    result = await db.execute(
        select(InterestModel)
        .where(InterestModel.user_id == user_id)
        .order_by(InterestModel.created_at)
    )
    return list(result.scalars().all())


async def add_interest(
    db: AsyncSession,
    user_id: uuid.UUID,
    interest_name: str,
    category: InterestCategory = InterestCategory.OTHER,
) -> InterestModel:
    name = interest_name.strip() if interest_name else ""
    if not name:
        raise InvalidInput("Please enter an interest")

    existing = await list_interests(db, user_id)
    if any(i.interest_name.lower() == name.lower() for i in existing):
        raise DuplicateInterest("You already have this interest")

    interest = InterestModel(user_id=user_id, interest_name=name, category=category)
    db.add(interest)
    await db.flush()
    return interest


async def remove_interest(
    db: AsyncSession, interest_id: uuid.UUID, user_id: uuid.UUID | None = None
) -> bool:
    interest = await db.get(InterestModel, interest_id)
    if interest is None or (user_id is not None and interest.user_id != user_id):
        return False
    await db.delete(interest)
    await db.flush()
    return True


async def find_interest_matches(
    db: AsyncSession, user_id: uuid.UUID
) -> list[InterestMatch]:
    """Other users sharing at least one interest, most shared interests first."""
    mine = {i.interest_name.lower() for i in await list_interests(db, user_id)}
    if not mine:
        raise InvalidInput("Add some interests first to find matches")

    result = await db.execute(
        select(InterestModel)
        .where(InterestModel.user_id != user_id)
        .order_by(InterestModel.created_at)
    )
    matches: dict[uuid.UUID, InterestMatch] = {}
    for interest in result.scalars().all():
        if interest.interest_name.lower() not in mine:
            continue
        match = matches.setdefault(interest.user_id, InterestMatch(user_id=interest.user_id))
        match.interests.append(interest.interest_name)

    # sorted() is stable, so ties keep first-seen order
    return sorted(matches.values(), key=lambda m: len(m.interests), reverse=True)

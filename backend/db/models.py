import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Float, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class MeetupType(str, enum.Enum):
    FRIENDS = "friends"
    MARKETPLACE = "marketplace"
    INTEREST = "interest"


class MeetupStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ParticipantStatus(str, enum.Enum):
    INVITED = "invited"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class MeetupModel(Base):
    __tablename__ = "meetups"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    creator_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    meetup_type: Mapped[MeetupType] = mapped_column(String(20), nullable=False)
    meeting_point_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    meeting_point_lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    meeting_point_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    scheduled_date: Mapped[datetime | None] = mapped_column(nullable=True)
    status: Mapped[MeetupStatus] = mapped_column(
        String(20), nullable=False, default=MeetupStatus.PENDING
    )
    created_at: Mapped[datetime] = mapped_column(default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=_utcnow, onupdate=_utcnow)


class MeetupParticipantModel(Base):
    __tablename__ = "meetup_participants"
    __table_args__ = (UniqueConstraint("meetup_id", "user_id"),)

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    meetup_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("meetups.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    location_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    location_lng: Mapped[float | None] = mapped_column(Float, nullable=True)
    availability: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    status: Mapped[ParticipantStatus] = mapped_column(
        String(20), nullable=False, default=ParticipantStatus.INVITED
    )
    created_at: Mapped[datetime] = mapped_column(default=_utcnow)


class InterestCategory(str, enum.Enum):
    GAMING = "gaming"
    SPORTS = "sports"
    MUSIC = "music"
    MOVIES = "movies"
    BOOKS = "books"
    FOOD = "food"
    TRAVEL = "travel"
    TECHNOLOGY = "technology"
    ART = "art"
    FITNESS = "fitness"
    OUTDOORS = "outdoors"
    OTHER = "other"


class InterestModel(Base):
    __tablename__ = "user_interests"
    __table_args__ = (UniqueConstraint("user_id", "interest_name"),)

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    interest_name: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[InterestCategory] = mapped_column(
        String(20), nullable=False, default=InterestCategory.OTHER
    )
    created_at: Mapped[datetime] = mapped_column(default=_utcnow)

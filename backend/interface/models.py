import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from db.models import (
    InterestCategory,
    InterestModel,
    MeetupModel,
    MeetupParticipantModel,
    MeetupStatus,
    MeetupType,
    ParticipantStatus,
)
from db.repository import InterestMatch
from geo.types import GeoPoint, PlaceCandidate
from geocoding.nominatim import GeocodeResult
from places.search import PlaceSearchResult


class PointIn(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

    def to_point(self) -> GeoPoint:
        return GeoPoint(latitude=self.lat, longitude=self.lng)


class GeocodeRequest(BaseModel):
    address: str


class MidpointRequest(BaseModel):
    points: list[PointIn]


class PlaceSearchRequest(BaseModel):
    center: PointIn
    category: str = "coffee"
    radius_meters: float | None = Field(default=None, gt=0)
    session_id: str | None = None


class PlanRequest(BaseModel):
    addresses: list[str]
    category: str = "coffee"
    radius_meters: float | None = Field(default=None, gt=0)


class CreateMeetupRequest(BaseModel):
    creator_id: uuid.UUID
    title: str = Field(min_length=1)
    meetup_type: MeetupType
    meeting_point: PointIn | None = None
    meeting_point_name: str | None = None
    meeting_point_address: str | None = None
    description: str | None = None
    scheduled_date: datetime | None = None
    creator_location: PointIn | None = None


class AddParticipantRequest(BaseModel):
    user_id: uuid.UUID
    location: PointIn | None = None
    status: ParticipantStatus = ParticipantStatus.INVITED
    availability: dict | None = None


class UpdateStatusRequest(BaseModel):
    status: MeetupStatus


class AddInterestRequest(BaseModel):
    interest_name: str
    category: InterestCategory = InterestCategory.OTHER


def _enum_value(value):
    return value.value if hasattr(value, "value") else value


def point_to_wire(point: GeoPoint) -> dict:
    return {"lat": point.latitude, "lng": point.longitude}


def candidate_to_wire(candidate: PlaceCandidate) -> dict:
    return {
        "id": candidate.identifier,
        "name": candidate.name,
        "type": candidate.category,
        "lat": candidate.location.latitude,
        "lng": candidate.location.longitude,
        "address": candidate.address,
        "distance_km": round(candidate.distance_km, 3),
    }


def search_result_to_wire(result: PlaceSearchResult) -> dict:
    return {
        "status": result.status.value,
        "places": [candidate_to_wire(p) for p in result.places],
        "message": result.message,
    }


def geocode_to_wire(result: GeocodeResult) -> dict:
    return {**point_to_wire(result.point), "display_name": result.display_name}


def participant_to_wire(participant: MeetupParticipantModel) -> dict:
    return {
        "id": str(participant.id),
        "meetup_id": str(participant.meetup_id),
        "user_id": str(participant.user_id),
        "location_lat": participant.location_lat,
        "location_lng": participant.location_lng,
        "availability": participant.availability,
        "status": _enum_value(participant.status),
    }


def meetup_to_wire(meetup: MeetupModel) -> dict:
    """Serialize a MeetupModel to a JSON-ready dict."""
    return {
        "id": str(meetup.id),
        "creator_id": str(meetup.creator_id),
        "title": meetup.title,
        "description": meetup.description,
        "meetup_type": _enum_value(meetup.meetup_type),
        "meeting_point_lat": meetup.meeting_point_lat,
        "meeting_point_lng": meetup.meeting_point_lng,
        "meeting_point_name": meetup.meeting_point_name,
        "scheduled_date": meetup.scheduled_date.isoformat() if meetup.scheduled_date else None,
        "status": _enum_value(meetup.status),
        "created_at": meetup.created_at.isoformat(),
    }


def interest_to_wire(interest: InterestModel) -> dict:
    return {
        "id": str(interest.id),
        "user_id": str(interest.user_id),
        "interest_name": interest.interest_name,
        "category": _enum_value(interest.category),
    }


def match_to_wire(match: InterestMatch) -> dict:
    return {"user_id": str(match.user_id), "interests": match.interests}

import logging
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from db.database import get_db, init_db
from db.models import ParticipantStatus
from db.repository import (
    add_interest,
    add_participant,
    create_meetup,
    find_interest_matches,
    get_meetup,
    list_interests,
    list_meetups,
    list_participants,
    remove_interest,
    update_meetup_status,
)
from errors import DuplicateInterest, InvalidInput, SearchSuperseded, TransportFailure
from geo.midpoint import compute_midpoint
from geocoding.nominatim import geocode
from interface.models import (
    AddInterestRequest,
    AddParticipantRequest,
    CreateMeetupRequest,
    GeocodeRequest,
    MidpointRequest,
    PlaceSearchRequest,
    PlanRequest,
    UpdateStatusRequest,
    geocode_to_wire,
    interest_to_wire,
    match_to_wire,
    meetup_to_wire,
    participant_to_wire,
    point_to_wire,
    search_result_to_wire,
)
from places.categories import CATEGORY_FILTERS, CATEGORY_LABELS, DEFAULT_CATEGORY
from places.search import SearchStatus, find_nearby_places
from planner.planner import plan_meetup
from planner.sessions import run_superseding

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    logger.info("Database tables ready")
    yield


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Geo endpoints ---


@app.get("/api/categories")
async def get_categories():
    return [
        {
            "id": category.value,
            "name": CATEGORY_LABELS[category],
            "filter": tag_filter,
            "default": category == DEFAULT_CATEGORY,
        }
        for category, tag_filter in CATEGORY_FILTERS.items()
    ]


@app.post("/api/geocode")
async def geocode_endpoint(body: GeocodeRequest):
    try:
        result = await geocode(body.address)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TransportFailure as e:
        raise HTTPException(status_code=502, detail=str(e))
    if result is None:
        raise HTTPException(status_code=404, detail="Address not found")
    return geocode_to_wire(result)


@app.post("/api/midpoint")
async def midpoint_endpoint(body: MidpointRequest):
    try:
        midpoint = compute_midpoint([p.to_point() for p in body.points])
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    return point_to_wire(midpoint)


@app.post("/api/places/search")
async def search_places_endpoint(body: PlaceSearchRequest):
    search = find_nearby_places(body.center.to_point(), body.category, body.radius_meters)
    try:
        if body.session_id:
            result = await run_superseding(body.session_id, search)
        else:
            result = await search
    except SearchSuperseded as e:
        raise HTTPException(status_code=409, detail=str(e))

    if result.status == SearchStatus.TRANSPORT_FAILURE:
        raise HTTPException(status_code=502, detail=result.message)
    return search_result_to_wire(result)


@app.post("/api/plan")
async def plan_endpoint(body: PlanRequest):
    try:
        plan = await plan_meetup(body.addresses, body.category, body.radius_meters)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except TransportFailure as e:
        raise HTTPException(status_code=502, detail=str(e))

    if plan.search.status == SearchStatus.TRANSPORT_FAILURE:
        raise HTTPException(status_code=502, detail=plan.search.message)
    return {
        "locations": [geocode_to_wire(loc) for loc in plan.locations],
        "midpoint": point_to_wire(plan.midpoint),
        "unresolved": plan.unresolved,
        **search_result_to_wire(plan.search),
    }


# --- Meetups ---


@app.post("/api/meetups")
async def create_meetup_endpoint(body: CreateMeetupRequest):
    point = body.meeting_point
    async with get_db() as db:
        meetup = await create_meetup(
            db,
            creator_id=body.creator_id,
            title=body.title,
            meetup_type=body.meetup_type,
            meeting_point_lat=point.lat if point else None,
            meeting_point_lng=point.lng if point else None,
            meeting_point_name=body.meeting_point_name,
            meeting_point_address=body.meeting_point_address,
            description=body.description,
            scheduled_date=body.scheduled_date,
        )
        # The creator joins their own meetup
        if body.creator_location:
            await add_participant(
                db,
                meetup_id=meetup.id,
                user_id=body.creator_id,
                location_lat=body.creator_location.lat,
                location_lng=body.creator_location.lng,
                status=ParticipantStatus.ACCEPTED,
            )
    return meetup_to_wire(meetup)


@app.get("/api/meetups")
async def list_meetups_endpoint(creator_id: uuid.UUID | None = None):
    async with get_db() as db:
        meetups = await list_meetups(db, creator_id=creator_id)
    return [meetup_to_wire(m) for m in meetups]


@app.get("/api/meetups/{meetup_id}")
async def get_meetup_endpoint(meetup_id: uuid.UUID):
    async with get_db() as db:
        meetup = await get_meetup(db, meetup_id)
        if not meetup:
            raise HTTPException(status_code=404, detail="Meetup not found")
        participants = await list_participants(db, meetup_id)
    return {
        **meetup_to_wire(meetup),
        "participants": [participant_to_wire(p) for p in participants],
    }


@app.post("/api/meetups/{meetup_id}/participants")
async def add_participant_endpoint(meetup_id: uuid.UUID, body: AddParticipantRequest):
    async with get_db() as db:
        meetup = await get_meetup(db, meetup_id)
        if not meetup:
            raise HTTPException(status_code=404, detail="Meetup not found")
        participant = await add_participant(
            db,
            meetup_id=meetup_id,
            user_id=body.user_id,
            location_lat=body.location.lat if body.location else None,
            location_lng=body.location.lng if body.location else None,
            status=body.status,
            availability=body.availability,
        )
    return participant_to_wire(participant)


@app.patch("/api/meetups/{meetup_id}/status")
async def update_status_endpoint(meetup_id: uuid.UUID, body: UpdateStatusRequest):
    async with get_db() as db:
        meetup = await update_meetup_status(db, meetup_id, body.status)
        if not meetup:
            raise HTTPException(status_code=404, detail="Meetup not found")
    return meetup_to_wire(meetup)


# --- Interests ---


@app.get("/api/users/{user_id}/interests")
async def list_interests_endpoint(user_id: uuid.UUID):
    async with get_db() as db:
        interests = await list_interests(db, user_id)
    return [interest_to_wire(i) for i in interests]


@app.post("/api/users/{user_id}/interests")
async def add_interest_endpoint(user_id: uuid.UUID, body: AddInterestRequest):
    try:
        async with get_db() as db:
            interest = await add_interest(db, user_id, body.interest_name, body.category)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateInterest as e:
        raise HTTPException(status_code=409, detail=str(e))
    return interest_to_wire(interest)


@app.delete("/api/users/{user_id}/interests/{interest_id}")
async def remove_interest_endpoint(user_id: uuid.UUID, interest_id: uuid.UUID):
    async with get_db() as db:
        removed = await remove_interest(db, interest_id, user_id=user_id)
    if not removed:
        raise HTTPException(status_code=404, detail="Interest not found")
    return {"ok": True}


@app.get("/api/users/{user_id}/matches")
async def interest_matches_endpoint(user_id: uuid.UUID):
    try:
        async with get_db() as db:
            matches = await find_interest_matches(db, user_id)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [match_to_wire(m) for m in matches]

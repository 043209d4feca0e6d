"""
Wedding and event routes.

Usage:
    1. GET   /api/weddings                      - Weddings owned by the caller
    2. POST  /api/weddings                      - Create a wedding
    3. GET   /api/weddings/{wedding_id}         - Single wedding
    4. PATCH /api/weddings/{wedding_id}         - Partial update
    5. GET   /api/events/wedding/{wedding_id}   - Events in display order
    6. POST  /api/events/wedding/{wedding_id}   - Add an event
    7. PATCH /api/events/{event_id}             - Partial update
    8. DELETE /api/events/{event_id}            - Remove an event
"""

from fastapi import APIRouter, Depends, HTTPException, status

from viah.auth.access import ensure_wedding_access
from viah.auth.verify import auth_dependency
from viah.features.planning.domain import Event, EventCreate, EventUpdate, Wedding, WeddingCreate, WeddingUpdate
from viah.features.planning.repository import EventRepository, WeddingRepository
from viah.infrastructure.observability.logging import get_logger

router = APIRouter(prefix="/api", tags=["planning"])
logger = get_logger(__name__)


@router.get("/weddings", response_model=list[Wedding])
async def list_weddings(claims: dict = Depends(auth_dependency)):
    return await WeddingRepository.list_for_user(claims["sub"])


@router.post("/weddings", response_model=Wedding, status_code=status.HTTP_201_CREATED)
async def create_wedding(payload: WeddingCreate, claims: dict = Depends(auth_dependency)):
    return await WeddingRepository.create(claims["sub"], payload)


@router.get("/weddings/{wedding_id}", response_model=Wedding)
async def get_wedding(wedding_id: str, claims: dict = Depends(auth_dependency)):
    return await ensure_wedding_access(claims, wedding_id)


@router.patch("/weddings/{wedding_id}", response_model=Wedding)
async def update_wedding(
    wedding_id: str, payload: WeddingUpdate, claims: dict = Depends(auth_dependency)
):
    await ensure_wedding_access(claims, wedding_id)
    return await WeddingRepository.update(wedding_id, payload)


@router.get("/events/wedding/{wedding_id}", response_model=list[Event])
async def list_events(wedding_id: str, claims: dict = Depends(auth_dependency)):
    await ensure_wedding_access(claims, wedding_id)
    return await EventRepository.list_for_wedding(wedding_id)


@router.post(
    "/events/wedding/{wedding_id}", response_model=Event, status_code=status.HTTP_201_CREATED
)
async def create_event(
    wedding_id: str, payload: EventCreate, claims: dict = Depends(auth_dependency)
):
    await ensure_wedding_access(claims, wedding_id)
    event = await EventRepository.create(wedding_id, payload)
    logger.info("Event created", wedding_id=wedding_id, event_id=event.id, type=event.type)
    return event


async def _load_owned_event(event_id: str, claims: dict) -> Event:
    event = await EventRepository.get(event_id)
    if not event:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    await ensure_wedding_access(claims, event.wedding_id)
    return event


@router.patch("/events/{event_id}", response_model=Event)
async def update_event(event_id: str, payload: EventUpdate, claims: dict = Depends(auth_dependency)):
    await _load_owned_event(event_id, claims)
    return await EventRepository.update(event_id, payload)


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: str, claims: dict = Depends(auth_dependency)):
    await _load_owned_event(event_id, claims)
    await EventRepository.delete(event_id)

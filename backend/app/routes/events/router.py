from fastapi import APIRouter, Depends, status
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.middleware import get_db, require_roles
from app.db.crud import event as event_crud
from app.schemas.event import EventCreateRequest, EventOut, EventTypeOut

router = APIRouter(prefix="/events", tags=["events"])


@router.get("/upcoming", response_model=List[EventOut])
async def upcoming_events(db: AsyncSession = Depends(get_db)):
    """Events ordered by date, earliest first."""
    return await event_crud.get_upcoming_events(db)


@router.get("/types", response_model=List[EventTypeOut])
async def event_types(db: AsyncSession = Depends(get_db)):
    return await event_crud.get_event_types(db)


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
async def create_event(
    body: EventCreateRequest,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(require_roles(["Doctor"])),
):
    return await event_crud.create_event(db, body)

# app/db/crud/event.py
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException

from app.config.constants import MONTH_ABBREVIATIONS
from app.db.models.event import EventModel, EventTypeModel
from app.schemas.event import EventCreateRequest, EventOut, EventTypeRef, DateFormatted

logger = logging.getLogger(__name__)


def to_event_out(event: EventModel) -> EventOut:
    event_type = event.event_type
    return EventOut(
        id=event.id,
        title=event.title,
        location=event.location,
        time=event.time,
        date=event.date,
        event_type_id=event.event_type_id,
        event_type=EventTypeRef(
            name=event_type.name if event_type else "Event",
            color=event_type.color if event_type else "primary",
        ),
        date_formatted=DateFormatted(
            month=MONTH_ABBREVIATIONS[event.date.month - 1],
            day=str(event.date.day),
        ),
    )


async def get_upcoming_events(db: AsyncSession) -> List[EventOut]:
    result = await db.execute(
        select(EventModel)
        .options(selectinload(EventModel.event_type))
        .order_by(EventModel.date, EventModel.id)
    )
    return [to_event_out(e) for e in result.scalars().all()]


async def get_event_types(db: AsyncSession) -> List[EventTypeModel]:
    result = await db.execute(select(EventTypeModel).order_by(EventTypeModel.id))
    return result.scalars().all()


async def create_event(db: AsyncSession, data: EventCreateRequest) -> EventOut:
    if data.event_type_id is not None and not await db.get(EventTypeModel, data.event_type_id):
        raise HTTPException(status_code=400, detail="Event type not found")

    event = EventModel(
        title=data.title,
        location=data.location,
        time=data.time,
        date=data.date,
        event_type_id=data.event_type_id,
    )
    db.add(event)
    await db.commit()

    event = await db.scalar(
        select(EventModel)
        .options(selectinload(EventModel.event_type))
        .where(EventModel.id == event.id)
        .execution_options(populate_existing=True)
    )
    logger.info(f"CRUD: created event_id={event.id} on {event.date:%Y-%m-%d}")
    return to_event_out(event)

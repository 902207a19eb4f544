# app/schemas/event.py
from datetime import datetime
from typing import Optional, Annotated
from pydantic import BaseModel, ConfigDict, Field


class EventTypeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str


class EventTypeRef(BaseModel):
    name: str
    color: str


class DateFormatted(BaseModel):
    month: str
    day: str


class EventOut(BaseModel):
    id: int
    title: str
    location: str
    time: str
    date: datetime
    event_type_id: Optional[int] = None
    event_type: EventTypeRef
    date_formatted: DateFormatted


class EventCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Annotated[str, Field(min_length=1, max_length=255)]
    location: Annotated[str, Field(min_length=1, max_length=255)]
    time: Annotated[str, Field(min_length=1, max_length=64)]
    date: datetime
    event_type_id: Optional[int] = Field(default=None, alias="eventTypeId")

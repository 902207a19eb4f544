# app/db/models/event.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base import Base


class EventTypeModel(Base):
    __tablename__ = "event_types"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    color = Column(String, nullable=False)


class EventModel(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=False)
    location = Column(String, nullable=False)
    time = Column(String, nullable=False)  # free text, e.g. "2:00 PM - 3:30 PM EST"
    event_type_id = Column(
        Integer, ForeignKey("event_types.id", ondelete="SET NULL"), nullable=True
    )
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    event_type = relationship("EventTypeModel")

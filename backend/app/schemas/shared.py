# app/schemas/shared.py
from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict

from app.config.constants import SPECIALTY_COLORS, DEFAULT_SPECIALTY_COLOR


class Role(str, Enum):
    doctor = "Doctor"
    student = "Student"
    patient = "Patient"


def color_class_for(specialty: Optional[str]) -> str:
    return SPECIALTY_COLORS.get(specialty or "", DEFAULT_SPECIALTY_COLOR)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str
    role: Role
    title: str = ""
    organization: str = ""
    specialty: str = ""
    location: str = ""
    initials: str = ""
    profile_picture_url: Optional[str] = None
    education: Optional[str] = None
    medical_history: Optional[str] = None
    created_at: Optional[datetime] = None


class UserSummary(BaseModel):
    """Compact user card used inside posts, comments and documents."""

    id: int
    name: str
    initials: str
    specialty: str = ""
    color_class: str

    @classmethod
    def from_user(cls, user) -> "UserSummary":
        return cls(
            id=user.id,
            name=user.name,
            initials=user.initials,
            specialty=user.specialty,
            color_class=color_class_for(user.specialty),
        )


class SuccessResponse(BaseModel):
    success: bool = True

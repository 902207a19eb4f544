# app/schemas/profile.py
from typing import Optional, Annotated
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.shared import UserOut


class ProfileOut(BaseModel):
    """Profile row merged with the owning user's public fields."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    profile_completion: int
    remaining_items: int
    network_growth: int
    network_growth_days: int

    name: str
    title: str
    organization: str
    specialty: str
    location: str
    initials: str
    profile_picture_url: Optional[str] = None
    education: Optional[str] = None
    medical_history: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    # username, password and role are not part of this model on purpose
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: Optional[Annotated[str, Field(min_length=1, max_length=128)]] = None
    title: Optional[str] = None
    organization: Optional[str] = None
    specialty: Optional[str] = None
    location: Optional[str] = None
    initials: Optional[Annotated[str, Field(max_length=4)]] = None
    education: Optional[str] = None
    medical_history: Optional[str] = Field(default=None, alias="medicalHistory")
    profile_picture_url: Optional[str] = Field(default=None, alias="profilePictureUrl")

    # Omitting these leaves them unchanged; an explicit null would clear a NOT NULL column
    @field_validator("name", "title", "organization", "specialty", "location", "initials")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class ProfilePictureResponse(BaseModel):
    message: str
    profile_picture_url: str
    user: UserOut

# app/schemas/signup_request.py
from pydantic import BaseModel, Field, model_validator
from typing import Optional, Annotated

from app.schemas.shared import Role


def initials_from_name(name: str) -> str:
    parts = [p for p in name.replace(".", " ").split() if p]
    # "Dr. John Wilson" -> "JW"
    if len(parts) > 1 and parts[0].lower() in {"dr", "prof"}:
        parts = parts[1:]
    return "".join(p[0].upper() for p in parts[:2])


class SignupRequest(BaseModel):
    username: Annotated[str, Field(min_length=3, max_length=64)]
    password: Annotated[str, Field(min_length=6, max_length=128)]
    role: Role
    name: Annotated[str, Field(min_length=1, max_length=128)]

    title: str = ""
    organization: str = ""
    specialty: str = ""
    location: str = ""
    initials: Optional[Annotated[str, Field(max_length=4)]] = None

    @model_validator(mode="after")
    def _derive_initials(self):
        if not self.initials:
            self.initials = initials_from_name(self.name)
        return self

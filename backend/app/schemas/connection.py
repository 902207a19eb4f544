# app/schemas/connection.py
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from app.config.constants import ConnectionStatus
from app.schemas.shared import UserOut


class ConnectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId", gt=0)


class ConnectionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    connected_user_id: int
    status: ConnectionStatus
    created_at: datetime
    updated_at: datetime


class ConnectionWithUsers(ConnectionOut):
    user: UserOut
    connected_user: UserOut


class ColleagueOut(BaseModel):
    id: int
    name: str
    initials: str
    color_class: str


class SuggestionOut(BaseModel):
    id: int
    name: str
    specialty: str
    organization: str
    initials: str
    color_class: str
    mutual_connections: int

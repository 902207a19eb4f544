from __future__ import annotations
from enum import Enum

from pydantic import BaseModel, ConfigDict

from app.schemas.shared import UserOut


class TokenType(Enum):
    bearer = 'bearer'

class AuthResponse(BaseModel):
    model_config = ConfigDict(
        extra='forbid',
    )
    token: str
    token_type: TokenType
    expires_in: int
    user: UserOut

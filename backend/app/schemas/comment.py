# app/schemas/comment.py
from datetime import datetime
from typing import Optional, Annotated
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.shared import UserSummary


class CommentCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: Annotated[str, Field(min_length=1, max_length=5000)]
    parent_id: Optional[int] = Field(default=None, alias="parentId")


class CommentOut(BaseModel):
    id: int
    post_id: int
    user_id: int
    content: str
    parent_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    user: UserSummary

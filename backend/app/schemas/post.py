# app/schemas/post.py
from datetime import datetime
from typing import List, Optional, Annotated
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.shared import UserOut, UserSummary


class CategoryRef(BaseModel):
    name: str
    color: str


class CategoryOption(BaseModel):
    value: str
    label: str
    color: str


class PostCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Annotated[str, Field(min_length=1, max_length=255)]
    content: Annotated[str, Field(min_length=1)]
    category_id: Optional[int] = Field(default=None, alias="categoryId")


class SavePostRequest(BaseModel):
    saved: bool = True


class PostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    content: str
    author_id: int
    category_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class PostDetail(PostOut):
    """A post with the viewer's overlay state merged in."""

    author: UserOut
    category: CategoryRef
    participants: List[UserSummary] = []
    discuss_count: int = 0
    likes_count: int = 0
    comments_count: int = 0
    liked: bool = False
    saved: bool = False


class LikeToggleResponse(BaseModel):
    message: str
    liked: bool
    likes_count: int

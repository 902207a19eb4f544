from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.middleware import get_db, get_current_user, require_roles
from app.db.crud import post as post_crud
from app.db.crud import comment as comment_crud
from app.schemas.comment import CommentCreateRequest, CommentOut
from app.schemas.post import (
    LikeToggleResponse,
    PostCreateRequest,
    PostDetail,
    PostOut,
    SavePostRequest,
)
from app.schemas.shared import SuccessResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=List[PostDetail])
async def list_posts(
    filter: Optional[str] = Query(None),
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    category_id: Optional[str] = Query(None, alias="categoryId"),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return await post_crud.get_posts(
        db,
        current_user["user_id"],
        filter=filter,
        search_term=search_term,
        category_id=category_id,
    )


@router.post("", response_model=PostOut, status_code=status.HTTP_201_CREATED)
async def create_post(
    body: PostCreateRequest,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(require_roles(["Doctor"])),
):
    return await post_crud.create_post(db, body, current_user["user_id"])


@router.get("/{post_id}", response_model=PostDetail)
async def get_post(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return await post_crud.get_post_detail(db, post_id, current_user["user_id"])


@router.post("/{post_id}/save", response_model=SuccessResponse)
async def save_post(
    post_id: int,
    body: Optional[SavePostRequest] = None,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    saved = body.saved if body else True
    await post_crud.save_post(db, current_user["user_id"], post_id, saved)
    return SuccessResponse()


@router.post("/{post_id}/like", response_model=LikeToggleResponse)
async def toggle_like(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    liked, likes_count = await post_crud.toggle_like(db, post_id, current_user["user_id"])
    return LikeToggleResponse(
        message="Post liked successfully." if liked else "Post unliked successfully.",
        liked=liked,
        likes_count=likes_count,
    )


@router.get("/{post_id}/comments", response_model=List[CommentOut])
async def list_comments(post_id: int, db: AsyncSession = Depends(get_db)):
    return await comment_crud.get_comments_for_post(db, post_id)


@router.post("/{post_id}/comments", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: int,
    body: CommentCreateRequest,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return await comment_crud.create_comment(
        db, post_id, current_user["user_id"], body.content, body.parent_id
    )

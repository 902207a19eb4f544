# app/db/crud/comment.py
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException

from app.db.crud.post import get_post_or_404
from app.db.models.post import CommentModel, PostParticipantModel
from app.schemas.comment import CommentOut
from app.schemas.shared import UserSummary

logger = logging.getLogger(__name__)


def to_comment_out(comment: CommentModel) -> CommentOut:
    return CommentOut(
        id=comment.id,
        post_id=comment.post_id,
        user_id=comment.user_id,
        content=comment.content,
        parent_id=comment.parent_id,
        created_at=comment.created_at,
        updated_at=comment.updated_at,
        user=UserSummary.from_user(comment.user),
    )


async def get_comments_for_post(db: AsyncSession, post_id: int) -> List[CommentOut]:
    """Flat list, oldest first; clients rebuild threads from parent_id."""
    await get_post_or_404(db, post_id)
    result = await db.execute(
        select(CommentModel)
        .options(selectinload(CommentModel.user))
        .where(CommentModel.post_id == post_id)
        .order_by(CommentModel.created_at, CommentModel.id)
    )
    return [to_comment_out(c) for c in result.scalars().all()]


async def _add_participant(db: AsyncSession, post_id: int, user_id: int) -> None:
    already = await db.scalar(
        select(PostParticipantModel.id).where(
            PostParticipantModel.post_id == post_id,
            PostParticipantModel.user_id == user_id,
        )
    )
    if not already:
        db.add(PostParticipantModel(post_id=post_id, user_id=user_id))


async def create_comment(
    db: AsyncSession,
    post_id: int,
    user_id: int,
    content: str,
    parent_id: Optional[int] = None,
) -> CommentOut:
    """
    Add a comment, optionally as a reply.

    A reply's parent must be a comment on the same post (400 otherwise).
    The commenter joins the post's participants.
    """
    await get_post_or_404(db, post_id)

    if parent_id is not None:
        parent = await db.get(CommentModel, parent_id)
        if not parent or parent.post_id != post_id:
            logger.warning(
                f"CRUD: rejected reply to comment_id={parent_id} on post_id={post_id}"
            )
            raise HTTPException(
                status_code=400, detail="Parent comment does not belong to this post"
            )

    comment = CommentModel(
        post_id=post_id, user_id=user_id, content=content, parent_id=parent_id
    )
    db.add(comment)
    await _add_participant(db, post_id, user_id)
    await db.commit()

    comment = await db.scalar(
        select(CommentModel)
        .options(selectinload(CommentModel.user))
        .where(CommentModel.id == comment.id)
        .execution_options(populate_existing=True)
    )
    logger.info(f"CRUD: created comment_id={comment.id} on post_id={post_id} by user_id={user_id}")
    return to_comment_out(comment)

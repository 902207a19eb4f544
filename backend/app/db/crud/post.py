# app/db/crud/post.py
import logging
from collections import defaultdict
from typing import List, Optional, Tuple

from sqlalchemy import select, delete, func, or_
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException

from app.config.constants import PostFilter
from app.db.models.post import (
    CategoryModel,
    PostModel,
    SavedPostModel,
    PostParticipantModel,
    LikeModel,
    CommentModel,
)
from app.schemas.post import PostCreateRequest, PostOut, PostDetail, CategoryRef
from app.schemas.shared import UserOut, UserSummary

logger = logging.getLogger(__name__)


async def get_categories(db: AsyncSession) -> List[CategoryModel]:
    result = await db.execute(select(CategoryModel).order_by(CategoryModel.id))
    return result.scalars().all()


async def get_post(db: AsyncSession, post_id: int) -> Optional[PostModel]:
    return await db.get(PostModel, post_id)


async def get_post_or_404(db: AsyncSession, post_id: int) -> PostModel:
    post = await get_post(db, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


async def create_post(db: AsyncSession, data: PostCreateRequest, author_id: int) -> PostModel:
    if data.category_id is not None and not await db.get(CategoryModel, data.category_id):
        raise HTTPException(status_code=400, detail="Category not found")

    post = PostModel(
        title=data.title,
        content=data.content,
        category_id=data.category_id,
        author_id=author_id,
    )
    db.add(post)
    await db.commit()
    await db.refresh(post)
    logger.info(f"CRUD: created post_id={post.id} by user_id={author_id}")
    return post


async def _count_by_post(db: AsyncSession, model, post_ids: List[int]) -> dict:
    result = await db.execute(
        select(model.post_id, func.count(model.id))
        .where(model.post_id.in_(post_ids))
        .group_by(model.post_id)
    )
    return dict(result.all())


async def annotate_posts(
    db: AsyncSession, posts: List[PostModel], viewer_id: int
) -> List[PostDetail]:
    """
    Merge the viewer's overlay state onto already-fetched posts.

    Every overlay (saved, participants, likes, comments) is one batched query
    keyed by the fetched post ids, never one query per post.
    """
    if not posts:
        return []
    post_ids = [p.id for p in posts]

    saved_ids = set(
        (
            await db.scalars(
                select(SavedPostModel.post_id).where(
                    SavedPostModel.user_id == viewer_id,
                    SavedPostModel.post_id.in_(post_ids),
                )
            )
        ).all()
    )
    liked_ids = set(
        (
            await db.scalars(
                select(LikeModel.post_id).where(
                    LikeModel.user_id == viewer_id,
                    LikeModel.post_id.in_(post_ids),
                )
            )
        ).all()
    )

    participant_rows = (
        await db.scalars(
            select(PostParticipantModel)
            .options(selectinload(PostParticipantModel.user))
            .where(PostParticipantModel.post_id.in_(post_ids))
            .order_by(PostParticipantModel.id)
        )
    ).all()
    participants = defaultdict(list)
    for row in participant_rows:
        participants[row.post_id].append(UserSummary.from_user(row.user))

    like_counts = await _count_by_post(db, LikeModel, post_ids)
    comment_counts = await _count_by_post(db, CommentModel, post_ids)

    details = []
    for post in posts:
        category = post.category
        details.append(
            PostDetail(
                **PostOut.model_validate(post).model_dump(),
                author=UserOut.model_validate(post.author),
                category=CategoryRef(
                    name=category.name if category else "Unknown",
                    color=category.color if category else "gray",
                ),
                participants=participants[post.id],
                discuss_count=len(participants[post.id]),
                likes_count=like_counts.get(post.id, 0),
                comments_count=comment_counts.get(post.id, 0),
                liked=post.id in liked_ids,
                saved=post.id in saved_ids,
            )
        )
    return details


def _with_author_and_category(query):
    return query.options(selectinload(PostModel.author), selectinload(PostModel.category))


async def get_posts(
    db: AsyncSession,
    viewer_id: int,
    filter: Optional[str] = None,
    search_term: Optional[str] = None,
    category_id: Optional[str] = None,
) -> List[PostDetail]:
    """
    List posts newest first with overlay state for the viewer.

    Args:
        db: Database session
        viewer_id: The requesting user
        filter: "saved" keeps only the viewer's saved posts
        search_term: Case-insensitive match on title or content
        category_id: Category id, or "all"/None for every category

    Returns:
        List of PostDetail
    """
    logger.debug(
        f"CRUD: listing posts for user_id={viewer_id} filter={filter!r} "
        f"search={search_term!r} category={category_id!r}"
    )
    query = _with_author_and_category(select(PostModel))

    if category_id and category_id != "all":
        try:
            query = query.where(PostModel.category_id == int(category_id))
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid category id")

    if search_term:
        term = f"%{search_term.lower()}%"
        query = query.where(
            or_(
                func.lower(PostModel.title).like(term),
                func.lower(PostModel.content).like(term),
            )
        )

    if filter == PostFilter.SAVED.value:
        query = query.join(SavedPostModel, SavedPostModel.post_id == PostModel.id).where(
            SavedPostModel.user_id == viewer_id
        )

    query = query.order_by(PostModel.created_at.desc(), PostModel.id.desc())
    posts = (await db.scalars(query)).all()
    return await annotate_posts(db, posts, viewer_id)


async def get_post_detail(db: AsyncSession, post_id: int, viewer_id: int) -> PostDetail:
    post = await db.scalar(
        _with_author_and_category(select(PostModel)).where(PostModel.id == post_id)
    )
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return (await annotate_posts(db, [post], viewer_id))[0]


async def save_post(db: AsyncSession, user_id: int, post_id: int, saved: bool) -> None:
    """Save or unsave. Repeating either call is a no-op."""
    await get_post_or_404(db, post_id)
    existing = await db.scalar(
        select(SavedPostModel).where(
            SavedPostModel.post_id == post_id, SavedPostModel.user_id == user_id
        )
    )
    if saved and not existing:
        db.add(SavedPostModel(post_id=post_id, user_id=user_id))
        await db.commit()
        logger.info(f"CRUD: user_id={user_id} saved post_id={post_id}")
    elif not saved and existing:
        await db.delete(existing)
        await db.commit()
        logger.info(f"CRUD: user_id={user_id} unsaved post_id={post_id}")


async def toggle_like(db: AsyncSession, post_id: int, user_id: int) -> Tuple[bool, int]:
    """
    Like the post, or unlike it if the like already exists.

    The unique (post_id, user_id) constraint decides which: a violation on
    insert means the like is there, so it is removed instead.

    Returns:
        (liked, likes_count) after the toggle
    """
    await get_post_or_404(db, post_id)

    db.add(LikeModel(post_id=post_id, user_id=user_id))
    try:
        await db.commit()
        liked = True
    except IntegrityError:
        await db.rollback()
        await db.execute(
            delete(LikeModel).where(LikeModel.post_id == post_id, LikeModel.user_id == user_id)
        )
        await db.commit()
        liked = False

    likes_count = await db.scalar(
        select(func.count(LikeModel.id)).where(LikeModel.post_id == post_id)
    )
    logger.info(
        f"CRUD: user_id={user_id} {'liked' if liked else 'unliked'} post_id={post_id} "
        f"(likes={likes_count})"
    )
    return liked, likes_count

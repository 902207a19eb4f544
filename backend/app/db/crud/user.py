# app/db/crud/user.py
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func, or_
from typing import List, Optional, Dict, Any

from fastapi import HTTPException

from app.db.models.user import UserModel, ProfileModel
from app.db.crud.connection import get_colleague_ids

logger = logging.getLogger(__name__)

# Columns a user may change about themself
UPDATABLE_USER_FIELDS = {
    "name",
    "title",
    "organization",
    "specialty",
    "location",
    "initials",
    "education",
    "medical_history",
    "profile_picture_url",
}


async def get_users(db: AsyncSession) -> List[UserModel]:
    """Every user, oldest account first."""
    result = await db.execute(select(UserModel).order_by(UserModel.id))
    return result.scalars().all()


async def get_user(db: AsyncSession, user_id: int) -> Optional[UserModel]:
    return await db.get(UserModel, user_id)


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[UserModel]:
    return await db.scalar(select(UserModel).where(UserModel.username == username))


async def update_user(db: AsyncSession, user_id: int, updates: Dict[str, Any]) -> UserModel:
    """
    Apply profile field updates to a user.

    Keys outside the updatable set (username, password, role...) are ignored.
    Raises 404 if the user does not exist.
    """
    user = await get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    changed = {k: v for k, v in updates.items() if k in UPDATABLE_USER_FIELDS}
    for field, value in changed.items():
        setattr(user, field, value)

    await db.commit()
    await db.refresh(user)
    logger.info(f"CRUD: updated user_id={user_id} fields={sorted(changed)}")
    return user


async def get_profile(db: AsyncSession, user_id: int) -> Optional[ProfileModel]:
    return await db.scalar(select(ProfileModel).where(ProfileModel.user_id == user_id))


async def get_specialties(db: AsyncSession) -> List[str]:
    result = await db.execute(
        select(UserModel.specialty)
        .where(UserModel.specialty.is_not(None), UserModel.specialty != "")
        .distinct()
        .order_by(UserModel.specialty)
    )
    return [row[0] for row in result.all()]


async def get_directory(
    db: AsyncSession,
    viewer_id: int,
    search_term: Optional[str] = None,
    specialty_filter: Optional[str] = None,
    show_connected: bool = False,
) -> List[UserModel]:
    """Every user except the viewer, narrowed by the directory filters."""
    logger.debug(
        f"CRUD: directory for user_id={viewer_id} search={search_term!r} "
        f"specialty={specialty_filter!r} connected={show_connected}"
    )
    query = select(UserModel).where(UserModel.id != viewer_id)

    if specialty_filter and specialty_filter != "all":
        query = query.where(UserModel.specialty == specialty_filter)

    if search_term:
        term = f"%{search_term.lower()}%"
        query = query.where(
            or_(
                func.lower(UserModel.name).like(term),
                func.lower(UserModel.specialty).like(term),
                func.lower(UserModel.organization).like(term),
            )
        )

    if show_connected:
        colleague_ids = await get_colleague_ids(db, viewer_id)
        if not colleague_ids:
            return []
        query = query.where(UserModel.id.in_(colleague_ids))

    result = await db.execute(query.order_by(UserModel.name))
    return result.scalars().all()


async def delete_user(db: AsyncSession, user_id: int) -> None:
    """
    Delete a user account.

    Owned rows (posts, documents, connections, likes, comments, saves,
    sharing entries, profile, stats) go with it through ON DELETE CASCADE.
    """
    result = await db.execute(delete(UserModel).where(UserModel.id == user_id))
    if result.rowcount == 0:
        raise HTTPException(status_code=404, detail="User not found")
    await db.commit()
    logger.info(f"CRUD: deleted user_id={user_id} and owned rows")

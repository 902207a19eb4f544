import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException

from app.db.models.user import UserModel, ProfileModel
from app.db.crud.user import get_user_by_username
from app.schemas.signup_request import SignupRequest
from app.schemas.login_request import LoginRequest
from app.core.auth import get_password_hash, verify_password

logger = logging.getLogger(__name__)


async def create_user(db: AsyncSession, data: SignupRequest) -> UserModel:
    """Insert user and its empty profile in one transaction."""
    if await get_user_by_username(db, data.username):
        raise HTTPException(status_code=400, detail="Username already exists")

    user = UserModel(
        username=data.username,
        password_hash=get_password_hash(data.password),
        role=data.role.value,
        name=data.name,
        title=data.title,
        organization=data.organization,
        specialty=data.specialty,
        location=data.location,
        initials=data.initials,
    )
    db.add(user)
    db.add(ProfileModel(user=user))

    try:
        await db.commit()
    except IntegrityError:
        # lost a race with a concurrent signup for the same username
        await db.rollback()
        raise HTTPException(status_code=400, detail="Username already exists")

    await db.refresh(user)
    logger.info(f"CRUD: created user_id={user.id} username={user.username!r} role={user.role}")
    return user


async def authenticate_user(db: AsyncSession, login_data: LoginRequest) -> UserModel | None:
    user = await get_user_by_username(db, login_data.username)
    if not user:
        return None
    if not verify_password(login_data.password, user.password_hash):
        return None
    return user

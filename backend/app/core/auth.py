from datetime import datetime, timedelta, timezone
from typing import Optional

from passlib.context import CryptContext
from jose import JWTError, jwt
from app.schemas.auth_response import AuthResponse
from app.schemas.shared import UserOut
from app.db.models.user import UserModel

from app.config.settings import settings

# Explicit ident keeps passlib from probing bcrypt's removed '__about__' attribute
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__ident="2b",
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)
    return encoded_jwt


def decode_access_token(token: str) -> dict:
    """Decode and verify a token; raises ``JWTError`` when invalid or expired."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
        return payload
    except JWTError as e:
        raise e


def token_lifetime(remember_me: bool = False) -> timedelta:
    if remember_me:
        return timedelta(days=settings.remember_me_expire_days)
    return timedelta(minutes=settings.access_token_expire_minutes)


def create_token_for_user(user: UserModel, remember_me: bool = False) -> AuthResponse:
    lifetime = token_lifetime(remember_me)
    token = create_access_token(
        {"sub": str(user.id), "username": user.username, "role": user.role},
        lifetime,
    )
    return AuthResponse(
        token=token,
        token_type="bearer",
        expires_in=int(lifetime.total_seconds()),
        user=UserOut.model_validate(user, from_attributes=True),
    )

import logging
from fastapi import Request, HTTPException, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import decode_access_token
from app.db.session import get_db_session
from app.db.crud.user import get_user

logger = logging.getLogger(__name__)

# List of paths that should be excluded from authentication checks
PUBLIC_PATHS = [
    "/auth/login",
    "/auth/signup",
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc",
    "/uploads",
]


def _user_from_token(token: str):
    token_data = decode_access_token(token)
    sub = token_data.get("sub")
    if sub is None:
        return None
    return {
        "user_id": int(sub),
        "username": token_data.get("username"),
        "role": token_data.get("role"),
    }


async def verify_token_middleware(request: Request, call_next):
    """
    Middleware to check the bearer token and add the authenticated user to request state.
    This doesn't block unauthenticated requests, but just adds user info if authenticated.
    """
    request.state.user = None

    # Skip authentication for public paths
    if any(request.url.path.startswith(public_path) for public_path in PUBLIC_PATHS):
        return await call_next(request)

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        token = auth_header.split(" ", 1)[1]
        try:
            request.state.user = _user_from_token(token)
        except Exception as e:
            # Continue without user info if token is invalid or expired
            logger.debug(f"Rejected bearer token: {e}")

    response = await call_next(request)
    return response


# FastAPI dependency for protected routes
def get_current_user(request: Request):
    """
    Dependency to use in FastAPI route functions that require authentication.
    This will raise an HTTPException if the user is not authenticated.
    """
    user = getattr(request.state, "user", None)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_roles(roles: list):
    """
    Factory function to create a dependency that requires specific roles.
    Usage: @router.post("/posts", dependencies=[Depends(require_roles(["Doctor"]))])
    """
    def _require_roles(user: dict = Depends(get_current_user)):
        if user["role"] not in roles:
            raise HTTPException(status_code=403, detail="Not enough permissions")
        return user

    return _require_roles


# Get a database session dependency
async def get_db(request: Request):
    """Yield an async SQLAlchemy session (dependency)."""
    async for session in get_db_session(request):
        yield session


async def db_user_dependency(
    db_session: AsyncSession = Depends(get_db), current_user=Depends(get_current_user)
):
    """
    Combined dependency that provides the database user model for the token's subject.
    A token for a deleted account is treated as unauthenticated.
    """
    db_user = await get_user(db_session, current_user["user_id"])

    if not db_user:
        raise HTTPException(status_code=401, detail="User not found")

    return db_user

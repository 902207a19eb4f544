from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.auth import create_token_for_user
from app.db.crud.auth import create_user, authenticate_user
from app.schemas.signup_request import SignupRequest
from app.schemas.login_request import LoginRequest
from app.schemas.auth_response import AuthResponse
from app.core.middleware import get_db

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: SignupRequest,
    db: AsyncSession = Depends(get_db)
):
    new_user = await create_user(db, user_data)
    return create_token_for_user(new_user)


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    user = await authenticate_user(db, login_data)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return create_token_for_user(user, remember_me=login_data.remember_me)

from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.constants import ConnectionStatus
from app.core.middleware import get_db, get_current_user
from app.db.crud import connection as connection_crud
from app.schemas.connection import ConnectRequest, ConnectionOut, ConnectionWithUsers

router = APIRouter(prefix="/connections", tags=["connections"])


@router.post("/connect", response_model=ConnectionOut, status_code=status.HTTP_201_CREATED)
async def connect(
    body: ConnectRequest,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """Send a connection request to another user."""
    return await connection_crud.create_connection(db, current_user["user_id"], body.user_id)


@router.post("/{connection_id}/accept", response_model=ConnectionOut)
async def accept(
    connection_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return await connection_crud.accept_connection(db, connection_id, current_user["user_id"])


@router.post("/{connection_id}/reject", response_model=ConnectionOut)
async def reject(
    connection_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return await connection_crud.reject_connection(db, connection_id, current_user["user_id"])


@router.get("", response_model=List[ConnectionWithUsers])
async def list_connections(
    status_filter: Optional[ConnectionStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return await connection_crud.get_connections_for_user(
        db, current_user["user_id"], status_filter
    )

from fastapi import APIRouter, Depends
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.middleware import get_db, require_roles
from app.db.crud.connection import get_student_connection_requests
from app.schemas.connection import ConnectionWithUsers

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/doctor/student-connection-requests", response_model=List[ConnectionWithUsers])
async def student_connection_requests(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(require_roles(["Doctor"])),
):
    """Pending requests students have sent to the calling doctor."""
    return await get_student_connection_requests(db, current_user["user_id"])

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool
import logging

from app.core.middleware import get_db, require_roles
from app.db.crud.user import get_user
from app.schemas.prescription import PrescriptionRequest
from app.services.prescription import render_prescription

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/prescription", tags=["prescription"])


@router.post(
    "/generate",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
async def generate_prescription(
    body: PrescriptionRequest,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(require_roles(["Doctor"])),
):
    doctor = await get_user(db, current_user["user_id"])
    if not doctor:
        raise HTTPException(status_code=401, detail="User not found")

    try:
        pdf = await run_in_threadpool(render_prescription, body, doctor.name)
    except Exception:
        logger.error("Error generating prescription PDF", exc_info=True)
        raise HTTPException(status_code=500, detail="Error generating PDF")

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="prescription.pdf"'},
    )

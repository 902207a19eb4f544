# Lookup lists used to populate client filters and dashboards
from fastapi import APIRouter, Depends
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.middleware import get_db, get_current_user
from app.db.crud.post import get_categories
from app.db.crud.stat import get_stats
from app.db.crud.user import get_specialties
from app.schemas.post import CategoryOption
from app.schemas.stat import StatOut

router = APIRouter(tags=["catalog"])


@router.get("/categories", response_model=List[CategoryOption])
async def categories(db: AsyncSession = Depends(get_db)):
    return [
        CategoryOption(value=str(c.id), label=c.name, color=c.color)
        for c in await get_categories(db)
    ]


@router.get("/specialties", response_model=List[str])
async def specialties(db: AsyncSession = Depends(get_db)):
    return await get_specialties(db)


@router.get("/stats", response_model=List[StatOut])
async def stats(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return await get_stats(db, current_user["user_id"])

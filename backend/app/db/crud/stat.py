# app/db/crud/stat.py
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.user import StatModel


async def get_stats(db: AsyncSession, user_id: int) -> List[StatModel]:
    result = await db.execute(
        select(StatModel).where(StatModel.user_id == user_id).order_by(StatModel.id)
    )
    return result.scalars().all()

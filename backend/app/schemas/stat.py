# app/schemas/stat.py
from pydantic import BaseModel, ConfigDict


class StatOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    value: int
    icon: str
    icon_color: str
    change: int
    timeframe: str

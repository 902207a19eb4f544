# app/schemas/document.py
from datetime import datetime
from typing import List
from pydantic import BaseModel, ConfigDict, Field

from app.schemas.shared import UserSummary


class DocumentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    filename: str
    file_type: str
    owner_id: int
    created_at: datetime
    updated_at: datetime


class TypeLabel(BaseModel):
    name: str
    color: str


class DocumentDetail(DocumentOut):
    icon: str
    type_label: TypeLabel
    shared_with: List[UserSummary] = []


class ShareDocumentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_ids: List[int] = Field(alias="userIds", min_length=1)


class ShareDocumentResponse(BaseModel):
    success: bool = True
    shared_with: List[int]

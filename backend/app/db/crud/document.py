# app/db/crud/document.py
import logging
from collections import defaultdict
from pathlib import Path
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException

from app.config.constants import (
    DocumentFilter,
    DOCUMENT_TYPES,
    UNKNOWN_DOCUMENT_TYPE,
    DOCUMENT_ICONS,
    DEFAULT_DOCUMENT_ICON,
    RECENT_DOCUMENTS_LIMIT,
)
from app.db.models.document import DocumentModel, DocumentSharingModel
from app.db.models.user import UserModel
from app.schemas.document import DocumentOut, DocumentDetail, TypeLabel
from app.schemas.shared import UserSummary

logger = logging.getLogger(__name__)


def document_type_for(filename: str) -> str:
    return DOCUMENT_TYPES.get(Path(filename).suffix.lower(), UNKNOWN_DOCUMENT_TYPE)


async def annotate_documents(
    db: AsyncSession, documents: List[DocumentModel]
) -> List[DocumentDetail]:
    """Attach icon, type label and shared-with users using one sharing query."""
    if not documents:
        return []

    result = await db.execute(
        select(DocumentSharingModel)
        .options(selectinload(DocumentSharingModel.user))
        .where(DocumentSharingModel.document_id.in_([d.id for d in documents]))
        .order_by(DocumentSharingModel.id)
    )
    shared_with = defaultdict(list)
    for share in result.scalars().all():
        shared_with[share.document_id].append(UserSummary.from_user(share.user))

    details = []
    for doc in documents:
        icon, color = DOCUMENT_ICONS.get(doc.file_type, DEFAULT_DOCUMENT_ICON)
        details.append(
            DocumentDetail(
                **DocumentOut.model_validate(doc).model_dump(),
                icon=icon,
                type_label=TypeLabel(name=doc.file_type, color=color),
                shared_with=shared_with[doc.id],
            )
        )
    return details


async def get_documents(
    db: AsyncSession,
    viewer_id: int,
    filter: Optional[str] = None,
    search_term: Optional[str] = None,
) -> List[DocumentDetail]:
    """
    List documents newest first.

    ``filter`` is "shared-by-me", "shared-with-me", "all", or a file type
    such as "pdf" (case-insensitive).
    """
    logger.debug(f"CRUD: listing documents for user_id={viewer_id} filter={filter!r} search={search_term!r}")
    query = select(DocumentModel)

    if search_term:
        query = query.where(func.lower(DocumentModel.filename).like(f"%{search_term.lower()}%"))

    if filter == DocumentFilter.SHARED_BY_ME.value:
        query = query.where(DocumentModel.owner_id == viewer_id)
    elif filter == DocumentFilter.SHARED_WITH_ME.value:
        query = query.join(
            DocumentSharingModel, DocumentSharingModel.document_id == DocumentModel.id
        ).where(DocumentSharingModel.user_id == viewer_id)
    elif filter and filter != DocumentFilter.ALL.value:
        query = query.where(func.lower(DocumentModel.file_type) == filter.lower())

    query = query.order_by(DocumentModel.created_at.desc(), DocumentModel.id.desc())
    documents = (await db.scalars(query)).all()
    return await annotate_documents(db, documents)


async def get_recent_documents(db: AsyncSession) -> List[DocumentDetail]:
    result = await db.execute(
        select(DocumentModel)
        .order_by(DocumentModel.updated_at.desc(), DocumentModel.id.desc())
        .limit(RECENT_DOCUMENTS_LIMIT)
    )
    return await annotate_documents(db, result.scalars().all())


async def get_document(db: AsyncSession, document_id: int) -> Optional[DocumentModel]:
    return await db.get(DocumentModel, document_id)


async def create_document(
    db: AsyncSession, filename: str, storage_path: str, owner_id: int
) -> DocumentModel:
    document = DocumentModel(
        filename=filename,
        file_type=document_type_for(filename),
        storage_path=storage_path,
        owner_id=owner_id,
    )
    db.add(document)
    await db.commit()
    await db.refresh(document)
    logger.info(
        f"CRUD: created document_id={document.id} ({document.file_type}) for user_id={owner_id}"
    )
    return document


async def share_document(
    db: AsyncSession, document_id: int, owner_id: int, user_ids: List[int]
) -> List[int]:
    """
    Share a document with users. Only the owner may share.

    Returns:
        The ids that were newly shared; already-shared ids are skipped.
    """
    document = await get_document(db, document_id)
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    if document.owner_id != owner_id:
        raise HTTPException(status_code=403, detail="Only the owner can share this document")

    wanted = set(user_ids)
    known = set(
        (await db.scalars(select(UserModel.id).where(UserModel.id.in_(wanted)))).all()
    )
    missing = wanted - known
    if missing:
        raise HTTPException(status_code=404, detail=f"Users not found: {sorted(missing)}")

    already = set(
        (
            await db.scalars(
                select(DocumentSharingModel.user_id).where(
                    DocumentSharingModel.document_id == document_id,
                    DocumentSharingModel.user_id.in_(wanted),
                )
            )
        ).all()
    )
    new_ids = sorted(wanted - already - {owner_id})
    for user_id in new_ids:
        db.add(DocumentSharingModel(document_id=document_id, user_id=user_id))
    if new_ids:
        await db.commit()
    logger.info(f"CRUD: document_id={document_id} shared with {new_ids} (skipped {sorted(already)})")
    return new_ids


async def get_downloadable_document(
    db: AsyncSession, document_id: int, user_id: int
) -> DocumentModel:
    """The document if ``user_id`` owns it or it is shared with them."""
    document = await get_document(db, document_id)
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")

    if document.owner_id != user_id:
        shared = await db.scalar(
            select(DocumentSharingModel.id).where(
                DocumentSharingModel.document_id == document_id,
                DocumentSharingModel.user_id == user_id,
            )
        )
        if not shared:
            raise HTTPException(status_code=403, detail="You do not have access to this document")
    return document


async def get_storage_paths_for_owner(db: AsyncSession, owner_id: int) -> List[str]:
    result = await db.execute(
        select(DocumentModel.storage_path).where(
            DocumentModel.owner_id == owner_id, DocumentModel.storage_path.is_not(None)
        )
    )
    return [row[0] for row in result.all()]

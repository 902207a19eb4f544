from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from fastapi.responses import FileResponse
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.middleware import get_db, get_current_user, require_roles
from app.db.crud import document as document_crud
from app.schemas.document import (
    DocumentDetail,
    DocumentOut,
    ShareDocumentRequest,
    ShareDocumentResponse,
)
from app.services.file_storage import FileStorage, get_file_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.get("", response_model=List[DocumentDetail])
async def list_documents(
    filter: Optional[str] = Query(None),
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return await document_crud.get_documents(
        db, current_user["user_id"], filter=filter, search_term=search_term
    )


@router.get("/recent", response_model=List[DocumentDetail])
async def recent_documents(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return await document_crud.get_recent_documents(db)


@router.post("", response_model=DocumentOut, status_code=status.HTTP_201_CREATED)
async def upload_document(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(require_roles(["Doctor"])),
    storage: FileStorage = Depends(get_file_storage),
):
    stored_name = await storage.save(file)
    try:
        return await document_crud.create_document(
            db, file.filename, stored_name, current_user["user_id"]
        )
    except Exception:
        logger.error(f"Failed to record upload {file.filename!r}, removing stored file", exc_info=True)
        await storage.remove(stored_name)
        raise


@router.post("/{document_id}/share", response_model=ShareDocumentResponse)
async def share_document(
    document_id: int,
    body: ShareDocumentRequest,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    new_ids = await document_crud.share_document(
        db, document_id, current_user["user_id"], body.user_ids
    )
    return ShareDocumentResponse(shared_with=new_ids)


@router.get("/{document_id}/download")
async def download_document(
    document_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
    storage: FileStorage = Depends(get_file_storage),
):
    document = await document_crud.get_downloadable_document(
        db, document_id, current_user["user_id"]
    )
    if not storage.exists(document.storage_path):
        logger.warning(f"Document {document_id} has no stored file ({document.storage_path!r})")
        raise HTTPException(status_code=404, detail="Document file not found")

    return FileResponse(
        storage.path_for(document.storage_path),
        filename=document.filename,
        media_type="application/octet-stream",
    )

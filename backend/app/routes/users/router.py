from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.config.constants import ALLOWED_PICTURE_EXTENSIONS
from app.core.middleware import get_db, get_current_user, require_roles, db_user_dependency
from app.db.crud import user as user_crud
from app.db.crud import connection as connection_crud
from app.db.crud.document import get_storage_paths_for_owner
from app.db.models.user import UserModel
from app.schemas.connection import ColleagueOut, SuggestionOut
from app.schemas.profile import ProfileOut, ProfileUpdateRequest, ProfilePictureResponse
from app.schemas.shared import UserOut, color_class_for
from app.services.file_storage import FileStorage, get_file_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserOut])
async def list_users(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(require_roles(["Doctor"])),
):
    """All users; doctors only."""
    return await user_crud.get_users(db)


@router.get("/current", response_model=UserOut)
async def current_user_route(user: UserModel = Depends(db_user_dependency)):
    return user


@router.get("/colleagues", response_model=List[ColleagueOut])
async def colleagues(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    users = await connection_crud.get_colleagues(db, current_user["user_id"])
    return [
        ColleagueOut(
            id=u.id, name=u.name, initials=u.initials, color_class=color_class_for(u.specialty)
        )
        for u in users
    ]


@router.get("/suggestions", response_model=List[SuggestionOut])
async def suggestions(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    pairs = await connection_crud.get_suggestions(db, current_user["user_id"])
    return [
        SuggestionOut(
            id=u.id,
            name=u.name,
            specialty=u.specialty,
            organization=u.organization,
            initials=u.initials,
            color_class=color_class_for(u.specialty),
            mutual_connections=mutual,
        )
        for u, mutual in pairs
    ]


@router.get("/profile", response_model=ProfileOut)
async def get_profile(
    db: AsyncSession = Depends(get_db),
    user: UserModel = Depends(db_user_dependency),
):
    profile = await user_crud.get_profile(db, user.id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found for this user")

    return ProfileOut(
        id=profile.id,
        user_id=profile.user_id,
        profile_completion=profile.profile_completion,
        remaining_items=profile.remaining_items,
        network_growth=profile.network_growth,
        network_growth_days=profile.network_growth_days,
        name=user.name,
        title=user.title,
        organization=user.organization,
        specialty=user.specialty,
        location=user.location,
        initials=user.initials,
        profile_picture_url=user.profile_picture_url,
        education=user.education,
        medical_history=user.medical_history,
    )


@router.put("/profile", response_model=UserOut)
async def update_profile(
    updates: ProfileUpdateRequest,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return await user_crud.update_user(
        db, current_user["user_id"], updates.model_dump(exclude_unset=True)
    )


@router.post("/profile/picture", response_model=ProfilePictureResponse)
async def upload_profile_picture(
    profile_picture: UploadFile = File(..., alias="profilePicture"),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
    storage: FileStorage = Depends(get_file_storage),
):
    stored_name = await storage.save(profile_picture, ALLOWED_PICTURE_EXTENSIONS)
    url = f"/uploads/{stored_name}"
    user = await user_crud.update_user(db, current_user["user_id"], {"profile_picture_url": url})
    return ProfilePictureResponse(
        message="Profile picture updated successfully.",
        profile_picture_url=url,
        user=UserOut.model_validate(user),
    )


@router.get("/connection-requests", response_model=List[UserOut])
async def connection_requests(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return await connection_crud.get_connection_requests(db, current_user["user_id"])


@router.get("/directory", response_model=List[UserOut])
async def directory(
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    specialty_filter: Optional[str] = Query(None, alias="specialtyFilter"),
    show_connected: bool = Query(False, alias="showConnected"),
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return await user_crud.get_directory(
        db,
        current_user["user_id"],
        search_term=search_term,
        specialty_filter=specialty_filter,
        show_connected=show_connected,
    )


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
    storage: FileStorage = Depends(get_file_storage),
):
    user_id = current_user["user_id"]
    stored_files = await get_storage_paths_for_owner(db, user_id)
    await user_crud.delete_user(db, user_id)
    for name in stored_files:
        await storage.remove(name)
    logger.info(f"User {user_id} deleted their account ({len(stored_files)} files removed)")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}/mutual-connections/{other_user_id}", response_model=List[UserOut])
async def mutual_connections(
    user_id: int,
    other_user_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    return await connection_crud.get_mutual_connections(db, user_id, other_user_id)

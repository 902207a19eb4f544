from .user import UserModel, ProfileModel, StatModel
from .connection import ConnectionModel
from .post import (
    CategoryModel,
    PostModel,
    SavedPostModel,
    PostParticipantModel,
    LikeModel,
    CommentModel,
)
from .document import DocumentModel, DocumentSharingModel
from .event import EventTypeModel, EventModel

__all__ = [
    "UserModel",
    "ProfileModel",
    "StatModel",
    "ConnectionModel",
    "CategoryModel",
    "PostModel",
    "SavedPostModel",
    "PostParticipantModel",
    "LikeModel",
    "CommentModel",
    "DocumentModel",
    "DocumentSharingModel",
    "EventTypeModel",
    "EventModel",
]

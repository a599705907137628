from fastapi import Depends
from sqlalchemy.orm import Session
from typing import Optional

from glimpse.crud import ConversationsCRUD, FriendsCRUD, ImagesCRUD, MessagesCRUD
from glimpse.database import get_db
from glimpse.storage import BlobStore, create_blob_store
from glimpse.utils.clock import Clock, utcnow


def get_clock() -> Clock:
    """Time source for every lifecycle operation; overridden in tests."""
    return utcnow


_blob_store: Optional[BlobStore] = None

def get_blob_store() -> BlobStore:
    global _blob_store
    if _blob_store is None:
        _blob_store = create_blob_store()
    return _blob_store


def get_friends_crud(db: Session = Depends(get_db), clock: Clock = Depends(get_clock)) -> FriendsCRUD:
    return FriendsCRUD(db, clock=clock)


def get_images_crud(
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    clock: Clock = Depends(get_clock),
) -> ImagesCRUD:
    return ImagesCRUD(db, blob_store=blob_store, clock=clock)


def get_messages_crud(
    db: Session = Depends(get_db),
    images: ImagesCRUD = Depends(get_images_crud),
    clock: Clock = Depends(get_clock),
) -> MessagesCRUD:
    return MessagesCRUD(db, images, clock=clock)


def get_conversations_crud(db: Session = Depends(get_db), clock: Clock = Depends(get_clock)) -> ConversationsCRUD:
    return ConversationsCRUD(db, clock=clock)


from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Any, Dict, List, Optional
from glimpse.crud.soft_delete import live, tombstone
from glimpse.models.image import Image
from glimpse.storage import BlobStore
from glimpse.utils.clock import Clock, utcnow
from glimpse.utils.logger import get_logger

logger = get_logger(__name__)

class ImagesCRUD:
    """Image registry: metadata rows for blobs held by the blob store."""

    def __init__(self, db: Session, blob_store: Optional[BlobStore] = None, clock: Clock = utcnow):
        self.db = db
        self.blob_store = blob_store
        self.clock = clock

    def register_image(self, owner_id: str, storage_locator: str, metadata: Dict[str, Any]) -> Image:
        """
        Record an uploaded image.

        Args:
            owner_id: Uploading user
            storage_locator: Locator returned by the blob store
            metadata: url, mime_type, size_bytes and optional width, height, filename.
                Values are trusted as supplied.

        Returns:
            The new Image row
        """
        if not storage_locator:
            raise ValueError("storage_locator must not be empty")

        image = Image(
            owner_id=owner_id,
            storage_locator=storage_locator,
            url=metadata.get("url", ""),
            filename=metadata.get("filename"),
            mime_type=metadata.get("mime_type", "application/octet-stream"),
            size_bytes=metadata.get("size_bytes", 0),
            width=metadata.get("width"),
            height=metadata.get("height"),
            created_at=self.clock(),
        )
        try:
            self.db.add(image)
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error registering image: {e}")
            self.db.rollback()
            raise
        self.db.refresh(image)
        logger.info(f"Image {image.id} registered for {owner_id}")
        return image

    def upload_image(
        self,
        owner_id: str,
        data: bytes,
        filename: Optional[str],
        mime_type: str,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> Image:
        """Store the bytes through the blob store, then register the metadata."""
        if self.blob_store is None:
            raise RuntimeError("ImagesCRUD was created without a blob store")

        locator = self.blob_store.store_blob(data)
        return self.register_image(owner_id, locator, {
            "url": self.blob_store.url_for(locator),
            "filename": filename[:100] if filename else None,
            "mime_type": mime_type,
            "size_bytes": len(data),
            "width": width,
            "height": height,
        })

    def get_image(self, image_id: str) -> Optional[Image]:
        return live(self.db.query(Image), Image).filter(Image.id == image_id).first()

    def list_user_images(self, owner_id: str) -> List[Image]:
        return live(self.db.query(Image), Image).filter(
            Image.owner_id == owner_id
        ).order_by(Image.created_at.desc()).all()

    def soft_delete_image(self, image: Image) -> bool:
        """Tombstone the metadata row only; the blob is never removed."""
        if image.deleted_at is not None:
            return False
        tombstone(image, self.clock())
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error deleting image {image.id}: {e}")
            self.db.rollback()
            raise
        logger.info(f"Image {image.id} soft-deleted")
        return True

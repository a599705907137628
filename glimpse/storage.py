from abc import ABC, abstractmethod
import hashlib
import os
from glimpse.config import settings
from glimpse.errors import StorageUnavailable
from glimpse.utils.logger import get_logger

logger = get_logger(__name__)

class BlobStore(ABC):
    """Opaque blob storage. Blobs are write-once; there is deliberately no delete."""

    @abstractmethod
    def store_blob(self, data: bytes) -> str:
        """Persist bytes and return a locator."""

    @abstractmethod
    def url_for(self, locator: str) -> str:
        """Public URL for a stored locator."""

# Content-addressed store on the local filesystem
class LocalBlobStore(BlobStore):
    def __init__(self, root: str, base_url: str = "/media"):
        self.root = root
        self.base_url = base_url.rstrip('/')

    def _path_for(self, locator: str) -> str:
        # Fan out by digest prefix to keep directories small
        return os.path.join(self.root, locator[:2], locator)

    def store_blob(self, data: bytes) -> str:
        locator = hashlib.sha256(data).hexdigest()
        path = self._path_for(locator)
        try:
            if not os.path.exists(path):
                os.makedirs(os.path.dirname(path), exist_ok=True)
                tmp_path = f"{path}.tmp"
                with open(tmp_path, "wb") as fh:
                    fh.write(data)
                os.replace(tmp_path, path)
                logger.info(f"Stored blob {locator} ({len(data)} bytes)")
            else:
                logger.debug(f"Blob {locator} already stored")
        except OSError as e:
            logger.error(f"Blob store write failed for {locator}: {e}")
            raise StorageUnavailable() from e
        return locator

    def url_for(self, locator: str) -> str:
        return f"{self.base_url}/{locator[:2]}/{locator}"

# Factory function to create the blob store based on settings
def create_blob_store() -> BlobStore:
    return LocalBlobStore(settings.MEDIA_ROOT, settings.MEDIA_BASE_URL)

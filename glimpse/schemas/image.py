from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

class ImageResponse(BaseModel):
    id: str
    owner_id: str
    url: str
    filename: Optional[str] = None
    mime_type: str
    size_bytes: int
    width: Optional[int] = None
    height: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True

class ImagesListResponse(BaseModel):
    images: List[ImageResponse]
    total_count: int

class ImageDeleteResponse(BaseModel):
    message: str
    deleted: bool

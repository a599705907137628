from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from typing import Optional
from glimpse.auth import get_current_user
from glimpse.config import settings, ALLOWED_IMAGE_TYPES
from glimpse.crud.images import ImagesCRUD
from glimpse.dependencies import get_images_crud
from glimpse.errors import GlimpseError
from glimpse.middleware.rate_limit import rate_limit_upload
from glimpse.schemas import CurrentUser, ImageDeleteResponse, ImageResponse, ImagesListResponse
from glimpse.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/images", tags=["images"])

@router.post("/upload", response_model=ImageResponse, status_code=201)
@rate_limit_upload
async def upload_image(
    request: Request,
    image: UploadFile = File(..., description="Image file"),
    width: Optional[int] = Form(None, ge=1),
    height: Optional[int] = Form(None, ge=1),
    current_user: CurrentUser = Depends(get_current_user),
    images: ImagesCRUD = Depends(get_images_crud)
):
    """Upload an image to attach to a view-once message"""
    try:
        if image.content_type not in ALLOWED_IMAGE_TYPES:
            raise HTTPException(status_code=415, detail=f"Unsupported image type: {image.content_type}")

        data = await image.read()
        if not data:
            raise HTTPException(status_code=422, detail="Uploaded file is empty")
        if len(data) > settings.MAX_IMAGE_BYTES:
            raise HTTPException(status_code=413, detail="Image is too large")

        record = images.upload_image(
            current_user.id,
            data,
            filename=image.filename,
            mime_type=image.content_type,
            width=width,
            height=height,
        )
        return ImageResponse.model_validate(record)
    except (HTTPException, GlimpseError):
        raise
    except Exception as e:
        logger.error(f"Error in upload_image: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("", response_model=ImagesListResponse)
async def list_images(
    current_user: CurrentUser = Depends(get_current_user),
    images: ImagesCRUD = Depends(get_images_crud)
):
    """List the current user's uploaded images"""
    try:
        records = images.list_user_images(current_user.id)
        return ImagesListResponse(
            images=[ImageResponse.model_validate(r) for r in records],
            total_count=len(records)
        )
    except Exception as e:
        logger.error(f"Error in list_images: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("/{image_id}", response_model=ImageResponse)
async def get_image(
    image_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    images: ImagesCRUD = Depends(get_images_crud)
):
    """Get metadata for one of the current user's images"""
    try:
        record = images.get_image(image_id)
        if not record or record.owner_id != current_user.id:
            raise HTTPException(status_code=404, detail="Image not found")
        return ImageResponse.model_validate(record)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in get_image: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.delete("/{image_id}", response_model=ImageDeleteResponse)
async def delete_image(
    image_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    images: ImagesCRUD = Depends(get_images_crud)
):
    """Soft-delete an image record. The stored file is kept."""
    try:
        record = images.get_image(image_id)
        if not record or record.owner_id != current_user.id:
            raise HTTPException(status_code=404, detail="Image not found")
        deleted = images.soft_delete_image(record)
        return ImageDeleteResponse(message="Image deleted successfully", deleted=deleted)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in delete_image: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

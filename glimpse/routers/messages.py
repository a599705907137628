from fastapi import APIRouter, Depends, HTTPException, Query, Request
from typing import Optional
from glimpse.auth import get_current_user
from glimpse.config import settings
from glimpse.crud.conversation import ConversationsCRUD
from glimpse.crud.friends import FriendsCRUD
from glimpse.crud.message import MessagesCRUD
from glimpse.dependencies import get_conversations_crud, get_friends_crud, get_messages_crud
from glimpse.errors import GlimpseError, InvalidRecipient
from glimpse.middleware.rate_limit import rate_limit_api_write
from glimpse.schemas import (
    CurrentUser, MessageCreate, MessageResponse, MessagesListResponse, MessageStatusResponse, MessageUpdate
)
from glimpse.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/messages",
    tags=["messages"],
    responses={404: {"description": "Not found"}}
)

@router.get("", response_model=MessagesListResponse)
async def list_messages(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_SIZE, description="Items per page; omit for all"),
    current_user: CurrentUser = Depends(get_current_user),
    conversations: ConversationsCRUD = Depends(get_conversations_crud)
):
    """All messages the current user sent or received, newest first"""
    try:
        messages, total = conversations.get_all_messages(current_user.id, page, page_size)
        return MessagesListResponse(
            messages=[MessageResponse.from_message(m, current_user.id) for m in messages],
            total_count=total,
            page=page,
            page_size=page_size
        )
    except Exception as e:
        logger.error(f"Error in list_messages: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("", response_model=MessageResponse, status_code=201)
@rate_limit_api_write
async def send_message(
    request: Request,
    body: MessageCreate,
    current_user: CurrentUser = Depends(get_current_user),
    messages: MessagesCRUD = Depends(get_messages_crud),
    friends: FriendsCRUD = Depends(get_friends_crud)
):
    """Send a text or view-once image message"""
    try:
        if settings.REQUIRE_FRIENDSHIP_TO_MESSAGE and not friends.are_friends(current_user.id, body.recipient_id):
            raise InvalidRecipient("Recipient is not in your friends list")

        message = messages.send(
            current_user.id,
            body.recipient_id,
            body.content,
            body.kind,
            body.image_id
        )
        return MessageResponse.from_message(message, current_user.id)
    except (HTTPException, GlimpseError):
        raise
    except Exception as e:
        logger.error(f"Error in send_message: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("/{message_id}", response_model=MessageResponse)
async def get_message(
    message_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    messages: MessagesCRUD = Depends(get_messages_crud)
):
    """Get a message the current user sent or received"""
    try:
        message = messages.get(current_user.id, message_id)
        if message is None:
            raise HTTPException(status_code=404, detail="Message not found")
        return MessageResponse.from_message(message, current_user.id)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in get_message: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.patch("/{message_id}", response_model=MessageResponse)
async def update_message(
    message_id: int,
    body: MessageUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    messages: MessagesCRUD = Depends(get_messages_crud)
):
    """Edit content or status of a message the current user sent"""
    try:
        message = messages.update_content(
            current_user.id,
            message_id,
            content=body.content,
            status=body.status
        )
        return MessageResponse.from_message(message, current_user.id)
    except (HTTPException, GlimpseError):
        raise
    except Exception as e:
        logger.error(f"Error in update_message: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.delete("/{message_id}", response_model=MessageStatusResponse)
async def delete_message(
    message_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    messages: MessagesCRUD = Depends(get_messages_crud)
):
    """Delete a message the current user sent"""
    try:
        messages.delete(current_user.id, message_id)
        return MessageStatusResponse(message="Message deleted successfully", status="deleted")
    except (HTTPException, GlimpseError):
        raise
    except Exception as e:
        logger.error(f"Error in delete_message: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("/{message_id}/mark-read", response_model=MessageResponse)
async def mark_message_read(
    message_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    messages: MessagesCRUD = Depends(get_messages_crud)
):
    """Mark a received message as read"""
    try:
        message = messages.mark_read(current_user.id, message_id)
        return MessageResponse.from_message(message, current_user.id)
    except (HTTPException, GlimpseError):
        raise
    except Exception as e:
        logger.error(f"Error in mark_message_read: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("/{message_id}/reveal", response_model=MessageResponse)
async def reveal_image(
    message_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    messages: MessagesCRUD = Depends(get_messages_crud)
):
    """Reveal a received view-once image and start its countdown"""
    try:
        message = messages.reveal_image(current_user.id, message_id)
        return MessageResponse.from_message(message, current_user.id)
    except (HTTPException, GlimpseError):
        raise
    except Exception as e:
        logger.error(f"Error in reveal_image: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

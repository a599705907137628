from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional
from glimpse.auth import get_current_user
from glimpse.config import settings
from glimpse.crud.conversation import ConversationsCRUD
from glimpse.dependencies import get_conversations_crud
from glimpse.schemas import (
    ChatPreviewListResponse, ChatPreviewResponse, CurrentUser, MessageResponse, MessagesListResponse, PublicUser
)
from glimpse.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/conversations", tags=["conversations"])

@router.get("", response_model=ChatPreviewListResponse)
async def list_chats(
    current_user: CurrentUser = Depends(get_current_user),
    conversations: ConversationsCRUD = Depends(get_conversations_crud)
):
    """Chat list: latest message per counterpart, newest conversation first"""
    try:
        previews = conversations.chat_previews(current_user.id)
        return ChatPreviewListResponse(
            chats=[
                ChatPreviewResponse(
                    friend_id=preview.counterpart_id,
                    friend=PublicUser.model_validate(preview.counterpart) if preview.counterpart else None,
                    last_message=MessageResponse.from_message(preview.message, current_user.id),
                    unread_count=preview.unread_count
                ) for preview in previews
            ]
        )
    except Exception as e:
        logger.error(f"Error in list_chats: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("/{friend_id}", response_model=MessagesListResponse)
async def get_conversation(
    friend_id: str,
    page: int = Query(1, ge=1, description="Page number"),
    page_size: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_SIZE, description="Items per page; omit for all"),
    current_user: CurrentUser = Depends(get_current_user),
    conversations: ConversationsCRUD = Depends(get_conversations_crud)
):
    """Thread between the current user and friend_id, oldest first"""
    try:
        messages, total = conversations.get_conversation(current_user.id, friend_id, page, page_size)
        return MessagesListResponse(
            messages=[MessageResponse.from_message(m, current_user.id) for m in messages],
            total_count=total,
            page=page,
            page_size=page_size
        )
    except Exception as e:
        logger.error(f"Error in get_conversation: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

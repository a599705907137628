from fastapi import APIRouter, Depends, HTTPException, Query, Request
from typing import Optional
from glimpse.auth import get_current_user
from glimpse.config import settings
from glimpse.crud.friends import FriendsCRUD
from glimpse.dependencies import get_friends_crud
from glimpse.errors import GlimpseError
from glimpse.middleware.rate_limit import rate_limit_api_write
from glimpse.models.friendship import Friendship
from glimpse.schemas import (
    CurrentUser, FriendAddRequest, FriendshipResponse, FriendsListResponse, FriendStatusResponse, PublicUser
)
from glimpse.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/friends", tags=["friends"])

def _to_response(friendship: Friendship) -> FriendshipResponse:
    return FriendshipResponse(
        id=friendship.id,
        owner_id=friendship.owner_id,
        friend_user_id=friendship.friend_user_id,
        created_at=friendship.created_at,
        friend=PublicUser.model_validate(friendship.friend_user) if friendship.friend_user else None,
    )

@router.get("", response_model=FriendsListResponse)
async def list_friends(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: Optional[int] = Query(None, ge=1, le=settings.MAX_PAGE_SIZE, description="Items per page; omit for all"),
    current_user: CurrentUser = Depends(get_current_user),
    friends: FriendsCRUD = Depends(get_friends_crud)
):
    """List the current user's friends with their public profiles"""
    try:
        friendships, total = friends.list_friends(current_user.id, page, page_size)
        return FriendsListResponse(
            friends=[_to_response(f) for f in friendships],
            total_count=total,
            page=page,
            page_size=page_size
        )
    except Exception as e:
        logger.error(f"Error in list_friends: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("", response_model=FriendshipResponse, status_code=201)
@rate_limit_api_write
async def add_friend(
    request: Request,
    body: FriendAddRequest,
    current_user: CurrentUser = Depends(get_current_user),
    friends: FriendsCRUD = Depends(get_friends_crud)
):
    """Add a user to the current user's friends"""
    try:
        friendship = friends.add_friend(current_user.id, body.friend_user_id)
        return _to_response(friendship)
    except (HTTPException, GlimpseError):
        raise
    except Exception as e:
        logger.error(f"Error in add_friend: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("/{friendship_id}", response_model=FriendshipResponse)
async def get_friend(
    friendship_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    friends: FriendsCRUD = Depends(get_friends_crud)
):
    """Get one of the current user's friendships"""
    try:
        friendship = friends.get_friend(current_user.id, friendship_id)
        if not friendship:
            raise HTTPException(status_code=404, detail="Friend not found")
        return _to_response(friendship)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in get_friend: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.delete("/{friendship_id}", response_model=FriendStatusResponse)
async def remove_friend(
    friendship_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    friends: FriendsCRUD = Depends(get_friends_crud)
):
    """Remove a friend (recoverable)"""
    try:
        friends.remove_friend(current_user.id, friendship_id)
        return FriendStatusResponse(
            message="Friend removed successfully",
            status="removed"
        )
    except (HTTPException, GlimpseError):
        raise
    except Exception as e:
        logger.error(f"Error in remove_friend: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.post("/{friendship_id}/restore", response_model=FriendshipResponse)
async def restore_friend(
    friendship_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    friends: FriendsCRUD = Depends(get_friends_crud)
):
    """Undo a friend removal"""
    try:
        friendship = friends.restore_friend(current_user.id, friendship_id)
        return _to_response(friendship)
    except (HTTPException, GlimpseError):
        raise
    except Exception as e:
        logger.error(f"Error in restore_friend: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

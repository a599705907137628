from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from glimpse.schemas.user import PublicUser

class FriendAddRequest(BaseModel):
    friend_user_id: str = Field(..., min_length=1, description="ID of the user to add as a friend")

class FriendshipResponse(BaseModel):
    id: str
    owner_id: str
    friend_user_id: str
    created_at: datetime
    friend: Optional[PublicUser] = None

class FriendsListResponse(BaseModel):
    friends: List[FriendshipResponse]
    total_count: int
    page: int
    page_size: Optional[int] = None

class FriendStatusResponse(BaseModel):
    message: str
    status: str

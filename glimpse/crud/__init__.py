from glimpse.crud.user import (
    get_user,
    search_users_by_username,
    is_username_available,
    create_user,
    update_user,
    update_user_display_name,
)
from glimpse.crud.friends import FriendsCRUD
from glimpse.crud.images import ImagesCRUD
from glimpse.crud.message import MessagesCRUD
from glimpse.crud.conversation import ConversationsCRUD, ChatPreview

__all__ = [
    # User operations
    "get_user",
    "search_users_by_username",
    "is_username_available",
    "create_user",
    "update_user",
    "update_user_display_name",

    # Core components
    "FriendsCRUD",
    "ImagesCRUD",
    "MessagesCRUD",
    "ConversationsCRUD",
    "ChatPreview",
]

# API Routers
from glimpse.routers import users, friends, images, messages, conversations

__all__ = ["users", "friends", "images", "messages", "conversations"]

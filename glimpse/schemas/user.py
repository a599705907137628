from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional
from datetime import datetime
import re

class PublicUser(BaseModel):
    """Profile fields other users are allowed to see"""
    id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    initials: Optional[str] = None
    color: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True

class UserUpdate(BaseModel):
    """Schema for updating the current user's profile"""
    username: Optional[str] = None
    display_name: Optional[str] = None
    initials: Optional[str] = None
    color: Optional[str] = None
    avatar_url: Optional[str] = None

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        if v is not None:
            if len(v) < 3:
                raise ValueError('Username must be at least 3 characters long')
            if len(v) > 30:
                raise ValueError('Username must be at most 30 characters long')
            if not re.match(r'^[a-zA-Z0-9_]+$', v):
                raise ValueError('Username can only contain letters, numbers, and underscores')
            if v.lower() in ['admin', 'root', 'system', 'user', 'test', 'guest']:
                raise ValueError('Username is not allowed')
        return v

    @field_validator('initials')
    @classmethod
    def validate_initials(cls, v):
        if v is not None and not (1 <= len(v) <= 3):
            raise ValueError('Initials must be 1 to 3 characters')
        return v

class UserResponse(PublicUser):
    """Schema for the current user's own profile"""
    email: Optional[EmailStr] = None
    created_at: datetime
    updated_at: datetime

class CurrentUser(BaseModel):
    """Simplified user model for authentication responses"""
    id: str
    email: Optional[str] = None
    username: Optional[str] = None
    display_name: Optional[str] = None

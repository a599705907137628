from sqlalchemy.orm import Session
from sqlalchemy import func
from glimpse.models import User
from typing import Optional, Dict, Any

def get_user(db: Session, user_id: str) -> Optional[User]:
    """Get a user by ID."""
    return db.query(User).filter(User.id == user_id).first()

def search_users_by_username(db: Session, username_pattern: str, limit: int = 10) -> list[User]:
    """Search users by username prefix (for the add-friend picker)."""
    return db.query(User).filter(
        User.username.isnot(None),
        func.lower(User.username).like(f"{username_pattern.lower()}%")
    ).order_by(User.username).limit(limit).all()

def is_username_available(db: Session, username: str, exclude_user_id: str = None) -> bool:
    """Check if a username is free, ignoring the user being updated."""
    query = db.query(User).filter(func.lower(User.username) == username.lower())
    if exclude_user_id:
        query = query.filter(User.id != exclude_user_id)
    return query.first() is None

def _initials_for(display_name: Optional[str]) -> Optional[str]:
    if not display_name:
        return None
    parts = [p for p in display_name.split() if p]
    return "".join(p[0] for p in parts[:3]).upper() or None

def create_user(db: Session, user_id: str, email: Optional[str], display_name: Optional[str]) -> User:
    """
    Create a new user mirrored from the identity provider.

    Args:
        db: Database session
        user_id: Identity provider UID
        email: User email
        display_name: User display name

    Returns:
        Created User object
    """
    db_user = User(
        id=user_id,
        email=email,
        display_name=display_name,
        initials=_initials_for(display_name),
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

def update_user(db: Session, user_id: str, user_data: Dict[str, Any]) -> Optional[User]:
    """Update profile fields that were supplied."""
    db_user = get_user(db, user_id)
    if not db_user:
        return None

    for key, value in user_data.items():
        if hasattr(db_user, key):
            setattr(db_user, key, value)
    if "display_name" in user_data and "initials" not in user_data:
        db_user.initials = _initials_for(db_user.display_name)

    db.commit()
    db.refresh(db_user)
    return db_user

def update_user_display_name(db: Session, user_id: str, display_name: str) -> Optional[User]:
    return update_user(db, user_id, {"display_name": display_name})

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List
from glimpse import crud
from glimpse.auth import get_current_user
from glimpse.database import get_db
from glimpse.schemas import CurrentUser, PublicUser, UserResponse, UserUpdate
from glimpse.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/me", response_model=UserResponse)
async def read_current_user(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the current user's profile"""
    db_user = crud.get_user(db, current_user.id)
    if db_user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserResponse.model_validate(db_user)

@router.patch("/me", response_model=UserResponse)
async def update_current_user(
    user_update: UserUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the current user's profile"""
    try:
        update_data = user_update.model_dump(exclude_unset=True)
        username = update_data.get("username")
        if username and not crud.is_username_available(db, username, exclude_user_id=current_user.id):
            raise HTTPException(status_code=409, detail="Username is already taken")

        db_user = crud.update_user(db, current_user.id, update_data)
        if db_user is None:
            raise HTTPException(status_code=404, detail="User not found")
        return UserResponse.model_validate(db_user)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in update_current_user: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

@router.get("/search", response_model=List[PublicUser])
async def search_users(
    username: str = Query(..., min_length=1, description="Username prefix"),
    limit: int = Query(10, ge=1, le=50),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Find users by username prefix, e.g. to add them as friends"""
    users = crud.search_users_by_username(db, username, limit)
    return [PublicUser.model_validate(u) for u in users if u.id != current_user.id]

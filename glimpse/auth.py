import os
from fastapi import Depends, HTTPException, status, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import firebase_admin
from firebase_admin import auth, credentials
from typing import Optional
from sqlalchemy.orm import Session
from glimpse.config import settings
from glimpse.database import get_db
from glimpse.utils.logger import get_logger
from glimpse import crud, schemas

logger = get_logger(__name__)

_firebase_app = None

def _ensure_firebase_app():
    """Initialise the Firebase Admin SDK on first use."""
    global _firebase_app
    if _firebase_app is not None:
        return _firebase_app
    try:
        _firebase_app = firebase_admin.get_app()
    except ValueError:
        firebase_json_path = settings.FIREBASE_SERVICE_ACCOUNT_JSON
        options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
        if os.path.exists(firebase_json_path):
            cred = credentials.Certificate(firebase_json_path)
            _firebase_app = firebase_admin.initialize_app(cred, options)
            logger.info("Initialized Firebase Admin with provided service account JSON")
        else:
            # Application Default Credentials (e.g. workload identity)
            _firebase_app = firebase_admin.initialize_app(options=options)
            logger.warning(f"FIREBASE_SERVICE_ACCOUNT_JSON not found at {firebase_json_path}. Initialized Firebase with default credentials.")
    return _firebase_app

async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False)),
    x_user_id: Optional[str] = Header(None, alias="X-User-ID"),
    db: Session = Depends(get_db)
) -> schemas.CurrentUser:
    """
    Verify a Firebase ID token and resolve the local user.
    Falls back to the X-User-ID header when header auth is allowed.

    Args:
        credentials: The HTTP Authorization credentials.
        x_user_id: Optional X-User-ID header value.
        db: The database session.

    Returns:
        CurrentUser: Simplified user object

    Raises:
        HTTPException: 401 if no usable identity was supplied
    """
    header_auth = settings.ALLOW_HEADER_AUTH and x_user_id is not None
    if credentials is None and not header_auth:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Bearer authentication is required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if credentials:
        try:
            _ensure_firebase_app()
            decoded_token = auth.verify_id_token(credentials.credentials)
        except Exception as firebase_error:
            logger.warning(f"Rejected bearer token: {firebase_error}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        user_id = decoded_token.get("uid")
        display_name = decoded_token.get("name")
        db_user = crud.get_user(db, user_id)
        if db_user is None:
            db_user = crud.create_user(db, user_id, decoded_token.get("email"), display_name)
            logger.info(f"Created local user {user_id} from Firebase token")
        elif display_name and display_name != db_user.display_name:
            db_user = crud.update_user_display_name(db, user_id, display_name)
    else:
        db_user = crud.get_user(db, x_user_id)
        if not db_user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid X-User-ID",
            )

    return schemas.CurrentUser(
        id=db_user.id,
        email=db_user.email,
        username=db_user.username,
        display_name=db_user.display_name,
    )

import os
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application settings."""
    # Base settings
    DEBUG: bool = False

    # CORS settings
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",  # Frontend development server
        "http://localhost:8000",  # Backend server
    ]

    # Firebase settings
    FIREBASE_PROJECT_ID: str = os.getenv("FIREBASE_PROJECT_ID", "")
    # Explicit Firebase Admin SDK credentials JSON path
    FIREBASE_SERVICE_ACCOUNT_JSON: str = os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON", "./firebase-service-account.json")
    # Accept X-User-ID as identity when no bearer token is sent (local dev, tests, trusted gateways)
    ALLOW_HEADER_AUTH: bool = os.getenv("ALLOW_HEADER_AUTH", "false").lower() == "true"

    # Database settings
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./glimpse.db")

    # Redis settings (rate limiting storage)
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))
    RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"

    # View-once images: seconds an image stays visible after the recipient first reveals it
    REVEAL_WINDOW_SECONDS: int = int(os.getenv("REVEAL_WINDOW_SECONDS", "10"))
    # When true, the messages router refuses to send to users the sender has not added as a friend
    REQUIRE_FRIENDSHIP_TO_MESSAGE: bool = os.getenv("REQUIRE_FRIENDSHIP_TO_MESSAGE", "false").lower() == "true"

    # Blob storage
    MEDIA_ROOT: str = os.getenv("MEDIA_ROOT", "./media")
    MEDIA_BASE_URL: str = os.getenv("MEDIA_BASE_URL", "/media")
    MAX_IMAGE_BYTES: int = int(os.getenv("MAX_IMAGE_BYTES", str(10 * 1024 * 1024)))

    # Pagination
    MAX_PAGE_SIZE: int = 100

    class Config:
        env_file = ".env"
        case_sensitive = True

# Create settings instance
settings = Settings()

# Content types accepted by the image upload route
ALLOWED_IMAGE_TYPES = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/heic",
}

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse
import redis
from glimpse.config import settings
from glimpse.utils.logger import get_logger

logger = get_logger(__name__)

def _connect_redis():
    if not settings.RATE_LIMIT_ENABLED:
        return None
    try:
        client = redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            decode_responses=True,
            retry_on_timeout=True,
            socket_connect_timeout=5,
            socket_timeout=5
        )
        client.ping()
        logger.info(f"Rate limiting Redis connected: {settings.REDIS_HOST}:{settings.REDIS_PORT}")
        return client
    except Exception as e:
        logger.warning(f"Rate limiting Redis connection failed: {e}. Using in-memory fallback.")
        return None

redis_client = _connect_redis()

def get_user_id_or_ip(request: Request):
    """
    Rate-limit key: the X-User-ID / authenticated user when known, else the client IP.
    """
    user_id = getattr(request.state, 'user_id', None) or request.headers.get("X-User-ID")
    if user_id:
        return f"user:{user_id}"
    return f"ip:{get_remote_address(request)}"

# Create limiter instance
limiter = Limiter(
    key_func=get_user_id_or_ip,
    storage_uri=f"redis://{settings.REDIS_HOST}:{settings.REDIS_PORT}" if redis_client else "memory://",
    default_limits=["1000/hour"],
    enabled=settings.RATE_LIMIT_ENABLED,
)

# Rate limiting configurations for different endpoint groups
RATE_LIMITS = {
    "api_write": "60/minute",
    "upload": "20/minute",
}

def get_rate_limit_for_endpoint(endpoint: str) -> str:
    """Get rate limit configuration for specific endpoint."""
    return RATE_LIMITS.get(endpoint, "100/minute")

async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Rate limit exceeded handler with a JSON body matching the domain error shape."""
    logger.warning(f"Rate limit exceeded for {get_user_id_or_ip(request)}: {exc.detail}")
    return JSONResponse(
        status_code=429,
        content={"detail": f"Rate limit exceeded: {exc.detail}. Please try again later.", "code": "rate_limited"},
        headers={"Retry-After": "60"},
    )

def rate_limit_api_write(func):
    """Rate limit for write API endpoints."""
    return limiter.limit(get_rate_limit_for_endpoint("api_write"))(func)

def rate_limit_upload(func):
    """Rate limit for image uploads."""
    return limiter.limit(get_rate_limit_for_endpoint("upload"))(func)

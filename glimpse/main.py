from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
import os

from glimpse.config import settings
from glimpse.database import init_db, get_pool_status
from glimpse.errors import GlimpseError
from glimpse.logging_config import configure_logging
from glimpse.middleware.rate_limit import limiter, rate_limit_exceeded_handler
from glimpse.middleware.request_id import RequestIDMiddleware
from glimpse.routers import users, friends, images, messages, conversations
from glimpse.utils.logger import get_logger

# Configure logging first
configure_logging()
logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup; schema changes for managed databases go through alembic."""
    init_db()
    if settings.DEBUG:
        logger.info("Glimpse API started in DEBUG mode - Docs available at /docs")
    else:
        logger.info("Glimpse API started in PRODUCTION mode - Docs disabled")
    yield

# Conditional docs configuration
if settings.DEBUG:
    docs_config = {
        "docs_url": "/docs",
        "redoc_url": "/redoc",
        "openapi_url": "/openapi.json"
    }
else:
    docs_config = {
        "docs_url": None,
        "redoc_url": None,
        "openapi_url": None
    }

app = FastAPI(
    title="Glimpse API",
    description="Friends, messages and view-once images",
    version="1.0.0",
    lifespan=lifespan,
    **docs_config
)

# Set up rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

@app.exception_handler(GlimpseError)
async def glimpse_error_handler(request: Request, exc: GlimpseError):
    """Translate domain failures into JSON responses with a stable code."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.detail}")
    else:
        logger.warning(f"{exc.code} on {request.method} {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )

# Add Request ID middleware first for proper request tracing
app.add_middleware(RequestIDMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(users.router)
app.include_router(friends.router)
app.include_router(images.router)
app.include_router(messages.router)
app.include_router(conversations.router)

# Serve stored blobs locally unless a CDN base URL is configured
if settings.MEDIA_BASE_URL.startswith("/"):
    os.makedirs(settings.MEDIA_ROOT, exist_ok=True)
    app.mount(settings.MEDIA_BASE_URL, StaticFiles(directory=settings.MEDIA_ROOT), name="media")

@app.get("/")
async def root():
    return {"message": "Glimpse API", "version": "1.0.0"}

# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {"status": "healthy", "service": "glimpse-api", "database": get_pool_status()}

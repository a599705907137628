from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool
from glimpse.config import settings
from glimpse.utils.logger import get_logger

logger = get_logger(__name__)

# Database connection pooling configuration (ignored for SQLite)
POOL_SIZE = 5          # Base connections per worker
MAX_OVERFLOW = 10      # Additional connections when needed
POOL_TIMEOUT = 30      # Seconds to wait for connection
POOL_RECYCLE = 1800    # Recycle connections every 30 minutes
POOL_PRE_PING = True   # Validate connections before use

# Global variables for lazy initialization
_engine = None
_session_local = None

def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")

def get_engine():
    """Get database engine with lazy initialization for Gunicorn worker compatibility."""
    global _engine
    if _engine is None:
        url = settings.DATABASE_URL
        if _is_sqlite(url):
            # SQLite connections are shared across FastAPI's threadpool
            _engine = create_engine(
                url,
                connect_args={"check_same_thread": False},
                echo=settings.DEBUG,
            )
            logger.info(f"Database configured: sqlite ({url})")
        else:
            _engine = create_engine(
                url,
                poolclass=QueuePool,
                pool_size=POOL_SIZE,
                max_overflow=MAX_OVERFLOW,
                pool_timeout=POOL_TIMEOUT,
                pool_recycle=POOL_RECYCLE,
                pool_pre_ping=POOL_PRE_PING,
                echo=settings.DEBUG,  # Log SQL queries in debug mode
                echo_pool=settings.DEBUG,
            )
            logger.info(f"Database pool configured: size={POOL_SIZE}, max_overflow={MAX_OVERFLOW}, timeout={POOL_TIMEOUT}s")
    return _engine

def get_session_local():
    """Get SessionLocal with lazy initialization for Gunicorn worker compatibility."""
    global _session_local
    if _session_local is None:
        _session_local = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=get_engine())
    return _session_local

Base = declarative_base()

def init_db():
    """Create all tables known to the ORM metadata."""
    # Import models so they register with Base.metadata
    import glimpse.models  # noqa: F401
    Base.metadata.create_all(bind=get_engine())
    logger.info("Database tables ensured")

def get_db():
    """
    Database dependency for FastAPI.
    Provides database session with automatic cleanup.
    """
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {e}")
        try:
            db.rollback()
        except Exception as rollback_error:
            logger.error(f"Error during rollback: {rollback_error}")
        raise
    finally:
        try:
            db.close()
        except Exception as close_error:
            logger.error(f"Error closing database session: {close_error}")

def get_pool_status():
    """
    Get current database connection pool status.
    Useful for monitoring and debugging.
    """
    try:
        pool = get_engine().pool
        status = {"pool_type": type(pool).__name__}
        if isinstance(pool, QueuePool):
            status.update({
                "pool_size": pool.size(),
                "checked_in": pool.checkedin(),
                "checked_out": pool.checkedout(),
                "overflow": pool.overflow(),
            })
        return status
    except Exception as e:
        return {
            "error": f"Could not get pool status: {str(e)}",
            "pool_type": "unknown"
        }

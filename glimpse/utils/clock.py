from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    """Naive UTC timestamp; every stored datetime in the schema uses this form."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

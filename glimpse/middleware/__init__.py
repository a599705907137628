# Middleware package for the Glimpse API

from .request_id import RequestIDMiddleware
from .rate_limit import limiter, rate_limit_api_write, rate_limit_upload, rate_limit_exceeded_handler

__all__ = [
    "RequestIDMiddleware",
    "limiter",
    "rate_limit_api_write",
    "rate_limit_upload",
    "rate_limit_exceeded_handler",
]

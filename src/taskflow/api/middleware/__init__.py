"""FastAPI middleware for the TaskFlow services."""

from taskflow.api.middleware.metrics import MetricsMiddleware
from taskflow.api.middleware.security import RequestIDMiddleware

__all__ = [
    "MetricsMiddleware",
    "RequestIDMiddleware",
]

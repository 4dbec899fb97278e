"""Middleware package."""

from octoops.middleware.logging import LoggingMiddleware
from octoops.middleware.request_id import RequestIDMiddleware

__all__ = ["LoggingMiddleware", "RequestIDMiddleware"]

"""
Middleware package for the application.
"""

from studio_planner.middleware.request_id import RequestIDMiddleware

__all__ = [
    "RequestIDMiddleware",
]

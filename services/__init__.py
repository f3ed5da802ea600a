"""
Services package.
Бизнес-логика приложения.
"""

from services.exceptions import (
    WorkflowError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailureError,
    AlreadyTerminalError,
    UpstreamFailureError,
)

__all__ = [
    "WorkflowError",
    "NotFoundError",
    "PermissionDeniedError",
    "ValidationFailureError",
    "AlreadyTerminalError",
    "UpstreamFailureError",
]

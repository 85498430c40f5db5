from app.utils.base.enums import BaseEnum, MirrorStatus
from app.utils.base.errors import (
    AppError,
    AuthError,
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

__all__ = [
    "BaseEnum",
    "MirrorStatus",
    "AppError",
    "AuthError",
    "ConflictError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
]

from .exceptions import (
    PlatformException,
    NotFoundError,
    PermissionDeniedError,
    ConflictError,
    ValidationError,
    FileTooLargeError,
    UnsupportedFileTypeError,
    AuthenticationError,
    UpstreamError,
)

__all__ = [
    "PlatformException",
    "NotFoundError",
    "PermissionDeniedError",
    "ConflictError",
    "ValidationError",
    "FileTooLargeError",
    "UnsupportedFileTypeError",
    "AuthenticationError",
    "UpstreamError",
]

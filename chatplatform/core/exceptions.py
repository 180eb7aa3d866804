# chatplatform/core/exceptions.py
"""
Application exceptions.
"""


class PlatformException(Exception):
    """Base exception for the chatbot platform."""
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(PlatformException):
    """Raised when a resource does not exist or is not owned by the caller."""
    status_code = 404

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"{resource} not found")


class PermissionDeniedError(PlatformException):
    """Raised when the caller lacks the privileges for an operation."""
    status_code = 403


class ConflictError(PlatformException):
    """Raised when a write would violate a uniqueness rule."""
    status_code = 400


class ValidationError(PlatformException):
    """Raised for request data rejected outside of schema validation."""
    status_code = 400


class FileTooLargeError(ValidationError):
    """Raised when an upload exceeds the configured size ceiling."""
    status_code = 413

    def __init__(self, limit_mb: int):
        self.limit_mb = limit_mb
        super().__init__(f"File exceeds the {limit_mb} MB limit")


class UnsupportedFileTypeError(ValidationError):
    """Raised when an upload's MIME type is not on the allow-list."""

    def __init__(self, mime_type: str):
        self.mime_type = mime_type
        super().__init__("File type not allowed")


class AuthenticationError(PlatformException):
    """Raised when credentials or tokens are invalid."""
    status_code = 401


class UpstreamError(PlatformException):
    """Raised when the chat-completion API fails or is not configured."""
    status_code = 500

    def __init__(self, message: str, status: int = None):
        self.status = status
        super().__init__(message)

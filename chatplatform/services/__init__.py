from .file_service import FileService, StoredUpload, file_service, normalize_mime

__all__ = ["FileService", "StoredUpload", "file_service", "normalize_mime"]

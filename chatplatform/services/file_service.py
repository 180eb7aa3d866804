# chatplatform/services/file_service.py
"""
File service for project uploads.
Bytes live on local disk under the configured upload directory; the
database only records metadata. Rejected uploads never leave bytes behind.
"""

import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from fastapi import UploadFile

from chatplatform.config import UPLOADS
from chatplatform.config.schema import UploadSettings
from chatplatform.core.exceptions import FileTooLargeError, UnsupportedFileTypeError, ValidationError
from chatplatform.utils.logger import setup_logger

logger = setup_logger(__name__)

CHUNK_SIZE = 1024 * 1024


@dataclass
class StoredUpload:
    """Metadata for a file written to disk."""
    filename: str
    original_name: str
    mime_type: str
    size: int


def normalize_mime(content_type: Optional[str]) -> str:
    """'Text/Plain; charset=utf-8' -> 'text/plain'"""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


class FileService:
    """Stores, resolves and removes uploaded project files."""

    def __init__(self, settings: Optional[UploadSettings] = None):
        self.settings = settings or UPLOADS

    @property
    def upload_dir(self) -> Path:
        path = Path(self.settings.upload_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def is_allowed(self, mime_type: str) -> bool:
        mime_type = normalize_mime(mime_type)
        if mime_type in self.settings.allowed_mime_types:
            return True
        return self.settings.allow_any_text and mime_type.startswith("text/")

    @staticmethod
    def generate_filename(original_name: str) -> str:
        """<epoch-ms>-<random><ext>, never derived from user input beyond the extension."""
        suffix = Path(original_name).suffix
        if not suffix.isascii() or len(suffix) > 16 or not suffix[1:].isalnum():
            suffix = ""
        return f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{suffix.lower()}"

    def path_for(self, filename: str) -> Path:
        """Resolve a stored filename, refusing anything outside the upload directory."""
        base = self.upload_dir.resolve()
        path = (base / filename).resolve()
        if path.parent != base:
            raise ValidationError("Invalid stored filename")
        return path

    async def save_upload(self, upload: UploadFile) -> StoredUpload:
        """
        Validate and write an upload to disk.

        Raises:
            UnsupportedFileTypeError before any bytes are written
            FileTooLargeError after removing the partial file
        """
        mime_type = normalize_mime(upload.content_type)
        if not self.is_allowed(mime_type):
            logger.warning(f"Rejected upload {upload.filename!r} with type {mime_type!r}")
            raise UnsupportedFileTypeError(mime_type)

        original_name = Path(upload.filename or "upload").name or "upload"
        filename = self.generate_filename(original_name)
        path = self.path_for(filename)
        limit = self.settings.max_file_size_bytes

        size = 0
        try:
            with open(path, "wb") as buffer:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > limit:
                        raise FileTooLargeError(self.settings.max_file_size_mb)
                    buffer.write(chunk)
        except BaseException:
            path.unlink(missing_ok=True)
            raise

        logger.info(f"Stored upload {original_name!r} as {filename} ({size} bytes)")
        return StoredUpload(filename=filename, original_name=original_name, mime_type=mime_type, size=size)

    def remove(self, filename: str) -> bool:
        """Delete stored bytes. Returns False if they were already gone."""
        try:
            path = self.path_for(filename)
        except ValidationError:
            logger.warning(f"Refusing to remove suspicious filename {filename!r}")
            return False
        if not path.exists():
            return False
        path.unlink()
        return True

    def remove_many(self, filenames: Iterable[str]) -> int:
        removed = 0
        for filename in filenames:
            try:
                if self.remove(filename):
                    removed += 1
            except OSError as e:
                logger.error(f"Failed to remove stored file {filename}: {e}")
        return removed


# Global instance for easy import in API routes
file_service = FileService()

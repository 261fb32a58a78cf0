"""
Exception types raised by the uploader.
"""
from pathlib import Path
from typing import Optional


class UploaderError(Exception):
    """Base class for all uploader errors."""


class ConfigurationError(UploaderError, ValueError):
    """Raised when options or inputs are invalid, before any I/O happens."""


class StagingError(UploaderError, OSError):
    """Raised when a file cannot be gzip-staged into the working directory."""


class UploadError(UploaderError):
    """Raised when a create-object call fails inside a worker."""

    def __init__(self, key: str, file_path: Optional[Path] = None,
                 message: Optional[str] = None):
        self.key = key
        self.file_path = file_path
        super().__init__(message or f"Failed to upload {file_path} to {key}")

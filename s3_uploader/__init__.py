from .coordinator import UploadCoordinator, upload_directory, upload_file
from .connection import BucketHandle, StorageConnection
from .exceptions import ConfigurationError, StagingError, UploadError, UploaderError
from .models import FileTask, UploadOptions, UploadResult, UploadSummary
from .scanner import FileScanner, PathFilter
from .uploader import S3Uploader

__version__ = "0.1.0"

__all__ = [
    "UploadCoordinator",
    "upload_directory",
    "upload_file",
    "BucketHandle",
    "StorageConnection",
    "ConfigurationError",
    "StagingError",
    "UploadError",
    "UploaderError",
    "FileTask",
    "UploadOptions",
    "UploadResult",
    "UploadSummary",
    "FileScanner",
    "PathFilter",
    "S3Uploader",
]

"""
Module for coordinating directory and single-file uploads.
"""
import logging
import time
from pathlib import Path
from typing import Any, Optional, Tuple, Union

from .compressor import GzipStager
from .connection import StorageConnection
from .exceptions import ConfigurationError
from .log import default_logger
from .models import KILO_SIZE, FileTask, UploadOptions, UploadSummary, format_elapsed
from .scanner import FileScanner, PathFilter
from .uploader import S3Uploader
from .work_queue import UploadQueue

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class UploadCoordinator:
    """Validates options, builds the queue and runs the worker pool."""

    def __init__(self, options: Optional[UploadOptions] = None):
        """Initialize the upload coordinator.

        Args:
            options: Upload options; defaults are used when omitted
        """
        self.options = options or UploadOptions()
        self.log = self.options.logger or default_logger()

    def _connection(self) -> Any:
        """Reuse the supplied connection or build one from credentials."""
        if self.options.connection is not None:
            return self.options.connection
        return StorageConnection.connect(
            self.options.s3_key,
            self.options.s3_secret,
            region=self.options.region,
            path_style=self.options.path_style
        )

    def build_queue(self, source_dir: Path) -> Tuple[UploadQueue, int]:
        """Walk the source tree, filter, optionally stage, and enqueue.

        Args:
            source_dir: Absolute path of the directory being uploaded

        Returns:
            Populated UploadQueue and the total size of queued files in bytes

        Raises:
            StagingError: If gzip staging fails
        """
        opts = self.options
        scanner = FileScanner(PathFilter(opts.pattern, opts.effective_time_range()))
        stager = None
        if opts.gzip:
            stager = GzipStager(source_dir, opts.gzip_working_dir.resolve())

        queue = UploadQueue()
        total_size = 0
        for path in scanner.scan(source_dir):
            base_dir = source_dir
            if stager is not None:
                staged = stager.stage(path)
                if staged != path:
                    path, base_dir = staged, stager.working_dir
            task = FileTask(path=path, base_dir=base_dir, size=path.stat().st_size)
            total_size += task.size
            queue.push(task)
        return queue, total_size

    def upload_directory(self, source: PathLike, bucket: str) -> UploadSummary:
        """Upload every qualifying file under a directory.

        Args:
            source: Local directory to upload
            bucket: Destination bucket name

        Returns:
            UploadSummary for the run

        Raises:
            ConfigurationError: If the source or options are invalid
            StagingError: If gzip staging fails
            UploadError: If any upload fails
        """
        opts = self.options
        source_dir = Path(source)
        if not source_dir.is_dir():
            raise ConfigurationError(f"Source must be a directory: {source}")
        source_dir = source_dir.resolve()

        opts.validate_gzip(source_dir)
        opts.validate_credentials()
        opts.validate_threads()

        connection = self._connection()
        queue, total_size = self.build_queue(source_dir)
        total_files = len(queue)
        logger.debug(f"Queued {total_files} files ({total_size} bytes) from {source_dir}")

        handle = connection.bucket(bucket)
        uploader = S3Uploader(max_workers=opts.threads, log=self.log)

        start = time.monotonic()
        results = uploader.upload_all(
            queue, handle,
            destination_dir=opts.destination_dir,
            public=opts.public,
            metadata=opts.metadata
        )
        elapsed = time.monotonic() - start

        summary = UploadSummary(
            bucket=bucket,
            total_files=total_files,
            total_bytes=total_size,
            elapsed_seconds=elapsed,
            results=sorted(results, key=lambda r: r.sequence)
        )
        self.log.info("Uploaded %d (%.0f KB) in %s" % (
            summary.total_files, summary.total_kilobytes, summary.elapsed_display))
        return summary

    def upload_file(self, source: PathLike, bucket: str) -> UploadSummary:
        """Upload a single file under the destination prefix.

        Args:
            source: Local file to upload
            bucket: Destination bucket name

        Returns:
            UploadSummary for the run

        Raises:
            ConfigurationError: If the file is missing or credentials are absent
            UploadError: If the upload fails
        """
        opts = self.options
        path = Path(source)
        if not path.is_file():
            raise ConfigurationError(f"Source not found: {source}")
        path = path.resolve()

        opts.validate_credentials()
        connection = self._connection()

        task = FileTask(path=path, base_dir=path.parent, size=path.stat().st_size)
        handle = connection.bucket(bucket)
        uploader = S3Uploader(max_workers=1, log=self.log)

        start = time.monotonic()
        result = uploader.upload_task(
            task, handle,
            destination_dir=opts.destination_dir,
            public=opts.public,
            metadata=opts.metadata
        )
        elapsed = time.monotonic() - start

        self.log.info("Uploaded (%.0f KB) in %s" % (task.size / KILO_SIZE, format_elapsed(elapsed)))
        return UploadSummary(
            bucket=bucket,
            total_files=1,
            total_bytes=task.size,
            elapsed_seconds=elapsed,
            results=[result]
        )


def upload_directory(source: PathLike, bucket: str,
                     options: Optional[UploadOptions] = None) -> UploadSummary:
    """Upload a directory tree to a bucket."""
    return UploadCoordinator(options).upload_directory(source, bucket)


def upload_file(source: PathLike, bucket: str,
                options: Optional[UploadOptions] = None) -> UploadSummary:
    """Upload one file to a bucket."""
    return UploadCoordinator(options).upload_file(source, bucket)

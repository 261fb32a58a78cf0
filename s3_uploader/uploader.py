"""
Module for draining the upload queue with a fixed pool of worker threads.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional

from .exceptions import ConfigurationError, UploadError
from .models import FileTask, UploadResult
from .work_queue import ProgressCounter, UploadQueue

logger = logging.getLogger(__name__)


class S3Uploader:
    """Uploads queued files concurrently through a shared bucket handle."""

    def __init__(self, max_workers: int = 5, log: Optional[logging.Logger] = None):
        """Initialize the uploader.

        Args:
            max_workers: Number of worker threads to run
            log: Logger receiving the per-file progress lines
        """
        if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
            raise ConfigurationError(f"max_workers must be a positive integer, got {max_workers!r}")
        self.max_workers = max_workers
        self.log = log or logger

    def upload_task(self, task: FileTask, bucket: Any, destination_dir: str = "",
                    public: bool = False, metadata: Optional[Dict[str, str]] = None,
                    sequence: Optional[int] = None,
                    total: Optional[int] = None) -> UploadResult:
        """Upload one task.

        Args:
            task: File to upload
            bucket: Bucket handle exposing create_object
            destination_dir: Normalized key prefix
            public: Make the object publicly readable
            metadata: Optional metadata to attach to the object
            sequence: Progress sequence number; omitted for single-file uploads
            total: Total number of files in this run

        Returns:
            UploadResult object

        Raises:
            UploadError: If the create-object call fails
        """
        relative = task.key()
        key = task.key(destination_dir)
        progress = f"[{sequence}/{total}] " if sequence is not None else ""
        self.log.info(f"{progress}Uploading {relative} to s3://{bucket.name}/{key}")

        try:
            with open(task.path, 'rb') as body:
                bucket.create_object(key, body, public=public, metadata=metadata)
        except Exception as e:
            raise UploadError(key, task.path, f"Error uploading {task.path} to {key}: {e}") from e

        return UploadResult(
            file_path=task.path,
            key=key,
            size_bytes=task.size,
            sequence=sequence or 1
        )

    def _worker(self, queue: UploadQueue, counter: ProgressCounter, total: int,
                bucket: Any, destination_dir: str, public: bool,
                metadata: Optional[Dict[str, str]]) -> List[UploadResult]:
        results = []
        while True:
            task = queue.pop()
            if task is None:
                break
            sequence = counter.next()
            results.append(self.upload_task(
                task, bucket,
                destination_dir=destination_dir,
                public=public,
                metadata=metadata,
                sequence=sequence,
                total=total
            ))
        return results

    def upload_all(self, queue: UploadQueue, bucket: Any, destination_dir: str = "",
                   public: bool = False,
                   metadata: Optional[Dict[str, str]] = None) -> List[UploadResult]:
        """Drain the queue with max_workers threads.

        Every worker runs to completion; a failure in one worker does not
        stop the others. Once all have finished, the first failure seen is
        re-raised.

        Args:
            queue: Fully populated queue of tasks
            bucket: Bucket handle exposing create_object
            destination_dir: Normalized key prefix
            public: Make objects publicly readable
            metadata: Optional metadata to attach to all objects

        Returns:
            Results from every worker, in no particular order

        Raises:
            UploadError: The first upload failure raised by any worker
        """
        total = len(queue)
        counter = ProgressCounter()
        results: List[UploadResult] = []
        first_error: Optional[BaseException] = None

        with ThreadPoolExecutor(max_workers=self.max_workers,
                                thread_name_prefix="s3-upload") as executor:
            futures = [
                executor.submit(
                    self._worker, queue, counter, total, bucket,
                    destination_dir, public, metadata
                )
                for _ in range(self.max_workers)
            ]

            for future in as_completed(futures):
                error = future.exception()
                if error is not None:
                    logger.debug(f"Worker failed: {error}")
                    if first_error is None:
                        first_error = error
                    continue
                results.extend(future.result())

        if first_error is not None:
            raise first_error
        return results

"""
Module for gzip-staging files into a working directory before upload.
"""
import gzip
import logging
from pathlib import Path

from .exceptions import StagingError

logger = logging.getLogger(__name__)

BLOCK_SIZE = 1024 * 1024
GZIP_SUFFIX = ".gz"
# gzip headers store mtime as an unsigned 32-bit integer
MAX_GZIP_MTIME = 2 ** 32 - 1


class GzipStager:
    """Writes gzip copies of source files under a separate working directory."""

    def __init__(self, source_dir: Path, working_dir: Path, block_size: int = BLOCK_SIZE):
        """Initialize the stager.

        Args:
            source_dir: Root of the tree being uploaded
            working_dir: Root under which compressed copies are written
            block_size: Read/write block size in bytes
        """
        self.source_dir = source_dir
        self.working_dir = working_dir
        self.block_size = block_size

    def staged_path(self, path: Path) -> Path:
        """Where the compressed copy of a source file goes."""
        relative = path.relative_to(self.source_dir)
        return self.working_dir / relative.parent / f"{relative.name}{GZIP_SUFFIX}"

    def stage(self, path: Path) -> Path:
        """Compress a file into the working directory.

        Files already ending in ``.gz`` are returned as-is.

        Args:
            path: Source file under source_dir

        Returns:
            Path of the file to upload

        Raises:
            StagingError: If the directory or compressed file cannot be written
        """
        if path.suffix == GZIP_SUFFIX:
            return path

        target = self.staged_path(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            mtime = min(max(int(path.stat().st_mtime), 0), MAX_GZIP_MTIME)
            with open(path, 'rb') as src, open(target, 'wb') as raw:
                # filename is only embedded in the header; output goes to raw
                with gzip.GzipFile(filename=path.name, mode='wb', fileobj=raw,
                                   mtime=mtime) as gz:
                    while True:
                        block = src.read(self.block_size)
                        if not block:
                            break
                        gz.write(block)
        except OSError as e:
            raise StagingError(f"Failed to gzip {path} to {target}: {e}") from e

        logger.debug(f"Staged {path} as {target}")
        return target

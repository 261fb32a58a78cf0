"""
Module for scanning folders and selecting files to upload.
"""
import fnmatch
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Iterator, Optional, Tuple

from .models import NamePattern

logger = logging.getLogger(__name__)


class PathFilter:
    """Decides whether a discovered file qualifies for upload."""

    def __init__(self, pattern: NamePattern, time_range: Tuple[datetime, datetime]):
        """Initialize the filter.

        Args:
            pattern: Glob string or compiled regex matched against the basename
            time_range: Inclusive (start, end) window for the modification time
        """
        self.pattern = pattern
        self._start = time_range[0].timestamp()
        self._end = time_range[1].timestamp()

    def matches_name(self, name: str) -> bool:
        if isinstance(self.pattern, str):
            return fnmatch.fnmatchcase(name, self.pattern)
        return self.pattern.search(name) is not None

    def matches_mtime(self, mtime: float) -> bool:
        return self._start <= mtime <= self._end

    def matches(self, path: Path, stat_result: Optional[os.stat_result] = None) -> bool:
        """Check a file's basename and modification time.

        Args:
            path: Path to a regular file
            stat_result: Pre-fetched stat of the file, if available

        Returns:
            True if both the name and the mtime qualify
        """
        if not self.matches_name(path.name):
            return False
        st = stat_result or path.stat()
        return self.matches_mtime(st.st_mtime)


class FileScanner:
    """Walks a directory tree and yields files accepted by a PathFilter."""

    def __init__(self, path_filter: PathFilter):
        self.path_filter = path_filter

    def scan(self, folder: Path) -> Iterator[Path]:
        """Recursively yield qualifying regular files under a folder.

        Directories are never yielded. Entries are visited in sorted
        order so repeated scans of an unchanged tree agree.

        Args:
            folder: Root of the tree to walk

        Yields:
            Paths of files that pass the filter
        """
        for dirpath, dirnames, filenames in os.walk(folder):
            dirnames.sort()
            for name in sorted(filenames):
                path = Path(dirpath) / name
                if not path.is_file():
                    continue
                if self.path_filter.matches(path):
                    yield path
                else:
                    logger.debug(f"Skipping {path}")

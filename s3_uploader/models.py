"""
Module containing data models for the uploader.
"""
import logging
import os
import re
from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .exceptions import ConfigurationError

KILO_SIZE = 1024.0

NamePattern = Union[str, re.Pattern]


def default_time_range() -> Tuple[datetime, datetime]:
    """Accept everything from the epoch up to 24 hours from now."""
    return (
        datetime.fromtimestamp(0, tz=timezone.utc),
        datetime.now(timezone.utc) + timedelta(hours=24)
    )


def format_elapsed(seconds: float) -> str:
    """Render elapsed seconds as minutes:seconds, e.g. ``1:7.25``."""
    mins, secs = divmod(seconds, 60.0)
    return "%d:%04.2f" % (int(mins), secs)


@dataclass
class UploadOptions:
    """Options shared by directory and single-file uploads."""
    destination_dir: str = ""
    threads: int = 5
    s3_key: Optional[str] = field(default_factory=lambda: os.environ.get("S3_KEY"))
    s3_secret: Optional[str] = field(default_factory=lambda: os.environ.get("S3_SECRET"))
    public: bool = False
    region: str = "us-east-1"
    metadata: Dict[str, str] = field(default_factory=dict)
    path_style: bool = False
    pattern: NamePattern = "*"
    gzip: bool = False
    gzip_working_dir: Optional[Path] = None
    # None means default_time_range(), evaluated when each upload starts
    time_range: Optional[Tuple[datetime, datetime]] = None
    connection: Optional[Any] = None
    logger: Optional[logging.Logger] = None

    def __post_init__(self):
        """Normalize paths and the destination prefix."""
        self.destination_dir = self.destination_dir.lstrip("/")
        if self.destination_dir and not self.destination_dir.endswith("/"):
            self.destination_dir = f"{self.destination_dir}/"
        if self.gzip_working_dir is not None:
            self.gzip_working_dir = Path(self.gzip_working_dir)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UploadOptions":
        """Build options from a plain mapping, e.g. a JSON config file.

        Args:
            data: Option names mapped to values

        Returns:
            UploadOptions instance

        Raises:
            ConfigurationError: If the mapping has unknown keys or bad values
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown options: {', '.join(sorted(unknown))}")

        values = dict(data)
        if values.get("time_range") is not None:
            try:
                start, end = values["time_range"]
                values["time_range"] = (_parse_time(start), _parse_time(end))
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid time_range: {e}") from e
        return cls(**values)

    def effective_time_range(self) -> Tuple[datetime, datetime]:
        """The configured time window, or the default window as of now."""
        return self.time_range or default_time_range()

    def validate_threads(self) -> None:
        """Reject non-positive worker counts."""
        if isinstance(self.threads, bool) or not isinstance(self.threads, int) or self.threads < 1:
            raise ConfigurationError(f"threads must be a positive integer, got {self.threads!r}")

    def validate_gzip(self, source_dir: Path) -> None:
        """Check the gzip working directory is set and outside the source tree.

        Args:
            source_dir: Directory being uploaded

        Raises:
            ConfigurationError: If the working directory is missing or nested
        """
        if not self.gzip:
            return
        if self.gzip_working_dir is None:
            raise ConfigurationError("gzip_working_dir required when using gzip")

        source = source_dir.resolve()
        working = self.gzip_working_dir.resolve()
        if working == source or source in working.parents:
            raise ConfigurationError("gzip_working_dir may not be located within source folder")

    def validate_credentials(self) -> None:
        """Require access keys unless a connection was supplied."""
        if self.connection is None and (not self.s3_key or not self.s3_secret):
            raise ConfigurationError("Missing access keys")


def _parse_time(value: Union[str, datetime]) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass
class FileTask:
    """A local file waiting to be uploaded."""
    path: Path
    base_dir: Path
    size: int

    def key(self, destination_dir: str = "") -> str:
        """Destination key: the prefix plus the path relative to base_dir."""
        relative = self.path.relative_to(self.base_dir).as_posix()
        return f"{destination_dir}{relative}"


@dataclass
class UploadResult:
    """Represents the result of a single file upload."""
    file_path: Path
    key: str
    size_bytes: int
    sequence: int


@dataclass
class UploadSummary:
    """Represents a summary of an upload operation."""
    bucket: str
    total_files: int
    total_bytes: int
    elapsed_seconds: float
    results: List[UploadResult] = field(default_factory=list)

    @property
    def keys(self) -> List[str]:
        return [r.key for r in self.results]

    @property
    def total_kilobytes(self) -> float:
        return self.total_bytes / KILO_SIZE

    @property
    def elapsed_display(self) -> str:
        return format_elapsed(self.elapsed_seconds)

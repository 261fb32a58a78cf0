"""
Command-line interface for the uploader.
"""
import argparse
import json
import logging
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .coordinator import UploadCoordinator
from .exceptions import ConfigurationError, UploaderError
from .log import setup_logging
from .models import UploadOptions, default_time_range

logger = logging.getLogger(__name__)


def load_config(config_file: Optional[Path] = None) -> dict:
    """Load configuration from a JSON file.

    Args:
        config_file: Path to config file

    Returns:
        Dictionary of configuration values

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    if not config_file:
        return {}

    try:
        with open(config_file) as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(f"Error loading config file {config_file}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_file} must contain a JSON object")
    return data


def parse_metadata(pairs: List[str]) -> Dict[str, str]:
    """Turn repeated KEY=VALUE arguments into a metadata mapping."""
    metadata = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ConfigurationError(f"Metadata must be KEY=VALUE, got {pair!r}")
        metadata[key] = value
    return metadata


def build_options(args: argparse.Namespace) -> UploadOptions:
    """Merge the config file with command line flags.

    Flags given on the command line take precedence over the config file.

    Args:
        args: Command line arguments

    Returns:
        UploadOptions for this run
    """
    values: Dict[str, Any] = load_config(args.config)

    overrides = {
        'destination_dir': args.destination_dir,
        'region': args.region,
        'threads': getattr(args, 'threads', None),
        'gzip_working_dir': getattr(args, 'gzip_working_dir', None),
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    for flag in ('public', 'path_style', 'gzip'):
        if getattr(args, flag, False):
            values[flag] = True

    if args.metadata:
        values['metadata'] = {**values.get('metadata', {}), **parse_metadata(args.metadata)}

    pattern = getattr(args, 'pattern', None)
    if pattern is not None:
        values['pattern'] = pattern
    if getattr(args, 'regex', False) and 'pattern' in values:
        try:
            values['pattern'] = re.compile(values['pattern'])
        except re.error as e:
            raise ConfigurationError(f"Invalid pattern {values['pattern']!r}: {e}") from e

    since = getattr(args, 'since', None)
    until = getattr(args, 'until', None)
    if since or until:
        start, end = values.get('time_range') or default_time_range()
        values['time_range'] = (since or start, until or end)

    values['logger'] = logging.getLogger('s3_uploader')
    return UploadOptions.from_dict(values)


def handle_dir(args: argparse.Namespace) -> None:
    """Handle the dir command.

    Args:
        args: Command line arguments
    """
    coordinator = UploadCoordinator(build_options(args))
    coordinator.upload_directory(Path(args.source), args.bucket)


def handle_file(args: argparse.Namespace) -> None:
    """Handle the file command.

    Args:
        args: Command line arguments
    """
    coordinator = UploadCoordinator(build_options(args))
    coordinator.upload_file(Path(args.source), args.bucket)


def _timestamp(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO 8601 timestamp: {value!r}")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('source', type=str,
                        help="Local source path")
    parser.add_argument('bucket', type=str,
                        help="Destination S3 bucket")
    parser.add_argument('-d', '--destination-dir', type=str,
                        help="Key prefix inside the bucket")
    parser.add_argument('--public', action='store_true',
                        help="Make uploaded objects publicly readable")
    parser.add_argument('--region', type=str,
                        help="AWS region (default us-east-1)")
    parser.add_argument('--path-style', action='store_true',
                        help="Use path-style bucket addressing")
    parser.add_argument('-m', '--metadata', action='append', default=[],
                        metavar='KEY=VALUE',
                        help="Metadata to attach to each object (repeatable)")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Upload files and directories to S3")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Enable verbose logging")
    parser.add_argument('-c', '--config', type=Path,
                        help="Path to JSON config file")

    subparsers = parser.add_subparsers(dest='command', required=True)

    # Dir command
    dir_parser = subparsers.add_parser('dir',
                                       help="Upload a directory tree")
    _add_common_arguments(dir_parser)
    dir_parser.add_argument('-w', '--threads', type=int,
                            help="Number of upload threads (default 5)")
    dir_parser.add_argument('-p', '--pattern', type=str,
                            help="File name pattern to match (glob)")
    dir_parser.add_argument('--regex', action='store_true',
                            help="Treat the pattern as a regular expression")
    dir_parser.add_argument('--gzip', action='store_true',
                            help="Gzip files before uploading")
    dir_parser.add_argument('--gzip-working-dir', type=Path,
                            help="Directory for gzip copies (outside the source)")
    dir_parser.add_argument('--since', type=_timestamp,
                            help="Only upload files modified at or after this time")
    dir_parser.add_argument('--until', type=_timestamp,
                            help="Only upload files modified at or before this time")

    # File command
    file_parser = subparsers.add_parser('file',
                                        help="Upload a single file")
    _add_common_arguments(file_parser)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        if args.command == 'dir':
            handle_dir(args)
        elif args.command == 'file':
            handle_file(args)

    except UploaderError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()

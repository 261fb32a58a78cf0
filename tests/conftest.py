"""
Test fixtures for the uploader.
"""
import logging
from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws as moto_mock_aws

from s3_uploader.connection import StorageConnection
from s3_uploader.models import UploadOptions


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Fake credentials so nothing can reach a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("S3_KEY", "testing")
    monkeypatch.setenv("S3_SECRET", "testing")


@pytest.fixture
def tmp_upload_dir(tmp_path):
    """Create a temporary directory for test files."""
    upload_dir = tmp_path / "uploads"
    upload_dir.mkdir()
    return upload_dir


@pytest.fixture
def tmp_gzip_dir(tmp_path):
    """Working directory for gzip copies, outside the upload dir."""
    return tmp_path / "gzip"


@pytest.fixture
def source_tree(tmp_upload_dir):
    """Create a small nested directory structure."""
    test_files = {
        "file1.txt": "Test content 1",
        "subdir/file2.txt": "Test content 2",
        "subdir/deeper/file3.log": "Test content 3",
        "subdir/archive.gz": "not really gzip",
    }

    for rel_path, content in test_files.items():
        file_path = tmp_upload_dir / rel_path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)

    return tmp_upload_dir


@pytest.fixture
def mock_aws():
    """Mock S3 client using moto."""
    with moto_mock_aws():
        s3 = boto3.client('s3', region_name='us-east-1')
        # Create test bucket
        s3.create_bucket(Bucket='test-bucket')
        yield s3


@pytest.fixture
def connection(mock_aws):
    """A real StorageConnection backed by the moto client."""
    return StorageConnection(mock_aws)


@pytest.fixture
def fake_connection():
    """A connection whose bucket handle records create_object calls."""
    handle = MagicMock()
    handle.name = "test-bucket"
    conn = MagicMock()
    conn.bucket.return_value = handle
    return conn


@pytest.fixture
def test_logger():
    return logging.getLogger("tests.uploader")


@pytest.fixture
def options_factory(test_logger):
    """Build UploadOptions with the test logger attached."""
    def factory(**kwargs):
        kwargs.setdefault("logger", test_logger)
        return UploadOptions(**kwargs)
    return factory


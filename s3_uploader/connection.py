"""
Thin wrapper around a boto3 S3 client exposing bucket handles.
"""
import logging
from typing import Any, BinaryIO, Dict, Optional

import boto3
from botocore.config import Config

logger = logging.getLogger(__name__)


class BucketHandle:
    """Creates objects in one bucket through a shared S3 client."""

    def __init__(self, client: Any, name: str):
        self.client = client
        self.name = name

    def create_object(self, key: str, body: BinaryIO, public: bool = False,
                      metadata: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """Upload a body stream to a key in this bucket.

        Args:
            key: Destination object key
            body: Binary stream with the object content
            public: Make the object publicly readable
            metadata: Optional metadata to attach to the object

        Returns:
            Response from the S3 put_object call
        """
        extra_args = {'Metadata': metadata} if metadata else {}
        # Private is the default; buckets with ACLs disabled reject an explicit one
        if public:
            extra_args['ACL'] = 'public-read'
        return self.client.put_object(
            Bucket=self.name,
            Key=key,
            Body=body,
            **extra_args
        )


class StorageConnection:
    """Handle to the storage service, shared read-only by all workers."""

    def __init__(self, client: Any):
        self.client = client

    @classmethod
    def connect(cls, access_key: str, secret_key: str, region: str = "us-east-1",
                path_style: bool = False) -> "StorageConnection":
        """Build a connection from credentials.

        Args:
            access_key: AWS access key id
            secret_key: AWS secret access key
            region: AWS region name
            path_style: Use path-style instead of virtual-host-style addressing

        Returns:
            StorageConnection instance
        """
        config = Config(s3={'addressing_style': 'path' if path_style else 'virtual'})
        client = boto3.client(
            's3',
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
            config=config
        )
        logger.debug(f"Created S3 client for region {region}")
        return cls(client)

    def bucket(self, name: str) -> BucketHandle:
        return BucketHandle(self.client, name)

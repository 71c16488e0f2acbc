"""
S3Client - S3 operations for uploading, downloading and deleting assets.
"""

import logging
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .errors import StorageError
from .s3_config import S3Config


class S3Client:
    """
    Wrapper for S3 operations used by the publish and mirror flows.

    botocore failures (including connect/read timeouts) are raised as
    StorageError so callers can contain them per file.
    """

    def __init__(self, config: S3Config, logger: Optional[logging.Logger] = None):
        """
        Initialize S3 client.

        Args:
            config: S3 configuration
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

        if config.uses_default_credentials:
            self.logger.info("No credentials in environment, using default credential provider chain")

        self._client = boto3.client(
            's3',
            endpoint_url=config.endpoint,
            aws_access_key_id=config.access_key,
            aws_secret_access_key=config.secret_key,
            region_name=config.region,
            config=Config(
                signature_version='s3v4',
                connect_timeout=config.connect_timeout,
                read_timeout=config.read_timeout,
                retries={'max_attempts': config.max_attempts, 'mode': 'standard'},
            ),
            verify=config.verify_ssl
        )

    @property
    def client(self):
        """Return the underlying boto3 client."""
        return self._client

    def public_url(self, key: str) -> str:
        """URL an uploaded object is served from."""
        return f"{self.config.public_base_url}/{key}"

    def object_exists(self, key: str) -> bool:
        """Check if an object exists in S3."""
        try:
            self._client.head_object(Bucket=self.config.bucket, Key=key)
            return True
        except ClientError as e:
            if e.response['Error']['Code'] in ('404', 'NoSuchKey', 'NotFound'):
                return False
            raise StorageError(f"Cannot check {key}: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"Cannot check {key}: {e}") from e

    def download_object(self, key: str) -> bytes:
        """Download an object from S3."""
        try:
            response = self._client.get_object(Bucket=self.config.bucket, Key=key)
            return response['Body'].read()
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Cannot download {key}: {e}") from e

    def upload_object(
        self,
        key: str,
        data: bytes,
        content_type: str = 'application/octet-stream'
    ) -> None:
        """Upload an object to S3."""
        params = {
            'Bucket': self.config.bucket,
            'Key': key,
            'Body': data,
            'ContentType': content_type,
        }
        if self.config.acl:
            params['ACL'] = self.config.acl

        try:
            self._client.put_object(**params)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Cannot upload {key}: {e}") from e

        self.logger.debug(f"Upload completed, accessible at: {self.public_url(key)}")

    def delete_object(self, key: str) -> None:
        """Delete an object from S3."""
        try:
            self._client.delete_object(Bucket=self.config.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Cannot delete {key}: {e}") from e

"""
S3Config - Bucket and credential settings loaded from the environment.
"""

import os
from dataclasses import dataclass
from typing import List, Optional


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == '':
        return default
    return value.strip().lower() not in ('0', 'false', 'no', 'off')


@dataclass
class S3Config:
    """
    S3 connection settings.

    Attributes:
        bucket: Bucket that published assets are written to
        region: AWS region name
        access_key: Access key id, or None for the default provider chain
        secret_key: Secret access key, or None for the default provider chain
        endpoint: Optional endpoint URL for S3-compatible stores
        acl: Canned ACL applied to uploads ('' disables)
        verify_ssl: Verify TLS certificates
        connect_timeout: Seconds to wait for a connection
        read_timeout: Seconds to wait for a response
        max_attempts: Total attempts per request (1 = no retries)
    """
    bucket: Optional[str] = None
    region: str = 'us-east-1'
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    endpoint: Optional[str] = None
    acl: str = 'public-read'
    verify_ssl: bool = True
    connect_timeout: float = 10.0
    read_timeout: float = 60.0
    max_attempts: int = 1

    @classmethod
    def from_env(cls) -> 'S3Config':
        """Build a config from AWS_* / S3_* environment variables."""
        access_key = os.getenv('AWS_ACCESS_KEY_ID') or None
        secret_key = os.getenv('AWS_SECRET_ACCESS_KEY') or None
        if not (access_key and secret_key):
            access_key = secret_key = None

        return cls(
            bucket=os.getenv('AWS_BUCKET_NAME') or os.getenv('S3_BUCKET') or None,
            region=os.getenv('AWS_REGION') or os.getenv('AWS_DEFAULT_REGION') or 'us-east-1',
            access_key=access_key,
            secret_key=secret_key,
            endpoint=os.getenv('S3_ENDPOINT') or None,
            acl=os.getenv('S3_ACL', 'public-read'),
            verify_ssl=_env_flag('S3_VERIFY_SSL', True),
            connect_timeout=float(os.getenv('S3_CONNECT_TIMEOUT', '10')),
            read_timeout=float(os.getenv('S3_READ_TIMEOUT', '60')),
        )

    @property
    def uses_default_credentials(self) -> bool:
        """True when boto3's default credential provider chain is used."""
        return not (self.access_key and self.secret_key)

    @property
    def public_base_url(self) -> str:
        """Base URL published objects are served from."""
        if self.endpoint:
            return f"{self.endpoint.rstrip('/')}/{self.bucket}"
        return f"https://s3.amazonaws.com/{self.bucket}"

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty if valid)."""
        errors = []
        if not self.bucket:
            errors.append("AWS_BUCKET_NAME must be set")
        if bool(self.access_key) != bool(self.secret_key):
            errors.append("AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY must be set together")
        if self.connect_timeout <= 0 or self.read_timeout <= 0:
            errors.append("S3 timeouts must be positive")
        if self.max_attempts < 1:
            errors.append("max_attempts must be at least 1")
        return errors

"""
Object store capability shared by the S3 and local clients.
"""

from typing import Protocol, Union

from .local_client import LocalClient
from .s3_client import S3Client


class ObjectStore(Protocol):
    """What the pipeline needs from a storage backend."""

    def upload_object(self, key: str, data: bytes, content_type: str = ...) -> None:
        ...

    def download_object(self, key: str) -> bytes:
        ...

    def delete_object(self, key: str) -> None:
        ...


# Type alias for the concrete storage clients
StorageClient = Union[S3Client, LocalClient]

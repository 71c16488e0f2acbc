"""
LocalClient - Object store backed by a local directory.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .errors import StorageError


@dataclass
class LocalConfig:
    """
    Local storage settings.

    Attributes:
        root_path: Directory that plays the role of the bucket
        prefix: Optional sub-directory within root_path
    """
    root_path: str
    prefix: str = ''

    @property
    def base_path(self) -> Path:
        return Path(self.root_path) / self.prefix if self.prefix else Path(self.root_path)

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty if valid)."""
        errors = []
        if not self.root_path:
            errors.append("Local root path must be set")
        elif os.path.exists(self.root_path) and not os.path.isdir(self.root_path):
            errors.append(f"Local root is not a directory: {self.root_path}")
        return errors


class LocalClient:
    """
    Stores objects as files under a root directory, keyed by relative path.

    Drop-in replacement for S3Client when publishing to a mounted
    volume or when testing without a bucket.
    """

    def __init__(self, config: LocalConfig, logger: Optional[logging.Logger] = None):
        """
        Initialize local client.

        Args:
            config: Local storage configuration
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def _path_for(self, key: str) -> Path:
        base = self.config.base_path.resolve()
        path = (base / key.lstrip('/')).resolve()
        if base != path and base not in path.parents:
            raise StorageError(f"Key escapes storage root: {key}")
        return path

    def object_exists(self, key: str) -> bool:
        """Check if an object exists."""
        return self._path_for(key).is_file()

    def download_object(self, key: str) -> bytes:
        """Read an object."""
        try:
            return self._path_for(key).read_bytes()
        except OSError as e:
            raise StorageError(f"Cannot download {key}: {e}") from e

    def upload_object(
        self,
        key: str,
        data: bytes,
        content_type: str = 'application/octet-stream'
    ) -> None:
        """Write an object, creating parent directories as needed."""
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Cannot upload {key}: {e}") from e
        self.logger.debug(f"Stored {key} ({content_type}) at {path}")

    def delete_object(self, key: str) -> None:
        """Delete an object; deleting a missing object is not an error."""
        try:
            self._path_for(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot delete {key}: {e}") from e

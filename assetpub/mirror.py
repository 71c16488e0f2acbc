"""
MirrorSync - Downloads published images into a local mirror directory.
"""

import contextlib
import logging
import os
from pathlib import Path
from typing import Optional

from .errors import LocalFileError, PublishError, ValidationError
from .metadata_reader import MetadataReader, MirrorEntry
from .publish_stats import MirrorStats
from .storage import ObjectStore


class MirrorSync:
    """
    Rebuilds a local copy of published images using metadata records as
    the index instead of a bucket listing.

    Files already present locally are skipped without comparing them to
    the stored object.
    """

    def __init__(
        self,
        store: ObjectStore,
        reader: MetadataReader,
        mirror_dir: Path,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize mirror sync.

        Args:
            store: Object store holding published images
            reader: Reader over the image metadata directory
            mirror_dir: Local directory to populate
            logger: Optional logger instance
        """
        self.store = store
        self.reader = reader
        self.mirror_dir = Path(mirror_dir)
        self.logger = logger or logging.getLogger(__name__)
        self.stats = MirrorStats()
        self._stop_requested = False

    def stop(self) -> None:
        """Request the sync to stop after the current download."""
        self._stop_requested = True

    def run(self) -> bool:
        """
        Create the mirror directory and download every missing image.

        Returns:
            True when the mirror directory could be set up; individual
            download failures are logged and do not affect the result
        """
        self.stats = MirrorStats()

        try:
            self.mirror_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.error(f"Error creating local directory {self.mirror_dir}: {e}")
            return False

        entries = self.reader.get_entries()
        self.stats.total = len(entries)
        self.logger.info(f"Found {len(entries)} images in {self.reader.image_dir}")

        for entry in entries:
            if self._stop_requested:
                self.logger.info("Stop requested, halting mirror sync")
                break
            self.sync_entry(entry)

        self.logger.info(f"Mirror sync complete: {self.stats.summary()}")
        return True

    def local_path(self, entry: MirrorEntry) -> Path:
        """
        Local path for an entry.

        Raises:
            ValidationError: If the key would land outside the mirror directory
        """
        root = self.mirror_dir.resolve()
        path = (root / entry.key).resolve()
        if root not in path.parents:
            raise ValidationError(f"Key escapes mirror directory: {entry.key}")
        return path

    def sync_entry(self, entry: MirrorEntry) -> bool:
        """Download one entry unless it is already present."""
        try:
            path = self.local_path(entry)
            if path.exists():
                self.logger.debug(f"File already exists, skipping: {path}")
                self.stats.skipped += 1
                return True

            self.logger.info(f"Downloading {entry.key} to {path}")
            data = self.store.download_object(entry.key)
            self._write(path, data)
        except PublishError as e:
            error_msg = f"Error downloading {entry.key}: {e}"
            self.logger.error(error_msg)
            self.stats.errors += 1
            self.stats.error_details.append(error_msg)
            return False
        except Exception as e:
            error_msg = f"Unexpected error mirroring {entry.key}: {e}"
            self.logger.exception(error_msg)
            self.stats.errors += 1
            self.stats.error_details.append(error_msg)
            return False

        self.stats.downloaded += 1
        self.stats.bytes_downloaded += len(data)
        return True

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        # Partial downloads must never look like a mirrored file
        part_path = path.with_name(path.name + '.part')
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            part_path.write_bytes(data)
            os.replace(part_path, path)
        except OSError as e:
            # Report the write failure, not a failed cleanup
            with contextlib.suppress(OSError):
                part_path.unlink(missing_ok=True)
            raise LocalFileError(f"Cannot write {path}: {e}") from e

"""
Statistics for publish and mirror runs.
"""

import time
from dataclasses import dataclass, field
from typing import List


@dataclass
class PublishStats:
    """
    Statistics for a publish run.

    Attributes:
        total: Valid files found in the staging directories
        processed: Files fully published
        errors: Files that failed to publish
        uploads: Objects uploaded (originals and variants)
        bytes_uploaded: Total bytes uploaded
        start_time: Start timestamp
        error_details: List of error messages
    """
    total: int = 0
    processed: int = 0
    errors: int = 0
    uploads: int = 0
    bytes_uploaded: int = 0
    start_time: float = field(default_factory=time.time)
    error_details: List[str] = field(default_factory=list)

    @property
    def elapsed_seconds(self) -> float:
        """Elapsed time in seconds."""
        return time.time() - self.start_time

    @property
    def completed_count(self) -> int:
        """Total attempted (processed + errors)."""
        return self.processed + self.errors

    @property
    def remaining_count(self) -> int:
        """Remaining to process."""
        return self.total - self.completed_count

    def summary(self) -> str:
        """Human-readable result of the run."""
        if self.total == 0:
            return "No valid files to process."
        return f"Successfully processed and uploaded {self.processed} out of {self.total} files."


@dataclass
class MirrorStats:
    """
    Statistics for a mirror sync run.

    Attributes:
        total: Entries found in the metadata directory
        downloaded: Objects fetched from the store
        skipped: Entries already present locally
        errors: Entries that failed to download
        bytes_downloaded: Total bytes written
        error_details: List of error messages
    """
    total: int = 0
    downloaded: int = 0
    skipped: int = 0
    errors: int = 0
    bytes_downloaded: int = 0
    error_details: List[str] = field(default_factory=list)

    def summary(self) -> str:
        return (
            f"{self.downloaded} downloaded, {self.skipped} already present, "
            f"{self.errors} errors ({self.total} images)"
        )

"""
Records for files moving through the publish pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from .errors import ValidationError
from .file_classifier import get_extension, is_image, sanitize_filename


class AssetKind(str, Enum):
    """Whether an asset is published as an image or a static file."""
    IMAGE = 'image'
    FILE = 'file'


@dataclass
class StagedFile:
    """
    A file moved out of the inbox and waiting to be published.

    Attributes:
        path: Location in the working directory
        name: Sanitized filename
        kind: Image or generic file
        extension: Lowercased extension without the dot
    """
    path: Path
    name: str
    kind: AssetKind
    extension: str

    @classmethod
    def from_path(cls, path: Path) -> 'StagedFile':
        """Classify a working-directory entry."""
        path = Path(path)
        return cls(
            path=path,
            name=sanitize_filename(path.name),
            kind=AssetKind.IMAGE if is_image(path) else AssetKind.FILE,
            extension=get_extension(path),
        )

    @property
    def uid(self) -> str:
        """
        Sanitized filename stem.

        Raises:
            ValidationError: If the name has no stem or no extension
        """
        stem, dot, extension = self.name.rpartition('.')
        if not dot or not stem:
            raise ValidationError(f"Invalid file name: {self.path.name!r}")
        if not extension:
            raise ValidationError(f"Invalid file extension: {self.path.name!r}")
        return stem

    @property
    def is_image(self) -> bool:
        return self.kind is AssetKind.IMAGE

    def with_path(self, path: Path) -> 'StagedFile':
        """Same file under a new path (e.g. after format conversion)."""
        path = Path(path)
        return StagedFile(
            path=path,
            name=sanitize_filename(path.name),
            kind=self.kind,
            extension=get_extension(path),
        )


@dataclass
class PublishedAsset:
    """
    Result of publishing one staged file.

    Attributes:
        uid: Sanitized filename stem
        format: Lowercased extension of the published original
        kind: Image or generic file
        original_key: Object key of the original upload
        variant_keys: Object keys of the variant uploads, in table order
        width: Original width (images only)
        height: Original height (images only)
        metadata_path: Sidecar record written for the asset
        source_path: Staged file that was published
        bytes_uploaded: Total bytes sent to the store
    """
    uid: str
    format: str
    kind: AssetKind
    original_key: str
    variant_keys: List[str] = field(default_factory=list)
    width: int = 0
    height: int = 0
    metadata_path: Optional[Path] = None
    source_path: Optional[Path] = None
    bytes_uploaded: int = 0


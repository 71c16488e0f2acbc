"""
MetadataReader - Rebuilds the set of published images from sidecar records.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

# Only the two fields the mirror needs; records are not parsed as YAML
UID_PATTERN = re.compile(r'^uid[ \t]*:[ \t]*(.*?)[ \t]*$', re.MULTILINE)
FORMAT_PATTERN = re.compile(r'^format[ \t]*:[ \t]*(.*?)[ \t]*$', re.MULTILINE)

METADATA_SUFFIX = '.yml'


@dataclass(frozen=True)
class MirrorEntry:
    """
    A published image to mirror locally.

    Attributes:
        key: Object key (uid.format)
        uid: Asset identifier
        format: File extension
    """
    key: str
    uid: str
    format: str


def _field_value(pattern: re.Pattern, content: str) -> Optional[str]:
    match = pattern.search(content)
    if not match:
        return None
    value = match.group(1).strip().strip('"\'').strip()
    return value or None


def parse_metadata(content: str) -> Optional[Tuple[str, str]]:
    """
    Extract (uid, format) from a record.

    Returns:
        The pair, or None when either field is missing or empty
    """
    uid = _field_value(UID_PATTERN, content)
    fmt = _field_value(FORMAT_PATTERN, content)
    if uid is None or fmt is None:
        return None
    return uid, fmt


class MetadataReader:
    """
    Scans the image metadata directory for mirror entries.
    """

    def __init__(
        self,
        image_dir: Path,
        image_prefix: str = '',
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reader.

        Args:
            image_dir: Directory holding image records (e.g. data/images)
            image_prefix: Key prefix images were uploaded under
            logger: Optional logger instance
        """
        self.image_dir = Path(image_dir)
        self.image_prefix = image_prefix
        self.logger = logger or logging.getLogger(__name__)

    def iter_entries(self) -> Iterator[MirrorEntry]:
        """
        Yield one entry per readable record, in filename order.

        Records missing uid or format are skipped silently; unreadable
        records are logged and skipped.
        """
        try:
            paths = sorted(
                p for p in self.image_dir.iterdir()
                if p.suffix == METADATA_SUFFIX and p.is_file()
            )
        except OSError as e:
            self.logger.error(f"Error reading metadata directory {self.image_dir}: {e}")
            return

        for path in paths:
            try:
                content = path.read_text(encoding='utf-8')
            except (OSError, UnicodeDecodeError) as e:
                self.logger.error(f"Error reading {path}: {e}")
                continue

            parsed = parse_metadata(content)
            if parsed is None:
                self.logger.debug(f"Skipping {path}: missing uid or format")
                continue

            uid, fmt = parsed
            yield MirrorEntry(key=f"{self.image_prefix}{uid}.{fmt}", uid=uid, format=fmt)

    def get_entries(self) -> List[MirrorEntry]:
        """All mirror entries as a list."""
        return list(self.iter_entries())

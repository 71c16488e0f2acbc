"""
MetadataWriter - Sidecar YAML records for published images and files.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from .errors import LocalFileError

DATE_FORMAT = '%Y-%m-%d %H:%M:%S %z'

IMAGE_TEMPLATE = """
{url_comment}# Image shortcode: {{{{ img src="{uid}" }}}}
date     :  {date}
uid      :  {uid}
width    :  {width}
height   :  {height}
format   :  {format}

# REQUIRED alternative text for accessibility.
# Keep within 150 characters.
alt      :  ""

# Caption text appears below the image; usually the attribution for stock images.
# Must be different from the alt text.
caption  :  ""

# Credit text appears after the caption text, separated by an m-dash.
credit   :  ""
"""

FILE_TEMPLATE = """
{url_comment}# File shortcode: {{{{ asset-static file="{uid}.{format}" label="{uid} ({format})" }}}}
date     :  {date}
uid      :  {uid}
format   :  {format}
"""


def _local_now() -> datetime:
    return datetime.now().astimezone()


class MetadataWriter:
    """
    Writes one record per uid, segregated by kind.

    Records are written once at publish time; an existing record for the
    same uid is overwritten.
    """

    def __init__(
        self,
        image_dir: Path,
        file_dir: Path,
        base_url: Optional[str] = None,
        image_prefix: str = '',
        static_prefix: str = 'static/',
        clock: Callable[[], datetime] = _local_now,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize writer.

        Args:
            image_dir: Directory for image records (e.g. data/images)
            file_dir: Directory for file records (e.g. data/files)
            base_url: Public URL of the bucket, used in the header comment
            image_prefix: Key prefix of image uploads
            static_prefix: Key prefix of file uploads
            clock: Returns the timestamp stored in the date field
            logger: Optional logger instance
        """
        self.image_dir = Path(image_dir)
        self.file_dir = Path(file_dir)
        self.base_url = base_url.rstrip('/') if base_url else None
        self.image_prefix = image_prefix
        self.static_prefix = static_prefix
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    def _url_comment(self, key: str) -> str:
        if not self.base_url:
            return ''
        return f"# {self.base_url}/{key}\n"

    def render_image_metadata(self, uid: str, width: int, height: int, format: str) -> str:
        """Render the record for an image."""
        return IMAGE_TEMPLATE.format(
            url_comment=self._url_comment(f"{self.image_prefix}{uid}.{format}"),
            date=self.clock().strftime(DATE_FORMAT),
            uid=uid,
            width=width,
            height=height,
            format=format,
        )

    def render_file_metadata(self, uid: str, format: str) -> str:
        """Render the record for a static file."""
        return FILE_TEMPLATE.format(
            url_comment=self._url_comment(f"{self.static_prefix}{uid}.{format}"),
            date=self.clock().strftime(DATE_FORMAT),
            uid=uid,
            format=format,
        )

    def write_image_metadata(self, uid: str, width: int, height: int, format: str) -> Path:
        """
        Write data/images/<uid>.yml.

        Returns:
            Path of the written record
        """
        self.logger.info(f"Generating metadata for image {uid} - dimensions: {width}x{height}")
        content = self.render_image_metadata(uid, width, height, format)
        return self._write(self.image_dir / f"{uid}.yml", content)

    def write_file_metadata(self, uid: str, format: str) -> Path:
        """
        Write data/files/<uid>.yml.

        Returns:
            Path of the written record
        """
        self.logger.info(f"Generating metadata for file {uid}.{format}")
        content = self.render_file_metadata(uid, format)
        return self._write(self.file_dir / f"{uid}.yml", content)

    def _write(self, path: Path, content: str) -> Path:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if path.exists():
                self.logger.debug(f"Overwriting existing metadata: {path}")
            path.write_text(content, encoding='utf-8')
        except OSError as e:
            raise LocalFileError(f"Cannot write metadata {path}: {e}") from e
        return path

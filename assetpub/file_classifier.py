"""
File classification and filename sanitation for inbox entries.
"""

import mimetypes
import re
from pathlib import Path
from typing import Union

IMAGE_EXTENSIONS = frozenset({'png', 'jpg', 'jpeg', 'gif', 'bmp', 'tiff', 'webp'})

FILE_EXTENSIONS = frozenset({
    # Documents
    'doc', 'docx', 'pdf', 'txt', 'rtf', 'xls', 'xlsx', 'csv', 'ppt', 'pptx',
    # Archives
    'zip', 'rar', '7z',
})

VALID_EXTENSIONS = IMAGE_EXTENSIONS | FILE_EXTENSIONS

JPEG_EXTENSIONS = frozenset({'jpg', 'jpeg'})

# Marker file kept in the inbox so the directory survives in git
PLACEHOLDER_NAME = '__add image or static files to this folder__'

_DISALLOWED_CHARS = re.compile(r'[^a-z0-9_.\-]')

PathLike = Union[str, Path]


def get_extension(path: PathLike) -> str:
    """Return the lowercased extension of a path without the dot."""
    return Path(path).suffix[1:].lower()


def is_image(path: PathLike) -> bool:
    """True if the path has an image extension."""
    return get_extension(path) in IMAGE_EXTENSIONS


def is_valid_file_type(path: PathLike) -> bool:
    """True if the path has an extension the pipeline accepts."""
    return get_extension(path) in VALID_EXTENSIONS


def sanitize_filename(name: str) -> str:
    """
    Normalize a filename for use as an object key and uid.

    Lowercases, turns spaces into hyphens, then drops anything that is
    not an ASCII letter, digit, hyphen, underscore or dot.

    >>> sanitize_filename('My Photo (1).JPG')
    'my-photo-1.jpg'
    """
    return _DISALLOWED_CHARS.sub('', name.lower().replace(' ', '-'))


def content_type_for(path: PathLike) -> str:
    """Guess a content type for a generic file."""
    content_type, _ = mimetypes.guess_type(str(path))
    return content_type or 'application/octet-stream'

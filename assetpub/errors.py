"""
Errors raised while publishing or mirroring assets.
"""


class PublishError(Exception):
    """Base exception for asset publishing errors."""

    pass


class StorageError(PublishError):
    """An object-store call failed (including request timeouts)."""

    pass


class LocalFileError(PublishError):
    """A local filesystem operation failed."""

    pass


class CodecError(PublishError):
    """An image could not be decoded, resized or encoded."""

    pass


class ValidationError(PublishError):
    """
    Input that cannot be published.

    Raised for a missing filename stem or extension, zero-dimension
    images and variant widths that produce an empty image.
    """

    pass

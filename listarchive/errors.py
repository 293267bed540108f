"""Exceptions raised while saving or reading simple_list archives."""

from typing import Optional


class ListArchiveError(Exception):
    """Base class for list archive errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        full_msg = message
        if path is not None:
            full_msg += f" (in {path})"
        super().__init__(full_msg)


class UnsupportedFormatError(ListArchiveError):
    """The OBJECT metadata declares a list format other than json.gz."""


class UnknownTypeError(ListArchiveError):
    """A node carries a type tag outside the known set."""


class InvalidNamesError(ListArchiveError):
    """A node's names do not line up with its values."""


class CorruptPayloadError(ListArchiveError):
    """The compressed payload could not be decompressed or parsed."""


class ExternalObjectError(ListArchiveError):
    """An external object was met where it cannot be stored."""

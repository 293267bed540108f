"""listarchive - portable on-disk storage for R-style lists."""

from . import list_archive
from .errors import (
    CorruptPayloadError,
    ExternalObjectError,
    InvalidNamesError,
    ListArchiveError,
    UnknownTypeError,
    UnsupportedFormatError,
)
from .list_archive import Decoded, ListOptions, decode, dumps, encode, loads, read_list, save_list
from .registry import NoHandlerError, ObjectRegistry, default_registry
from .storage import LocalStorage
from .vectors import BooleanVector, IntegerVector, ListValue, NumberVector, StringVector

__version__ = "0.1.0"

__all__ = [
    "list_archive",
    "save_list",
    "read_list",
    "dumps",
    "loads",
    "encode",
    "decode",
    "Decoded",
    "ListOptions",
    "ListValue",
    "IntegerVector",
    "NumberVector",
    "StringVector",
    "BooleanVector",
    "ObjectRegistry",
    "default_registry",
    "LocalStorage",
    "ListArchiveError",
    "UnsupportedFormatError",
    "UnknownTypeError",
    "InvalidNamesError",
    "CorruptPayloadError",
    "ExternalObjectError",
    "NoHandlerError",
]

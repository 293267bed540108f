"""
registry.py - Save/read dispatch for objects stored in their own directory

Every saved object lives in a directory with an OBJECT file naming its type:

    <path>/OBJECT    {"type": "<type_name>", "<type_name>": {...}}

Readers are looked up by that type name; savers by the Python class of the
value being saved (most recently registered first, so later registrations
can override earlier ones for subclasses).

Usage:
    from listarchive.registry import default_registry

    registry = default_registry()
    registry.register_reader("my_type", read_my_type)
    registry.register_saver(MyType, save_my_type)

    obj = registry.read_object("path/to/dir", storage)
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Callable, Optional

import numpy as np
from structlog import get_logger

from .errors import ListArchiveError, UnsupportedFormatError

logger = get_logger()

OBJECT_FILE = "OBJECT"

# reader(path, metadata, storage, registry, options) -> value
Reader = Callable[..., Any]
# saver(value, path, storage, registry, options) -> None
Saver = Callable[..., None]


class NoHandlerError(ListArchiveError):
    """No reader or saver is registered for an object."""


class ObjectRegistry:
    """Mapping of on-disk type names to readers and classes to savers."""

    def __init__(self):
        self.log = logger.new()
        self._readers: dict[str, Reader] = {}
        self._savers: list[tuple[type, Saver]] = []

    def register_reader(self, type_name: str, reader: Reader):
        self._readers[type_name] = reader

    def register_saver(self, cls: type, saver: Saver):
        self._savers.insert(0, (cls, saver))

    def reader_for(self, type_name: str) -> Reader:
        if type_name not in self._readers:
            raise NoHandlerError(f"No reader registered for object type '{type_name}'")
        return self._readers[type_name]

    def saver_for(self, value: Any) -> Saver:
        for cls, saver in self._savers:
            if isinstance(value, cls):
                return saver
        raise NoHandlerError(f"No saver registered for {type(value).__name__}")

    def read_object(self, path, storage, options=None, metadata: Optional[dict] = None) -> Any:
        """Read the object stored in directory ``path``.

        Args:
            path: Object directory
            storage: Storage holding the directory
            options: ListOptions forwarded to the reader
            metadata: Parsed OBJECT contents (read from ``path`` if omitted)
        """
        if metadata is None:
            metadata = read_object_file(path, storage)
        reader = self.reader_for(metadata.get("type"))
        self.log.debug('reading object', path=str(path), type=metadata.get("type"))
        return reader(path, metadata, storage, self, options)

    def save_object(self, value: Any, path, storage, options=None):
        """Save ``value`` into directory ``path`` with the matching saver."""
        saver = self.saver_for(value)
        self.log.debug('saving object', path=str(path), cls=type(value).__name__)
        saver(value, path, storage, self, options)


def read_object_file(path, storage) -> dict:
    return storage.read_json(Path(path) / OBJECT_FILE)


def write_object_file(path, storage, type_name: str, **details):
    storage.write_json(Path(path) / OBJECT_FILE, {"type": type_name, type_name: details})


# =============================================================================
# dense_array: numpy arrays with more than one dimension
# =============================================================================

DENSE_ARRAY_FILE = "array.npy"


def save_dense_array(value: np.ndarray, path, storage, registry, options):
    storage.mkdir(path)
    write_object_file(path, storage, "dense_array", version="1.0", format="npy")
    buf = io.BytesIO()
    np.save(buf, value, allow_pickle=False)
    storage.write(Path(path) / DENSE_ARRAY_FILE, buf.getvalue())


def read_dense_array(path, metadata: dict, storage, registry, options) -> np.ndarray:
    details = metadata.get("dense_array", {})
    if details.get("format", "npy") != "npy":
        raise UnsupportedFormatError(
            f"dense_array format '{details.get('format')}' is not supported", str(path)
        )
    data = storage.read(Path(path) / DENSE_ARRAY_FILE)
    return np.load(io.BytesIO(data), allow_pickle=False)


def default_registry() -> ObjectRegistry:
    """Build a registry that knows about simple lists and dense arrays."""
    from . import list_archive
    from .vectors import ListValue

    registry = ObjectRegistry()
    registry.register_reader("simple_list", list_archive.read_list)
    registry.register_saver(ListValue, list_archive.save_list)
    registry.register_reader("dense_array", read_dense_array)
    registry.register_saver(np.ndarray, save_dense_array)
    return registry

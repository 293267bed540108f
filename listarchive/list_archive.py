"""
list_archive.py - Reader and writer for simple_list archives

Directory layout:
- <path>/OBJECT: {"type": "simple_list", "simple_list": {"version": "1.1", "format": "json.gz"}}
- <path>/list_contents.json.gz: gzip-compressed JSON tree (below)
- <path>/other_contents/<index>/: one directory per external object, written
  by whatever saver the object registry picks for it

JSON tree:
- Lists: {"type": "list", "values": [node, ...], "names": [...]}
- Vectors: {"type": "integer" | "number" | "string" | "boolean", "values": v | [v, ...], "names": [...]}
- Factors: {"type": "factor", "values": code | [code, ...], "levels": [...], "names": [...]}
- Nulls: {"type": "nothing"}
- External objects: {"type": "external", "index": i}

"names" is optional everywhere. A bare (non-array) "values" marks a scalar.
Missing values are JSON null. Number vectors write NaN, Inf and -Inf as the
strings "NaN", "Inf" and "-Inf". Integer vectors only hold int32 values;
anything wider is written as a number vector.

Usage:
    from listarchive import list_archive as la

    la.save_list({"a": [1, 2, 3], "b": "foo"}, "out/my_list")
    x = la.read_list("out/my_list")
    x = la.read_list("out/my_list", options=la.ListOptions(to_scalar=True))

    # In-memory round trip (no external objects)
    data = la.dumps({"a": [1.5, float("nan")]})
    x = la.loads(data)
"""

from __future__ import annotations

import gzip
import json
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, NamedTuple, Optional

import numpy as np
from structlog import get_logger

from .errors import (
    CorruptPayloadError,
    ExternalObjectError,
    InvalidNamesError,
    UnknownTypeError,
    UnsupportedFormatError,
)
from .numeric import (
    classify_array,
    classify_collection,
    dump_number,
    dump_number_array,
    exceeds_int32,
    is_number,
    is_scalar,
    load_number_array,
)
from .registry import ObjectRegistry, default_registry, read_object_file, write_object_file
from .storage import LocalStorage
from .vectors import (
    BooleanVector,
    IntegerVector,
    ListValue,
    NumberVector,
    StringVector,
    Vector,
)

logger = get_logger()

LIST_TYPE = "simple_list"
LIST_VERSION = "1.1"
LIST_FORMAT = "json.gz"
CONTENTS_FILE = "list_contents.json.gz"
OTHER_CONTENTS = "other_contents"

# Node type tags
TYPE_LIST = "list"
TYPE_INTEGER = "integer"
TYPE_NUMBER = "number"
TYPE_STRING = "string"
TYPE_BOOLEAN = "boolean"
TYPE_FACTOR = "factor"
TYPE_NOTHING = "nothing"
TYPE_EXTERNAL = "external"


@dataclass
class ListOptions:
    """Options for saving and reading lists.

    Attributes:
        to_scalar: Return unnamed scalars as bare Python values instead of
            length-1 vectors. Integers come back as floats.
        to_typed_array: Return unnamed integer/number vectors without missing
            values as numpy arrays (int32/float64).
        save_other: Called with values that have no list representation.
            Returning a JSON node stores it inline; returning None falls back
            to saving the value as an external object.
        compress_level: gzip level for list_contents.json.gz.
    """

    to_scalar: bool = False
    to_typed_array: bool = False
    save_other: Optional[Callable[[Any], Optional[dict]]] = None
    compress_level: int = 6


class Decoded(NamedTuple):
    """Result of decoding one node.

    ``scalar`` is True when the node held a bare value without names.
    """

    value: Any
    scalar: bool = False


# =============================================================================
# External objects
# =============================================================================

class ExternalBridge:
    """Saves values without a list representation under other_contents/.

    One bridge is created per saved list; its index counts the external
    objects written so far and names the next subdirectory.
    """

    def __init__(self, path, storage, registry: Optional[ObjectRegistry], options: ListOptions):
        self.log = logger.new()
        self.path = path
        self.storage = storage
        self.registry = registry
        self.options = options
        self.index = 0

    def save(self, value: Any) -> int:
        if self.path is None or self.registry is None:
            raise ExternalObjectError(
                f"Cannot store {type(value).__name__} without a destination directory"
            )
        odir = Path(self.path) / OTHER_CONTENTS
        if not self.storage.exists(odir):
            self.storage.mkdir(odir)
        curdex = self.index
        self.registry.save_object(value, odir / str(curdex), self.storage, self.options)
        self.index += 1
        self.log.debug('saved external object', index=curdex, path=str(odir / str(curdex)))
        return curdex


# =============================================================================
# Encoding
# =============================================================================

def _dump_vector(type_name: str, values: list, names: Optional[list] = None, scalar: bool = False) -> dict:
    node: dict[str, Any] = {"type": type_name}
    if scalar and is_scalar(values, names):
        node["values"] = values[0]
    else:
        node["values"] = values
    if names is not None:
        node["names"] = list(names)
    return node


def _encode_vector(x: Vector) -> dict:
    if isinstance(x, IntegerVector):
        values = [None if v is None else int(v) for v in x.values]
        type_name = TYPE_NUMBER if exceeds_int32(values) else TYPE_INTEGER
    elif isinstance(x, NumberVector):
        type_name = TYPE_NUMBER
        values = dump_number_array(x.values)
    elif isinstance(x, StringVector):
        type_name = TYPE_STRING
        values = [None if v is None else str(v) for v in x.values]
    elif isinstance(x, BooleanVector):
        type_name = TYPE_BOOLEAN
        values = [None if v is None else bool(v) for v in x.values]
    else:
        raise TypeError(f"Unsupported vector type: {type(x).__name__}")
    return _dump_vector(type_name, values, x.names, x.scalar)


def _encode_collection(x, bridge: ExternalBridge, options: ListOptions) -> dict:
    values = list(x)
    type_name = classify_collection(values)
    if type_name == TYPE_STRING:
        return _dump_vector(type_name, [None if v is None else str(v) for v in values])
    if type_name == TYPE_BOOLEAN:
        return _dump_vector(type_name, [None if v is None else bool(v) for v in values])
    if type_name == TYPE_NUMBER:
        return _dump_vector(type_name, dump_number_array(values))
    return {"type": TYPE_LIST, "values": [encode(v, bridge, options) for v in values]}


def _encode_array(x: np.ndarray, type_name: str) -> dict:
    values = x.tolist()
    if type_name == TYPE_NUMBER:
        values = dump_number_array(values)
    return _dump_vector(type_name, values)


def encode(value: Any, bridge: ExternalBridge, options: Optional[ListOptions] = None) -> dict:
    """Convert a value into a JSON node.

    Args:
        value: ListValue, vector, dict, list/tuple, numpy array, scalar,
            None, or any object the bridge can save
        bridge: Receives values without a list representation
        options: ListOptions (defaults if omitted)

    Returns:
        JSON-serializable dict describing the value
    """
    if options is None:
        options = ListOptions()

    if isinstance(value, ListValue):
        node = {"type": TYPE_LIST, "values": [encode(v, bridge, options) for v in value.values]}
        if value.names is not None:
            node["names"] = list(value.names)
        return node

    elif isinstance(value, Vector):
        return _encode_vector(value)

    elif isinstance(value, dict):
        return {
            "type": TYPE_LIST,
            "values": [encode(v, bridge, options) for v in value.values()],
            "names": [str(k) for k in value.keys()],
        }

    elif isinstance(value, (list, tuple)):
        return _encode_collection(value, bridge, options)

    elif isinstance(value, np.ndarray) and value.ndim == 1 and value.dtype.kind == "O":
        return _encode_collection(value.tolist(), bridge, options)

    elif isinstance(value, np.ndarray) and classify_array(value) is not None:
        return _encode_array(value, classify_array(value))

    elif value is None:
        return {"type": TYPE_NOTHING}

    elif isinstance(value, (bool, np.bool_)):
        return {"type": TYPE_BOOLEAN, "values": bool(value)}

    elif isinstance(value, str):
        return {"type": TYPE_STRING, "values": str(value)}

    elif is_number(value):
        return {"type": TYPE_NUMBER, "values": dump_number(value)}

    if options.save_other is not None:
        converted = options.save_other(value)
        if converted is not None:
            return converted

    return {"type": TYPE_EXTERNAL, "index": bridge.save(value)}


# =============================================================================
# Decoding
# =============================================================================

def _load_names(node: dict, count: int, path) -> Optional[list[str]]:
    if "names" not in node:
        return None
    names = node["names"]
    if not isinstance(names, list) or len(names) != count:
        raise InvalidNamesError(
            f"'{node.get('type')}' node has {count} values but names {names!r}",
            None if path is None else str(path),
        )
    return names


def _factor_levels(levels: list) -> Callable[[list], list]:
    def convert(codes: list) -> list:
        output = []
        for code in codes:
            if isinstance(code, int) and not isinstance(code, bool) and 0 <= code < len(levels):
                output.append(levels[code])
            else:
                output.append(None)
        return output
    return convert


def _load_vector(node: dict, cls: type, convert: Callable[[list], list],
                 options: ListOptions, dtype, path) -> Decoded:
    vals = node.get("values", [])
    scalar = False
    if not isinstance(vals, list):
        vals = [vals]
        scalar = True
    vals = convert(vals)
    names = _load_names(node, len(vals), path)

    if names is None:
        if scalar:
            if options.to_scalar:
                v = vals[0]
                if dtype is not None and v is not None:
                    v = float(v)
                return Decoded(v, True)
        elif dtype is not None and options.to_typed_array and all(v is not None for v in vals):
            return Decoded(np.array(vals, dtype=dtype))
    else:
        scalar = False

    return Decoded(cls(vals, names=names, scalar=scalar), scalar)


def decode(node: dict, path, storage, registry: Optional[ObjectRegistry],
           options: Optional[ListOptions] = None) -> Decoded:
    """Convert a JSON node back into a value.

    Args:
        node: Parsed JSON node
        path: Directory of the saved list (used to find external objects)
        storage: Storage holding ``path``
        registry: Registry used to read external objects
        options: ListOptions (defaults if omitted)

    Returns:
        Decoded(value, scalar)

    Raises:
        UnknownTypeError: if a node has an unrecognized type tag
        InvalidNamesError: if names do not match the number of values
    """
    if options is None:
        options = ListOptions()
    if not isinstance(node, dict):
        raise UnknownTypeError(f"Expected a JSON object, got {type(node).__name__}",
                               None if path is None else str(path))

    type_name = node.get("type")

    if type_name == TYPE_LIST:
        children = node.get("values", [])
        names = _load_names(node, len(children), path)
        contents = [decode(child, path, storage, registry, options).value for child in children]
        return Decoded(ListValue(contents, names=names))

    elif type_name == TYPE_INTEGER:
        return _load_vector(node, IntegerVector, list, options, np.int32, path)

    elif type_name == TYPE_NUMBER:
        return _load_vector(node, NumberVector, load_number_array, options, np.float64, path)

    elif type_name == TYPE_STRING:
        return _load_vector(node, StringVector, list, options, None, path)

    elif type_name == TYPE_BOOLEAN:
        return _load_vector(node, BooleanVector, list, options, None, path)

    elif type_name == TYPE_FACTOR:
        convert = _factor_levels(node.get("levels", []))
        return _load_vector(node, StringVector, convert, options, None, path)

    elif type_name == TYPE_NOTHING:
        return Decoded(None)

    elif type_name == TYPE_EXTERNAL:
        if path is None or registry is None:
            raise ExternalObjectError("Cannot read an external object without a source directory")
        opath = Path(path) / OTHER_CONTENTS / str(node["index"])
        return Decoded(registry.read_object(opath, storage, options))

    raise UnknownTypeError(f"Unknown JSON list type '{type_name}'",
                           None if path is None else str(path))


# =============================================================================
# Compression
# =============================================================================

def compress_tree(node: dict, level: int = 6) -> bytes:
    """Serialize a JSON tree and gzip it."""
    text = json.dumps(node, allow_nan=False)
    return gzip.compress(text.encode("utf-8"), compresslevel=level)


def decompress_tree(data: bytes, path=None) -> dict:
    """Gunzip and parse a JSON tree.

    Raises:
        CorruptPayloadError: if the data is not gzip-compressed JSON
    """
    where = None if path is None else str(path)
    try:
        text = gzip.decompress(data).decode("utf-8")
    except (OSError, EOFError, zlib.error, UnicodeDecodeError) as e:
        raise CorruptPayloadError(f"Could not decompress list contents: {e}", where) from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise CorruptPayloadError(f"Invalid JSON in list contents: {e}", where) from e


# =============================================================================
# Convenience functions
# =============================================================================

def save_list(value: Any, path, storage=None, registry: Optional[ObjectRegistry] = None,
              options: Optional[ListOptions] = None):
    """Save a list to directory ``path``.

    Args:
        value: List to save (ListValue, dict, list, ...)
        path: Destination directory (created if needed)
        storage: Storage to write to (default: LocalStorage)
        registry: Registry for external objects (default: default_registry())
        options: ListOptions

    Example:
        la.save_list(ListValue([1, "a"], names=["x", "y"]), "out/my_list")
    """
    if storage is None:
        storage = LocalStorage()
    if registry is None:
        registry = default_registry()
    if options is None:
        options = ListOptions()

    storage.mkdir(path)
    write_object_file(path, storage, LIST_TYPE, version=LIST_VERSION, format=LIST_FORMAT)

    bridge = ExternalBridge(path, storage, registry, options)
    node = encode(value, bridge, options)
    storage.write(Path(path) / CONTENTS_FILE, compress_tree(node, options.compress_level))
    logger.debug('saved list', path=str(path), externals=bridge.index)


def read_list(path, metadata: Optional[dict] = None, storage=None,
              registry: Optional[ObjectRegistry] = None,
              options: Optional[ListOptions] = None) -> Any:
    """Read the list saved in directory ``path``.

    Args:
        path: Directory written by save_list
        metadata: Parsed OBJECT file (read from ``path`` if omitted)
        storage: Storage to read from (default: LocalStorage)
        registry: Registry for external objects (default: default_registry())
        options: ListOptions

    Returns:
        Decoded value, usually a ListValue

    Raises:
        UnsupportedFormatError: if the list is not stored as json.gz
    """
    if storage is None:
        storage = LocalStorage()
    if registry is None:
        registry = default_registry()
    if options is None:
        options = ListOptions()
    if metadata is None:
        metadata = read_object_file(path, storage)

    if metadata.get("type", LIST_TYPE) != LIST_TYPE:
        raise UnsupportedFormatError(f"Object type '{metadata.get('type')}' is not a list", str(path))
    fmt = metadata.get(LIST_TYPE, {}).get("format", LIST_FORMAT)
    if fmt != LIST_FORMAT:
        raise UnsupportedFormatError(
            f"List formats other than '{LIST_FORMAT}' are not supported (got '{fmt}')", str(path)
        )

    node = decompress_tree(storage.read(Path(path) / CONTENTS_FILE), path)
    result = decode(node, path, storage, registry, options)
    logger.debug('read list', path=str(path))
    return result.value


def dumps(value: Any, options: Optional[ListOptions] = None) -> bytes:
    """Encode and compress a list without a directory.

    Raises:
        ExternalObjectError: if the list holds an object that must be
            saved externally
    """
    if options is None:
        options = ListOptions()
    bridge = ExternalBridge(None, None, None, options)
    return compress_tree(encode(value, bridge, options), options.compress_level)


def loads(data: bytes, options: Optional[ListOptions] = None) -> Any:
    """Decompress and decode the output of dumps."""
    return decode(decompress_tree(data), None, None, None, options).value

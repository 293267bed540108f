"""
numeric.py - Numeric sentinels and vector classification

JSON has no representation for NaN or the infinities, so number vectors
carry them as string tokens:

- NaN  -> "NaN"
- +Inf -> "Inf"
- -Inf -> "-Inf"

Integer vectors never hold these values and are not touched.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Optional

import numpy as np

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

NAN_TOKEN = "NaN"
POS_INF_TOKEN = "Inf"
NEG_INF_TOKEN = "-Inf"

_TOKEN_VALUES = {
    NAN_TOKEN: math.nan,
    POS_INF_TOKEN: math.inf,
    NEG_INF_TOKEN: -math.inf,
}

# numpy integer dtypes that always fit in a signed 32-bit integer
_INT32_SAFE_DTYPES = {
    np.dtype(np.int8),
    np.dtype(np.int16),
    np.dtype(np.int32),
    np.dtype(np.uint8),
    np.dtype(np.uint16),
}


# =============================================================================
# Sentinel codec
# =============================================================================

def dump_number(value: Any) -> Any:
    """Replace a special float with its token, pass anything else through."""
    if isinstance(value, (float, np.floating)):
        if math.isnan(value):
            return NAN_TOKEN
        if value == math.inf:
            return POS_INF_TOKEN
        if value == -math.inf:
            return NEG_INF_TOKEN
        return float(value)
    if isinstance(value, np.integer):
        return int(value)
    return value


def load_number(value: Any) -> Any:
    """Inverse of dump_number."""
    if isinstance(value, str) and value in _TOKEN_VALUES:
        return _TOKEN_VALUES[value]
    return value


def dump_number_array(values: Iterable) -> list:
    return [dump_number(v) for v in values]


def load_number_array(values: Iterable) -> list:
    return [load_number(v) for v in values]


# =============================================================================
# Classification
# =============================================================================

def is_number(value: Any) -> bool:
    """True for ints and floats, including numpy scalars, but not bools."""
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def exceeds_int32(values: Iterable) -> bool:
    """Whether any non-missing value falls outside the int32 range."""
    for v in values:
        if v is not None and (v < INT32_MIN or v > INT32_MAX):
            return True
    return False


def is_scalar(values: list, names: Optional[list] = None) -> bool:
    """A vector is a scalar when it has exactly one element and no names."""
    return len(values) == 1 and names is None


def classify_collection(values: list) -> Optional[str]:
    """Pick the vector type for an unnamed collection of Python values.

    Missing values (None) are ignored. Strings win over booleans, which win
    over numbers. Returns None when the collection is empty, entirely
    missing, or mixes types, in which case it has to be stored as a list.

    Example:
        classify_collection(["a", None])   # "string"
        classify_collection([1, 2.5])      # "number"
        classify_collection([1, "a"])      # None
    """
    present = [v for v in values if v is not None]
    if not present:
        return None
    if all(isinstance(v, str) for v in present):
        return "string"
    if all(isinstance(v, (bool, np.bool_)) for v in present):
        return "boolean"
    if all(is_number(v) for v in present):
        return "number"
    return None


def classify_array(arr: np.ndarray) -> Optional[str]:
    """Pick the vector type for a one-dimensional numpy array.

    Small integer dtypes are always integer vectors; wider ones are
    integer vectors only when every value fits in int32.
    """
    if arr.ndim != 1:
        return None
    if arr.dtype == np.bool_:
        return "boolean"
    if arr.dtype in _INT32_SAFE_DTYPES:
        return "integer"
    if np.issubdtype(arr.dtype, np.integer):
        if arr.size == 0 or (arr.min() >= INT32_MIN and arr.max() <= INT32_MAX):
            return "integer"
        return "number"
    if np.issubdtype(arr.dtype, np.floating):
        return "number"
    if arr.dtype.kind == "U":
        return "string"
    return None

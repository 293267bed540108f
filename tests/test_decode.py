"""Tests for converting JSON nodes back into values."""

import math

import numpy as np
import pytest

from listarchive.errors import ExternalObjectError, InvalidNamesError, UnknownTypeError
from listarchive.list_archive import Decoded, ListOptions, decode
from listarchive.vectors import BooleanVector, IntegerVector, ListValue, NumberVector, StringVector


def load(node, **kwargs):
    return decode(node, None, None, None, ListOptions(**kwargs))


# ---------------------------------------------------------------------------
# Vectors and scalars
# ---------------------------------------------------------------------------

def test_decode_boolean_scalar_default():
    result = load({"type": "boolean", "values": True})
    assert result == Decoded(BooleanVector([True], scalar=True), True)

def test_decode_boolean_scalar_as_bare_value():
    result = load({"type": "boolean", "values": True}, to_scalar=True)
    assert result.value is True
    assert result.scalar

def test_decode_integer_scalar_widens():
    result = load({"type": "integer", "values": 3}, to_scalar=True)
    assert result.value == 3.0
    assert isinstance(result.value, float)

def test_decode_missing_scalar():
    assert load({"type": "number", "values": None}, to_scalar=True).value is None

def test_decode_named_scalar_stays_vector():
    result = load({"type": "string", "values": "a", "names": ["x"]}, to_scalar=True)
    assert result == Decoded(StringVector(["a"], names=["x"]), False)

def test_decode_number_sentinels():
    values = load({"type": "number", "values": [1.0, "NaN", "Inf", "-Inf"]}).value.values
    assert values[0] == 1.0
    assert math.isnan(values[1])
    assert values[2] == math.inf
    assert values[3] == -math.inf

def test_decode_number_scalar_sentinel():
    assert load({"type": "number", "values": "-Inf"}, to_scalar=True).value == -math.inf

def test_decode_vector_names():
    value = load({"type": "integer", "values": [1, None], "names": ["a", "b"]}).value
    assert value == IntegerVector([1, None], names=["a", "b"])


# ---------------------------------------------------------------------------
# Typed arrays
# ---------------------------------------------------------------------------

def test_decode_typed_arrays():
    value = load({"type": "integer", "values": [1, 2, 3]}, to_typed_array=True).value
    assert isinstance(value, np.ndarray)
    assert value.dtype == np.int32
    assert value.tolist() == [1, 2, 3]

    value = load({"type": "number", "values": [0.5, "Inf"]}, to_typed_array=True).value
    assert value.dtype == np.float64
    assert value[1] == np.inf

def test_decode_typed_array_skips_missing_values():
    value = load({"type": "number", "values": [0.5, None]}, to_typed_array=True).value
    assert value == NumberVector([0.5, None])

def test_decode_typed_array_skips_named():
    value = load({"type": "integer", "values": [1], "names": ["a"]}, to_typed_array=True).value
    assert value == IntegerVector([1], names=["a"])

def test_decode_typed_array_skips_strings():
    value = load({"type": "string", "values": ["a"]}, to_typed_array=True).value
    assert value == StringVector(["a"])

def test_decode_typed_array_keeps_scalars():
    result = load({"type": "number", "values": 2.5}, to_typed_array=True)
    assert result == Decoded(NumberVector([2.5], scalar=True), True)


# ---------------------------------------------------------------------------
# Factors
# ---------------------------------------------------------------------------

def test_decode_factor():
    node = {"type": "factor", "values": [0, 1, None, 0], "levels": ["a", "b"]}
    assert load(node).value == StringVector(["a", "b", None, "a"])

def test_decode_factor_invalid_codes():
    node = {"type": "factor", "values": [5, -1, 1], "levels": ["a", "b"]}
    assert load(node).value == StringVector([None, None, "b"])

def test_decode_factor_scalar():
    node = {"type": "factor", "values": 1, "levels": ["a", "b"]}
    assert load(node).value == StringVector(["b"], scalar=True)
    assert load(node, to_scalar=True).value == "b"


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------

def test_decode_nested_list():
    node = {
        "type": "list",
        "values": [
            {"type": "nothing"},
            {"type": "list", "values": [{"type": "string", "values": ["z"]}]},
        ],
        "names": ["nil", "inner"],
    }
    result = load(node)
    assert result == Decoded(ListValue([None, ListValue([StringVector(["z"])])], names=["nil", "inner"]))

def test_decode_list_names_mismatch():
    node = {"type": "list", "values": [{"type": "nothing"}], "names": ["a", "b"]}
    with pytest.raises(InvalidNamesError):
        load(node)

def test_decode_vector_names_mismatch():
    with pytest.raises(InvalidNamesError):
        load({"type": "boolean", "values": [True, False], "names": ["a"]})

def test_decode_unknown_type():
    with pytest.raises(UnknownTypeError):
        load({"type": "complex", "values": []})
    with pytest.raises(UnknownTypeError):
        load({"values": []})
    with pytest.raises(UnknownTypeError):
        load(["not", "a", "node"])

def test_decode_external_without_directory():
    with pytest.raises(ExternalObjectError):
        load({"type": "external", "index": 0})

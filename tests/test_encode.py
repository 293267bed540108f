"""Tests for converting values into JSON nodes."""

import math

import numpy as np
import pytest

from listarchive.errors import ExternalObjectError
from listarchive.list_archive import ExternalBridge, ListOptions, encode
from listarchive.vectors import BooleanVector, IntegerVector, ListValue, NumberVector, StringVector


class Opaque:
    pass


@pytest.fixture
def bridge():
    return ExternalBridge(None, None, None, ListOptions())


# ---------------------------------------------------------------------------
# Vectors
# ---------------------------------------------------------------------------

def test_encode_number_vector_sentinels(bridge):
    node = encode(NumberVector([1.0, math.nan, math.inf, -math.inf]), bridge)
    assert node == {"type": "number", "values": [1.0, "NaN", "Inf", "-Inf"]}

def test_encode_integer_vector(bridge):
    node = encode(IntegerVector([1, None, 2**31 - 1, -(2**31)]), bridge)
    assert node == {"type": "integer", "values": [1, None, 2**31 - 1, -(2**31)]}

def test_encode_integer_vector_promoted(bridge):
    assert encode(IntegerVector([1, 2147483648]), bridge)["type"] == "number"
    assert encode(IntegerVector([-2147483649]), bridge)["type"] == "number"

def test_encode_named_vector(bridge):
    node = encode(StringVector(["a", None], names=["x", "y"]), bridge)
    assert node == {"type": "string", "values": ["a", None], "names": ["x", "y"]}

def test_encode_scalar_vector(bridge):
    assert encode(BooleanVector([True], scalar=True), bridge) == {"type": "boolean", "values": True}
    assert encode(BooleanVector([True]), bridge) == {"type": "boolean", "values": [True]}


# ---------------------------------------------------------------------------
# Plain Python values
# ---------------------------------------------------------------------------

def test_encode_scalars(bridge):
    assert encode(True, bridge) == {"type": "boolean", "values": True}
    assert encode("foo", bridge) == {"type": "string", "values": "foo"}
    assert encode(3, bridge) == {"type": "number", "values": 3}
    assert encode(math.nan, bridge) == {"type": "number", "values": "NaN"}
    assert encode(None, bridge) == {"type": "nothing"}

def test_encode_homogeneous_collections(bridge):
    assert encode(["a", None], bridge) == {"type": "string", "values": ["a", None]}
    assert encode((True, False), bridge) == {"type": "boolean", "values": [True, False]}
    assert encode([1, 2.5, math.inf], bridge) == {"type": "number", "values": [1, 2.5, "Inf"]}

def test_encode_mixed_collection(bridge):
    node = encode([1, "a"], bridge)
    assert node == {
        "type": "list",
        "values": [{"type": "number", "values": 1}, {"type": "string", "values": "a"}],
    }

def test_encode_all_missing_collection(bridge):
    node = encode([None, None], bridge)
    assert node == {"type": "list", "values": [{"type": "nothing"}, {"type": "nothing"}]}

def test_encode_empty_collection(bridge):
    assert encode([], bridge) == {"type": "list", "values": []}

def test_encode_dict(bridge):
    node = encode({"a": "x", "b": [1, 2]}, bridge)
    assert node == {
        "type": "list",
        "values": [{"type": "string", "values": "x"}, {"type": "number", "values": [1, 2]}],
        "names": ["a", "b"],
    }

def test_encode_list_value(bridge):
    node = encode(ListValue([None, ListValue([])], names=["n", "l"]), bridge)
    assert node == {
        "type": "list",
        "values": [{"type": "nothing"}, {"type": "list", "values": []}],
        "names": ["n", "l"],
    }


# ---------------------------------------------------------------------------
# numpy arrays
# ---------------------------------------------------------------------------

def test_encode_numpy_integers(bridge):
    node = encode(np.array([1, 2], dtype=np.int32), bridge)
    assert node == {"type": "integer", "values": [1, 2]}
    node = encode(np.array([2**40], dtype=np.int64), bridge)
    assert node == {"type": "number", "values": [2**40]}

def test_encode_numpy_floats(bridge):
    node = encode(np.array([0.5, np.nan, -np.inf]), bridge)
    assert node == {"type": "number", "values": [0.5, "NaN", "-Inf"]}

def test_encode_numpy_booleans(bridge):
    assert encode(np.array([True, False]), bridge) == {"type": "boolean", "values": [True, False]}

def test_encode_numpy_object_strings(bridge):
    node = encode(np.array(["a", None, "b"], dtype=object), bridge)
    assert node == {"type": "string", "values": ["a", None, "b"]}

def test_encode_numpy_object_mixed(bridge):
    node = encode(np.array([1, "a"], dtype=object), bridge)
    assert node == {
        "type": "list",
        "values": [{"type": "number", "values": 1}, {"type": "string", "values": "a"}],
    }


# ---------------------------------------------------------------------------
# Other objects
# ---------------------------------------------------------------------------

def test_encode_save_other_override(bridge):
    def save_other(x):
        if isinstance(x, Opaque):
            return {"type": "string", "values": "opaque"}
        return None

    options = ListOptions(save_other=save_other)
    node = encode([Opaque(), 1], bridge, options)
    assert node["values"][0] == {"type": "string", "values": "opaque"}
    assert bridge.index == 0

def test_encode_save_other_declines(bridge):
    options = ListOptions(save_other=lambda x: None)
    with pytest.raises(ExternalObjectError):
        encode(Opaque(), bridge, options)

def test_encode_unsupported_without_directory(bridge):
    with pytest.raises(ExternalObjectError):
        encode({"a": Opaque()}, bridge)

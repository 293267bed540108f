"""
vectors.py - R-style list and vector values

A ListValue is an ordered collection that may carry one name per element,
like an R list. The typed vectors hold flat sequences of a single type where
any element may be None (R's NA).

Usage:
    from listarchive.vectors import ListValue, IntegerVector, StringVector

    x = ListValue(
        [IntegerVector([1, 2, None]), StringVector(["a"], scalar=True)],
        names=["counts", "label"],
    )
    x["counts"]     # IntegerVector([1, 2, None])
    x[1]            # StringVector(["a"], scalar=True)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Union


def _check_names(names: Optional[list], count: int, what: str):
    if names is not None and len(names) != count:
        raise ValueError(
            f"{what} has {count} values but {len(names)} names"
        )


@dataclass
class Vector:
    """Base class for the typed vectors.

    ``scalar`` marks a vector of length one that should be written as a
    bare JSON value rather than a one-element array. It only applies to
    unnamed vectors.
    """

    values: list
    names: Optional[list[str]] = None
    scalar: bool = False

    type_name = ""

    def __post_init__(self):
        self.values = list(self.values)
        if self.names is not None:
            self.names = list(self.names)
        _check_names(self.names, len(self.values), type(self).__name__)
        if self.scalar and (len(self.values) != 1 or self.names is not None):
            raise ValueError("Only unnamed vectors of length 1 can be scalars")

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator:
        return iter(self.values)

    def __getitem__(self, key: Union[int, str]) -> Any:
        if isinstance(key, str):
            if self.names is None or key not in self.names:
                raise KeyError(key)
            return self.values[self.names.index(key)]
        return self.values[key]


@dataclass
class IntegerVector(Vector):
    type_name = "integer"


@dataclass
class NumberVector(Vector):
    type_name = "number"


@dataclass
class StringVector(Vector):
    type_name = "string"


@dataclass
class BooleanVector(Vector):
    type_name = "boolean"


@dataclass
class ListValue:
    """Ordered collection of arbitrary values with optional names."""

    values: list = field(default_factory=list)
    names: Optional[list[str]] = None

    def __post_init__(self):
        self.values = list(self.values)
        if self.names is not None:
            self.names = list(self.names)
        _check_names(self.names, len(self.values), "ListValue")

    @classmethod
    def from_dict(cls, data: dict) -> "ListValue":
        return cls(list(data.values()), names=[str(k) for k in data.keys()])

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator:
        return iter(self.values)

    def __getitem__(self, key: Union[int, str]) -> Any:
        if isinstance(key, str):
            if self.names is None or key not in self.names:
                raise KeyError(key)
            return self.values[self.names.index(key)]
        return self.values[key]

    def keys(self) -> list[str]:
        return list(self.names) if self.names is not None else []

    def to_dict(self) -> dict:
        """Return the named elements as a dict.

        Raises:
            ValueError: if the list has no names
        """
        if self.names is None:
            raise ValueError("Cannot convert an unnamed list to a dict")
        return dict(zip(self.names, self.values))


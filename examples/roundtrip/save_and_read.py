"""Example usage of the listarchive Python interface."""

import math
import tempfile
from pathlib import Path

import numpy as np

import listarchive as la

with tempfile.TemporaryDirectory() as tmp:
    path = Path(tmp) / "my_list"

    # Plain Python values: dicts become named lists, homogeneous lists become vectors
    la.save_list(
        {
            "counts": la.IntegerVector([1, 2, None]),
            "weights": [0.5, math.nan, math.inf],
            "label": "experiment",
            "flags": [True, False],
            "matrix": np.arange(6).reshape(2, 3),  # stored under other_contents/0
        },
        path,
    )

    x = la.read_list(path)
    print(f"names = {x.names}")
    print(f"counts = {x['counts']}")
    print(f"label = {x['label']}")
    print(f"matrix shape = {x['matrix'].shape}")

    # Bare scalars and numpy arrays instead of vectors
    options = la.ListOptions(to_scalar=True, to_typed_array=True)
    x = la.read_list(path, options=options)
    print(f"label = {x['label']!r}, weights = {x['weights']!r}")

# In-memory round trip
data = la.dumps(la.ListValue([la.StringVector(["a", "b"])], names=["letters"]))
print(f"{len(data)} compressed bytes -> {la.loads(data)}")

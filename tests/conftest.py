from dataclasses import dataclass
from pathlib import Path

import pytest

from listarchive.cli_util import setup_logging
from listarchive.registry import default_registry, write_object_file
from listarchive.storage import LocalStorage


@dataclass
class DummyMatrix:
    rows: int
    columns: int


def save_dummy_matrix(value, path, storage, registry, options):
    storage.mkdir(path)
    write_object_file(path, storage, "dummy_matrix", version="1.0")
    storage.write_json(Path(path) / "shape.json", [value.rows, value.columns])


def read_dummy_matrix(path, metadata, storage, registry, options):
    rows, columns = storage.read_json(Path(path) / "shape.json")
    return DummyMatrix(rows, columns)


@pytest.fixture
def storage():
    return LocalStorage()


@pytest.fixture
def registry():
    registry = default_registry()
    registry.register_saver(DummyMatrix, save_dummy_matrix)
    registry.register_reader("dummy_matrix", read_dummy_matrix)
    return registry


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    setup_logging(debug=False)

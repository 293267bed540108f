"""Byte storage used by the list codec and the object registry."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

from structlog import get_logger

logger = get_logger()

PathLike = Union[str, Path]


class LocalStorage:
    """Store objects as files under the local filesystem.

    Paths are used as given; a ``root`` may be set to resolve relative paths
    against a fixed directory.
    """

    def __init__(self, root: PathLike | None = None):
        self.log = logger.new()
        self.root = Path(root) if root is not None else None

    def _resolve(self, path: PathLike) -> Path:
        path = Path(path)
        if self.root is not None and not path.is_absolute():
            return self.root / path
        return path

    def read(self, path: PathLike) -> bytes:
        return self._resolve(path).read_bytes()

    def write(self, path: PathLike, data: Union[bytes, str]):
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._resolve(path).write_bytes(data)
        self.log.debug('wrote file', path=str(path), size=len(data))

    def exists(self, path: PathLike) -> bool:
        return self._resolve(path).exists()

    def mkdir(self, path: PathLike):
        self._resolve(path).mkdir(parents=True, exist_ok=True)

    def read_json(self, path: PathLike) -> Any:
        return json.loads(self.read(path).decode("utf-8"))

    def write_json(self, path: PathLike, obj: Any):
        self.write(path, json.dumps(obj))

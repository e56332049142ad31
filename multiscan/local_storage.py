"""Object storage backed by a directory on the local file system."""

from __future__ import annotations

import os
import shutil
from typing import BinaryIO


class LocalStorage:
    """Stores objects as files under ``root/<bucket>/<key>``.

    The root directory is created when it does not exist yet.
    """

    def __init__(self, root: str | os.PathLike) -> None:
        self.root = os.fspath(root)
        os.makedirs(self.root, exist_ok=True)

    def __repr__(self) -> str:
        return f"LocalStorage(root={self.root!r})"

    def _path(self, bucket: str, key: str) -> str:
        return os.path.join(self.root, bucket, key)

    def upload(self, bucket: str, key: str, file: BinaryIO) -> None:
        """Write everything read from ``file`` to the object, replacing it."""
        with open(self._path(bucket, key), "wb") as dest:
            shutil.copyfileobj(file, dest)

    def download(self, bucket: str, key: str, file: BinaryIO) -> None:
        """Copy the object's content into ``file``."""
        with open(self._path(bucket, key), "rb") as src:
            shutil.copyfileobj(src, file)

    def make_bucket(self, bucket: str, location: str = "") -> None:
        """Create the directory that acts as a bucket; ``location`` is ignored."""
        os.makedirs(os.path.join(self.root, bucket), exist_ok=True)

    def exists(self, bucket: str, key: str) -> bool:
        """Report whether the object exists."""
        try:
            os.stat(self._path(bucket, key))
        except FileNotFoundError:
            return False
        return True
"""Shared fixtures for treeops tests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import pytest

from treeops.fs import AsyncFilesystem


@pytest.fixture()
def work_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temp directory and chdir into it."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def build_tree(root: Path, layout: dict[str, Any]) -> Path:
    """Create files and directories under root.

    String values become file contents, dict values become subdirectories.
    """
    root.mkdir(parents=True, exist_ok=True)
    for name, value in layout.items():
        path = root / name
        if isinstance(value, dict):
            build_tree(path, value)
        else:
            path.write_text(value)
    return root


@pytest.fixture()
def make_tree():
    return build_tree


class FaultyFilesystem(AsyncFilesystem):
    """AsyncFilesystem that raises queued OSErrors for chosen (operation, path) pairs.

    Every call is recorded in `calls` so tests can assert which recovery path ran.
    """

    def __init__(self) -> None:
        super().__init__(max_concurrency=8)
        self.faults: dict[tuple[str, str], list[int]] = {}
        self.calls: list[tuple[str, str]] = []

    def fail(self, op: str, path: str | os.PathLike[str], *codes: int) -> None:
        self.faults.setdefault((op, os.fspath(path)), []).extend(codes)

    def _check(self, op: str, path: str) -> None:
        self.calls.append((op, path))
        pending = self.faults.get((op, path))
        if pending:
            code = pending.pop(0)
            raise OSError(code, os.strerror(code), path)

    async def lstat(self, path: str) -> os.stat_result:
        self._check("lstat", path)
        return await super().lstat(path)

    async def readdir(self, path: str) -> list[str]:
        self._check("readdir", path)
        return await super().readdir(path)

    async def unlink(self, path: str) -> None:
        self._check("unlink", path)
        await super().unlink(path)

    async def rmdir(self, path: str) -> None:
        self._check("rmdir", path)
        await super().rmdir(path)

    async def chmod(self, path: str, mode: int) -> None:
        self._check("chmod", path)
        await super().chmod(path, mode)


@pytest.fixture()
def faulty_fs() -> FaultyFilesystem:
    return FaultyFilesystem()

"""Async access layer over the filesystem primitives the engines rely on.

Every primitive runs in a worker thread via asyncio.to_thread and is gated by
a per-instance semaphore, so one top-level operation never has more than
max_concurrency syscalls in flight no matter how wide the tree is. The
semaphore is held only for the duration of a single primitive.
"""

from __future__ import annotations

import asyncio
import os
import shutil
from collections.abc import Callable
from typing import TypeVar

from .config import MAX_CONCURRENCY

T = TypeVar("T")


class AsyncFilesystem:
    def __init__(self, max_concurrency: int = MAX_CONCURRENCY) -> None:
        self._limit = asyncio.Semaphore(max_concurrency)

    async def _run(self, fn: Callable[..., T], *args: object, **kwargs: object) -> T:
        async with self._limit:
            return await asyncio.to_thread(fn, *args, **kwargs)

    async def lstat(self, path: str) -> os.stat_result:
        return await self._run(os.lstat, path)

    async def stat(self, path: str) -> os.stat_result:
        return await self._run(os.stat, path)

    async def readdir(self, path: str) -> list[str]:
        return await self._run(os.listdir, path)

    async def mkdir(self, path: str, mode: int = 0o777) -> None:
        await self._run(os.mkdir, path, mode)

    async def unlink(self, path: str) -> None:
        await self._run(os.unlink, path)

    async def makedirs(self, path: str, mode: int = 0o777) -> None:
        await self._run(os.makedirs, path, mode, exist_ok=True)

    async def rmdir(self, path: str) -> None:
        await self._run(os.rmdir, path)

    async def readlink(self, path: str) -> str:
        return await self._run(os.readlink, path)

    async def symlink(self, target: str, path: str, *, is_directory: bool = False) -> None:
        await self._run(os.symlink, target, path, target_is_directory=is_directory)

    async def chmod(self, path: str, mode: int) -> None:
        await self._run(os.chmod, path, mode)

    async def copy_file(self, source: str, destination: str, *, preserve_timestamps: bool = False) -> None:
        """Copy file bytes and mode bits; optionally carry atime/mtime over too."""
        await self._run(_copy_file, source, destination, preserve_timestamps)

    async def exists(self, path: str) -> bool:
        """True if path exists, following symlinks."""
        try:
            await self.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return False
        return True


def _copy_file(source: str, destination: str, preserve_timestamps: bool) -> None:
    shutil.copyfile(source, destination)
    shutil.copymode(source, destination)
    if preserve_timestamps:
        st = os.stat(source)
        os.utime(destination, ns=(st.st_atime_ns, st.st_mtime_ns))

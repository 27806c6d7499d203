"""Depth-bounded enumeration of a tree into a path -> stat mapping."""

from __future__ import annotations

import os

from .fs import AsyncFilesystem
from .types import Entry, ScanOptions, StrPath
from .walker import TreeWalker, WalkPolicy

ScanResult = dict[str, os.stat_result]


class ScanPolicy(WalkPolicy[ScanResult]):
    """Records every entry the filter accepts.

    The filter hides a node, not its subtree: children of a rejected
    directory are still visited.
    """

    def __init__(self, options: ScanOptions) -> None:
        self._options = options

    def _record(self, entry: Entry) -> ScanResult:
        assert entry.stat is not None
        accept = self._options.filter
        if accept is None or accept(entry.stat, entry.path):
            return {entry.path: entry.stat}
        return {}

    def empty(self) -> ScanResult:
        return {}

    def merge(self, own: ScanResult, children: list[ScanResult]) -> ScanResult:
        # Branches never share keys, so a plain union is enough.
        for child in children:
            own.update(child)
        return own

    async def visit_directory(self, entry: Entry, level: int) -> tuple[ScanResult, bool]:
        limit = self._options.depth_limit
        return self._record(entry), limit is None or level < limit

    async def visit_leaf(self, entry: Entry, level: int) -> ScanResult:
        return self._record(entry)


async def scan_deep(
    path: StrPath,
    results: ScanResult,
    level: int,
    options: ScanOptions,
    *,
    fs: AsyncFilesystem | None = None,
) -> ScanResult:
    """Scan path as if it sat `level` directories below the scan root and add what is found to results."""
    fs = fs or AsyncFilesystem(options.max_concurrency)
    found = await TreeWalker(fs, ScanPolicy(options)).walk(os.path.abspath(os.fspath(path)), level)
    results.update(found)
    return results


async def scan(
    path: StrPath,
    options: ScanOptions | None = None,
    *,
    fs: AsyncFilesystem | None = None,
) -> ScanResult:
    """Map every entry under path (path included) to its lstat result.

    Symbolic links are reported, not followed. With options.depth_limit set,
    entries up to that many levels below path are returned.
    """
    return await scan_deep(path, {}, 0, options or ScanOptions(), fs=fs)

"""Recursive tree walk shared by copy and scan."""

from __future__ import annotations

import asyncio
import os
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Iterable
from typing import Generic, TypeVar

from .classify import classify
from .fs import AsyncFilesystem
from .types import Entry

R = TypeVar("R")
T = TypeVar("T")


async def _settle(aw: Awaitable[T]) -> tuple[T | None, Exception | None]:
    try:
        return await aw, None
    except Exception as err:
        return None, err


async def fan_out(coros: Iterable[Awaitable[T]]) -> list[T]:
    """Run coros concurrently and wait until every one of them has finished.

    A failure does not cancel its siblings. The join returns only after
    every coroutine has settled, so no filesystem call started below it is
    still running in a worker thread. The first failure in submission
    order is then re-raised as itself, not wrapped in an ExceptionGroup.
    """
    async with asyncio.TaskGroup() as group:
        tasks = [group.create_task(_settle(coro)) for coro in coros]

    outcomes = [task.result() for task in tasks]
    failures = [err for _, err in outcomes if err is not None]
    if failures:
        first = failures[0]
        if len(failures) > 1:
            first.add_note(f"{len(failures) - 1} sibling operation(s) also failed")
        raise first
    return [value for value, _ in outcomes]


class WalkPolicy(ABC, Generic[R]):
    """What a walk does at each entry."""

    dereference: bool = False

    def admit(self, path: str) -> bool:
        """Return False to skip path and everything below it without classifying it."""
        return True

    @abstractmethod
    def empty(self) -> R: ...

    @abstractmethod
    def merge(self, own: R, children: list[R]) -> R: ...

    @abstractmethod
    async def visit_directory(self, entry: Entry, level: int) -> tuple[R, bool]:
        """Handle a directory before its children. Returns (result, descend)."""

    @abstractmethod
    async def visit_leaf(self, entry: Entry, level: int) -> R: ...


class TreeWalker(Generic[R]):
    def __init__(self, fs: AsyncFilesystem, policy: WalkPolicy[R]) -> None:
        self._fs = fs
        self._policy = policy

    async def walk(self, path: str, level: int = 0) -> R:
        policy = self._policy
        if not policy.admit(path):
            return policy.empty()

        entry = await classify(self._fs, path, dereference=policy.dereference)

        if not entry.is_directory:
            return await policy.visit_leaf(entry, level)

        own, descend = await policy.visit_directory(entry, level)
        if not descend:
            return own

        names = await self._fs.readdir(path)
        children = await fan_out(self.walk(os.path.join(path, name), level + 1) for name in names)
        return policy.merge(own, children)

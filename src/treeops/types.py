"""treeops domain types."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from .config import BUSY_BACKOFF_S, MAX_BUSY_TRIES, MAX_CONCURRENCY

StrPath = str | os.PathLike[str]

CopyFilter = Callable[[str, str], bool]
ScanFilter = Callable[[os.stat_result, str], bool]


def _accept_all(_path: str, _dest_path: str) -> bool:
    return True


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    CHAR_DEVICE = "char_device"
    BLOCK_DEVICE = "block_device"
    OTHER = "other"
    ABSENT = "absent"


@dataclass(frozen=True)
class Entry:
    """A filesystem object and its classification at one point in time."""

    path: str
    kind: EntryKind
    stat: os.stat_result | None = None

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def is_symlink(self) -> bool:
        return self.kind is EntryKind.SYMLINK

    @property
    def exists(self) -> bool:
        return self.kind is not EntryKind.ABSENT

    @property
    def mode(self) -> int:
        return self.stat.st_mode if self.stat is not None else 0


class LinkPaths(NamedTuple):
    to_cwd: str  # where the link target lives, usable from the current directory
    to_dst: str  # the text to write into the new link


class CopyOptions(BaseModel):
    """Options for copy().

    With overwrite=False an existing destination file is skipped silently
    unless error_on_exist is also set.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    filter: CopyFilter = _accept_all
    overwrite: bool = True
    error_on_exist: bool = False
    preserve_timestamps: bool = False
    dereference: bool = False
    max_concurrency: int = Field(default=MAX_CONCURRENCY, ge=1)
    # Filled once per top-level call by normalized().
    current_path: str | None = None
    target_path: str | None = None

    def normalized(self, source: StrPath, destination: StrPath) -> CopyOptions:
        """Return a copy with both traversal roots resolved to absolute paths."""
        return self.model_copy(
            update={
                "current_path": os.path.abspath(os.fspath(source)),
                "target_path": os.path.abspath(os.fspath(destination)),
            }
        )


class ScanOptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    filter: ScanFilter | None = None
    depth_limit: int | None = Field(default=None, ge=0)
    max_concurrency: int = Field(default=MAX_CONCURRENCY, ge=1)


class RemoveOptions(BaseModel):
    """Options for remove().

    The top-level entry is attempted up to max_busy_tries times (default
    from TREEOPS_MAX_BUSY_TRIES, 3) while it fails as busy or not empty,
    sleeping busy_backoff_s * attempt between tries. When the tries run out
    a BusyError is raised, chained from the last failure; a directory that
    keeps refilling therefore surfaces as BusyError caused by NotEmptyError.
    A permission error is retried once after resetting the mode bits and
    otherwise raised as PermissionDeniedError.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_busy_tries: int = Field(default=MAX_BUSY_TRIES, ge=1)
    busy_backoff_s: float = Field(default=BUSY_BACKOFF_S, ge=0)
    max_concurrency: int = Field(default=MAX_CONCURRENCY, ge=1)

"""Entry classification and symlink target resolution."""

from __future__ import annotations

import errno
import os
import stat as stat_module
from typing import Literal

from .errors import BrokenSourceError, NotFoundError
from .fs import AsyncFilesystem
from .types import Entry, EntryKind, LinkPaths


def kind_of(st: os.stat_result) -> EntryKind:
    mode = st.st_mode
    if stat_module.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat_module.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if stat_module.S_ISREG(mode):
        return EntryKind.FILE
    if stat_module.S_ISCHR(mode):
        return EntryKind.CHAR_DEVICE
    if stat_module.S_ISBLK(mode):
        return EntryKind.BLOCK_DEVICE
    return EntryKind.OTHER


async def classify(
    fs: AsyncFilesystem,
    path: str,
    *,
    dereference: bool = False,
    missing_ok: bool = False,
) -> Entry:
    """Stat path and report what kind of entry it is.

    With dereference the link target is classified instead of the link.
    An absent path raises NotFoundError unless missing_ok is set, in which
    case an ABSENT entry is returned.
    """
    try:
        st = await (fs.stat(path) if dereference else fs.lstat(path))
    except FileNotFoundError as err:
        if missing_ok:
            return Entry(path=path, kind=EntryKind.ABSENT)
        raise NotFoundError(errno.ENOENT, "No such file or directory", path) from err
    return Entry(path=path, kind=kind_of(st), stat=st)


async def link_type(
    fs: AsyncFilesystem,
    source_path: str,
    explicit_type: Literal["dir", "file"] | None = None,
) -> Literal["dir", "file"]:
    """Decide whether a link to source_path should be a directory or a file link."""
    if explicit_type:
        return explicit_type
    try:
        st = await fs.lstat(source_path)
    except OSError:
        # The link target does not have to exist.
        return "file"
    return "dir" if stat_module.S_ISDIR(st.st_mode) else "file"


async def require_exists(fs: AsyncFilesystem, path: str) -> None:
    try:
        await fs.lstat(path)
    except FileNotFoundError as err:
        raise BrokenSourceError(errno.ENOENT, "Symbolic link target does not exist", path) from err


async def resolve_link_target(
    fs: AsyncFilesystem,
    source_path: str,
    dest_path: str,
    *,
    base_dir: str | None = None,
) -> LinkPaths:
    """Work out what a new link at dest_path pointing at source_path should contain.

    Absolute targets are kept as they are. A relative target that already
    resolves from the destination's directory is kept verbatim; otherwise it
    is looked up relative to base_dir (the current directory by default) and
    rewritten so it still reaches the same object from dest_path's directory.
    """
    if os.path.isabs(source_path):
        await require_exists(fs, source_path)
        return LinkPaths(to_cwd=source_path, to_dst=source_path)

    dest_dir = os.path.dirname(dest_path)
    relative_to_dst = os.path.join(dest_dir, source_path)
    if await fs.exists(relative_to_dst):
        return LinkPaths(to_cwd=relative_to_dst, to_dst=source_path)

    to_cwd = os.path.join(base_dir, source_path) if base_dir is not None else source_path
    await require_exists(fs, to_cwd)
    return LinkPaths(
        to_cwd=to_cwd,
        to_dst=os.path.relpath(os.path.abspath(to_cwd), os.path.abspath(dest_dir)),
    )

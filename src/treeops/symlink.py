"""Create symbolic links whose relative targets stay valid from where the link lives."""

from __future__ import annotations

import errno
import os
from typing import Literal

from .classify import link_type, resolve_link_target
from .errors import ErrorClass, classify_error
from .fs import AsyncFilesystem
from .types import StrPath


async def ensure_symlink(
    target: StrPath,
    link_path: StrPath,
    link_kind: Literal["dir", "file"] | None = None,
    *,
    fs: AsyncFilesystem | None = None,
) -> None:
    """Make link_path a symbolic link to target, creating parent directories.

    A relative target is read relative to the current directory unless it
    already resolves from link_path's directory, and is rewritten so the link
    works from where it is created. An identical existing link is left alone;
    anything else already at link_path raises FileExistsError.
    """
    fs = fs or AsyncFilesystem()
    target = os.fspath(target)
    link_path = os.fspath(link_path)

    try:
        existing = await fs.readlink(link_path)
    except OSError as err:
        # EINVAL: something other than a link is there; symlink() below reports it.
        if err.errno != errno.EINVAL and classify_error(err) is not ErrorClass.NOT_FOUND:
            raise
        existing = None

    paths = await resolve_link_target(fs, target, link_path)
    if existing is not None and existing == paths.to_dst:
        return

    kind = await link_type(fs, paths.to_cwd, link_kind)
    parent = os.path.dirname(link_path)
    if parent and not await fs.exists(parent):
        await fs.makedirs(parent)
    await fs.symlink(paths.to_dst, link_path, is_directory=kind == "dir")

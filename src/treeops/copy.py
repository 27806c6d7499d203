"""Recursive copy of files, directories and symbolic links."""

from __future__ import annotations

import errno
import os
import re
import stat as stat_module

from .classify import link_type, require_exists, resolve_link_target
from .config import IS_WINDOWS
from .errors import CyclicCopyError, DestinationExistsError, UnsupportedEntryError
from .fs import AsyncFilesystem
from .logger import logger
from .types import CopyOptions, Entry, EntryKind, StrPath
from .util import is_writable
from .walker import TreeWalker, WalkPolicy


def rebase_path(path: str, current_root: str, target_root: str) -> str:
    """Swap the current_root prefix of path for target_root.

    target_root is inserted literally, so backslashes and other characters
    that mean something in a replacement template are safe.
    """
    pattern = re.compile(r"\A" + re.escape(current_root))
    return pattern.sub(lambda _match: target_root, path, count=1)


def is_src_kid(src: str, dest: str) -> bool:
    """True when dest lies strictly inside src."""
    src = os.path.abspath(src)
    dest = os.path.abspath(dest)
    if src == dest:
        return False
    try:
        return os.path.commonpath([src, dest]) == src
    except ValueError:
        # Different drives on Windows.
        return False


class CopyPolicy(WalkPolicy[None]):
    def __init__(self, fs: AsyncFilesystem, options: CopyOptions) -> None:
        assert options.current_path is not None and options.target_path is not None
        self._fs = fs
        self._options = options
        self._root = options.current_path
        self._target_root = options.target_path
        self.dereference = options.dereference

    def _target_for(self, path: str) -> str:
        return rebase_path(path, self._root, self._target_root)

    def admit(self, path: str) -> bool:
        return bool(self._options.filter(path, self._target_for(path)))

    def empty(self) -> None:
        return None

    def merge(self, own: None, children: list[None]) -> None:
        return None

    async def visit_directory(self, entry: Entry, level: int) -> tuple[None, bool]:
        target = self._target_for(entry.path)
        if is_src_kid(self._root, target):
            raise CyclicCopyError(entry.path, target)

        if await is_writable(target, self._fs):
            mode = stat_module.S_IMODE(entry.mode)
            await self._fs.mkdir(target, mode)
            # mkdir is subject to the umask.
            await self._fs.chmod(target, mode)
        return None, True

    async def visit_leaf(self, entry: Entry, level: int) -> None:
        if entry.kind is EntryKind.OTHER:
            raise UnsupportedEntryError(f"Cannot copy '{entry.path}': unsupported file type")

        target = self._target_for(entry.path)
        if await self._is_directory(target, follow=not entry.is_symlink):
            target = os.path.join(target, os.path.basename(entry.path))

        if entry.is_symlink:
            await self._copy_link(entry.path, target)
        else:
            await self._copy_file(entry.path, target)

    async def _is_directory(self, path: str, *, follow: bool) -> bool:
        try:
            st = await (self._fs.stat(path) if follow else self._fs.lstat(path))
        except OSError:
            return False
        return stat_module.S_ISDIR(st.st_mode)

    async def _copy_file(self, source: str, target: str) -> None:
        options = self._options
        if await is_writable(target, self._fs):
            await self._fs.copy_file(source, target, preserve_timestamps=options.preserve_timestamps)
        elif options.overwrite:
            await self._fs.unlink(target)
            await self._fs.copy_file(source, target, preserve_timestamps=options.preserve_timestamps)
        elif options.error_on_exist:
            raise DestinationExistsError(errno.EEXIST, "Destination already exists", target)
        else:
            logger.debug("Destination exists, skipping", source=source, target=target)

    async def _link_text(self, source: str, target: str) -> str:
        text = await self._fs.readlink(source)
        if self._options.dereference:
            return os.path.abspath(text)
        if not os.path.isabs(text):
            resolved = os.path.normpath(os.path.join(os.path.dirname(source), text))
            if resolved == self._root or is_src_kid(self._root, resolved):
                # Points inside the tree being copied, so it resolves inside the copy too.
                await require_exists(self._fs, resolved)
                return text
        paths = await resolve_link_target(self._fs, text, target, base_dir=os.path.dirname(source))
        return paths.to_dst

    async def _existing_link_text(self, target: str) -> str | None:
        try:
            text = await self._fs.readlink(target)
        except OSError as err:
            if err.errno == errno.EINVAL:
                # Present but not a link.
                return None
            raise
        return os.path.abspath(text) if self._options.dereference else text

    async def _make_link(self, text: str, target: str) -> None:
        is_directory = False
        if IS_WINDOWS:
            pointee = text if os.path.isabs(text) else os.path.join(os.path.dirname(target), text)
            is_directory = await link_type(self._fs, pointee) == "dir"
        await self._fs.symlink(text, target, is_directory=is_directory)

    async def _copy_link(self, source: str, target: str) -> None:
        text = await self._link_text(source, target)
        if await is_writable(target, self._fs):
            await self._make_link(text, target)
            return

        if await self._existing_link_text(target) == text:
            return
        await self._fs.unlink(target)
        await self._make_link(text, target)


async def copy(
    source: StrPath,
    destination: StrPath,
    options: CopyOptions | None = None,
    *,
    fs: AsyncFilesystem | None = None,
) -> None:
    """Copy source to destination, recursing into directories.

    Symbolic links are recreated rather than followed unless
    options.dereference is set. A failure part way through leaves whatever
    was already copied in place.
    """
    options = (options or CopyOptions()).normalized(source, destination)
    assert options.current_path is not None and options.target_path is not None
    if options.current_path == options.target_path:
        raise CyclicCopyError(options.current_path, options.target_path)

    fs = fs or AsyncFilesystem(options.max_concurrency)
    await TreeWalker(fs, CopyPolicy(fs, options)).walk(options.current_path)

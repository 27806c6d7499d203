"""Recursive removal with recovery from busy, non-empty and permission errors."""

from __future__ import annotations

import asyncio
import errno
import os
import stat as stat_module
from collections.abc import Awaitable, Callable

from .config import O666, O777
from .errors import BusyError, ErrorClass, NotEmptyError, PermissionDeniedError, classify_error
from .fs import AsyncFilesystem
from .logger import logger
from .types import RemoveOptions, StrPath
from .walker import fan_out

Recovery = Callable[[str, OSError], Awaitable[None]]

# Failure classes worth retrying the whole entry for after a short wait.
# Permission errors get their single retry from the mode reset instead.
RETRYABLE: frozenset[ErrorClass] = frozenset({ErrorClass.BUSY, ErrorClass.NOT_EMPTY})


class RemoveEngine:
    def __init__(self, fs: AsyncFilesystem, options: RemoveOptions) -> None:
        self._fs = fs
        self._options = options
        # What to do when deleting a non-directory fails, keyed by error class.
        self._unlink_recovery: dict[ErrorClass, Recovery] = {
            ErrorClass.PERMISSION: self._fix_permission,
            ErrorClass.IS_DIRECTORY: self.remove_dir,
            ErrorClass.NOT_FOUND: self._already_gone,
        }
        # What to do when deleting a directory fails, keyed by error class.
        self._rmdir_recovery: dict[ErrorClass, Recovery] = {
            ErrorClass.NOT_EMPTY: self._remove_children_after,
            ErrorClass.EXISTS: self._remove_children_after,
            ErrorClass.PERMISSION: self._remove_children_after,
            ErrorClass.BUSY: self._remove_children_after,
            ErrorClass.NOT_FOUND: self._already_gone,
        }

    async def remove(self, path: str) -> None:
        """Remove path and everything below it. A missing path is not an error.

        Only this top-level entry is retried with backoff. Each attempt
        removes everything below it in a single pass.
        """
        attempt = 0
        while True:
            try:
                await self._remove_entry(path)
                return
            except OSError as err:
                error_class = classify_error(err)
                if error_class is ErrorClass.PERMISSION and not isinstance(err, PermissionDeniedError):
                    raise PermissionDeniedError(err.errno, "Permission denied", err.filename or path) from err
                if error_class not in RETRYABLE:
                    raise
                attempt += 1
                if attempt >= self._options.max_busy_tries:
                    raise BusyError(err.errno, "Entry is locked or in use", err.filename or path) from err
                delay_s = self._options.busy_backoff_s * attempt
                logger.debug(
                    "Retrying removal with backoff",
                    path=path,
                    error_class=error_class.value,
                    attempt=attempt,
                    delay_s=delay_s,
                )
                await asyncio.sleep(delay_s)

    async def _remove_entry(self, path: str) -> None:
        try:
            st = await self._fs.lstat(path)
        except OSError as err:
            error_class = classify_error(err)
            if error_class is ErrorClass.NOT_FOUND:
                return
            if error_class is ErrorClass.PERMISSION:
                await self._fix_permission(path, err)
                return
            raise

        if stat_module.S_ISDIR(st.st_mode):
            await self.remove_dir(path, None)
            return

        try:
            await self._fs.unlink(path)
        except OSError as err:
            recover = self._unlink_recovery.get(classify_error(err))
            if recover is None:
                raise
            await recover(path, err)

    async def remove_dir(self, path: str, original_error: OSError | None) -> None:
        """Delete a directory, falling back to removing its children first.

        The plain rmdir is tried first so an empty directory costs no listing.
        """
        try:
            await self._fs.rmdir(path)
        except OSError as err:
            error_class = classify_error(err)
            if error_class is ErrorClass.NOT_DIRECTORY and original_error is not None:
                raise original_error
            recover = self._rmdir_recovery.get(error_class)
            if recover is None:
                raise
            await recover(path, err)

    async def remove_children(self, path: str) -> None:
        names = await self._fs.readdir(path)
        if names:
            logger.debug("Removing directory contents", path=path, count=len(names))
            await fan_out(self._remove_entry(os.path.join(path, name)) for name in names)
        try:
            await self._fs.rmdir(path)
        except OSError as err:
            if classify_error(err) is ErrorClass.NOT_EMPTY:
                # Something was added meanwhile; the top-level removal retries the whole entry.
                raise NotEmptyError(err.errno, "Directory not empty", path) from err
            raise

    async def _remove_children_after(self, path: str, err: OSError) -> None:
        await self.remove_children(path)

    async def _already_gone(self, path: str, err: OSError) -> None:
        return None

    async def _fix_permission(self, path: str, original: OSError) -> None:
        """Make path writable and try once more; vanishing in the meantime counts as success."""
        logger.debug("Resetting permissions before retrying removal", path=path)
        try:
            before = await self._fs.lstat(path)
            # chmod would follow a link and change its target instead.
            if not stat_module.S_ISLNK(before.st_mode):
                await self._fs.chmod(path, O777 if stat_module.S_ISDIR(before.st_mode) else O666)
            after = await self._fs.lstat(path)
        except OSError as err:
            if classify_error(err) is ErrorClass.NOT_FOUND:
                return
            raise PermissionDeniedError(original.errno or errno.EPERM, "Permission denied", path) from original

        try:
            if stat_module.S_ISDIR(after.st_mode):
                await self.remove_dir(path, original)
            else:
                await self._fs.unlink(path)
        except OSError as err:
            error_class = classify_error(err)
            if error_class is ErrorClass.NOT_FOUND:
                return
            if error_class is ErrorClass.PERMISSION and not isinstance(err, PermissionDeniedError):
                raise PermissionDeniedError(err.errno, "Permission denied", path) from err
            raise



async def remove(
    path: StrPath,
    options: RemoveOptions | None = None,
    *,
    fs: AsyncFilesystem | None = None,
) -> None:
    """Delete path, recursively if it is a directory.

    Removing something that does not exist succeeds. A failure part way
    through leaves whatever was not yet deleted in place.
    """
    options = options or RemoveOptions()
    fs = fs or AsyncFilesystem(options.max_concurrency)
    await RemoveEngine(fs, options).remove(os.path.abspath(os.fspath(path)))

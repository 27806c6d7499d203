"""Exception types and the abstract error-class table for filesystem failures."""

from __future__ import annotations

import errno
from enum import Enum


class TreeOpsError(Exception):
    """Base class for every error raised by treeops itself."""


class NotFoundError(TreeOpsError, FileNotFoundError):
    """An entry was absent where existence was required."""


class BrokenSourceError(TreeOpsError, FileNotFoundError):
    """A symbolic link points at something that does not exist."""


class CyclicCopyError(TreeOpsError):
    """The copy destination lies inside the source tree."""

    def __init__(self, source: str, destination: str) -> None:
        super().__init__(
            f"Cannot copy '{source}' to '{destination}': the destination is inside the source"
        )
        self.source = source
        self.destination = destination


class DestinationExistsError(TreeOpsError, FileExistsError):
    """Overwrite is disabled, error_on_exist is enabled and the destination is present."""


class BusyError(TreeOpsError, OSError):
    """The platform kept reporting the entry as locked or in use."""


class NotEmptyError(TreeOpsError, OSError):
    """A directory delete was refused because the directory still has children."""


class PermissionDeniedError(TreeOpsError, PermissionError):
    """Permission was still denied after resetting the entry's mode bits."""


class UnsupportedEntryError(TreeOpsError):
    """The entry kind (fifo, socket) cannot be copied."""


class ErrorClass(str, Enum):
    """Platform-independent classes of filesystem failure."""

    BUSY = "busy"
    NOT_EMPTY = "not_empty"
    EXISTS = "exists"
    NOT_FOUND = "not_found"
    PERMISSION = "permission"
    NOT_DIRECTORY = "not_directory"
    IS_DIRECTORY = "is_directory"
    UNRECOGNIZED = "unrecognized"


_ERRNO_CLASSES: dict[int, ErrorClass] = {
    errno.EBUSY: ErrorClass.BUSY,
    errno.ETXTBSY: ErrorClass.BUSY,
    errno.ENOTEMPTY: ErrorClass.NOT_EMPTY,
    errno.EEXIST: ErrorClass.EXISTS,
    errno.ENOENT: ErrorClass.NOT_FOUND,
    errno.EPERM: ErrorClass.PERMISSION,
    errno.EACCES: ErrorClass.PERMISSION,
    errno.ENOTDIR: ErrorClass.NOT_DIRECTORY,
    errno.EISDIR: ErrorClass.IS_DIRECTORY,
}

# Windows reports locking through winerror codes that map onto generic errnos.
_WINERROR_CLASSES: dict[int, ErrorClass] = {
    32: ErrorClass.BUSY,  # ERROR_SHARING_VIOLATION
    33: ErrorClass.BUSY,  # ERROR_LOCK_VIOLATION
    145: ErrorClass.NOT_EMPTY,  # ERROR_DIR_NOT_EMPTY
}


def classify_error(exc: BaseException) -> ErrorClass:
    """Map an exception onto its abstract error class."""
    if not isinstance(exc, OSError):
        return ErrorClass.UNRECOGNIZED
    winerror = getattr(exc, "winerror", None)
    if winerror in _WINERROR_CLASSES:
        return _WINERROR_CLASSES[winerror]
    if exc.errno is None:
        return ErrorClass.UNRECOGNIZED
    return _ERRNO_CLASSES.get(exc.errno, ErrorClass.UNRECOGNIZED)

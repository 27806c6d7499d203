"""Async copy, remove and scan of filesystem trees."""

from __future__ import annotations

from .classify import classify, link_type, resolve_link_target
from .copy import copy, is_src_kid, rebase_path
from .errors import (
    BrokenSourceError,
    BusyError,
    CyclicCopyError,
    DestinationExistsError,
    ErrorClass,
    NotEmptyError,
    NotFoundError,
    PermissionDeniedError,
    TreeOpsError,
    UnsupportedEntryError,
    classify_error,
)
from .fs import AsyncFilesystem
from .logger import setup_logging
from .remove import remove
from .scan import ScanResult, scan, scan_deep
from .symlink import ensure_symlink
from .types import (
    CopyOptions,
    Entry,
    EntryKind,
    LinkPaths,
    RemoveOptions,
    ScanOptions,
)
from .util import invalid_win32_path, is_writable, path_exists, strip_bom, temp_file, uuid

__all__ = [
    # classify
    "classify",
    "link_type",
    "resolve_link_target",
    # copy
    "copy",
    "is_src_kid",
    "rebase_path",
    # errors
    "BrokenSourceError",
    "BusyError",
    "CyclicCopyError",
    "DestinationExistsError",
    "ErrorClass",
    "NotEmptyError",
    "NotFoundError",
    "PermissionDeniedError",
    "TreeOpsError",
    "UnsupportedEntryError",
    "classify_error",
    # fs
    "AsyncFilesystem",
    # logger
    "setup_logging",
    # remove
    "remove",
    # scan
    "ScanResult",
    "scan",
    "scan_deep",
    # symlink
    "ensure_symlink",
    # types
    "CopyOptions",
    "Entry",
    "EntryKind",
    "LinkPaths",
    "RemoveOptions",
    "ScanOptions",
    # util
    "invalid_win32_path",
    "is_writable",
    "path_exists",
    "strip_bom",
    "temp_file",
    "uuid",
]

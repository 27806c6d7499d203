"""Small path helpers."""

from __future__ import annotations

import os
import re
import secrets
import tempfile

from .errors import ErrorClass, classify_error
from .fs import AsyncFilesystem
from .types import StrPath

_WIN32_INVALID_CHARS = re.compile(r'[<>:"|?*]')


async def is_writable(path: StrPath, fs: AsyncFilesystem | None = None) -> bool:
    """True when nothing exists at path, i.e. it can be created without clobbering anything.

    Dangling symlinks count as existing.
    """
    fs = fs or AsyncFilesystem()
    try:
        await fs.lstat(os.fspath(path))
    except OSError as err:
        return classify_error(err) is ErrorClass.NOT_FOUND
    return False


async def path_exists(path: StrPath, fs: AsyncFilesystem | None = None) -> bool:
    fs = fs or AsyncFilesystem()
    return await fs.exists(os.fspath(path))


def strip_bom(content: str | bytes) -> str:
    if isinstance(content, bytes):
        content = content.decode("utf-8")
    return content.removeprefix("\ufeff")


def invalid_win32_path(path: StrPath) -> bool:
    """True if path contains characters Windows does not allow outside the drive root."""
    text = os.fspath(path)
    drive, _ = os.path.splitdrive(os.path.abspath(text))
    return bool(_WIN32_INVALID_CHARS.search(text.removeprefix(drive) if drive else text))


def uuid() -> str:
    """A random 32-hex-digit id in 8-4-4-4-12 form."""
    h = secrets.token_hex(16)
    return f"{h[:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:]}"


def temp_file(ext: str = "") -> str:
    """A fresh, not yet created path in the system temp directory."""
    return os.path.join(tempfile.gettempdir(), uuid() + ext)

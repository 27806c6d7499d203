"""Tests for small path helpers and logging setup."""

from __future__ import annotations

import os
import re
import tempfile
from typing import TYPE_CHECKING

import pytest

from treeops.logger import logger, setup_logging
from treeops.util import invalid_win32_path, is_writable, path_exists, strip_bom, temp_file, uuid

if TYPE_CHECKING:
    from pathlib import Path


class TestIsWritable:
    @pytest.mark.asyncio
    async def test_missing_path_is_writable(self, tmp_path: Path) -> None:
        assert await is_writable(tmp_path / "free") is True

    @pytest.mark.asyncio
    async def test_existing_path_is_not_writable(self, tmp_path: Path) -> None:
        (tmp_path / "taken").write_text("x")
        assert await is_writable(tmp_path / "taken") is False

    @pytest.mark.asyncio
    async def test_path_below_a_file_is_not_writable(self, tmp_path: Path) -> None:
        (tmp_path / "file").write_text("x")
        assert await is_writable(tmp_path / "file" / "child") is False


class TestPathExists:
    @pytest.mark.asyncio
    async def test_exists(self, tmp_path: Path) -> None:
        assert await path_exists(tmp_path) is True

    @pytest.mark.asyncio
    async def test_missing(self, tmp_path: Path) -> None:
        assert await path_exists(tmp_path / "missing") is False


class TestStripBom:
    def test_str(self) -> None:
        assert strip_bom("\ufeffhello") == "hello"

    def test_bytes(self) -> None:
        assert strip_bom(b"\xef\xbb\xbfhello") == "hello"

    def test_without_bom(self) -> None:
        assert strip_bom("plain") == "plain"


class TestInvalidWin32Path:
    def test_plain_path_is_valid(self) -> None:
        assert invalid_win32_path(os.path.join("some", "dir", "file.txt")) is False

    def test_reserved_characters_are_invalid(self) -> None:
        for bad in ("a<b", "a>b", 'a"b', "a|b", "a?b", "a*b"):
            assert invalid_win32_path(bad) is True


class TestIds:
    def test_uuid_shape(self) -> None:
        assert re.fullmatch(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", uuid())

    def test_uuid_is_random(self) -> None:
        assert uuid() != uuid()

    def test_temp_file(self) -> None:
        path = temp_file(".json")
        assert os.path.dirname(path) == tempfile.gettempdir()
        assert path.endswith(".json")
        assert not os.path.exists(path)


class TestLogging:
    def test_setup_logging_returns_usable_logger(self) -> None:
        configured = setup_logging("DEBUG")
        configured.debug("treeops test event", key="value")

    def test_module_logger_accepts_key_values(self) -> None:
        logger.debug("Destination exists, skipping", source="/a", target="/b")

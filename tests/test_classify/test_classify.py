"""Tests for entry classification and link target resolution."""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

import pytest

from treeops.classify import classify, link_type, resolve_link_target
from treeops.errors import BrokenSourceError, NotFoundError
from treeops.fs import AsyncFilesystem
from treeops.types import EntryKind

if TYPE_CHECKING:
    from pathlib import Path

needs_symlinks = pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")


class TestClassify:
    @pytest.fixture(autouse=True)
    def _setup(self, work_dir: Path) -> None:
        self.tmp_dir = work_dir
        self.fs = AsyncFilesystem()
        (work_dir / "file.txt").write_text("x")
        (work_dir / "dir").mkdir()

    @pytest.mark.asyncio
    async def test_file(self) -> None:
        entry = await classify(self.fs, str(self.tmp_dir / "file.txt"))
        assert entry.kind is EntryKind.FILE
        assert entry.exists
        assert entry.stat is not None and entry.stat.st_size == 1

    @pytest.mark.asyncio
    async def test_directory(self) -> None:
        entry = await classify(self.fs, str(self.tmp_dir / "dir"))
        assert entry.is_directory

    @pytest.mark.asyncio
    async def test_missing_raises_not_found(self) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await classify(self.fs, str(self.tmp_dir / "missing"))
        assert exc_info.value.filename == str(self.tmp_dir / "missing")

    @pytest.mark.asyncio
    async def test_missing_ok_returns_absent_entry(self) -> None:
        entry = await classify(self.fs, str(self.tmp_dir / "missing"), missing_ok=True)
        assert entry.kind is EntryKind.ABSENT
        assert not entry.exists
        assert entry.stat is None

    @needs_symlinks
    @pytest.mark.asyncio
    async def test_symlink_without_dereference(self) -> None:
        os.symlink("dir", self.tmp_dir / "alias")
        entry = await classify(self.fs, str(self.tmp_dir / "alias"))
        assert entry.is_symlink

    @needs_symlinks
    @pytest.mark.asyncio
    async def test_symlink_with_dereference(self) -> None:
        os.symlink("dir", self.tmp_dir / "alias")
        entry = await classify(self.fs, str(self.tmp_dir / "alias"), dereference=True)
        assert entry.is_directory

    @pytest.mark.skipif(not os.path.exists("/dev/null"), reason="needs /dev/null")
    @pytest.mark.asyncio
    async def test_character_device(self) -> None:
        entry = await classify(self.fs, "/dev/null")
        assert entry.kind is EntryKind.CHAR_DEVICE


class TestLinkType:
    @pytest.mark.asyncio
    async def test_explicit_type_wins(self, tmp_path: Path) -> None:
        assert await link_type(AsyncFilesystem(), str(tmp_path), "file") == "file"

    @pytest.mark.asyncio
    async def test_directory(self, tmp_path: Path) -> None:
        assert await link_type(AsyncFilesystem(), str(tmp_path)) == "dir"

    @pytest.mark.asyncio
    async def test_file(self, tmp_path: Path) -> None:
        (tmp_path / "f").write_text("x")
        assert await link_type(AsyncFilesystem(), str(tmp_path / "f")) == "file"

    @pytest.mark.asyncio
    async def test_missing_defaults_to_file(self, tmp_path: Path) -> None:
        assert await link_type(AsyncFilesystem(), str(tmp_path / "nope")) == "file"


class TestResolveLinkTarget:
    @pytest.fixture(autouse=True)
    def _setup(self, work_dir: Path) -> None:
        self.tmp_dir = work_dir
        self.fs = AsyncFilesystem()
        (work_dir / "target.txt").write_text("t")
        (work_dir / "links" / "deep").mkdir(parents=True)

    @pytest.mark.asyncio
    async def test_absolute_target_is_unchanged(self) -> None:
        target = str(self.tmp_dir / "target.txt")
        paths = await resolve_link_target(self.fs, target, str(self.tmp_dir / "links" / "l"))
        assert paths.to_cwd == target
        assert paths.to_dst == target

    @pytest.mark.asyncio
    async def test_missing_absolute_target_is_broken(self) -> None:
        with pytest.raises(BrokenSourceError):
            await resolve_link_target(self.fs, str(self.tmp_dir / "gone"), str(self.tmp_dir / "l"))

    @pytest.mark.asyncio
    async def test_relative_target_valid_from_destination_is_kept(self) -> None:
        paths = await resolve_link_target(self.fs, "../target.txt", str(self.tmp_dir / "links" / "l"))
        assert paths.to_dst == "../target.txt"
        assert os.path.exists(paths.to_cwd)

    @pytest.mark.asyncio
    async def test_relative_target_from_cwd_is_rewritten(self) -> None:
        paths = await resolve_link_target(self.fs, "target.txt", str(self.tmp_dir / "links" / "deep" / "l"))
        assert paths.to_cwd == "target.txt"
        assert paths.to_dst == os.path.join("..", "..", "target.txt")

    @pytest.mark.asyncio
    async def test_relative_target_from_base_dir(self) -> None:
        paths = await resolve_link_target(
            self.fs,
            "target.txt",
            str(self.tmp_dir / "links" / "l"),
            base_dir=str(self.tmp_dir),
        )
        assert paths.to_dst == os.path.join("..", "target.txt")

    @pytest.mark.asyncio
    async def test_missing_relative_target_is_broken(self) -> None:
        with pytest.raises(BrokenSourceError) as exc_info:
            await resolve_link_target(self.fs, "nothing.txt", str(self.tmp_dir / "links" / "l"))
        assert isinstance(exc_info.value, FileNotFoundError)

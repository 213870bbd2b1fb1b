"""
Тесты локальной папки и пикера по пути (реальный диск через tmp_path).
"""

import asyncio

import pytest

from launcher.control.errors import SelectionCancelled, SelectionFailed
from launcher.control.state import PreviewStatus
from launcher.filesystem.handles import EntryKind, LocalDirectory, LocalPathPicker
from launcher.preview.resolver import resolve_preview


async def _collect(directory):
    return [entry async for entry in directory.iter_children()]


def test_iter_children_kinds(tmp_path):
    (tmp_path / "Index.HTML").write_text("<p>x</p>", encoding="utf-8")
    (tmp_path / "assets").mkdir()
    entries = {e.name: e.kind for e in asyncio.run(_collect(LocalDirectory(tmp_path)))}
    assert entries == {"Index.HTML": EntryKind.FILE, "assets": EntryKind.DIRECTORY}


def test_resolve_preview_on_disk(tmp_path):
    (tmp_path / "INDEX.html").write_text("<p>привет</p>", encoding="utf-8")
    outcome = asyncio.run(resolve_preview(LocalDirectory(tmp_path)))
    assert outcome.status is PreviewStatus.FOUND
    assert outcome.text == "<p>привет</p>"


def test_nested_index_not_used(tmp_path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "index.html").write_text("<p>x</p>", encoding="utf-8")
    outcome = asyncio.run(resolve_preview(LocalDirectory(tmp_path)))
    assert outcome.status is PreviewStatus.NOT_FOUND


def test_too_large_preview_is_read_error(tmp_path):
    (tmp_path / "index.html").write_text("x" * 100, encoding="utf-8")
    outcome = asyncio.run(resolve_preview(LocalDirectory(tmp_path, max_file_bytes=10)))
    assert outcome.status is PreviewStatus.READ_ERROR


def test_invalid_utf8_is_replaced(tmp_path):
    (tmp_path / "index.html").write_bytes(b"<p>\xff</p>")
    outcome = asyncio.run(resolve_preview(LocalDirectory(tmp_path)))
    assert outcome.status is PreviewStatus.FOUND
    assert outcome.text == "<p>�</p>"


def test_missing_directory_is_read_error(tmp_path):
    outcome = asyncio.run(resolve_preview(LocalDirectory(tmp_path / "gone")))
    assert outcome.status is PreviewStatus.READ_ERROR


def test_directory_name(tmp_path):
    assert LocalDirectory(tmp_path / "site").name == "site"


def test_picker_empty_path_is_cancel():
    with pytest.raises(SelectionCancelled):
        asyncio.run(LocalPathPicker("  ").choose())
    with pytest.raises(SelectionCancelled):
        asyncio.run(LocalPathPicker(None).choose())


def test_picker_missing_path_fails(tmp_path):
    with pytest.raises(SelectionFailed):
        asyncio.run(LocalPathPicker(str(tmp_path / "missing"), root=None).choose())


def test_picker_file_path_fails(tmp_path):
    f = tmp_path / "file.txt"
    f.write_text("x", encoding="utf-8")
    with pytest.raises(SelectionFailed):
        asyncio.run(LocalPathPicker(str(f), root=None).choose())


def test_picker_outside_root_fails(tmp_path):
    root = tmp_path / "root"
    other = tmp_path / "other"
    root.mkdir()
    other.mkdir()
    with pytest.raises(SelectionFailed):
        asyncio.run(LocalPathPicker(str(other), root=root.resolve()).choose())


def test_picker_returns_local_directory(tmp_path):
    site = tmp_path / "site"
    site.mkdir()
    directory = asyncio.run(LocalPathPicker(str(site), root=tmp_path.resolve()).choose())
    assert directory == LocalDirectory(site.resolve())
    assert directory.name == "site"

# tests/test_store.py

import pytest

from notecheck.errors import Cancelled, IoError
from notecheck.store import DirectoryNoteStore


def test_list_returns_sorted_files_only(tmp_path):
    (tmp_path / "b.txt").write_text("b", encoding="utf-8")
    (tmp_path / "a.md").write_text("a", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    assert DirectoryNoteStore(str(tmp_path)).list() == ["a.md", "b.txt"]


def test_missing_directory_lists_nothing(tmp_path):
    assert DirectoryNoteStore(str(tmp_path / "nope")).list() == []


def test_write_then_read_unicode(tmp_path):
    store = DirectoryNoteStore(str(tmp_path / "notes"))
    store.write("todo.txt", "café ☕\nline two")
    assert store.read("todo.txt") == "café ☕\nline two"
    assert store.list() == ["todo.txt"]


@pytest.mark.parametrize("name", ["../secret", "a/b", "..", "", "bad\x00name"])
def test_rejects_unsafe_names(tmp_path, name):
    store = DirectoryNoteStore(str(tmp_path))
    with pytest.raises(IoError):
        store.read(name)
    with pytest.raises(IoError):
        store.write(name, "x")


def test_read_missing_file_raises_io_error(tmp_path):
    with pytest.raises(IoError):
        DirectoryNoteStore(str(tmp_path)).read("missing.txt")


def test_external_open_and_save(tmp_path):
    source = tmp_path / "elsewhere.txt"
    source.write_text("hello", encoding="utf-8")
    target = tmp_path / "out.txt"
    store = DirectoryNoteStore(
        str(tmp_path), pick_open=lambda: str(source), pick_save=lambda: str(target)
    )

    assert store.open_external() == ("elsewhere.txt", "hello")
    assert store.save_external("bye") == "out.txt"
    assert target.read_text(encoding="utf-8") == "bye"


def test_external_cancel(tmp_path):
    store = DirectoryNoteStore(str(tmp_path), pick_open=lambda: None)
    with pytest.raises(Cancelled):
        store.open_external()
    with pytest.raises(Cancelled):
        store.save_external("text")


def test_failed_write_keeps_previous_note(tmp_path, monkeypatch):
    store = DirectoryNoteStore(str(tmp_path))
    store.write("todo.txt", "original text")

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("notecheck.store.os.replace", fail_replace)
    with pytest.raises(IoError):
        store.write("todo.txt", "new text")

    assert (tmp_path / "todo.txt").read_text(encoding="utf-8") == "original text"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["todo.txt"]

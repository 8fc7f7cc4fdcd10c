# notecheck/store.py

from __future__ import annotations

import logging
import os
import tempfile
from typing import Callable, List, Optional, Protocol, Tuple

import regex as re

from notecheck.errors import Cancelled, IoError

logger = logging.getLogger(__name__)

# a bare file name: no separators, no control characters
NOTE_NAME_RE = re.compile(r"^(?!\.{1,2}$)[^/\\\p{Cc}]+$")

Picker = Callable[[], Optional[str]]


class NoteStore(Protocol):
    def list(self) -> List[str]:
        ...

    def read(self, name: str) -> str:
        ...

    def write(self, name: str, content: str) -> None:
        ...

    def open_external(self) -> Tuple[str, str]:
        ...

    def save_external(self, content: str) -> str:
        ...


def _read_file(path: str) -> str:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise IoError(f"Failed to read {path}: {e}") from e


def _write_file(path: str, content: str) -> None:
    # temp file in the same directory so os.replace stays atomic
    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".", suffix=".tmp", dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as e:
        raise IoError(f"Failed to write {path}: {e}") from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)


class DirectoryNoteStore:
    """
    Notes kept as UTF-8 files in one flat directory.

    pick_open / pick_save stand in for the UI file picker: they return a
    path, or None when the user cancels.
    """

    def __init__(
        self,
        directory: str,
        pick_open: Optional[Picker] = None,
        pick_save: Optional[Picker] = None,
    ):
        self.directory = directory
        self._pick_open = pick_open
        self._pick_save = pick_save

    def _path(self, name: str) -> str:
        if not NOTE_NAME_RE.match(name):
            raise IoError(f"Invalid note name: {name!r}")
        return os.path.join(self.directory, name)

    def list(self) -> List[str]:
        try:
            entries = os.listdir(self.directory)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise IoError(f"Failed to list {self.directory}: {e}") from e
        return sorted(
            e for e in entries if os.path.isfile(os.path.join(self.directory, e))
        )

    def read(self, name: str) -> str:
        return _read_file(self._path(name))

    def write(self, name: str, content: str) -> None:
        path = self._path(name)
        try:
            os.makedirs(self.directory, exist_ok=True)
        except OSError as e:
            raise IoError(f"Failed to create {self.directory}: {e}") from e
        _write_file(path, content)
        logger.info("Saved note %s (%d chars)", name, len(content))

    def open_external(self) -> Tuple[str, str]:
        path = self._pick_open() if self._pick_open else None
        if not path:
            raise Cancelled("Open cancelled")
        return os.path.basename(path), _read_file(path)

    def save_external(self, content: str) -> str:
        path = self._pick_save() if self._pick_save else None
        if not path:
            raise Cancelled("Save cancelled")
        _write_file(path, content)
        logger.info("Saved note to %s", path)
        return os.path.basename(path)

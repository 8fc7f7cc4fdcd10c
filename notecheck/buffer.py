# notecheck/buffer.py

from __future__ import annotations

from notecheck.errors import RangeError


class TextBuffer:
    """
    Mutable note text addressed by code point offsets.

    Python str indexing is already per code point, so every offset handed
    out or accepted here lands on a character boundary. Nothing outside this
    class slices the raw string.
    """

    def __init__(self, content: str = ""):
        self._content = content
        self._length = len(content)
        self.revision = 0

    @property
    def text(self) -> str:
        return self._content

    def length(self) -> int:
        return self._length

    def _check_range(self, start: int, end: int) -> None:
        if start < 0 or start > end or end > self._length:
            raise RangeError(
                f"Invalid range [{start}, {end}) for buffer of length {self._length}"
            )

    def slice(self, start: int, end: int) -> str:
        self._check_range(start, end)
        return self._content[start:end]

    def splice(self, start: int, end: int, replacement: str) -> None:
        self._check_range(start, end)
        self._content = self._content[:start] + replacement + self._content[end:]
        self._length += len(replacement) - (end - start)
        self.revision += 1

    def __repr__(self) -> str:
        return f"TextBuffer(length={self._length}, revision={self.revision})"

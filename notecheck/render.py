# notecheck/render.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from notecheck.buffer import TextBuffer
from notecheck.models import AnnotationSet, Span


@dataclass(frozen=True)
class Run:
    text: str
    is_highlighted: bool
    span_id: Optional[int] = None
    start: int = 0


@dataclass(frozen=True)
class Line:
    number: int
    start: int
    runs: Tuple[Run, ...] = ()

    def __iter__(self) -> Iterator[Run]:
        return iter(self.runs)

    def __len__(self) -> int:
        return len(self.runs)

    @property
    def text(self) -> str:
        return "".join(r.text for r in self.runs)


class Layout:
    """
    Restartable view of a buffer as styled lines; each iteration recomputes.
    """

    def __init__(self, text: str, spans: Tuple[Span, ...]):
        self._text = text
        self._spans = spans

    def __iter__(self) -> Iterator[Line]:
        return _lines(self._text, self._spans)


def _lines(text: str, spans: Tuple[Span, ...]) -> Iterator[Line]:
    visible = [s for s in spans if s.end > s.start]
    cursor = 0  # first visible span that may still cover upcoming text
    line_start = 0

    for number, line_text in enumerate(text.split("\n")):
        line_end = line_start + len(line_text)
        runs: List[Run] = []
        pos = line_start

        while pos < line_end:
            while cursor < len(visible) and visible[cursor].end <= pos:
                cursor += 1
            span = visible[cursor] if cursor < len(visible) else None

            if span is not None and span.start <= pos:
                stop = min(span.end, line_end)
                runs.append(Run(text[pos:stop], True, span.id, pos))
            else:
                stop = min(span.start, line_end) if span is not None else line_end
                runs.append(Run(text[pos:stop], False, None, pos))
            pos = stop

        yield Line(number=number, start=line_start, runs=tuple(runs))
        line_start = line_end + 1  # skip the line feed


class LineRenderer:
    """
    Projects a buffer and its annotations into highlighted runs per line.

    Stateless: holds nothing between calls and never mutates its inputs.
    """

    def layout(self, buffer: TextBuffer, annotations: AnnotationSet) -> Layout:
        return Layout(buffer.text, annotations.spans)

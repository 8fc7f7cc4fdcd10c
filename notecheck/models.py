# notecheck/models.py

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterator, List, Optional, Tuple

from notecheck.errors import RangeError


@dataclass(frozen=True)
class RawFinding:
    message: str
    offset: int
    length: int
    replacement_candidates: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Span:
    id: int
    start: int
    end: int
    message: str
    choices: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.start < 0 or self.start > self.end:
            raise RangeError(f"Invalid span [{self.start}, {self.end})")

    def overlaps(self, other: "Span") -> bool:
        return not (self.end <= other.start or other.end <= self.start)

    def length(self) -> int:
        return self.end - self.start

    @property
    def actionable(self) -> bool:
        return bool(self.choices)

    def shifted(self, delta: int) -> "Span":
        return replace(self, start=self.start + delta, end=self.end + delta)


@dataclass(frozen=True)
class AnnotationSet:
    """
    One generation of checker findings: sorted by start, pairwise disjoint.
    """

    generation: int = 0
    spans: Tuple[Span, ...] = ()

    def __post_init__(self):
        prev: Optional[Span] = None
        for span in self.spans:
            if prev is not None and (span.start < prev.start or prev.overlaps(span)):
                raise RangeError(
                    f"Span {span.id} [{span.start}, {span.end}) overlaps or "
                    f"precedes span {prev.id} [{prev.start}, {prev.end})"
                )
            prev = span

    def __iter__(self) -> Iterator[Span]:
        return iter(self.spans)

    def __len__(self) -> int:
        return len(self.spans)

    def __bool__(self) -> bool:
        return bool(self.spans)

    def get(self, span_id: int) -> Optional[Span]:
        for span in self.spans:
            if span.id == span_id:
                return span
        return None

    def without(self, span_id: int, generation: int) -> "AnnotationSet":
        return AnnotationSet(
            generation=generation,
            spans=tuple(s for s in self.spans if s.id != span_id),
        )

    def after_edit(
        self, start: int, end: int, replacement_length: int, generation: int
    ) -> "AnnotationSet":
        """
        Re-anchor spans after [start, end) was replaced by
        replacement_length characters.

        Spans at or after the edit shift by the length delta, spans before it
        stay put, anything intersecting it is dropped.
        """
        delta = replacement_length - (end - start)
        kept: List[Span] = []
        for span in self.spans:
            if span.start >= end:
                kept.append(span.shifted(delta) if delta else span)
            elif span.end <= start:
                kept.append(span)
            # else: the edit touched this span's text
        return AnnotationSet(generation=generation, spans=tuple(kept))

# notecheck/engine.py

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from notecheck.buffer import TextBuffer
from notecheck.checker import CheckerClient
from notecheck.errors import CheckError, ChoiceOutOfRange, NotFound
from notecheck.models import AnnotationSet, Span
from notecheck.resolve import build_spans

logger = logging.getLogger(__name__)

NO_CHOICE_GLYPH = "❌"


class EngineState(str, Enum):
    IDLE = "idle"
    CHECKING = "checking"
    APPLYING = "applying"


class AnnotationEngine:
    """
    Owns one note's buffer and its current annotation set.

    All methods run on a single event loop. refresh() awaits the checker and
    is the only suspension point; edits made while it is pending make its
    response stale and it is discarded on arrival.
    """

    def __init__(self, checker: CheckerClient, buffer: Optional[TextBuffer] = None):
        self._checker = checker
        self._buffer = buffer if buffer is not None else TextBuffer()
        self._annotations = AnnotationSet()
        self._state = EngineState.IDLE
        self._request_seq = 0
        self._pending_seq: Optional[int] = None
        self._next_span_id = 0

    @property
    def buffer(self) -> TextBuffer:
        return self._buffer

    @property
    def annotations(self) -> AnnotationSet:
        return self._annotations

    @property
    def generation(self) -> int:
        return self._annotations.generation

    @property
    def state(self) -> EngineState:
        return self._state

    def _settle_state(self) -> None:
        pending = self._pending_seq is not None
        self._state = EngineState.CHECKING if pending else EngineState.IDLE

    async def refresh(self) -> bool:
        """
        Check the current text and install the findings.

        Returns False when the response was dropped because a newer refresh
        superseded it or the buffer changed while it was in flight.
        Raises CheckError when the latest request fails; the annotation set
        is left as it was.
        """
        self._request_seq += 1
        seq = self._request_seq
        revision = self._buffer.revision
        text = self._buffer.text
        self._pending_seq = seq
        self._state = EngineState.CHECKING
        logger.debug("Refresh #%d started (revision %d)", seq, revision)

        try:
            findings = await self._checker.check(text)
        except CheckError:
            if seq != self._request_seq:
                logger.info("Ignoring failure of superseded refresh #%d", seq)
                return False
            raise
        finally:
            if seq == self._request_seq:
                self._pending_seq = None
                self._settle_state()

        if seq != self._request_seq:
            logger.info("Discarding superseded refresh #%d", seq)
            return False

        if self._buffer.revision != revision:
            logger.info(
                "Discarding stale refresh #%d: buffer revision %d -> %d",
                seq,
                revision,
                self._buffer.revision,
            )
            return False

        spans = build_spans(findings, self._buffer.length(), first_id=self._next_span_id)
        self._next_span_id += len(findings)
        self._annotations = AnnotationSet(
            generation=self._annotations.generation + 1, spans=tuple(spans)
        )
        logger.info(
            "Refresh #%d installed %d spans (generation %d)",
            seq,
            len(spans),
            self._annotations.generation,
        )
        return True

    def _lookup(self, span_id: int, generation: Optional[int]) -> Span:
        if generation is not None and generation != self._annotations.generation:
            raise NotFound(
                f"Span {span_id} belongs to generation {generation}, "
                f"current is {self._annotations.generation}"
            )
        span = self._annotations.get(span_id)
        if span is None:
            raise NotFound(f"No span with id {span_id}")
        return span

    def apply(
        self, span_id: int, choice_index: int, generation: Optional[int] = None
    ) -> Span:
        """
        Replace a span's text with one of its choices.

        The applied span is removed and the others are re-anchored. Does not
        re-check the text; callers decide whether to refresh().
        """
        span = self._lookup(span_id, generation)
        if not 0 <= choice_index < len(span.choices):
            raise ChoiceOutOfRange(
                f"Choice {choice_index} out of range for span {span_id} "
                f"with {len(span.choices)} choices"
            )
        choice = span.choices[choice_index]

        self._state = EngineState.APPLYING
        try:
            updated = self._annotations.without(span.id, self.generation).after_edit(
                span.start, span.end, len(choice), self.generation + 1
            )
            self._buffer.splice(span.start, span.end, choice)
            self._annotations = updated
        finally:
            self._settle_state()

        logger.info(
            "Applied span %d [%d, %d) -> %r (generation %d)",
            span.id,
            span.start,
            span.end,
            choice,
            self.generation,
        )
        return span

    def discard_stale_spans(
        self, edit_start: int, edit_end: int, replacement_length: int = 0
    ) -> None:
        """
        Re-anchor spans after a free-form edit of [edit_start, edit_end) that
        inserted replacement_length characters.
        """
        updated = self._annotations.after_edit(
            edit_start, edit_end, replacement_length, self.generation + 1
        )
        if updated.spans != self._annotations.spans:
            self._annotations = updated

    def edit(self, start: int, end: int, replacement: str) -> None:
        self._buffer.splice(start, end, replacement)
        self.discard_stale_spans(start, end, len(replacement))

    def describe(self, span_id: int) -> str:
        span = self._lookup(span_id, None)
        original = self._buffer.slice(span.start, span.end)
        target = span.choices[0] if span.actionable else NO_CHOICE_GLYPH
        return f"{original} → {target}"

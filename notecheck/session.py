# notecheck/session.py

from __future__ import annotations

import logging
from typing import List, Optional

from notecheck.buffer import TextBuffer
from notecheck.checker import CheckerClient, LanguageToolClient
from notecheck.config import Settings
from notecheck.engine import AnnotationEngine
from notecheck.errors import CheckError, ChoiceOutOfRange, IoError, NotFound
from notecheck.models import Span
from notecheck.render import Layout, LineRenderer
from notecheck.store import DirectoryNoteStore, NoteStore

logger = logging.getLogger(__name__)


class NoteSession:
    """
    The open note and its collaborators.

    Exactly one AnnotationEngine exists per open note; opening another note
    replaces it. Recoverable failures are kept in `status` for display and
    re-raised to the caller.
    """

    def __init__(
        self,
        store: NoteStore,
        checker: CheckerClient,
        recheck_after_apply: bool = True,
    ):
        self.store = store
        self.checker = checker
        self.recheck_after_apply = recheck_after_apply
        self.renderer = LineRenderer()
        self.name: Optional[str] = None
        self.status: Optional[str] = None
        self.engine = AnnotationEngine(checker)

    @classmethod
    def from_settings(cls, settings: Settings) -> "NoteSession":
        checker = LanguageToolClient(
            url=settings.checker.url,
            language=settings.checker.language,
            timeout_s=settings.checker.timeout_s,
            username=settings.checker.username,
            api_key=settings.checker.api_key,
        )
        store = DirectoryNoteStore(settings.notes.directory)
        return cls(store, checker, recheck_after_apply=settings.recheck_after_apply)

    def _report(self, err: Exception) -> None:
        self.status = str(err)
        logger.warning("%s", err)

    def _replace_note(self, name: Optional[str], content: str) -> AnnotationEngine:
        self.name = name
        self.engine = AnnotationEngine(self.checker, TextBuffer(content))
        self.status = None
        return self.engine

    def notes(self) -> List[str]:
        try:
            return self.store.list()
        except IoError as e:
            self._report(e)
            raise

    def new(self) -> AnnotationEngine:
        return self._replace_note(None, "")

    def open(self, name: str) -> AnnotationEngine:
        try:
            content = self.store.read(name)
        except IoError as e:
            self._report(e)
            raise
        logger.info("Opened note %s", name)
        return self._replace_note(name, content)

    def open_external(self) -> AnnotationEngine:
        try:
            name, content = self.store.open_external()
        except IoError as e:
            self._report(e)
            raise
        return self._replace_note(name, content)

    def save(self, name: Optional[str] = None) -> str:
        target = name or self.name
        if not target:
            err = IoError("No file name to save to")
            self._report(err)
            raise err
        try:
            self.store.write(target, self.engine.buffer.text)
        except IoError as e:
            self._report(e)
            raise
        self.name = target
        return target

    def save_external(self) -> str:
        try:
            self.name = self.store.save_external(self.engine.buffer.text)
        except IoError as e:
            self._report(e)
            raise
        return self.name

    def edit(self, start: int, end: int, text: str) -> None:
        self.engine.edit(start, end, text)

    async def check(self) -> bool:
        try:
            installed = await self.engine.refresh()
        except CheckError as e:
            self._report(e)
            raise
        self.status = None
        return installed

    async def accept(
        self, span_id: int, choice_index: int, generation: Optional[int] = None
    ) -> Span:
        try:
            span = self.engine.apply(span_id, choice_index, generation)
        except (NotFound, ChoiceOutOfRange) as e:
            self._report(e)
            raise
        if self.recheck_after_apply:
            try:
                await self.check()
            except CheckError:
                # the edit stands; check() already recorded the failure
                pass
        return span

    def layout(self) -> Layout:
        return self.renderer.layout(self.engine.buffer, self.engine.annotations)

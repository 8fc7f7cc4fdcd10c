# notecheck/checker.py

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

import httpx
from pydantic import BaseModel, ValidationError

from notecheck.errors import CheckError
from notecheck.models import RawFinding

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://api.languagetoolplus.com/v2/check"


class CheckerClient(Protocol):
    async def check(self, text: str) -> List[RawFinding]:
        ...


# LanguageTool wire format (only the fields we read)
class LTSuggestion(BaseModel):
    value: str


class LTMatch(BaseModel):
    message: str
    offset: int
    length: int
    replacements: List[LTSuggestion] = []


class LTResponse(BaseModel):
    matches: List[LTMatch]


def utf16_to_char_offsets(text: str) -> List[int]:
    """
    Map every UTF-16 code unit offset of text to a code point offset.

    LanguageTool counts offsets in UTF-16 units, so characters outside the
    BMP (most emoji) take two units but one Python index. Index i of the
    result is the code point offset for UTF-16 offset i; the second unit of
    a surrogate pair maps to the character after the pair.
    """
    table: List[int] = []
    for ix, ch in enumerate(text):
        table.append(ix)
        if ord(ch) > 0xFFFF:
            table.append(ix + 1)
    table.append(len(text))
    return table


def _to_finding(match: LTMatch, table: List[int]) -> RawFinding:
    start16 = match.offset
    end16 = match.offset + match.length
    # out-of-range offsets pass through untranslated so span building drops them
    if 0 <= start16 and 0 <= end16 < len(table):
        start = table[start16]
        end = table[end16]
    else:
        start = start16
        end = end16
    return RawFinding(
        message=match.message,
        offset=start,
        length=end - start,
        replacement_candidates=[r.value for r in match.replacements],
    )


class LanguageToolClient:
    """
    CheckerClient backed by the LanguageTool HTTP API.
    """

    def __init__(
        self,
        url: str = DEFAULT_URL,
        language: str = "en-US",
        timeout_s: float = 10.0,
        username: Optional[str] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.language = language
        self.timeout_s = timeout_s
        self._username = username
        self._api_key = api_key
        self._transport = transport

    def _form(self, text: str) -> dict:
        form = {"text": text, "language": self.language}
        if self._username and self._api_key:
            form["username"] = self._username
            form["apiKey"] = self._api_key
        return form

    async def check(self, text: str) -> List[RawFinding]:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self._transport
            ) as client:
                resp = await client.post(self.url, data=self._form(text))
        except httpx.HTTPError as e:
            logger.warning("Checker request failed: %s", e)
            raise CheckError(f"Checker request failed: {e}") from e

        if not resp.is_success:
            logger.warning("Checker returned HTTP %d", resp.status_code)
            raise CheckError(
                f"Checker returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            parsed = LTResponse.model_validate_json(resp.content)
        except ValidationError as e:
            logger.warning("Malformed checker response: %s", e)
            raise CheckError("Malformed checker response") from e

        table = utf16_to_char_offsets(text)
        findings = [_to_finding(m, table) for m in parsed.matches]
        logger.info("Checker returned %d findings", len(findings))
        return findings

# tests/conftest.py

import asyncio
from typing import List

import pytest

from notecheck.errors import CheckError
from notecheck.models import RawFinding


class FakeChecker:
    """Returns canned findings, or raises once `error` is set."""

    def __init__(self, findings: List[RawFinding] = None, error: CheckError = None):
        self.findings = list(findings or [])
        self.error = error
        self.calls: List[str] = []

    async def check(self, text: str) -> List[RawFinding]:
        self.calls.append(text)
        if self.error is not None:
            raise self.error
        return list(self.findings)


class GatedChecker:
    """Holds each check() open until the test releases it."""

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.findings: List[RawFinding] = []
        self.error = None

    async def check(self, text: str) -> List[RawFinding]:
        self.started.set()
        await self.release.wait()
        if self.error is not None:
            raise self.error
        return list(self.findings)


def finding(offset, length, *choices, message="Possible typo"):
    return RawFinding(
        message=message,
        offset=offset,
        length=length,
        replacement_candidates=list(choices),
    )


@pytest.fixture
def fake_checker():
    return FakeChecker()

# tests/test_checker.py

import json

import httpx
import pytest

from notecheck.checker import LanguageToolClient, utf16_to_char_offsets
from notecheck.errors import CheckError


def _client(handler, **kwargs):
    return LanguageToolClient(
        url="https://lt.test/v2/check", transport=httpx.MockTransport(handler), **kwargs
    )


def _lt_match(offset, length, *values, message="Possible spelling mistake found."):
    return {
        "message": message,
        "offset": offset,
        "length": length,
        "replacements": [{"value": v} for v in values],
        "rule": {"id": "MORFOLOGIK_RULE_EN_US"},
    }


@pytest.mark.asyncio
async def test_check_posts_form_and_parses_matches():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["form"] = dict(
            item.split("=", 1) for item in request.content.decode().split("&")
        )
        body = {"matches": [_lt_match(0, 3, "The", "Tea"), _lt_match(8, 3)]}
        return httpx.Response(200, json=body)

    findings = await _client(handler).check("Teh cat sta.")

    assert seen["form"]["language"] == "en-US"
    assert "username" not in seen["form"]
    assert [(f.offset, f.length) for f in findings] == [(0, 3), (8, 3)]
    assert findings[0].replacement_candidates == ["The", "Tea"]
    assert findings[1].replacement_candidates == []


@pytest.mark.asyncio
async def test_check_sends_credentials_when_configured():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = request.content.decode()
        return httpx.Response(200, json={"matches": []})

    await _client(handler, username="me@example.com", api_key="k123").check("hi")
    assert "apiKey=k123" in seen["body"]
    assert "username=me%40example.com" in seen["body"]


@pytest.mark.asyncio
async def test_utf16_offsets_are_converted_to_code_points():
    text = "😀 Teh cat"

    def handler(request):
        # LanguageTool counts the emoji as two units
        return httpx.Response(200, json={"matches": [_lt_match(3, 3, "The")]})

    findings = await _client(handler).check(text)
    f = findings[0]
    assert text[f.offset:f.offset + f.length] == "Teh"


def test_utf16_table():
    assert utf16_to_char_offsets("a😀b") == [0, 1, 2, 2, 3]


@pytest.mark.asyncio
async def test_non_2xx_raises_check_error():
    client = _client(lambda request: httpx.Response(429, text="Too many requests"))
    with pytest.raises(CheckError) as exc:
        await client.check("text")
    assert exc.value.status_code == 429


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload", [b"not json", json.dumps({"nope": []}).encode(), b'{"matches": [{"offset": 1}]}']
)
async def test_malformed_payload_raises_check_error(payload):
    client = _client(lambda request: httpx.Response(200, content=payload))
    with pytest.raises(CheckError):
        await client.check("text")


@pytest.mark.asyncio
async def test_network_failure_raises_check_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(CheckError):
        await _client(handler).check("text")

"""Tests for the OpenAI suggestion client."""

import asyncio
import json

import pytest

from drink_journal.adapters.openai_suggestion_client import OpenAISuggestionClient
from drink_journal.errors import AdvisoryServiceFailure


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str) -> None:
        self.responses = _FakeResponses(output_text)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def _complete(client: OpenAISuggestionClient) -> dict[str, object]:
    return asyncio.run(
        client.complete_json(
            model="gpt-4.1-mini",
            store=False,
            prompt="List items",
            schema_name="item_suggestions",
            schema={"type": "object"},
        )
    )


def test_openai_suggestion_client_parses_output() -> None:
    fake = _FakeOpenAI(json.dumps({"items": ["珍珠奶茶"]}))
    client = OpenAISuggestionClient(client=fake)

    result = _complete(client)

    assert result == {"items": ["珍珠奶茶"]}
    assert fake.responses.last_payload is not None
    text_format = fake.responses.last_payload["text"]["format"]
    assert text_format["name"] == "item_suggestions"
    assert text_format["strict"] is True
    assert fake.responses.last_payload["store"] is False


@pytest.mark.parametrize("output_text", ["", "not json"])
def test_openai_suggestion_client_rejects_bad_output(output_text: str) -> None:
    client = OpenAISuggestionClient(client=_FakeOpenAI(output_text))

    with pytest.raises(AdvisoryServiceFailure):
        _complete(client)


def test_openai_suggestion_client_close() -> None:
    fake = _FakeOpenAI("{}")

    asyncio.run(OpenAISuggestionClient(client=fake).close())

    assert fake.closed is True

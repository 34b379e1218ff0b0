from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from aitrader.advisory import OpenAIRecommender
from aitrader.config import AdvisoryConfig
from aitrader.errors import AdvisoryUnavailableError


class FakeCompletions:
    def __init__(self, content=None, error=None, choices=True) -> None:
        self.content = content
        self.error = error
        self.choices = choices
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if not self.choices:
            return SimpleNamespace(choices=[])
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=self.content))])


def _client(completions: FakeCompletions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_recommend_sends_configured_request():
    completions = FakeCompletions(content="  Hold: range-bound market.  ")
    recommender = OpenAIRecommender(AdvisoryConfig(model="gpt-test", temperature=0.2, max_tokens=42), _client(completions))

    text = asyncio.run(recommender.recommend("prompt text"))

    assert text == "Hold: range-bound market."
    call = completions.calls[0]
    assert call["model"] == "gpt-test"
    assert call["temperature"] == 0.2
    assert call["max_tokens"] == 42
    assert call["messages"] == [{"role": "user", "content": "prompt text"}]


def test_defaults_match_chat_settings():
    completions = FakeCompletions(content="Buy")
    asyncio.run(OpenAIRecommender(client=_client(completions)).recommend("p"))

    call = completions.calls[0]
    assert call["model"] == "gpt-3.5-turbo"
    assert call["temperature"] == 0.7
    assert call["max_tokens"] == 150


def test_api_error_is_mapped():
    recommender = OpenAIRecommender(client=_client(FakeCompletions(error=OpenAIError("rate limited"))))
    with pytest.raises(AdvisoryUnavailableError, match="rate limited"):
        asyncio.run(recommender.recommend("p"))


@pytest.mark.parametrize(
    "completions",
    [FakeCompletions(choices=False), FakeCompletions(content=None), FakeCompletions(content="   ")],
)
def test_empty_responses_are_unavailable(completions):
    recommender = OpenAIRecommender(client=_client(completions))
    with pytest.raises(AdvisoryUnavailableError):
        asyncio.run(recommender.recommend("p"))

"""Recommendation suppliers."""

from __future__ import annotations

import os
from typing import Any, Optional, Sequence

from openai import AsyncOpenAI, OpenAIError

from aitrader.config.models import AdvisoryConfig
from aitrader.errors import AdvisoryUnavailableError
from aitrader.market.models import PricePoint


def build_prompt(symbol: str, window: Sequence[PricePoint]) -> str:
    price_data = ", ".join(f"{point.price:.4f}" for point in window)
    return (
        f"As an AI trading assistant, analyze the recent price data for {symbol}: [{price_data}]. "
        "Should I buy, sell, or hold? Provide a brief, clear explanation for your decision, "
        "considering market trends and potential risks."
    )


class Recommender:
    async def recommend(self, prompt: str) -> str:  # pragma: no cover - interface
        raise NotImplementedError


class OpenAIRecommender(Recommender):
    """
    Chat-completions backed recommender.

    The client is created on first use so that a missing API key surfaces as an
    ``AdvisoryUnavailableError`` at request time instead of at start-up.
    """

    def __init__(self, config: Optional[AdvisoryConfig] = None, client: Optional[Any] = None) -> None:
        self.config = config or AdvisoryConfig()
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            kwargs: dict[str, Any] = {
                "api_key": os.getenv(self.config.api_key_env),
                "timeout": self.config.timeout_seconds,
            }
            if self.config.base_url:
                kwargs["base_url"] = self.config.base_url
            self._client = AsyncOpenAI(**kwargs)
        return self._client

    async def recommend(self, prompt: str) -> str:
        try:
            response = await self._get_client().chat.completions.create(
                model=self.config.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except OpenAIError as exc:
            raise AdvisoryUnavailableError(f"Recommender request failed: {exc}") from exc

        if not response.choices:
            raise AdvisoryUnavailableError("Recommender returned no choices")
        content = response.choices[0].message.content
        if not content or not content.strip():
            raise AdvisoryUnavailableError("Recommender returned empty content")
        return content.strip()

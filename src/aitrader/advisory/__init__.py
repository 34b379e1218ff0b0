"""AI advisory: recommender access and gating."""

from aitrader.advisory.gate import FALLBACK_EXPLANATION, AdvisoryGate, parse_action
from aitrader.advisory.models import Advisory, AdvisoryRequest, GateState
from aitrader.advisory.recommender import OpenAIRecommender, Recommender, build_prompt

__all__ = [
    "FALLBACK_EXPLANATION",
    "Advisory",
    "AdvisoryGate",
    "AdvisoryRequest",
    "GateState",
    "OpenAIRecommender",
    "Recommender",
    "build_prompt",
    "parse_action",
]

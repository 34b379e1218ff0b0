"""Trust-survey interruption policy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from aitrader.survey.statements import DETAILED_STATEMENTS, SCORE_MAX, SCORE_MIN


class SurveyMode(str, Enum):
    NONE = "none"
    SIMPLE = "simple"
    DETAILED = "detailed"


@dataclass(frozen=True)
class SurveyState:
    mode: SurveyMode
    trade_count: int
    simple_pending: bool
    detailed_pending: bool
    simple_score: Optional[int] = None
    responses: dict[int, int] = field(default_factory=dict)


@dataclass(frozen=True)
class SurveySubmission:
    mode: SurveyMode
    trade_count: int
    simple_score: Optional[int]
    responses: dict[int, int]
    complete: bool


def _check_score(score: int) -> int:
    score = int(score)
    if not SCORE_MIN <= score <= SCORE_MAX:
        raise ValueError(f"score must be between {SCORE_MIN} and {SCORE_MAX}, got {score}")
    return score


class SurveyPolicy:
    """
    Decides when trust surveys interrupt the session.

    Two independent flags: the simple survey is raised after every executed
    trade, the detailed survey whenever the cumulative trade count reaches a
    multiple of ``milestone_interval``. The survey is active while either flag
    is set; ``close_survey`` clears both.
    """

    def __init__(self, milestone_interval: int = 5) -> None:
        if milestone_interval <= 0:
            raise ValueError("milestone_interval must be positive")
        self.milestone_interval = milestone_interval
        self.trade_count = 0
        self.simple_pending = False
        self.detailed_pending = False
        self._simple_score: Optional[int] = None
        self._responses: dict[int, int] = {}

    @property
    def active(self) -> bool:
        return self.simple_pending or self.detailed_pending

    @property
    def mode(self) -> SurveyMode:
        if self.detailed_pending:
            return SurveyMode.DETAILED
        if self.simple_pending:
            return SurveyMode.SIMPLE
        return SurveyMode.NONE

    @property
    def state(self) -> SurveyState:
        return SurveyState(
            mode=self.mode,
            trade_count=self.trade_count,
            simple_pending=self.simple_pending,
            detailed_pending=self.detailed_pending,
            simple_score=self._simple_score,
            responses=dict(self._responses),
        )

    def record_trade(self) -> list[SurveyMode]:
        """Count an executed trade and return the survey modes it triggered."""
        self.trade_count += 1
        self.simple_pending = True
        triggered = [SurveyMode.SIMPLE]
        if self.trade_count % self.milestone_interval == 0:
            self.detailed_pending = True
            triggered.append(SurveyMode.DETAILED)
        return triggered

    def score_simple(self, score: int) -> None:
        if not self.simple_pending:
            raise ValueError("No simple survey pending")
        self._simple_score = _check_score(score)

    def score_statement(self, index: int, score: int) -> None:
        if not self.detailed_pending:
            raise ValueError("No detailed survey pending")
        if not 0 <= index < len(DETAILED_STATEMENTS):
            raise ValueError(f"Unknown statement index: {index}")
        self._responses[index] = _check_score(score)

    def close_survey(self) -> SurveySubmission:
        complete = self.detailed_pending and len(self._responses) == len(DETAILED_STATEMENTS)
        submission = SurveySubmission(
            mode=self.mode,
            trade_count=self.trade_count,
            simple_score=self._simple_score,
            # partial detailed answers are dropped
            responses=dict(self._responses) if complete else {},
            complete=complete,
        )
        self.simple_pending = False
        self.detailed_pending = False
        self._simple_score = None
        self._responses = {}
        return submission

"""Trust surveys."""

from aitrader.survey.policy import SurveyMode, SurveyPolicy, SurveyState, SurveySubmission
from aitrader.survey.statements import (
    DETAILED_PROMPT,
    DETAILED_STATEMENTS,
    SCORE_MAX,
    SCORE_MIN,
    SIMPLE_QUESTION,
    score_label,
)

__all__ = [
    "DETAILED_PROMPT",
    "DETAILED_STATEMENTS",
    "SCORE_MAX",
    "SCORE_MIN",
    "SIMPLE_QUESTION",
    "SurveyMode",
    "SurveyPolicy",
    "SurveyState",
    "SurveySubmission",
    "score_label",
]

"""Fixed trust-survey wording."""

SCORE_MIN = 1
SCORE_MAX = 7
SCORE_LABELS = {SCORE_MIN: "Not at all", SCORE_MAX: "Extremely"}

SIMPLE_QUESTION = "How much do you trust the AI-Trader Assistant?"

DETAILED_PROMPT = (
    "Based on the information you have so far received about the AI system "
    "(AI-Trader Assistant) and your last interactions, please rate each of the "
    "following statements:"
)

DETAILED_STATEMENTS: tuple[str, ...] = (
    "I am suspicious of the AI-system's intent, action or, outputs.",
    "I can trust the AI-system.",
    "The AI-system provides security.",
    "I am familiar with the AI-system.",
    "I am confident in the AI-system.",
    "The AI-system is deceptive.",
    "The AI-system behaves in an underhanded manner.",
    "I am wary of the AI-system.",
    "The AI-system's actions will have a harmful or injurious outcome.",
    "The AI-system has integrity.",
    "The AI-system is reliable.",
    "The AI-system is dependable.",
)


def score_label(score: int) -> str:
    return SCORE_LABELS.get(score, str(score))

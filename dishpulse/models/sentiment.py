"""
Sentiment data model.
"""

from dataclasses import dataclass

LABELS = ("positive", "neutral", "negative")


@dataclass(frozen=True)
class SentimentScore:
    """
    Raw output of a sentiment scorer for one text.
    comparative is score divided by the text's word count.
    """
    score: float
    comparative: float


@dataclass(frozen=True)
class SentimentResult:
    """
    Labelled sentiment for one text or a combination of texts.
    """
    score: float
    comparative: float
    label: str  # "positive", "neutral", or "negative"

    def __post_init__(self):
        if self.label not in LABELS:
            raise ValueError(
                f"Invalid label: {self.label}. Must be 'positive', 'neutral', or 'negative'"
            )

    @classmethod
    def neutral(cls) -> "SentimentResult":
        """The zero result used for empty input and scorer failures."""
        return cls(score=0.0, comparative=0.0, label="neutral")


# Design Rationale and Trade-offs:
#
# 1. Why a string label instead of an Enum?
#    - Serializes directly into the JSON response
#    - Validated against LABELS on construction
#    - Trade-off: Typos in comparisons are not caught statically

"""
Sentiment Agent.

Lexicon-based sentiment scoring and the combination of scores across
all discussion text associated with one establishment.
"""

import logging
import re
from typing import Dict, List, Optional

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from dishpulse.agents.protocols import SentimentScorer
from dishpulse.models.sentiment import SentimentResult, SentimentScore
import config.settings as settings

logger = logging.getLogger(__name__)

TOKEN_PATTERN = re.compile(r"[a-z0-9']+")


def classify_label(
    comparative: float,
    positive_threshold: float = settings.POSITIVE_THRESHOLD,
    negative_threshold: float = settings.NEGATIVE_THRESHOLD
) -> str:
    """
    Map a comparative score to a label.

    Thresholds are strict: a comparative exactly on a threshold is neutral.
    """
    if comparative > positive_threshold:
        return "positive"
    if comparative < negative_threshold:
        return "negative"
    return "neutral"


class LexiconSentimentScorer:
    """
    Word-valence scorer over the VADER lexicon.

    score is the sum of lexicon valences of the text's words,
    comparative is score divided by the number of words.

    Like the AFINN word-sum scorers, score is unbounded: it grows with
    the number of opinion words in the text. Only comparative is on a
    fixed per-word scale (the lexicon's -4..4 valence range).
    """

    def __init__(self, lexicon: Optional[Dict[str, float]] = None):
        """
        Initialize scorer.

        Args:
            lexicon: Word -> valence mapping (defaults to the VADER lexicon)
        """
        if lexicon is None:
            lexicon = SentimentIntensityAnalyzer().lexicon
        self.lexicon = lexicon

        logger.info(f"Initialized LexiconSentimentScorer with {len(self.lexicon)} words")

    def score(self, text: str) -> SentimentScore:
        tokens = TOKEN_PATTERN.findall(text.lower())
        if not tokens:
            return SentimentScore(score=0.0, comparative=0.0)

        total = sum(self.lexicon.get(token, 0.0) for token in tokens)
        return SentimentScore(score=total, comparative=total / len(tokens))


class SentimentCombiner:
    """
    Labels single texts and averages sentiment across many texts.

    A scorer failure on one text counts as a neutral zero for that text
    so one malformed text never poisons a combination.
    """

    def __init__(
        self,
        scorer: Optional[SentimentScorer] = None,
        positive_threshold: float = settings.POSITIVE_THRESHOLD,
        negative_threshold: float = settings.NEGATIVE_THRESHOLD
    ):
        """
        Initialize sentiment combiner.

        Args:
            scorer: Plain-text scorer (defaults to LexiconSentimentScorer)
            positive_threshold: Comparative above which a label is positive
            negative_threshold: Comparative below which a label is negative
        """
        self.scorer = scorer or LexiconSentimentScorer()
        self.positive_threshold = positive_threshold
        self.negative_threshold = negative_threshold

    def analyze(self, text: str) -> SentimentResult:
        """
        Score and label a single text.

        Args:
            text: Text to analyze

        Returns:
            SentimentResult (neutral zero if scoring fails)
        """
        raw = self._safe_score(text)
        return SentimentResult(
            score=raw.score,
            comparative=raw.comparative,
            label=self._label(raw.comparative)
        )

    def analyze_batch(self, texts: List[str]) -> List[SentimentResult]:
        """Analyze each text independently."""
        return [self.analyze(text) for text in texts]

    def combine(self, texts: List[str]) -> SentimentResult:
        """
        Average sentiment across texts.

        Args:
            texts: Texts about one establishment (blank ones are ignored)

        Returns:
            SentimentResult with score rounded to 2 and comparative to 4 places
        """
        non_blank = [text for text in texts if text and text.strip()]
        if not non_blank:
            return SentimentResult.neutral()

        scores = [self._safe_score(text) for text in non_blank]
        avg_score = sum(s.score for s in scores) / len(scores)
        avg_comparative = sum(s.comparative for s in scores) / len(scores)

        return SentimentResult(
            score=round(avg_score, 2),
            comparative=round(avg_comparative, 4),
            label=self._label(avg_comparative)
        )

    def _safe_score(self, text: str) -> SentimentScore:
        try:
            return self.scorer.score(text)
        except Exception as e:
            logger.warning(f"Sentiment analysis failed: {e}")
            return SentimentScore(score=0.0, comparative=0.0)

    def _label(self, comparative: float) -> str:
        return classify_label(comparative, self.positive_threshold, self.negative_threshold)


# Design Rationale and Trade-offs:
#
# 1. Why a word-sum lexicon scorer instead of VADER's compound score?
#    - comparative (score per word) makes short and long texts comparable
#    - Thresholds of +/-0.1 are calibrated for that scale
#    - Trade-off: No negation or intensifier handling
#
# 2. Why average per-text scores instead of scoring concatenated text?
#    - Each post or comment weighs the same regardless of length
#    - Trade-off: One short emphatic comment can swing a small sample
#
# 3. Why treat scorer failures as neutral zero?
#    - One bad text should not drop an establishment
#    - Trade-off: Failures pull the average toward neutral

"""
Mention Extraction Agent.

Finds candidate establishment names in post titles, post bodies and comments
using literal pattern matching (no NLP).
"""

import logging
import re
from typing import Dict, Iterable, List, Optional

from dishpulse.models.document import Comment, Post
from dishpulse.models.mention import Mention, SourceKind

logger = logging.getLogger(__name__)


# Establishment-type words that usually precede or contain a venue name
RESTAURANT_KEYWORDS = [
    "restaurant",
    "cafe",
    "diner",
    "bistro",
    "pizzeria",
    "sushi",
    "burger",
    "steakhouse",
    "kitchen",
    "grill",
    "bar and grill",
    "bbq",
    "barbecue",
    "taco",
    "noodles",
    "ramen",
    "pho",
    "bakery",
    "coffee",
    "burger joint",
    "food truck",
]

# Words whose presence makes bare capitalized phrases worth considering
FOOD_CONTEXT_WORDS = ("restaurant", "food", "eat")

QUOTED_PATTERN = re.compile(r"\"([^\"]+)\"|'([^']+)'")

CAPITALIZED_NAME_PATTERN = re.compile(r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\b")

# Keyword and "called" match in any case, the captured name must be capitalized
KEYWORD_PATTERN = re.compile(
    r"(?i:" + "|".join(re.escape(k) for k in RESTAURANT_KEYWORDS) + r")"
    r"\s+(?:(?i:called)\s+)?\"?([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\"?"
)

MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 99
MIN_BARE_NAME_LENGTH = 4
SNIPPET_RADIUS = 50


class MentionExtractor:
    """
    Extracts establishment mentions from a single piece of text.

    Runs three passes over the text, all writing into one insertion-ordered
    dict keyed by lower-cased name:
    1. Quoted spans ("Joe's Pizza", 'The Pasta House')
    2. Keyword followed by a capitalized name ("pizzeria called Lucali")
    3. Bare capitalized phrases, only when the text talks about food

    The first pass to find a name owns its stored casing and snippet.
    """

    def __init__(self, keywords: Optional[Iterable[str]] = None):
        """
        Initialize mention extractor.

        Args:
            keywords: Establishment-type words excluded from bare-name matches
                (defaults to RESTAURANT_KEYWORDS)
        """
        self.keywords = {k.lower() for k in (keywords or RESTAURANT_KEYWORDS)}

    def extract(self, text: str, source: SourceKind, source_id: str) -> List[Mention]:
        """
        Extract potential establishment mentions from text.

        Args:
            text: Text to scan (may be empty)
            source: Which document field the text came from
            source_id: ID of the post or comment

        Returns:
            One Mention per distinct (case-insensitive) name, in discovery order
        """
        if not text:
            return []

        mentions: Dict[str, Mention] = {}

        for match in QUOTED_PATTERN.finditer(text):
            name = (match.group(1) or match.group(2) or "").strip()
            if self._valid_length(name, MIN_NAME_LENGTH):
                self._record(mentions, name, match.start(), text, source, source_id)

        for match in KEYWORD_PATTERN.finditer(text):
            name = match.group(1).strip()
            if self._valid_length(name, MIN_NAME_LENGTH):
                self._record(mentions, name, match.start(), text, source, source_id)

        if self._has_food_context(text):
            for match in CAPITALIZED_NAME_PATTERN.finditer(text):
                name = match.group(1)
                if not self._valid_length(name, MIN_BARE_NAME_LENGTH):
                    continue
                if name.lower() in self.keywords:
                    continue
                # Bare phrases only fill gaps, they never bump existing names
                if name.lower() not in mentions:
                    self._record(mentions, name, match.start(1), text, source, source_id)

        logger.debug(f"Extracted {len(mentions)} mentions from {source.value} {source_id}")
        return list(mentions.values())

    def _record(
        self,
        mentions: Dict[str, Mention],
        name: str,
        position: int,
        text: str,
        source: SourceKind,
        source_id: str
    ) -> None:
        """Store a new name or bump the count of a known one."""
        key = name.lower()
        existing = mentions.get(key)
        if existing is not None:
            existing.mentions += 1
            return

        mentions[key] = Mention(
            name=name,
            source=source,
            source_id=source_id,
            snippet=_snippet(text, position),
            mentions=1
        )

    @staticmethod
    def _valid_length(name: str, min_length: int) -> bool:
        return min_length <= len(name) <= MAX_NAME_LENGTH

    @staticmethod
    def _has_food_context(text: str) -> bool:
        lowered = text.lower()
        return any(word in lowered for word in FOOD_CONTEXT_WORDS)


def _snippet(text: str, position: int) -> str:
    """Text within SNIPPET_RADIUS characters either side of position."""
    start = max(0, position - SNIPPET_RADIUS)
    end = min(len(text), position + SNIPPET_RADIUS)
    return text[start:end]


def extract_from_documents(
    posts: List[Post],
    comments: List[Comment],
    extractor: Optional[MentionExtractor] = None
) -> List[Mention]:
    """
    Extract mentions from every post title, post body and comment body.

    Args:
        posts: Posts returned by the content search
        comments: Comments returned by the content search
        extractor: Extractor to use (a default one if omitted)

    Returns:
        All per-document mentions, in document order
    """
    extractor = extractor or MentionExtractor()
    all_mentions: List[Mention] = []

    for post in posts:
        all_mentions.extend(extractor.extract(post.title, SourceKind.POST_TITLE, post.id))
        all_mentions.extend(extractor.extract(post.body, SourceKind.POST_BODY, post.id))

    for comment in comments:
        all_mentions.extend(extractor.extract(comment.body, SourceKind.COMMENT, comment.id))

    logger.info(
        f"Extracted {len(all_mentions)} mentions from "
        f"{len(posts)} posts and {len(comments)} comments"
    )
    return all_mentions


# Design Rationale and Trade-offs:
#
# 1. Why regex heuristics instead of an NER model?
#    - No model download, no GPU, deterministic output
#    - Restaurant names in discussions are usually quoted or follow a keyword
#    - Trade-off: False positives from capitalized phrases ("The Best Day")
#
# 2. Why does the capitalization pass only add new names?
#    - It is the noisiest pass
#    - Counting it would inflate names already found by stronger passes
#    - Trade-off: A name seen only by this pass always counts once per text
#
# 3. Why a 3..99 character bound?
#    - Drops initials and runaway quoted sentences
#    - Trade-off: Real two-letter names are lost

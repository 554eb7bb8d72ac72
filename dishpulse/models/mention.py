"""
Mention data model.

Represents establishment mentions found in a single document
and their aggregation across documents.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class SourceKind(str, Enum):
    """Which text field of a document a mention was found in."""
    POST_TITLE = "post_title"
    POST_BODY = "post_body"
    COMMENT = "comment"


@dataclass
class Mention:
    """
    One candidate establishment name located in one document.
    Output of MentionExtractor, consumed by MentionAggregator.
    """
    name: str  # Establishment name as first found in the text
    source: SourceKind
    source_id: str  # ID of the post or comment
    snippet: str  # Text surrounding the first match
    mentions: int = 1  # Occurrences within this document

    def __post_init__(self):
        if self.mentions < 1:
            raise ValueError(f"Invalid mention count: {self.mentions}. Must be >= 1")


@dataclass
class AggregatedEstablishment:
    """
    All mentions of one establishment across a search's documents.
    Keyed by lower-cased name; display casing is the first one seen.
    """
    name: str
    count: int
    sources: List[str] = field(default_factory=list)  # Unique, insertion-ordered


# Design Rationale and Trade-offs:
#
# 1. Why validate mentions >= 1 in __post_init__?
#    - A zero-count mention would create an establishment nobody mentioned
#    - Trade-off: Construction raises instead of clamping
#
# 2. Why is AggregatedEstablishment mutable?
#    - The aggregator bumps count and appends sources in place
#    - Trade-off: Callers must not share instances across searches

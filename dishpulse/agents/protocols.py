"""
Interfaces of the external capabilities the pipeline depends on.

The orchestrator only relies on these shapes, so tests and alternative
backends can be swapped in through constructor injection.
"""

from typing import List, Protocol

from dishpulse.models.document import SearchResults
from dishpulse.models.result import PlaceData
from dishpulse.models.sentiment import SentimentScore


class ContentSearchClient(Protocol):
    """Searches discussion channels for posts and comments."""

    def search(self, query: str, channels: List[str]) -> SearchResults:
        ...


class PlaceLookup(Protocol):
    """Resolves an establishment name to a display name and map URL."""

    def lookup(self, name: str, locality: str) -> PlaceData:
        ...


class SentimentScorer(Protocol):
    """Scores the sentiment of plain text."""

    def score(self, text: str) -> SentimentScore:
        ...


# Design Rationale and Trade-offs:
#
# 1. Why Protocols instead of abstract base classes?
#    - Test doubles (MagicMock, lambdas) satisfy them without inheritance
#    - Trade-off: Conformance is only checked by type checkers, not at run time

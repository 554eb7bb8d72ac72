"""
Search result data model.

Represents ranked establishments and the response cached per (city, query).
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional


@dataclass(frozen=True)
class PlaceData:
    """Map reference returned by the place-lookup client."""
    name: str  # Canonical display name
    url: str  # Always navigable, falls back to a generic search URL
    formatted_address: Optional[str] = None
    place_id: Optional[str] = None


@dataclass
class EstablishmentResult:
    """
    One ranked establishment in a search response.
    """
    name: str
    sentiment_score: float
    sentiment_label: str
    sentiment_comparative: float
    mention_count: int
    map_url: str
    sources: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "EstablishmentResult":
        """Create EstablishmentResult from JSON dict."""
        return cls(
            name=data["name"],
            sentiment_score=data.get("sentimentScore", 0.0),
            sentiment_label=data.get("sentimentLabel", "neutral"),
            sentiment_comparative=data.get("sentimentComparative", 0.0),
            mention_count=data.get("mentionCount", 0),
            map_url=data.get("mapUrl", ""),
            sources=list(data.get("sources", []))
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "name": self.name,
            "sentimentScore": self.sentiment_score,
            "sentimentLabel": self.sentiment_label,
            "sentimentComparative": self.sentiment_comparative,
            "mentionCount": self.mention_count,
            "mapUrl": self.map_url,
            "sources": list(self.sources)
        }


@dataclass
class SearchResponse:
    """
    Final output of a search, cached verbatim per (city, query).
    The cached flag is overridden on every retrieval.
    """
    query: str
    city: str
    restaurants: List[EstablishmentResult] = field(default_factory=list)
    total_results: int = 0
    cached: bool = False
    timestamp: int = 0  # Epoch milliseconds

    def copy(self) -> "SearchResponse":
        """Return a copy that shares no mutable state with this response."""
        return replace(
            self,
            restaurants=[replace(r, sources=list(r.sources)) for r in self.restaurants]
        )

    def as_cached(self) -> "SearchResponse":
        """Return a copy flagged as served from cache."""
        return replace(self.copy(), cached=True)

    @classmethod
    def empty(cls, query: str, city: str, timestamp: int) -> "SearchResponse":
        """Well-formed response with no results."""
        return cls(query=query, city=city, restaurants=[], total_results=0,
                   cached=False, timestamp=timestamp)

    @classmethod
    def from_dict(cls, data: dict) -> "SearchResponse":
        """Create SearchResponse from JSON dict."""
        restaurants = [
            EstablishmentResult.from_dict(item)
            for item in data.get("restaurants", [])
        ]
        return cls(
            query=data["query"],
            city=data["city"],
            restaurants=restaurants,
            total_results=data.get("totalResults", len(restaurants)),
            cached=data.get("cached", False),
            timestamp=data.get("timestamp", 0)
        )

    def to_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        return {
            "query": self.query,
            "city": self.city,
            "restaurants": [r.to_dict() for r in self.restaurants],
            "totalResults": self.total_results,
            "cached": self.cached,
            "timestamp": self.timestamp
        }


# Design Rationale and Trade-offs:
#
# 1. Why camelCase keys in to_dict?
#    - Matches the response shape web clients already consume
#    - Trade-off: Python attribute names differ from serialized names
#
# 2. Why copy establishments in copy() and as_cached()?
#    - The cached response must not change when a caller edits its copy
#    - Trade-off: Extra allocation on every cache hit

"""
Document data model.

Represents the posts and comments returned by the content-search client.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Post:
    """
    A Reddit submission.
    Title and body are mined separately for establishment mentions.
    """
    id: str
    title: str
    body: str  # selftext, empty for link posts
    channel: str  # subreddit the post was found in
    created_utc: float = 0.0
    url: str = ""


@dataclass(frozen=True)
class Comment:
    """A Reddit comment."""
    id: str
    body: str
    channel: str
    created_utc: float = 0.0
    score: int = 0


@dataclass
class SearchResults:
    """
    Output of a content search across several channels.
    Both lists may be empty.
    """
    posts: List[Post] = field(default_factory=list)
    comments: List[Comment] = field(default_factory=list)


# Design Rationale and Trade-offs:
#
# 1. Why frozen dataclasses?
#    - Documents are shared across enrichment threads
#    - Trade-off: Building a variant needs dataclasses.replace
#
# 2. Why empty-string defaults instead of Optional fields?
#    - Extraction and sentiment never need None checks
#    - Trade-off: Cannot tell an empty body from a missing one

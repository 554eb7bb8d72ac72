"""
Ingestion Agent.

Searches Reddit for posts and comments across a list of subreddits.
Supports both the real OAuth API and mock data for testing.
"""

import logging
import time
from typing import Any, Callable, List, Optional

import httpx

from dishpulse.models.document import Comment, Post, SearchResults

logger = logging.getLogger(__name__)

TOKEN_URL = "https://www.reddit.com/api/v1/access_token"
SEARCH_URL = "https://oauth.reddit.com/r/{channel}/search"


class RedditAPIError(RuntimeError):
    """Authentication or configuration failure of the Reddit client."""


class RedditSearchClient:
    """
    Fetches posts and comments from Reddit search.

    Uses application-only OAuth (client credentials). The access token is
    reused until it expires. A failing subreddit is logged and skipped so
    one bad channel never aborts the whole search.

    For testing/demo:
    - Set use_mock_data to generate synthetic discussions instead
    """

    def __init__(
        self,
        client_id: str = "",
        client_secret: str = "",
        user_agent: str = "RestaurantAggregator/1.0",
        search_limit: int = 25,
        timeout_seconds: float = 10,
        use_mock_data: bool = False,
        mock_posts_per_channel: int = 3,
        http_client: Optional[httpx.Client] = None,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize Reddit search client.

        Args:
            client_id: Reddit app client ID
            client_secret: Reddit app client secret
            user_agent: User-Agent header required by Reddit
            search_limit: Maximum results per subreddit
            timeout_seconds: Per-request timeout
            use_mock_data: If True, generate mock discussions instead of calling Reddit
            mock_posts_per_channel: Number of mock posts per subreddit
            http_client: HTTP client to use (one is created if omitted)
            clock: Time source for token expiry
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.user_agent = user_agent
        self.search_limit = search_limit
        self.use_mock_data = use_mock_data
        self.mock_posts_per_channel = mock_posts_per_channel
        self._http = http_client or httpx.Client(timeout=timeout_seconds)
        self._clock = clock

        self._token: Optional[str] = None
        self._token_expiry = 0.0

        if use_mock_data:
            logger.info("Initialized RedditSearchClient in MOCK mode")
        else:
            logger.info("Initialized RedditSearchClient in REAL mode")

    def search(self, query: str, channels: List[str]) -> SearchResults:
        """
        Search every channel for the query.

        Args:
            query: Search terms
            channels: Subreddit names (without the r/ prefix)

        Returns:
            SearchResults with posts and comments from all channels

        Raises:
            RedditAPIError: If credentials are missing or authentication fails
        """
        if self.use_mock_data:
            return self._generate_mock_results(query, channels)

        token = self._get_token()
        results = SearchResults()

        for channel in channels:
            try:
                response = self._http.get(
                    SEARCH_URL.format(channel=channel),
                    headers={
                        "Authorization": f"bearer {token}",
                        "User-Agent": self.user_agent
                    },
                    params={
                        "q": query,
                        "type": "link,comment",
                        "limit": self.search_limit,
                        "sort": "relevance"
                    }
                )
                response.raise_for_status()
                self._parse_listing(response.json(), results)
            except (httpx.HTTPError, ValueError) as e:
                logger.warning(f"Failed to search subreddit {channel}: {e}")
                continue

        logger.info(
            f"Fetched {len(results.posts)} posts and {len(results.comments)} comments "
            f"from {len(channels)} subreddits"
        )
        return results

    def close(self) -> None:
        self._http.close()

    def _get_token(self) -> str:
        """Return a valid access token, requesting a new one if needed."""
        now = self._clock()
        if self._token is not None and self._token_expiry > now:
            return self._token

        if not self.client_id or not self.client_secret:
            raise RedditAPIError("Reddit API credentials not configured")

        try:
            response = self._http.post(
                TOKEN_URL,
                auth=(self.client_id, self.client_secret),
                data={"grant_type": "client_credentials"},
                headers={"User-Agent": self.user_agent}
            )
            response.raise_for_status()
            data = response.json()
            self._token = data["access_token"]
            self._token_expiry = now + float(data.get("expires_in", 0))
        except (httpx.HTTPError, ValueError, KeyError) as e:
            raise RedditAPIError(f"Failed to authenticate with Reddit API: {e}") from e

        logger.debug("Obtained new Reddit access token")
        return self._token

    @staticmethod
    def _parse_listing(payload: Any, results: SearchResults) -> None:
        """
        Append t3 children as posts and t1 children as comments.

        Raises ValueError when the payload is not a listing object;
        malformed children are skipped.
        """
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected listing payload of type {type(payload).__name__}")

        listing = payload.get("data")
        children = listing.get("children") if isinstance(listing, dict) else None
        if not isinstance(children, list):
            children = []

        for child in children:
            if not isinstance(child, dict):
                continue
            data = child.get("data")
            if not isinstance(data, dict):
                data = {}
            kind = child.get("kind")
            if kind == "t3":
                results.posts.append(Post(
                    id=data.get("id", ""),
                    title=data.get("title") or "",
                    body=data.get("selftext") or "",
                    channel=data.get("subreddit") or "",
                    created_utc=data.get("created_utc") or 0.0,
                    url=data.get("url") or ""
                ))
            elif kind == "t1":
                results.comments.append(Comment(
                    id=data.get("id", ""),
                    body=data.get("body") or "",
                    channel=data.get("subreddit") or "",
                    created_utc=data.get("created_utc") or 0.0,
                    score=data.get("score") or 0
                ))

    def _generate_mock_results(self, query: str, channels: List[str]) -> SearchResults:
        """
        Generate synthetic discussions for testing.

        Creates realistic patterns:
        - Quoted names and "keyword called Name" phrasing
        - The same venue mentioned across channels (to test aggregation)
        - Mixed positive and negative opinions
        """
        topic = query.replace(" restaurant", "").strip() or "food"

        templates = [
            (
                f"Best {topic} in town?",
                f"Everyone keeps telling me to try \"Golden Fork\". Is the {topic} really that good?",
                "\"Golden Fork\" is amazing, the staff are lovely and the food is great."
            ),
            (
                f"Where to eat {topic} tonight",
                "I went to a bistro called Luna Verde last week and loved it.",
                "Luna Verde was terrible for me, cold food and rude service."
            ),
            (
                f"Underrated {topic} spots",
                f"The diner called Rusty Spoon has the best {topic}, honestly fantastic.",
                "Rusty Spoon is fine. Nothing special but decent prices."
            ),
            (
                f"Avoid this {topic} place",
                f"Had an awful meal at \"Blue Lantern\". Overpriced and bland.",
                "Agree about \"Blue Lantern\", disappointing every time."
            ),
        ]

        results = SearchResults()
        template_count = len(templates)

        for channel_idx, channel in enumerate(channels):
            for i in range(self.mock_posts_per_channel):
                title, body, comment_body = templates[(channel_idx + i) % template_count]
                results.posts.append(Post(
                    id=f"mock_{channel}_{i}",
                    title=title,
                    body=body,
                    channel=channel
                ))
                results.comments.append(Comment(
                    id=f"mock_{channel}_{i}_c",
                    body=comment_body,
                    channel=channel
                ))

        logger.info(
            f"Generated {len(results.posts)} mock posts and "
            f"{len(results.comments)} mock comments"
        )
        return results


# Design Rationale and Trade-offs:
#
# 1. Why application-only OAuth instead of a user login?
#    - Search is read-only public data
#    - No refresh tokens or user consent flow
#    - Trade-off: Lower rate limits than an authorized user app
#
# 2. Why skip a failing subreddit instead of failing the search?
#    - City subreddits often do not exist (404) or are private (403)
#    - Malformed listings are treated the same way
#    - Trade-off: A broken channel only shows up in the logs
#
# 3. Why support mock data?
#    - Demo and tests without Reddit credentials
#    - Trade-off: Mock text does not reflect real distribution

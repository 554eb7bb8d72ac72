"""
Search Orchestrator.

Coordinates one search: cache → content search → extraction →
aggregation → sentiment + map enrichment → ranking → cache.
"""

import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional

from dishpulse.agents.aggregation import MentionAggregator
from dishpulse.agents.extraction import MentionExtractor, extract_from_documents
from dishpulse.agents.protocols import ContentSearchClient, PlaceLookup
from dishpulse.agents.sentiment import SentimentCombiner
from dishpulse.models.document import SearchResults
from dishpulse.models.mention import AggregatedEstablishment
from dishpulse.models.result import EstablishmentResult, SearchResponse
from dishpulse.utils.cache import CacheService
import config.settings as settings

logger = logging.getLogger(__name__)


def get_target_channels(
    city: str,
    base_channels: Optional[List[str]] = None,
    fallback_channel: str = settings.FALLBACK_CHANNEL
) -> List[str]:
    """
    Subreddits to search for a city.

    Base food subreddits, then the city's own subreddit and its "<city>food"
    variant, then the generic fallback. Empty names are dropped and
    duplicates keep their first position.
    """
    base = settings.BASE_CHANNELS if base_channels is None else base_channels
    city_channel = re.sub(r"\s+", "", city.lower())
    candidates = list(base) + [city_channel, f"{city_channel}food", fallback_channel]

    channels: List[str] = []
    for channel in candidates:
        if channel and channel not in channels:
            channels.append(channel)
    return channels


class SearchOrchestrator:
    """
    Runs the search-and-rank pipeline for a (city, query) pair.

    Always returns a well-formed SearchResponse:
    - Content search failure → empty response (not cached)
    - Enrichment failure for one establishment → that one is dropped
    """

    def __init__(
        self,
        search_client: ContentSearchClient,
        place_client: PlaceLookup,
        cache: Optional[CacheService] = None,
        sentiment: Optional[SentimentCombiner] = None,
        extractor: Optional[MentionExtractor] = None,
        aggregator: Optional[MentionAggregator] = None,
        max_workers: int = settings.ENRICHMENT_MAX_WORKERS,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize search orchestrator.

        Args:
            search_client: Content-search client (posts and comments)
            place_client: Place-lookup client (display name and map URL)
            cache: Shared cache (a private one is created if omitted)
            sentiment: Sentiment combiner (lexicon-based by default)
            extractor: Mention extractor
            aggregator: Mention aggregator
            max_workers: Threads used for per-establishment enrichment
            clock: Time source in seconds for response timestamps
        """
        self.search_client = search_client
        self.place_client = place_client
        self.cache = cache or CacheService()
        self.sentiment = sentiment or SentimentCombiner()
        self.extractor = extractor or MentionExtractor()
        self.aggregator = aggregator or MentionAggregator()
        self.max_workers = max_workers
        self._clock = clock

        logger.info("Search orchestrator initialized")

    @staticmethod
    def cache_key(city: str, query: str) -> str:
        return f"search:{city.lower()}:{query.lower()}"

    def search_and_aggregate(self, city: str, query: str) -> SearchResponse:
        """
        Search, aggregate and rank establishments for a city and query.

        Args:
            city: City to search in
            query: Free-text search term (e.g. "pizza")

        Returns:
            SearchResponse, flagged cached=True when served from cache
        """
        cache_key = self.cache_key(city, query)

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info(f"Cache hit for city={city}, query={query}")
            return cached.as_cached()

        try:
            response = self._run_search(city, query)
        except Exception as e:
            logger.error(f"Search failed for city={city}, query={query}: {e}")
            return SearchResponse.empty(query, city, self._now_millis())

        self.cache.set(cache_key, response.copy())
        return response

    def _run_search(self, city: str, query: str) -> SearchResponse:
        """Uncached pipeline run; content-search errors propagate."""
        channels = get_target_channels(city)
        search_query = f"{query} {settings.SEARCH_SUFFIX}"

        logger.info(f"Searching {len(channels)} channels for '{search_query}'")
        documents = self.search_client.search(search_query, channels)

        mentions = extract_from_documents(documents.posts, documents.comments, self.extractor)
        aggregated = self.aggregator.aggregate(mentions)

        restaurants = self._enrich_all(city, list(aggregated.values()), documents)

        # Stable sort keeps aggregation order among exact ties
        restaurants.sort(key=lambda r: (-r.mention_count, -r.sentiment_score))

        logger.info(
            f"Search complete for city={city}, query={query}: "
            f"{len(restaurants)}/{len(aggregated)} establishments ranked"
        )

        return SearchResponse(
            query=query,
            city=city,
            restaurants=restaurants,
            total_results=len(restaurants),
            cached=False,
            timestamp=self._now_millis()
        )

    def _enrich_all(
        self,
        city: str,
        establishments: List[AggregatedEstablishment],
        documents: SearchResults
    ) -> List[EstablishmentResult]:
        """Enrich every establishment, dropping the ones that fail."""
        def enrich(establishment: AggregatedEstablishment) -> Optional[EstablishmentResult]:
            return self._enrich_one(city, establishment, documents)

        if self.max_workers > 1 and len(establishments) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                # map yields in input order regardless of completion order
                outcomes = list(executor.map(enrich, establishments))
        else:
            outcomes = [enrich(e) for e in establishments]

        return [result for result in outcomes if result is not None]

    def _enrich_one(
        self,
        city: str,
        establishment: AggregatedEstablishment,
        documents: SearchResults
    ) -> Optional[EstablishmentResult]:
        """Sentiment and map data for one establishment, or None on failure."""
        try:
            sources = set(establishment.sources)
            post_text = " ".join(
                f"{post.title} {post.body}"
                for post in documents.posts
                if post.id in sources
            )
            comment_texts = [
                comment.body
                for comment in documents.comments
                if comment.id in sources
            ]
            sentiment = self.sentiment.combine([post_text] + comment_texts)

            place = self.place_client.lookup(establishment.name, city)

            return EstablishmentResult(
                name=place.name,
                sentiment_score=sentiment.score,
                sentiment_label=sentiment.label,
                sentiment_comparative=sentiment.comparative,
                mention_count=establishment.count,
                map_url=place.url,
                sources=list(establishment.sources)
            )
        except Exception as e:
            logger.warning(f"Error processing restaurant {establishment.name}: {e}")
            return None

    def _now_millis(self) -> int:
        return int(self._clock() * 1000)

    def cache_summary(self) -> Dict[str, int]:
        stats = self.cache.stats()
        return {"keys": stats.keys, "hits": stats.hits, "misses": stats.misses}


# Design Rationale and Trade-offs:
#
# 1. Why a single attempt per search instead of retries?
#    - The Reddit client already skips failing subreddits
#    - A failed search is not cached, so the next call retries naturally
#    - Trade-off: Transient auth failures surface as an empty response
#
# 2. Why drop an establishment on enrichment failure instead of the whole search?
#    - Partial results are more useful than none
#    - Failures are logged with the establishment name
#    - Trade-off: A flaky place lookup can silently shrink the list
#
# 3. Why ThreadPoolExecutor.map for enrichment?
#    - Place lookups are network-bound and independent
#    - map() returns results in input order, so ranking stays deterministic
#    - Trade-off: One slow lookup holds back collection of later results
#
# 4. Why store a copy in the cache?
#    - Callers own the response they get back
#    - Trade-off: One extra copy of a small object per search

"""
DishPulse - Restaurant Buzz from Reddit

CLI entry point for running a restaurant search.
"""

import argparse
import logging
import sys

from dishpulse.agents.aggregation import ResultsExporter
from dishpulse.agents.ingestion import RedditSearchClient
from dishpulse.agents.places import PlaceLookupClient
from dishpulse.orchestrator import SearchOrchestrator
from dishpulse.utils.cache import RATE_LIMITED, CacheService
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler("dishpulse.log")
        ]
    )


def build_orchestrator(cache: CacheService) -> SearchOrchestrator:
    """Wire the real clients from settings."""
    search_client = RedditSearchClient(
        client_id=settings.REDDIT_CLIENT_ID,
        client_secret=settings.REDDIT_CLIENT_SECRET,
        user_agent=settings.REDDIT_USER_AGENT,
        search_limit=settings.REDDIT_SEARCH_LIMIT,
        timeout_seconds=settings.REDDIT_TIMEOUT_SECONDS,
        use_mock_data=settings.USE_MOCK_DATA,
        mock_posts_per_channel=settings.MOCK_POSTS_PER_CHANNEL
    )
    place_client = PlaceLookupClient(
        api_key=settings.GOOGLE_MAPS_API_KEY,
        timeout_seconds=settings.PLACES_TIMEOUT_SECONDS
    )
    return SearchOrchestrator(
        search_client=search_client,
        place_client=place_client,
        cache=cache
    )


def print_results(response) -> None:
    """Print a ranked summary table."""
    source = "cache" if response.cached else "live search"
    print(f"{response.total_results} restaurants for '{response.query}' in {response.city} ({source})")
    print("-" * 60)
    for rank, restaurant in enumerate(response.restaurants, start=1):
        print(
            f"{rank:>3}. {restaurant.name:<30} "
            f"mentions={restaurant.mention_count:<3} "
            f"{restaurant.sentiment_label:<8} ({restaurant.sentiment_score:+.2f})"
        )
        print(f"     {restaurant.map_url}")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="DishPulse - Restaurant recommendations mined from Reddit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Find pizza places in New York
  python main.py --city "New York" --query pizza

  # Run twice to see the second answer come from cache
  python main.py --city Chicago --query "deep dish" --repeat 2

  # Offline demo with synthetic discussions
  DISHPULSE_USE_MOCK_DATA=true python main.py --city Austin --query tacos

Note: Set REDDIT_CLIENT_ID and REDDIT_CLIENT_SECRET (and optionally
GOOGLE_MAPS_API_KEY) environment variables before running.
        """
    )

    parser.add_argument(
        "--city",
        required=True,
        help="City to search in (e.g., \"New York\")"
    )

    parser.add_argument(
        "--query",
        required=True,
        help="What to look for (e.g., pizza, sushi)"
    )

    parser.add_argument(
        "--output-dir",
        default=str(settings.OUTPUT_ROOT),
        help=f"Directory for CSV results (default: {settings.OUTPUT_ROOT})"
    )

    parser.add_argument(
        "--repeat",
        type=int,
        default=1,
        help="Run the same search N times (default: 1)"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    args = parser.parse_args()

    city = args.city.strip()
    query = args.query.strip()
    if not city or not query:
        parser.error("--city and --query cannot be empty")

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    if not settings.USE_MOCK_DATA and not (settings.REDDIT_CLIENT_ID and settings.REDDIT_CLIENT_SECRET):
        logger.warning(
            "Reddit credentials not set; searches will return no results. "
            "Set DISHPULSE_USE_MOCK_DATA=true for an offline demo."
        )

    print("=" * 60)
    print("DishPulse - Restaurant Buzz from Reddit")
    print("=" * 60)
    print(f"City: {city}")
    print(f"Query: {query}")
    print(f"Mock Data: {settings.USE_MOCK_DATA}")
    print("=" * 60)
    print()

    try:
        cache = CacheService()
        orchestrator = build_orchestrator(cache)
        exporter = ResultsExporter()

        response = None
        for _ in range(max(1, args.repeat)):
            response = cache.with_rate_limit(
                "cli",
                lambda: orchestrator.search_and_aggregate(city, query)
            )
            if response is RATE_LIMITED:
                print("⚠️  Rate limit reached, try again in a minute")
                sys.exit(1)
            print_results(response)
            print()

        output_path = exporter.export(response, args.output_dir)

        print("=" * 60)
        print("✅ Search completed successfully!")
        print("=" * 60)
        print(f"Results: {output_path}")
        print(f"Cache: {orchestrator.cache_summary()}")
        print("=" * 60)

        logger.info("DishPulse completed successfully")
        sys.exit(0)

    except KeyboardInterrupt:
        logger.warning("Search interrupted by user")
        print("\n⚠️  Search interrupted")
        sys.exit(1)

    except Exception as e:
        logger.error(f"Search failed: {e}", exc_info=True)
        print(f"\n❌ Search failed: {e}")
        print("Check dishpulse.log for details")
        sys.exit(1)


if __name__ == "__main__":
    main()


# Design Rationale and Trade-offs:
#
# 1. Why warn on missing Reddit credentials instead of exiting?
#    - Mock mode needs no credentials at all
#    - A real search without them fails inside the orchestrator and
#      returns an empty response, which is still exported
#    - Trade-off: An empty CSV is easy to miss, so the warning is logged first
#
# 2. Why route the CLI through CacheService.with_rate_limit?
#    - Same admission path any other front end would use
#    - --repeat exercises both the cache and the limiter
#    - Trade-off: Limiter state lives in the process, so separate CLI runs
#      never share a window
#
# 3. Why export only the last response when --repeat is used?
#    - Repeats return the same establishments from cache
#    - Trade-off: The CSV metadata shows cached=true after a repeat

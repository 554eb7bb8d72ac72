"""
Configuration settings for DishPulse.

Centralized configuration for the search pipeline, its clients and the cache.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
OUTPUT_ROOT = PROJECT_ROOT / "output"

# Reddit API (application-only OAuth)
REDDIT_CLIENT_ID = os.getenv("REDDIT_CLIENT_ID", "")
REDDIT_CLIENT_SECRET = os.getenv("REDDIT_CLIENT_SECRET", "")
REDDIT_USER_AGENT = os.getenv("REDDIT_USER_AGENT", "RestaurantAggregator/1.0")
REDDIT_SEARCH_LIMIT = 25  # Results per subreddit
REDDIT_TIMEOUT_SECONDS = 10

# Google Maps Places API
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")
PLACES_TIMEOUT_SECONDS = 5

# Cache and throttling
CACHE_TTL_SECONDS = int(os.getenv("DISHPULSE_CACHE_TTL_SECONDS", "3600"))
RATE_LIMIT_MAX_REQUESTS = 30  # Per identity, per window
RATE_LIMIT_WINDOW_SECONDS = 60

# Channel selection
BASE_CHANNELS = ["food", "restaurants", "foodit", "eatingout"]
FALLBACK_CHANNEL = "AskReddit"
SEARCH_SUFFIX = "restaurant"  # Appended to every user query

# Sentiment label thresholds (strict inequalities)
POSITIVE_THRESHOLD = 0.1
NEGATIVE_THRESHOLD = -0.1

# Per-establishment enrichment
ENRICHMENT_MAX_WORKERS = 4

# Ingestion
USE_MOCK_DATA = os.getenv("DISHPULSE_USE_MOCK_DATA", "false").lower() in ("1", "true", "yes")
MOCK_POSTS_PER_CHANNEL = 3

# Logging
LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# Design Rationale and Trade-offs:
#
# 1. Why environment variables for Reddit and Maps credentials?
#    - Secrets stay out of the repo
#    - Different apps for dev/prod without code changes
#    - Trade-off: Missing variables only show up at run time (main.py warns)
#
# 2. Why module-level constants instead of a settings object?
#    - Single source of truth, imported as `settings`
#    - Components still take explicit constructor arguments, so tests
#      never patch this module
#    - Trade-off: Changing a value needs a restart
#
# 3. Why a 30 requests / 60 seconds rate limit?
#    - Keeps bursts well under the Reddit per-client quota
#    - Trade-off: Conservative for cached traffic, which never reaches Reddit

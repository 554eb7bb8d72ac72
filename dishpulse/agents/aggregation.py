"""
Mention Aggregator and Results Exporter.

Merges per-document mentions into one record per establishment and
writes ranked search results to CSV.
"""

import json
import logging
import os
import re
from datetime import datetime, timezone
from typing import Dict, List

import pandas as pd

from dishpulse.models.mention import AggregatedEstablishment, Mention
from dishpulse.models.result import SearchResponse

logger = logging.getLogger(__name__)

RESULT_COLUMNS = [
    "Rank", "Name", "Mentions", "Sentiment", "Label", "Comparative", "Map URL", "Sources"
]


class MentionAggregator:
    """
    Deduplicates mentions by case-insensitive name.
    """

    def aggregate(self, mentions: List[Mention]) -> Dict[str, AggregatedEstablishment]:
        """
        Merge mentions into one record per establishment.

        Args:
            mentions: Per-document mentions, in extraction order

        Returns:
            Dict keyed by lower-cased name, in first-seen order
        """
        aggregated: Dict[str, AggregatedEstablishment] = {}

        for mention in mentions:
            key = mention.name.lower()
            existing = aggregated.get(key)
            if existing is None:
                aggregated[key] = AggregatedEstablishment(
                    name=mention.name,
                    count=mention.mentions,
                    sources=[mention.source_id]
                )
                continue

            existing.count += mention.mentions
            if mention.source_id not in existing.sources:
                existing.sources.append(mention.source_id)

        logger.info(
            f"Aggregated {len(mentions)} mentions into {len(aggregated)} establishments"
        )
        return aggregated


class ResultsExporter:
    """
    Writes a search response as a ranked CSV table plus metadata JSON.
    """

    def export(self, response: SearchResponse, output_dir: str = "output") -> str:
        """
        Export ranked establishments for one search.

        Args:
            response: Search response to export
            output_dir: Directory to save CSV output

        Returns:
            Path to generated CSV file
        """
        rows = []
        for rank, restaurant in enumerate(response.restaurants, start=1):
            rows.append({
                "Rank": rank,
                "Name": restaurant.name,
                "Mentions": restaurant.mention_count,
                "Sentiment": restaurant.sentiment_score,
                "Label": restaurant.sentiment_label,
                "Comparative": restaurant.sentiment_comparative,
                "Map URL": restaurant.map_url,
                "Sources": ";".join(restaurant.sources)
            })

        df = pd.DataFrame(rows, columns=RESULT_COLUMNS)
        if df.empty:
            logger.warning("No establishments found, creating empty results table")

        os.makedirs(output_dir, exist_ok=True)
        stem = f"results_{_slug(response.city)}_{_slug(response.query)}"
        output_path = os.path.join(output_dir, f"{stem}.csv")
        df.to_csv(output_path, index=False)

        logger.info(f"Results saved to {output_path} ({len(df)} establishments)")

        metadata_path = os.path.join(output_dir, f"{stem}_metadata.json")
        metadata = {
            "query": response.query,
            "city": response.city,
            "total_results": response.total_results,
            "cached": response.cached,
            "timestamp": response.timestamp,
            "generated_at": datetime.now(timezone.utc).isoformat()
        }
        with open(metadata_path, "w") as f:
            json.dump(metadata, f, indent=2)

        logger.info(f"Metadata saved to {metadata_path}")

        return output_path


def _slug(value: str) -> str:
    """Lower-case filesystem-safe form of a city or query."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "blank"


# Design Rationale and Trade-offs:
#
# 1. Why key by lower-cased name?
#    - "Joe's Pizza" and "joe's pizza" are the same place
#    - First spelling seen is kept for display
#    - Trade-off: Near-duplicates ("Joes Pizza") stay separate
#
# 2. Why keep MentionAggregator and ResultsExporter in one module?
#    - Both turn pipeline output into a final shape
#    - Trade-off: The exporter pulls in pandas for callers that only aggregate
#
# 3. Why CSV plus a metadata JSON?
#    - CSV opens directly in spreadsheets
#    - Metadata records whether the answer came from cache
#    - Trade-off: Two files per search instead of one

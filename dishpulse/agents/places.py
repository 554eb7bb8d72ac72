"""
Place Lookup Agent.

Resolves establishment names to Google Maps links via the Places
Text Search API, falling back to a generic Maps search URL.
"""

import logging
from typing import List, Optional
from urllib.parse import quote

import httpx

from dishpulse.models.result import PlaceData

logger = logging.getLogger(__name__)

TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
MAPS_SEARCH_URL = "https://www.google.com/maps/search/"


def fallback_map_url(name: str, locality: str) -> str:
    """Generic Maps search URL for "name locality"."""
    return MAPS_SEARCH_URL + quote(f"{name} {locality}", safe="")


class PlaceLookupClient:
    """
    Looks up an establishment on Google Maps.

    Always returns a usable URL: without an API key, on request failure,
    or when nothing matches, the URL is a plain Maps search.
    """

    def __init__(
        self,
        api_key: str = "",
        timeout_seconds: float = 5,
        http_client: Optional[httpx.Client] = None
    ):
        """
        Initialize place lookup client.

        Args:
            api_key: Google Maps API key (lookups fall back without one)
            timeout_seconds: Per-request timeout
            http_client: HTTP client to use (one is created if omitted)
        """
        self.api_key = api_key
        self._http = http_client or httpx.Client(timeout=timeout_seconds)

        if not api_key:
            logger.warning("Google Maps API key not configured, map links will be generic searches")

    def lookup(self, name: str, locality: str) -> PlaceData:
        """
        Resolve a name within a locality.

        Args:
            name: Establishment name as mentioned
            locality: City used to disambiguate

        Returns:
            PlaceData with the canonical name and a map URL
        """
        fallback = PlaceData(name=name, url=fallback_map_url(name, locality))
        if not self.api_key:
            return fallback

        try:
            response = self._http.get(
                TEXT_SEARCH_URL,
                params={"query": f"{name} restaurant {locality}", "key": self.api_key}
            )
            response.raise_for_status()
            places = response.json().get("results") or []
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Failed to enrich restaurant {name} with Google Maps data: {e}")
            return fallback

        if not places:
            logger.debug(f"No Places match for {name} in {locality}")
            return fallback

        place = places[0]
        display_name = place.get("name") or name
        place_id = place.get("place_id")
        url = f"{MAPS_SEARCH_URL}?api=1&query={quote(display_name, safe='')}"
        if place_id:
            url += f"&query_place_id={place_id}"

        return PlaceData(
            name=display_name,
            url=url,
            formatted_address=place.get("formatted_address"),
            place_id=place_id
        )

    def lookup_batch(self, names: List[str], locality: str) -> List[PlaceData]:
        """Look up several names in the same locality, preserving order."""
        return [self.lookup(name, locality) for name in names]

    def close(self) -> None:
        self._http.close()


# Design Rationale and Trade-offs:
#
# 1. Why always return a URL, even without an API key?
#    - Every establishment result carries a working map link
#    - The generic search URL needs no key
#    - Trade-off: Fallback links are less precise than place IDs
#
# 2. Why take only the first Places result?
#    - Text search ranks by relevance to "<name> restaurant <city>"
#    - Trade-off: Chains may resolve to the wrong branch

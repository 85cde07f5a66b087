# wanderlust/services/wikipedia.py
# Encyclopedia lookup used when the user arrives at a place or asks about it.

import httpx
import logging
from typing import Optional

from wanderlust.core.config import settings
from wanderlust.models.dto import PointOfInterest

logger = logging.getLogger(__name__)


class EncyclopediaError(RuntimeError):
    """Wikipedia could not be reached or answered with an error."""


class WikipediaService:
    """Looks up the Wikipedia article nearest to a coordinate."""

    def __init__(
        self,
        api_url: str = settings.WIKIPEDIA_API_URL,
        search_radius: int = settings.WIKIPEDIA_SEARCH_RADIUS_M,
        timeout: float = settings.WIKIPEDIA_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.search_radius = search_radius
        self.timeout = timeout
        self._transport = transport

    async def lookup(self, latitude: float, longitude: float) -> Optional[str]:
        """
        Return the intro extract of the closest article, None when no article
        is nearby, or "" when the article has an empty intro.

        Raises:
            EncyclopediaError: on timeouts, transport or HTTP errors, or an
                unreadable response.
        """
        headers = {"User-Agent": settings.HTTP_USER_AGENT}
        search_params = {
            "action": "query",
            "list": "geosearch",
            "gscoord": f"{latitude}|{longitude}",
            "gsradius": self.search_radius,
            "gslimit": 1,
            "format": "json",
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, headers=headers, transport=self._transport
            ) as client:
                response = await client.get(self.api_url, params=search_params)
                response.raise_for_status()
                hits = response.json().get("query", {}).get("geosearch") or []
                if not hits:
                    return None

                page_id = hits[0]["pageid"]
                extract_params = {
                    "action": "query",
                    "prop": "extracts",
                    "exintro": 1,
                    "explaintext": 1,
                    "pageids": page_id,
                    "format": "json",
                }
                response = await client.get(self.api_url, params=extract_params)
                response.raise_for_status()
                page = response.json().get("query", {}).get("pages", {}).get(str(page_id), {})
        except httpx.HTTPError as e:
            raise EncyclopediaError(f"Wikipedia request failed: {e}") from e
        except (ValueError, KeyError, AttributeError) as e:
            raise EncyclopediaError(f"Unexpected Wikipedia response: {e}") from e

        extract = page.get("extract") if isinstance(page, dict) else None
        # An article was found; "" tells callers its intro is empty
        return (extract or "").strip()

    async def describe(self, poi: PointOfInterest) -> str:
        """Wikipedia extract for the POI, or a short generic description."""
        try:
            extract = await self.lookup(poi.latitude, poi.longitude)
        except EncyclopediaError as e:
            logger.error(f"Error fetching Wikipedia info for {poi.name}: {e}")
            return (
                f"{poi.name} is a {poi.type} located about {poi.distance}m from your current position. "
                f"I couldn't retrieve additional information due to an error."
            )

        if extract is None:
            return (
                f"I couldn't find specific information about {poi.name} on Wikipedia. "
                f"This place appears to be a {poi.type} located about {poi.distance}m from your current position."
            )
        if not extract:
            return (
                f"{poi.name} is a {poi.type} located about {poi.distance}m from your current position, "
                f"but I couldn't find detailed information about it."
            )
        return extract

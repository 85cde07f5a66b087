# wanderlust/services/overpass.py
# Geospatial query provider backed by the OpenStreetMap Overpass API.

import httpx
import logging
from typing import List, Optional, Protocol, Sequence, Tuple

from pydantic import ValidationError

from wanderlust.core.config import settings
from wanderlust.models.dto import Location, RawGeoElement

logger = logging.getLogger(__name__)

# (tag key, value regex); a None regex matches any value
TagFilter = Tuple[str, Optional[str]]

DEFAULT_TAG_FILTERS: Tuple[TagFilter, ...] = (
    ("historic", None),
    ("tourism", "museum|attraction|viewpoint|gallery|zoo"),
)

OSM_ELEMENT_TYPES = ("node", "way", "relation")


class GeoProviderError(RuntimeError):
    """The geospatial provider could not answer the query."""


class GeoQueryProvider(Protocol):
    async def query(
        self, location: Location, radius: int, tag_filters: Sequence[TagFilter]
    ) -> List[RawGeoElement]: ...


def build_overpass_query(location: Location, radius: int, tag_filters: Sequence[TagFilter]) -> str:
    """Overpass QL union over nodes, ways and relations, with way/relation centers."""
    around = f"(around:{radius},{location.latitude},{location.longitude})"
    statements = []
    for key, pattern in tag_filters:
        selector = f'["{key}"~"{pattern}"]' if pattern else f'["{key}"]'
        for element_type in OSM_ELEMENT_TYPES:
            statements.append(f"  {element_type}{selector}{around};")
    body = "\n".join(statements)
    return f"[out:json];\n(\n{body}\n);\nout body center;"


class OverpassProvider:
    """Runs tag-filtered radius queries against an Overpass interpreter."""

    def __init__(
        self,
        api_url: str = settings.OVERPASS_API_URL,
        timeout: float = settings.OVERPASS_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport

    async def query(
        self,
        location: Location,
        radius: int,
        tag_filters: Sequence[TagFilter] = DEFAULT_TAG_FILTERS,
    ) -> List[RawGeoElement]:
        overpass_query = build_overpass_query(location, radius, tag_filters)
        headers = {"User-Agent": settings.HTTP_USER_AGENT}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.api_url, data={"data": overpass_query}, headers=headers)
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise GeoProviderError(f"Overpass query timed out at radius {radius}m") from e
        except httpx.HTTPStatusError as e:
            raise GeoProviderError(
                f"Overpass API returned status {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise GeoProviderError(f"Overpass request failed: {e}") from e
        except ValueError as e:
            raise GeoProviderError("Overpass API returned invalid JSON") from e

        if not isinstance(data, dict) or not isinstance(data.get("elements"), list):
            raise GeoProviderError("Overpass response has no 'elements' list")

        elements: List[RawGeoElement] = []
        for raw in data["elements"]:
            try:
                elements.append(RawGeoElement.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed Overpass element: {e.error_count()} validation errors")

        logger.info(f"Overpass returned {len(elements)} elements within {radius}m")
        return elements

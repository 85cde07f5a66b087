# wanderlust/services/discovery.py
# Radius-expanding POI discovery around a location.

from typing import List, Optional, Sequence

import structlog

from wanderlust.core.config import settings
from wanderlust.models.dto import Location, PointOfInterest
from wanderlust.services.overpass import DEFAULT_TAG_FILTERS, GeoQueryProvider, TagFilter
from wanderlust.services.poi_classifier import classify_and_filter

logger = structlog.get_logger(__name__)


def radius_sequence(initial: int, step: int, maximum: int) -> List[int]:
    """All radii to try, from `initial` up to and including `maximum`."""
    if step <= 0:
        raise ValueError("radius step must be positive")
    return list(range(initial, maximum + 1, step))


class DiscoveryEngine:
    """
    Queries the geospatial provider with a growing radius until the filtered
    result is non-empty or the ceiling is reached.

    Provider failures never escape: they count as an empty result for that
    radius. An empty list means nothing usable was found nearby.
    """

    def __init__(
        self,
        provider: GeoQueryProvider,
        radius_step: int = settings.DISCOVERY_RADIUS_STEP_M,
        max_radius: int = settings.DISCOVERY_MAX_RADIUS_M,
        max_results: int = settings.MAX_DISCOVERED_POIS,
        tag_filters: Sequence[TagFilter] = DEFAULT_TAG_FILTERS,
    ):
        self.provider = provider
        self.radius_step = radius_step
        self.max_radius = max_radius
        self.max_results = max_results
        self.tag_filters = tuple(tag_filters)

    async def discover(
        self, location: Location, initial_radius: Optional[int] = None
    ) -> List[PointOfInterest]:
        if initial_radius is None:
            initial_radius = settings.DISCOVERY_INITIAL_RADIUS_M

        pois: List[PointOfInterest] = []
        for radius in radius_sequence(initial_radius, self.radius_step, self.max_radius):
            logger.info("poi_search", radius_m=radius)
            try:
                elements = await self.provider.query(location, radius, self.tag_filters)
            except Exception as e:
                logger.warning("poi_search_failed", radius_m=radius, error=str(e))
                pois = []
                continue

            pois = classify_and_filter(elements, location, limit=self.max_results)
            if pois:
                logger.info("poi_search_hit", radius_m=radius, count=len(pois))
                return pois

            logger.info("poi_search_empty", radius_m=radius)

        logger.info("poi_search_exhausted", max_radius_m=self.max_radius)
        return pois

# wanderlust/services/poi_classifier.py
# Turns raw geospatial elements into ranked, filtered POIs.

import logging
import re
from typing import Iterable, List, Mapping, Optional, Set, Tuple

from wanderlust.core.config import settings
from wanderlust.models.dto import Location, PointOfInterest, RawGeoElement
from wanderlust.utils.haversine import haversine

logger = logging.getLogger(__name__)

# First non-empty tag in this order decides the category
CATEGORY_TAG_PRIORITY = (
    "shop",
    "tourism",
    "amenity",
    "historic",
    "leisure",
    "natural",
    "man_made",
    "memorial",
)

UNKNOWN_TYPE = "unknown"

# Street furniture, utilities and plain housing
EXCLUDED_TYPES = frozenset({
    "traffic_signals",
    "crossing",
    "street_lamp",
    "tree",
    "waste_basket",
    "post_box",
    "bollard",
    "bench",
    "recycling",
    "bicycle_parking",
    "surveillance",
    "parking",
    "parking_entrance",
    "parking_space",
    "car_sharing",
    "bus_stop",
    "restaurant",
    "fast_food",
    "house",
    "residential",
})

# Amenities worth suggesting as a destination
VALUABLE_AMENITIES = frozenset({
    "cafe",
    "pub",
    "bar",
    "tourist_attraction",
    "poi",
    "poi_category",
    "monument",
    "historic",
    "park",
    "church",
    "place_of_worship",
    "cinema",
    "theatre",
    "museum",
    "library",
    "marketplace",
    "arts_centre",
    "fountain",
    "nightclub",
    "gallery",
})

RESIDENTIAL_BUILDINGS = frozenset({"house", "residential"})

_DIGITS = re.compile(r"[0-9]")


def classify(tags: Mapping[str, Optional[str]]) -> Tuple[Optional[str], str]:
    """Return (tag key, category) for the highest-priority non-empty tag."""
    for key in CATEGORY_TAG_PRIORITY:
        value = tags.get(key)
        if value and value.strip():
            return key, value
    return None, UNKNOWN_TYPE


def _is_residential(element: RawGeoElement) -> bool:
    return element.building in RESIDENTIAL_BUILDINGS or element.residential == "yes"


def _rejects_amenity(category_key: Optional[str], poi_type: str, strict: bool) -> bool:
    if strict:
        return category_key == "amenity" and poi_type not in VALUABLE_AMENITIES
    # Legacy rule: compares the generic bucket name, so only a literal
    # "amenity" category is ever affected.
    return poi_type == "amenity" and poi_type not in VALUABLE_AMENITIES


def _has_meaningful_name(name: str) -> bool:
    return len(_DIGITS.sub("", name).strip()) > 2


def rejection_reason(
    poi: PointOfInterest,
    element: RawGeoElement,
    category_key: Optional[str],
    strict_amenities: bool = True,
) -> Optional[str]:
    """Name of the first filter rule rejecting the candidate, or None."""
    if not poi.name or not poi.name.strip():
        return "unnamed"
    if poi.type in EXCLUDED_TYPES:
        return "excluded_type"
    if _is_residential(element):
        return "residential"
    if _rejects_amenity(category_key, poi.type, strict_amenities):
        return "low_value_amenity"
    if not _has_meaningful_name(poi.name):
        return "placeholder_name"
    return None


def to_poi(element: RawGeoElement, origin: Location) -> Optional[Tuple[PointOfInterest, Optional[str]]]:
    """Build a POI from a raw element; None when it has no usable coordinates."""
    coords = element.coordinates()
    if coords is None:
        logger.warning(f"Element {element.identity} has no coordinates, skipping")
        return None

    lat, lon = coords
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        logger.warning(f"Element {element.identity} has out-of-range coordinates ({lat}, {lon}), skipping")
        return None

    distance = round(haversine(origin.latitude, origin.longitude, lat, lon))
    category_key, poi_type = classify(element.tags)
    # A blank name tag is kept so the unnamed rule rejects it
    name = element.name or element.operator or f"{poi_type} at {distance}m"

    poi = PointOfInterest(
        id=element.identity,
        name=name,
        type=poi_type,
        latitude=lat,
        longitude=lon,
        distance=distance,
    )
    return poi, category_key


def classify_and_filter(
    elements: Iterable[RawGeoElement],
    origin: Location,
    limit: Optional[int] = None,
    strict_amenities: Optional[bool] = None,
) -> List[PointOfInterest]:
    """Classify, filter and rank raw elements around `origin`.

    Returns at most `limit` POIs sorted by ascending distance.
    """
    if limit is None:
        limit = settings.MAX_DISCOVERED_POIS
    if strict_amenities is None:
        strict_amenities = settings.STRICT_AMENITY_FILTER

    seen: Set[str] = set()
    kept: List[PointOfInterest] = []
    rejected = 0

    for element in elements:
        if element.identity in seen:
            continue
        seen.add(element.identity)

        built = to_poi(element, origin)
        if built is None:
            continue
        poi, category_key = built

        reason = rejection_reason(poi, element, category_key, strict_amenities)
        if reason:
            rejected += 1
            logger.debug(f"Rejected {poi.id} ({poi.name!r}, {poi.type}): {reason}")
            continue
        kept.append(poi)

    kept.sort(key=lambda p: p.distance or 0)
    if rejected:
        logger.info(f"Filtered out {rejected} elements, {len(kept)} candidates remain.")
    return kept[:limit]

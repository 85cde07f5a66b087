from typing import List, Optional, Sequence, Union

import pytest

from wanderlust.models.dto import Location, PointOfInterest, RawGeoElement

# Grote Markt, Antwerp
ORIGIN = Location(latitude=51.2213, longitude=4.3997)


class FakeReasoningService:
    """Replays canned replies; an Exception instance is raised instead of returned."""

    def __init__(self, *replies: Union[str, Exception]):
        self.replies = list(replies)
        self.prompts: List[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.replies:
            raise RuntimeError("no reply scripted")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeGeoProvider:
    """Returns one scripted batch per call and records the radii asked for."""

    def __init__(self, *batches: Union[Sequence[RawGeoElement], Exception]):
        self.batches = list(batches)
        self.radii: List[int] = []

    async def query(self, location, radius, tag_filters):
        self.radii.append(radius)
        if not self.batches:
            return []
        batch = self.batches.pop(0)
        if isinstance(batch, Exception):
            raise batch
        return list(batch)


def make_element(
    element_id: int,
    lat: Optional[float] = None,
    lon: Optional[float] = None,
    element_type: str = "node",
    center: Optional[dict] = None,
    **tags: str,
) -> RawGeoElement:
    data = {"id": element_id, "type": element_type, "tags": tags}
    if lat is not None:
        data["lat"] = lat
    if lon is not None:
        data["lon"] = lon
    if center is not None:
        data["center"] = center
    return RawGeoElement.model_validate(data)


def north_of(origin: Location, meters: float) -> dict:
    """Coordinates roughly `meters` due north of `origin`."""
    return {"lat": origin.latitude + meters / 111_195.0, "lon": origin.longitude}


def make_poi(index: int, distance: int, poi_type: str = "museum") -> PointOfInterest:
    return PointOfInterest(
        id=f"node/{index}",
        name=f"Place {chr(ord('A') + index)}",
        type=poi_type,
        latitude=51.0 + index / 1000,
        longitude=4.0,
        distance=distance,
    )


@pytest.fixture
def origin() -> Location:
    return ORIGIN


@pytest.fixture
def five_pois() -> List[PointOfInterest]:
    return [make_poi(i, d) for i, d in enumerate([50, 80, 120, 300, 900])]


@pytest.fixture
def ten_pois() -> List[PointOfInterest]:
    return [make_poi(i, 100 * (i + 1)) for i in range(10)]

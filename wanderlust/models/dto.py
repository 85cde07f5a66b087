from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Dict, List, Literal, Optional, Tuple

# --- Core Value Objects ---

class Location(BaseModel):
    """A WGS84 coordinate in decimal degrees."""
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees.")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees.")

# --- External Geospatial Records ---

class GeoCenter(BaseModel):
    lat: float
    lon: float

class RawGeoElement(BaseModel):
    """An element as returned by the geospatial provider (Overpass JSON).

    Nodes carry `lat`/`lon` directly; ways and relations only carry a
    computed `center`. Tags are an open mapping.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    type: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    center: Optional[GeoCenter] = None
    tags: Dict[str, Optional[str]] = Field(default_factory=dict)

    @property
    def identity(self) -> str:
        # Node, way and relation ids are separate sequences in OSM
        return f"{self.type}/{self.id}" if self.type else str(self.id)

    def tag(self, key: str) -> Optional[str]:
        """Tag value, or None when absent or blank."""
        value = self.tags.get(key)
        if value is None or not value.strip():
            return None
        return value

    # Unlike tag(), names are returned verbatim, blanks included
    @property
    def name(self) -> Optional[str]:
        return self.tags.get("name")

    @property
    def operator(self) -> Optional[str]:
        return self.tags.get("operator")

    @property
    def building(self) -> Optional[str]:
        return self.tag("building")

    @property
    def residential(self) -> Optional[str]:
        return self.tag("residential")

    def coordinates(self) -> Optional[Tuple[float, float]]:
        """Direct coordinate if present, else the centroid, else None."""
        if self.lat is not None and self.lon is not None:
            return self.lat, self.lon
        if self.center is not None:
            return self.center.lat, self.center.lon
        return None

# --- Pipeline Data Models ---

class PointOfInterest(BaseModel):
    """A named, located place surfaced to the user."""
    id: str = Field(..., description="Identifier, unique within one discovery call.")
    name: str = Field(..., description="Display name.")
    type: str = Field(..., description="Normalized category, e.g. 'museum'.")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    distance: Optional[int] = Field(None, ge=0, description="Meters from the query origin.")
    description: Optional[str] = None

class Message(BaseModel):
    role: Literal["user", "assistant"]
    content: str

class StoryResponse(BaseModel):
    """Narrative payload recommending the first selected POI."""
    selected_pois: List[PointOfInterest] = Field(..., min_length=1, max_length=3)
    story: str
    next_destination: PointOfInterest

    @model_validator(mode="after")
    def _check_selection(self) -> "StoryResponse":
        ids = [poi.id for poi in self.selected_pois]
        if len(set(ids)) != len(ids):
            raise ValueError("selected_pois contains duplicate ids")
        if self.next_destination.id != ids[0]:
            raise ValueError("next_destination must be the first selected POI")
        return self

# --- API Request / Response Models ---

class DiscoverRequest(BaseModel):
    """Request model for the /api/poi endpoint."""
    location: Location

class DiscoverResponse(BaseModel):
    pois: List[PointOfInterest] = Field(..., description="Nearby POIs sorted by distance.")

class StoryRequest(BaseModel):
    """Request model for the /api/story endpoint."""
    pois: List[PointOfInterest] = Field(default_factory=list)
    messages: List[Message] = Field(default_factory=list, description="Conversation so far, oldest first.")

class WikipediaRequest(BaseModel):
    poi: PointOfInterest

class WikipediaResponse(BaseModel):
    wikipedia_info: str

# --- Error Response Model ---

class ErrorResponse(BaseModel):
    """Standardized error response model."""
    error: str = Field(..., description="A machine-readable error code.")
    detail: str = Field(..., description="A human-readable explanation.")

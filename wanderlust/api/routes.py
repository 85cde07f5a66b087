# wanderlust/api/routes.py
# Thin HTTP surface over the discovery and narrative pipeline.

from fastapi import APIRouter, Depends, HTTPException, Request, status
import logging

from wanderlust.models.dto import (
    DiscoverRequest,
    DiscoverResponse,
    ErrorResponse,
    StoryRequest,
    StoryResponse,
    WikipediaRequest,
    WikipediaResponse,
)
from wanderlust.services.discovery import DiscoveryEngine
from wanderlust.services.narrative import NarrativeOrchestrator
from wanderlust.services.wikipedia import WikipediaService

router = APIRouter()
logger = logging.getLogger(__name__)

# ----------------------------------------------------------------------
# Dependencies (built once in the application lifespan)
# ----------------------------------------------------------------------
def get_discovery_engine(request: Request) -> DiscoveryEngine:
    return request.app.state.discovery_engine

def get_narrative_orchestrator(request: Request) -> NarrativeOrchestrator:
    return request.app.state.narrative_orchestrator

def get_wikipedia_service(request: Request) -> WikipediaService:
    return request.app.state.wikipedia_service

# ----------------------------------------------------------------------
# Nearby POIs
# ----------------------------------------------------------------------
@router.post("/poi", response_model=DiscoverResponse)
async def discover_pois(
    data: DiscoverRequest,
    engine: DiscoveryEngine = Depends(get_discovery_engine),
):
    """Find points of interest around the user, closest first."""
    pois = await engine.discover(data.location)
    if not pois:
        logger.info(
            f"No POIs found near {data.location.latitude},{data.location.longitude}"
        )
    return DiscoverResponse(pois=pois)

# ----------------------------------------------------------------------
# Story / next destination
# ----------------------------------------------------------------------
@router.post(
    "/story",
    response_model=StoryResponse,
    responses={400: {"model": ErrorResponse}},
)
async def generate_story(
    data: StoryRequest,
    orchestrator: NarrativeOrchestrator = Depends(get_narrative_orchestrator),
):
    """Narrate the nearby POIs and recommend where to go next."""
    if not data.pois:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ErrorResponse(
                error="NO_POIS",
                detail="Provide at least one point of interest.",
            ).model_dump(),
        )
    return await orchestrator.generate(data.pois, data.messages)

# ----------------------------------------------------------------------
# Encyclopedia info for a POI (arrival / follow-up questions)
# ----------------------------------------------------------------------
@router.post("/wikipedia", response_model=WikipediaResponse)
async def wikipedia_info(
    data: WikipediaRequest,
    wikipedia: WikipediaService = Depends(get_wikipedia_service),
):
    info = await wikipedia.describe(data.poi)
    return WikipediaResponse(wikipedia_info=info)

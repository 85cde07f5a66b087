from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import uuid

from wanderlust.core.config import settings
from wanderlust.logging import configure_logging
from wanderlust.middleware.logging import LoggingMiddleware
from wanderlust.api.routes import router as api_router
from wanderlust.services.discovery import DiscoveryEngine
from wanderlust.services.narrative import NarrativeOrchestrator
from wanderlust.services.overpass import OverpassProvider
from wanderlust.services.reasoning import OpenAIReasoningService
from wanderlust.services.wikipedia import WikipediaService

configure_logging()
logger = logging.getLogger(__name__)

# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Application startup: v{settings.VERSION} ({settings.ENV})")

    # Stateless collaborators; each request opens its own HTTP clients
    reasoning = OpenAIReasoningService()
    app.state.discovery_engine = DiscoveryEngine(OverpassProvider())
    app.state.narrative_orchestrator = NarrativeOrchestrator(reasoning)
    app.state.wikipedia_service = WikipediaService()

    yield

    logger.info("Application shutdown.")

# --- FastAPI Application Initialization ---
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.BRIEF_DESCRIPTION,
    lifespan=lifespan,
)

app.add_middleware(LoggingMiddleware)

# --- API Routes ---
app.include_router(api_router, prefix="/api")

# --- Health Check Endpoint ---
@app.get("/health", status_code=status.HTTP_200_OK)
async def health_check():
    return {"status": "ok", "version": settings.VERSION}

# --- Global Exception Handler (for unhandled errors) ---
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    error_id = str(uuid.uuid4())
    logger.error(f"Unhandled exception (ID: {error_id}): {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": {
                "error": "INTERNAL_SERVER_ERROR",
                "detail": "An unexpected error occurred. Please report this error ID.",
                "error_id": error_id
            }
        }
    )

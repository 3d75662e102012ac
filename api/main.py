"""FastAPI application exposing nearby suggestions and itinerary generation."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

import config
from agents.itinerary_agent import ItineraryAgent
from agents.suggestion_agent import GeoSuggestionService
from errors import ConfigurationError, GenerationError, ItineraryNotFoundError
from tools.llm import GeminiJsonClient
from tools.places import GooglePlacesClient
from workflows.schemas import (
    Coordinate,
    ItineraryCreate,
    ItineraryRecord,
    ItineraryUpdate,
    TravelSuggestion,
)
from workflows.storage import ItineraryStorage

logger = logging.getLogger(__name__)

GENERATION_FAILED_DETAIL = "Failed to generate itinerary. Please try again."


def _build_places_client() -> Optional[GooglePlacesClient]:
    try:
        return GooglePlacesClient(config.get_google_places_api_key(), timeout=config.PLACES_REQUEST_TIMEOUT_S)
    except ConfigurationError as exc:
        logger.warning(f"{exc}; location suggestions will use the static fallback list")
        return None


def _build_generator() -> Optional[GeminiJsonClient]:
    try:
        return GeminiJsonClient(
            config.get_google_api_key(),
            model_name=config.DEFAULT_MODEL_NAME,
            temperature=config.ITINERARY_TEMPERATURE,
        )
    except ConfigurationError as exc:
        logger.warning(f"{exc}; itinerary generation is disabled")
        return None


def create_app(
    *,
    suggestion_service: Optional[GeoSuggestionService] = None,
    storage: Optional[ItineraryStorage] = None,
    itinerary_agent: Optional[ItineraryAgent] = None,
    generator: Optional[GeminiJsonClient] = None,
) -> FastAPI:
    """Wire services into a FastAPI app; anything not passed is built from ``config``."""
    storage = storage or ItineraryStorage(config.REDIS_URL)
    if suggestion_service is None:
        suggestion_service = GeoSuggestionService(_build_places_client())
    if itinerary_agent is None:
        generator = generator or _build_generator()
        if generator is not None:
            itinerary_agent = ItineraryAgent(generator, storage)

    app = FastAPI(title="Travel Itinerary API", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.suggestion_service = suggestion_service
    app.state.storage = storage
    app.state.itinerary_agent = itinerary_agent

    app.get("/health")(health)
    app.get("/location-suggestions", response_model=List[TravelSuggestion])(location_suggestions)
    app.get("/itineraries", response_model=List[ItineraryRecord])(list_itineraries)
    app.post("/itineraries", response_model=ItineraryRecord, status_code=201)(create_itinerary)
    app.get("/itineraries/{itinerary_id}", response_model=ItineraryRecord)(get_itinerary)
    app.put("/itineraries/{itinerary_id}", response_model=ItineraryRecord)(update_itinerary)
    app.delete("/itineraries/{itinerary_id}", status_code=204)(delete_itinerary)
    app.post("/itineraries/{itinerary_id}/generate", response_model=ItineraryRecord)(generate_itinerary)
    return app


# ============================================================================
# Handlers
# ============================================================================

async def health() -> Dict[str, str]:
    return {"status": "ok"}


def _parse_float(value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError:
        return None


async def location_suggestions(
    request: Request,
    response: Response,
    lat: Optional[str] = None,
    lng: Optional[str] = None,
    radius: Optional[str] = None,
) -> List[TravelSuggestion]:
    if lat is None or lng is None:
        raise HTTPException(status_code=400, detail="Latitude and longitude are required")

    latitude, longitude = _parse_float(lat), _parse_float(lng)
    if latitude is None or longitude is None:
        raise HTTPException(status_code=400, detail="Invalid coordinates")
    try:
        origin = Coordinate(lat=latitude, lng=longitude)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid coordinates")

    radius_m = config.PLACES_SEARCH_RADIUS_M
    if radius is not None and radius.strip():
        try:
            radius_m = int(radius)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid radius")
        if radius_m <= 0:
            raise HTTPException(status_code=400, detail="Invalid radius")

    service: GeoSuggestionService = request.app.state.suggestion_service
    result = await service.suggest(origin, radius_m)
    response.headers["X-Suggestion-Source"] = result.source
    if result.message:
        response.headers["X-Suggestion-Advisory"] = result.message
    return result.suggestions


def _storage(request: Request) -> ItineraryStorage:
    return request.app.state.storage


def _get_or_404(request: Request, itinerary_id: int) -> ItineraryRecord:
    record = _storage(request).get(itinerary_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Itinerary not found")
    return record


def list_itineraries(request: Request) -> List[ItineraryRecord]:
    return _storage(request).list()


def create_itinerary(request: Request, payload: ItineraryCreate) -> ItineraryRecord:
    record = _storage(request).create(payload)
    logger.info(f"Created draft itinerary {record.id} for {record.location!r}")
    return record


def get_itinerary(request: Request, itinerary_id: int) -> ItineraryRecord:
    return _get_or_404(request, itinerary_id)


def update_itinerary(request: Request, itinerary_id: int, payload: ItineraryUpdate) -> ItineraryRecord:
    _get_or_404(request, itinerary_id)
    updated = _storage(request).update(itinerary_id, payload.changes())
    if updated is None:
        raise HTTPException(status_code=404, detail="Itinerary not found")
    return updated


def delete_itinerary(request: Request, itinerary_id: int) -> Response:
    if not _storage(request).delete(itinerary_id):
        raise HTTPException(status_code=404, detail="Itinerary not found")
    return Response(status_code=204)


async def generate_itinerary(request: Request, itinerary_id: int) -> ItineraryRecord:
    agent: Optional[ItineraryAgent] = request.app.state.itinerary_agent
    if agent is None:
        raise HTTPException(status_code=503, detail="Itinerary generation is not configured")
    try:
        return await agent.generate(itinerary_id)
    except ItineraryNotFoundError:
        raise HTTPException(status_code=404, detail="Itinerary not found")
    except GenerationError:
        raise HTTPException(status_code=502, detail=GENERATION_FAILED_DETAIL)


def _configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _startup_checks() -> List[str]:
    missing = config.validate_api_keys()
    if missing:
        logger.warning(f"Missing API keys: {', '.join(missing)}")
    return missing


_configure_logging()
_startup_checks()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)

"""FastAPI routes for event listing and taxonomy endpoints."""
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import ValidationError

from circles.models.catalog import CategoryAliases, CategoryOption, CustomVibeRequest, VibeOption
from circles.models.event import EventCard
from circles.models.event_filter import FilterSpec
from circles.models.taxonomy import Locale
from circles.models.vibes import CustomVibe, VibeRejection

logger = logging.getLogger(__name__)

router = APIRouter()

# Global handler reference - set during startup
_event_handler = None


def set_event_handler(handler):
    """Set the event handler instance (called during startup)."""
    global _event_handler
    _event_handler = handler
    if handler is None:
        logger.info("[EventRouter] Handler cleared")
    else:
        logger.info("[EventRouter] Handler injected successfully")


def get_handler():
    """Get the event handler, raising error if not initialized."""
    if _event_handler is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return _event_handler


@router.get(
    "/v1/events",
    response_model=list[EventCard],
    summary="Filter events",
    description="Events matching every supplied filter, annotated with category and continuity",
)
def filter_events(
    main_category: Optional[str] = Query(None, alias="mainCategory", description="Category key or legacy alias"),
    country: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    group_size: Optional[str] = Query(None, alias="groupSize", description="tiny | small | larger"),
    session_frequency: Optional[str] = Query(
        None, alias="sessionFrequency", description="Comma-separated: weekly,monthly,oneTime"
    ),
    session_mode: Optional[str] = Query(
        None, alias="sessionMode", description="Comma-separated: inPerson,remote"
    ),
    vibes: Optional[str] = Query(None, description="Comma-separated vibe keys"),
    circle_continuity: Optional[str] = Query(
        None, alias="circleContinuity", description="startingSoon | ongoing"
    ),
    locale: Optional[Locale] = Query(None),
) -> list[EventCard]:
    """Filter stored events."""
    handler = get_handler()
    try:
        spec = FilterSpec.from_query_params({
            "mainCategory": main_category,
            "country": country,
            "city": city,
            "groupSize": group_size,
            "sessionFrequency": session_frequency,
            "sessionMode": session_mode,
            "vibes": vibes,
            "circleContinuity": circle_continuity,
        })
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=[err["msg"] for err in e.errors()])

    try:
        return handler.filter_events(spec, locale or handler.default_locale)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"[EventRouter] Error in filter_events: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get(
    "/v1/events/{event_id}",
    response_model=EventCard,
    summary="Get event",
)
def get_event(event_id: str, locale: Optional[Locale] = Query(None)) -> EventCard:
    handler = get_handler()
    try:
        card = handler.get_event(event_id, locale or handler.default_locale)
    except Exception as e:
        logger.error(f"[EventRouter] Error in get_event: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")
    if card is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return card


@router.get(
    "/v1/taxonomy/categories",
    response_model=list[CategoryOption],
    summary="List categories",
)
def list_categories(locale: Optional[Locale] = Query(None)) -> list[CategoryOption]:
    handler = get_handler()
    return handler.list_categories(locale or handler.default_locale)


@router.get(
    "/v1/taxonomy/categories/{category_key}/vibes",
    response_model=list[VibeOption],
    summary="List preset vibes of a category",
)
def list_presets(category_key: str, locale: Optional[Locale] = Query(None)) -> list[VibeOption]:
    handler = get_handler()
    presets = handler.list_presets(category_key, locale or handler.default_locale)
    if presets is None:
        raise HTTPException(status_code=404, detail=f"Unknown category: {category_key}")
    return presets


@router.get(
    "/v1/taxonomy/categories/{category_key}/aliases",
    response_model=CategoryAliases,
    summary="Stored strings equivalent to a category",
)
def category_aliases(category_key: str) -> CategoryAliases:
    handler = get_handler()
    aliases = handler.category_aliases(category_key)
    if aliases is None:
        raise HTTPException(status_code=404, detail=f"Unknown category: {category_key}")
    return aliases


@router.post(
    "/v1/vibes/custom",
    response_model=CustomVibe,
    summary="Create a custom vibe",
    responses={422: {"description": "Labels rejected"}},
)
def create_custom_vibe(request: CustomVibeRequest) -> CustomVibe:
    handler = get_handler()
    result = handler.create_custom_vibe(request)
    if isinstance(result, VibeRejection):
        raise HTTPException(status_code=422, detail=result.model_dump(mode="json"))
    return result


@router.get(
    "/ping",
    summary="Health check",
    description="Health check endpoint",
)
def ping() -> dict[str, str]:
    """Health check endpoint."""
    handler = get_handler()
    return handler.ping()

"""
Tracking Router

Storefront-facing tracking endpoints:
- Public tracking ids for the browser snippets (no secrets)
- Server-side forwarding of a storefront event (e.g. Purchase) to every
  analytics provider
"""

from typing import Any, Optional

import httpx
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from ..common.logging_setup import get_service_logger
from ..dependencies.services import get_http_client
from ..services.event_relay import (
    ConversionsApiRelay,
    EventPayload,
    MeasurementConfig,
    MeasurementProtocolRelay,
    PixelConfig,
)
from ..services.settings import Settings, get_settings

router = APIRouter()
logger = get_service_logger("tracking")


# ============================================
# SCHEMAS
# ============================================

class TrackEventRequest(BaseModel):
    """Storefront event to forward."""
    name: str = Field(..., min_length=1, description="Event name, e.g. 'Purchase'")
    params: dict[str, Any] = Field(default_factory=dict)
    timestamp: Optional[int] = Field(None, description="Epoch seconds, defaults to now")
    source_url: Optional[str] = None
    client_id: Optional[str] = Field(None, description="GA client id, defaults to the session's")


# ============================================
# ENDPOINTS
# ============================================

@router.get("/config")
def get_tracking_config(settings: Settings = Depends(get_settings)):
    """
    Ids the storefront needs to render the browser tracking snippets.

    Only enabled providers with an id are returned.
    """
    pixel = PixelConfig.from_settings(settings)
    analytics = MeasurementConfig.from_settings(settings)

    return {
        "facebook_pixel": {
            "enabled": pixel.enabled and bool(pixel.pixel_id),
            "pixel_id": pixel.pixel_id if pixel.enabled else None,
        },
        "google_analytics": {
            "enabled": analytics.enabled and bool(analytics.measurement_id),
            "measurement_id": analytics.measurement_id if analytics.enabled else None,
        },
    }


@router.post("/events")
def forward_event(
    payload: TrackEventRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
    http_client: httpx.Client = Depends(get_http_client),
):
    """
    Forward one event to Facebook Pixel and Google Analytics.

    A failing provider never fails the request: each provider's RelayResult
    is returned as is.
    """
    event = EventPayload(
        name=payload.name,
        params=payload.params,
        timestamp=payload.timestamp,
        source_url=payload.source_url,
    )

    pixel_relay = ConversionsApiRelay.from_settings(
        settings, http_client, request_url=str(request.url)
    )
    analytics_relay = MeasurementProtocolRelay.from_settings(
        settings, http_client, session=request.session
    )
    if payload.client_id:
        analytics_relay.set_client_id(payload.client_id)

    results = {
        "facebook_pixel": pixel_relay.post_event(event),
        "google_analytics": analytics_relay.post_event(event),
    }

    for provider, result in results.items():
        if not result.ok:
            logger.warning(
                f"Failed to forward {event.name} to {provider}: {result.message}",
                extra={"provider": provider, "event_name": event.name},
            )

    return {provider: result.to_dict() for provider, result in results.items()}

"""
Google Analytics Settings Router

Handles the Google Analytics 4 settings page:
- Read current GA4 settings from live config
- Update GOOGLE_ANALYTICS_* values in the env file
- Send a test event through the Measurement Protocol
"""

import time
from typing import Optional
from uuid import uuid4

import httpx
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from ..common.logging_setup import get_service_logger
from ..dependencies.services import get_env_store, get_http_client
from ..services.env_store import EnvStore
from ..services.event_relay import (
    SESSION_CLIENT_ID_KEY,
    EventPayload,
    MeasurementProtocolRelay,
)
from ..services.settings import Settings, get_settings
from .common import RelayTestRequest, error_response, persist_settings, relay_test_response

router = APIRouter()
logger = get_service_logger("settings.google_analytics")


# ============================================
# SCHEMAS
# ============================================

class AnalyticsSettingsUpdate(BaseModel):
    """Update Google Analytics settings request."""
    GOOGLE_ANALYTICS_MEASUREMENT_ID: Optional[str] = Field(None, max_length=255)
    GOOGLE_ANALYTICS_API_SECRET: Optional[str] = Field(None, max_length=255)
    GOOGLE_ANALYTICS_DEBUG_MODE: bool = False
    GOOGLE_ANALYTICS_ENABLED: bool = True


# ============================================
# ENDPOINTS
# ============================================

@router.get("/")
def get_analytics_settings(settings: Settings = Depends(get_settings)):
    """Current Google Analytics settings."""
    return {
        "ga_settings": {
            "GOOGLE_ANALYTICS_MEASUREMENT_ID": settings.google_analytics_measurement_id,
            "GOOGLE_ANALYTICS_API_SECRET": settings.google_analytics_api_secret,
            "GOOGLE_ANALYTICS_DEBUG_MODE": settings.google_analytics_debug_mode,
            "GOOGLE_ANALYTICS_ENABLED": settings.google_analytics_enabled,
        }
    }


@router.post("/")
def update_analytics_settings(
    payload: AnalyticsSettingsUpdate,
    store: EnvStore = Depends(get_env_store),
):
    """Write Google Analytics settings to the env file."""
    values = payload.model_dump(exclude_unset=True)
    return persist_settings(store, values, "Google Analytics")


@router.post("/test")
def send_analytics_test_event(
    request: Request,
    payload: Optional[RelayTestRequest] = None,
    settings: Settings = Depends(get_settings),
    http_client: httpx.Client = Depends(get_http_client),
):
    """
    Send a test_event to the Measurement Protocol with the live settings.

    Reuses the session's client id, or generates a test_ one and stores it
    in the session.
    """
    try:
        relay = MeasurementProtocolRelay.from_settings(
            settings, http_client, session=request.session
        )
        client_id = request.session.get(SESSION_CLIENT_ID_KEY) or f"test_{uuid4().hex}"
        relay.set_client_id(client_id)

        if payload and payload.debug_mode:
            relay.enable_debug_mode()

        result = relay.post_event(EventPayload(
            name="test_event",
            params={
                "test_param": "test_value",
                "timestamp": int(time.time()),
            },
        ))
    except Exception as e:
        logger.error("Google Analytics test error", extra={"exception": str(e)}, exc_info=True)
        return error_response(settings, e)

    return relay_test_response(result, "Google Analytics")

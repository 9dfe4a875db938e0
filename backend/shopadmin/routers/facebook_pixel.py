"""
Facebook Pixel Settings Router

Handles the Facebook Pixel settings page:
- Read current pixel settings from live config
- Update FACEBOOK_PIXEL_* values in the env file
- Send a test event through the Conversions API
"""

import time
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field

from ..common.logging_setup import get_service_logger
from ..dependencies.services import get_env_store, get_http_client
from ..services.env_store import EnvStore
from ..services.event_relay import ConversionsApiRelay, EventPayload
from ..services.settings import Settings, get_settings
from .common import RelayTestRequest, error_response, persist_settings, relay_test_response

router = APIRouter()
logger = get_service_logger("settings.facebook_pixel")


# ============================================
# SCHEMAS
# ============================================

class PixelSettingsUpdate(BaseModel):
    """Update Facebook Pixel settings request."""
    FACEBOOK_PIXEL_ID: Optional[str] = Field(None, max_length=255)
    FACEBOOK_PIXEL_ACCESS_TOKEN: Optional[str] = Field(None, max_length=255)
    FACEBOOK_PIXEL_DEBUG_MODE: bool = False
    FACEBOOK_PIXEL_ENABLED: bool = True


# ============================================
# ENDPOINTS
# ============================================

@router.get("/")
def get_pixel_settings(settings: Settings = Depends(get_settings)):
    """Current Facebook Pixel settings."""
    return {
        "pixel_settings": {
            "FACEBOOK_PIXEL_ID": settings.facebook_pixel_id,
            "FACEBOOK_PIXEL_ACCESS_TOKEN": settings.facebook_pixel_access_token,
            "FACEBOOK_PIXEL_DEBUG_MODE": settings.facebook_pixel_debug_mode,
            "FACEBOOK_PIXEL_ENABLED": settings.facebook_pixel_enabled,
        }
    }


@router.post("/")
def update_pixel_settings(
    payload: PixelSettingsUpdate,
    store: EnvStore = Depends(get_env_store),
):
    """Write Facebook Pixel settings to the env file."""
    values = payload.model_dump(exclude_unset=True)
    return persist_settings(store, values, "Facebook Pixel")


@router.post("/test")
def send_pixel_test_event(
    request: Request,
    payload: Optional[RelayTestRequest] = None,
    settings: Settings = Depends(get_settings),
    http_client: httpx.Client = Depends(get_http_client),
):
    """
    Send a TestEvent to the Conversions API with the live settings.

    Returns 400 with the provider's error when the event is rejected.
    """
    try:
        relay = ConversionsApiRelay.from_settings(
            settings, http_client, request_url=str(request.url)
        )
        if payload and payload.debug_mode:
            relay.enable_debug_mode()

        result = relay.post_event(EventPayload(
            name="TestEvent",
            timestamp=int(time.time()),
            params={"test_param": "test_value"},
        ))
    except Exception as e:
        logger.error("Facebook Pixel test error", extra={"exception": str(e)}, exc_info=True)
        return error_response(settings, e)

    return relay_test_response(result, "Facebook Pixel")

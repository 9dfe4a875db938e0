"""
Analytics Event Relay

Server-side forwarding of storefront events to marketing/analytics APIs:
- Facebook Pixel Conversions API (ConversionsApiRelay)
- Google Analytics 4 Measurement Protocol (MeasurementProtocolRelay)

Relays are built per request from the current Settings. post_event() never
raises on network errors: every outcome comes back as a RelayResult.
One synchronous POST per event, no retries, httpx default timeout.
"""

import json
import time
from dataclasses import dataclass, field, asdict
from typing import Any, MutableMapping, Optional

import httpx

from ..common.exceptions import (
    RelayError,
    RelayNotConfiguredError,
    MissingClientIdError,
    MissingEventNameError,
    RelayTransportError,
)
from ..common.logging_setup import get_service_logger, mask_secrets
from .settings import Settings

logger = get_service_logger("event_relay")


# ============================================
# PROVIDER ENDPOINTS
# ============================================

GRAPH_API_URL = "https://graph.facebook.com/v19.0/{pixel_id}/events"
TEST_EVENT_CODE = "TEST12345"

GA_COLLECT_URL = "https://www.google-analytics.com/mp/collect"
GA_DEBUG_COLLECT_URL = "https://www.google-analytics.com/debug/mp/collect"

# Session key the GA client id is mirrored into
SESSION_CLIENT_ID_KEY = "ga_client_id"


# ============================================
# HELPERS
# ============================================

def drop_none(values: dict[str, Any]) -> dict[str, Any]:
    """Remove keys whose value is None."""
    return {key: value for key, value in values.items() if value is not None}


def decode_body(response: httpx.Response) -> Any:
    """Provider response body as JSON, falling back to raw text."""
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text or None


# ============================================
# VALUE TYPES
# ============================================

@dataclass(frozen=True)
class PixelConfig:
    """Facebook Pixel settings snapshot."""
    pixel_id: Optional[str] = None
    access_token: Optional[str] = None
    debug_mode: bool = False
    enabled: bool = True

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.pixel_id) and bool(self.access_token)

    def describe(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "pixelId": "set" if self.pixel_id else "not set",
            "accessToken": "set" if self.access_token else "not set",
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "PixelConfig":
        return cls(
            pixel_id=settings.facebook_pixel_id,
            access_token=settings.facebook_pixel_access_token,
            debug_mode=settings.facebook_pixel_debug_mode,
            enabled=settings.facebook_pixel_enabled,
        )


@dataclass(frozen=True)
class MeasurementConfig:
    """Google Analytics 4 settings snapshot."""
    measurement_id: Optional[str] = None
    api_secret: Optional[str] = None
    debug_mode: bool = False
    enabled: bool = True

    @property
    def is_configured(self) -> bool:
        return self.enabled and bool(self.measurement_id) and bool(self.api_secret)

    def describe(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "measurementId": "set" if self.measurement_id else "not set",
            "apiSecret": "set" if self.api_secret else "not set",
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "MeasurementConfig":
        return cls(
            measurement_id=settings.google_analytics_measurement_id,
            api_secret=settings.google_analytics_api_secret,
            debug_mode=settings.google_analytics_debug_mode,
            enabled=settings.google_analytics_enabled,
        )


@dataclass
class EventPayload:
    """
    A storefront event: name, optional timestamp, custom params.

    Each relay handles a missing name its own way: the Conversions API sends
    "CustomEvent", the Measurement Protocol refuses the event.
    """
    name: Optional[str] = None
    params: dict[str, Any] = field(default_factory=dict)
    timestamp: Optional[int] = None
    source_url: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return drop_none(asdict(self))


@dataclass
class RelayResult:
    """Outcome of a post_event() call."""
    status: str
    response: Any = None
    message: Optional[str] = None

    @classmethod
    def success(cls, response: Any = None) -> "RelayResult":
        return cls(status="success", response=response)

    @classmethod
    def error(cls, message: str, response: Any = None) -> "RelayResult":
        return cls(status="error", response=response, message=message)

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def to_dict(self) -> dict[str, Any]:
        return drop_none(asdict(self))


def classify_response(response: httpx.Response) -> RelayResult:
    """2xx is success, anything else is an error carrying the body."""
    body = decode_body(response)
    if response.is_success:
        return RelayResult.success(body)
    return RelayResult.error(f"HTTP {response.status_code}", response=body)


# ============================================
# RELAYS
# ============================================

class EventRelay:
    """
    Base relay.

    Subclasses implement _check_ready() and _build_request(). Debug mode can
    only be switched on for the lifetime of an instance, never off.
    """

    provider_name = "Event relay"

    def __init__(self, config, http_client: Optional[httpx.Client] = None):
        self.config = config
        self.debug_mode = config.debug_mode
        self._http_client = http_client

    def enable_debug_mode(self) -> "EventRelay":
        self.debug_mode = True
        return self

    def post_event(self, event: EventPayload) -> RelayResult:
        """
        Post one event to the provider.

        Returns:
            RelayResult.success with the provider body on a 2xx response,
            RelayResult.error otherwise (never raises for transport errors)
        """
        try:
            self._check_ready(event)
        except RelayError as e:
            if self.debug_mode:
                logger.info(
                    f"{self.provider_name} not sent: {e.message}",
                    extra={"config": self.config.describe()},
                )
            return RelayResult.error(e.message)

        url, params, payload = self._build_request(event)

        try:
            response = self._post(url, params, payload)
        except RelayTransportError as e:
            logger.error(f"{self.provider_name} error: {e.message}")
            return RelayResult.error(e.message)

        result = classify_response(response)

        if self.debug_mode:
            logger.info(
                f"{self.provider_name} event posted",
                extra={
                    "url": url,
                    "event": event.to_dict(),
                    "payload": mask_secrets(payload),
                    "status_code": response.status_code,
                    "response": result.response,
                },
            )

        return result

    def _check_ready(self, event: EventPayload) -> None:
        if not self.config.is_configured:
            raise RelayNotConfiguredError(self.provider_name)

    def _build_request(
        self, event: EventPayload
    ) -> tuple[str, Optional[dict[str, str]], dict[str, Any]]:
        raise NotImplementedError

    def _post(
        self,
        url: str,
        params: Optional[dict[str, str]],
        payload: dict[str, Any],
    ) -> httpx.Response:
        try:
            if self._http_client is not None:
                return self._http_client.post(url, params=params, json=payload)
            with httpx.Client() as client:
                return client.post(url, params=params, json=payload)
        except httpx.HTTPError as e:
            raise RelayTransportError(str(e) or type(e).__name__, self.provider_name) from e


class ConversionsApiRelay(EventRelay):
    """Facebook Pixel Conversions API relay."""

    provider_name = "Facebook Pixel"

    def __init__(
        self,
        config: PixelConfig,
        http_client: Optional[httpx.Client] = None,
        request_url: Optional[str] = None,
    ):
        super().__init__(config, http_client)
        self.request_url = request_url

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: Optional[httpx.Client] = None,
        request_url: Optional[str] = None,
    ) -> "ConversionsApiRelay":
        return cls(PixelConfig.from_settings(settings), http_client, request_url)

    def _build_request(self, event):
        url = GRAPH_API_URL.format(pixel_id=self.config.pixel_id)

        server_event = drop_none({
            "event_name": event.name or "CustomEvent",
            "event_time": event.timestamp if event.timestamp is not None else int(time.time()),
            "action_source": "website",
            "event_source_url": event.source_url or self.request_url,
            "custom_data": event.params,
        })

        payload = drop_none({
            "access_token": self.config.access_token,
            "data": [server_event],
            "test_event_code": TEST_EVENT_CODE if self.debug_mode else None,
        })

        return url, None, payload


class MeasurementProtocolRelay(EventRelay):
    """
    Google Analytics 4 Measurement Protocol relay.

    The client id is read from the session on construction and written back
    whenever set_client_id() is called.
    """

    provider_name = "Google Analytics"

    def __init__(
        self,
        config: MeasurementConfig,
        http_client: Optional[httpx.Client] = None,
        session: Optional[MutableMapping[str, Any]] = None,
    ):
        super().__init__(config, http_client)
        self.session = session if session is not None else {}
        self.client_id: Optional[str] = self.session.get(SESSION_CLIENT_ID_KEY)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: Optional[httpx.Client] = None,
        session: Optional[MutableMapping[str, Any]] = None,
    ) -> "MeasurementProtocolRelay":
        return cls(MeasurementConfig.from_settings(settings), http_client, session)

    def set_client_id(self, client_id: str) -> "MeasurementProtocolRelay":
        self.client_id = client_id
        self.session[SESSION_CLIENT_ID_KEY] = client_id
        return self

    def _check_ready(self, event: EventPayload) -> None:
        super()._check_ready(event)
        if not self.client_id:
            raise MissingClientIdError(self.provider_name)
        if not event.name:
            raise MissingEventNameError(self.provider_name)

    def _build_request(self, event):
        url = GA_DEBUG_COLLECT_URL if self.debug_mode else GA_COLLECT_URL
        params = {
            "measurement_id": self.config.measurement_id,
            "api_secret": self.config.api_secret,
        }
        payload = {
            "client_id": self.client_id,
            "events": [drop_none({"name": event.name, "params": event.params})],
        }
        return url, params, payload

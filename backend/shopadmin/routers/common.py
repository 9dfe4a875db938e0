"""
Shared helpers for the settings routers.
"""

from typing import Any, Mapping

from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..common.logging_setup import get_service_logger
from ..services.env_store import EnvStore, to_env_values
from ..services.settings import Settings, reload_config

logger = get_service_logger("settings")


class RelayTestRequest(BaseModel):
    """Test event request."""
    debug_mode: bool = False


def persist_settings(store: EnvStore, values: Mapping[str, Any], label: str):
    """
    Write validated form values to the env file and reload the config.

    Returns:
        {"success": True, ...} or a 500 JSONResponse if the write failed
    """
    if not values:
        return {"success": True, "message": f"No {label} settings changed"}

    if not store.set(to_env_values(values)):
        logger.error(f"Failed to save {label} settings", extra={"keys": sorted(values)})
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": f"Failed to save {label} settings"},
        )

    # Make the new values visible to the next request
    reload_config()

    return {"success": True, "message": f"{label} settings updated successfully"}


def error_response(settings: Settings, error: Exception) -> JSONResponse:
    """500 response for an unexpected error; exception text is hidden in production."""
    message = "An error occurred"
    if not settings.is_production:
        message = f"An error occurred: {error}"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": message},
    )


def relay_test_response(result, provider_name: str):
    """Translate a RelayResult from a test event into the JSON reply."""
    if result.ok:
        return {
            "success": True,
            "message": f"Test event sent successfully to {provider_name}",
        }
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": f"Failed to send test event: {result.message or 'Unknown error'}",
        },
    )

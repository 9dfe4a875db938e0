"""
Audit Logging Middleware

Logs every modifying request (POST, PATCH, PUT, DELETE) against the admin
settings endpoints to the audit logger.
Captures the settings section, action, status and client info.
"""

from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..common.logging_setup import get_service_logger

logger = get_service_logger("audit")


# Only these path prefixes are audited
AUDITED_PREFIXES = [
    "/api/settings/",
]

# HTTP methods to log (only modifying operations)
LOGGED_METHODS = ["POST", "PATCH", "PUT", "DELETE"]


def parse_section_from_path(path: str) -> Optional[str]:
    """
    Parse the settings section from a URL path.

    Examples:
    - /api/settings/mail/ → "mail"
    - /api/settings/facebook-pixel/test → "facebook-pixel"
    - /api/tracking/events → None
    """
    for prefix in AUDITED_PREFIXES:
        if path.startswith(prefix):
            parts = [part for part in path[len(prefix):].split("/") if part]
            return parts[0] if parts else None
    return None


def method_to_action(method: str, path: str) -> str:
    """Convert HTTP method (and test paths) to an action name."""
    if path.rstrip("/").endswith("/test"):
        return "test"
    mapping = {
        "POST": "update",
        "PATCH": "update",
        "PUT": "update",
        "DELETE": "delete",
    }
    return mapping.get(method, method.lower())


class AuditLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that logs modifying settings requests.

    Only logs POST, PATCH, PUT, DELETE requests under /api/settings/.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        """Process request and log if it's a modifying operation."""

        # Skip non-modifying methods
        if request.method not in LOGGED_METHODS:
            return await call_next(request)

        section = parse_section_from_path(request.url.path)
        if section is None:
            return await call_next(request)

        # Execute the request first
        response = await call_next(request)

        # Now log the action (after we know the status code)
        self._log_action(request, response, section)

        return response

    def _log_action(self, request: Request, response: Response, section: str) -> None:
        path = request.url.path
        action = method_to_action(request.method, path)

        ip_address = request.client.host if request.client else None
        user_agent = request.headers.get("user-agent", "")

        status = "success" if 200 <= response.status_code < 400 else "failed"

        logger.info(
            f"Settings {action} [{section}]: {status}",
            extra={
                "action": action,
                "section": section,
                "status": status,
                "ip_address": ip_address,
                "user_agent": user_agent[:500] if user_agent else None,
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
            },
        )

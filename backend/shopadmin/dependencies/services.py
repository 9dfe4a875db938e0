"""
Service Dependencies

FastAPI dependencies that hand routers their collaborators:
- get_env_store: EnvStore bound to the configured env file
- get_http_client: httpx client for outbound relay calls

Tests swap these through app.dependency_overrides.
"""

from typing import Iterator

import httpx

from ..services.env_store import EnvStore
from ..services.settings import get_env_file_path


def get_env_store() -> EnvStore:
    """EnvStore for the env file named by SHOPADMIN_ENV_FILE."""
    return EnvStore(get_env_file_path())


def get_http_client() -> Iterator[httpx.Client]:
    """
    Dependency for an outbound HTTP client, closed after the request.

    Usage:
        @router.post("/test")
        def test(http: httpx.Client = Depends(get_http_client)):
            ...
    """
    with httpx.Client() as client:
        yield client

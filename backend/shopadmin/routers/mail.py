"""
Mail Settings Router

Handles the SMTP settings page:
- Read current MAIL_* values from the env file
- Update MAIL_* values
- Send a test email through the configured mailer
"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, EmailStr, Field

from ..common.exceptions import MailerError
from ..dependencies.services import get_env_store
from ..services.env_store import EnvStore
from ..services.mailer import send_test_email
from ..services.settings import Settings, get_settings
from .common import persist_settings

router = APIRouter()

MAIL_KEYS = [
    "MAIL_MAILER",
    "MAIL_HOST",
    "MAIL_PORT",
    "MAIL_USERNAME",
    "MAIL_PASSWORD",
    "MAIL_ENCRYPTION",
    "MAIL_FROM_ADDRESS",
    "MAIL_FROM_NAME",
]


# ============================================
# SCHEMAS
# ============================================

class MailSettingsUpdate(BaseModel):
    """Update mail settings request."""
    MAIL_MAILER: Literal["smtp", "sendmail", "mailgun", "ses", "postmark", "log", "array"]
    MAIL_HOST: str = Field(..., min_length=1)
    MAIL_PORT: int = Field(..., description="SMTP port, e.g. 587")
    MAIL_USERNAME: Optional[str] = None
    MAIL_PASSWORD: Optional[str] = None
    MAIL_ENCRYPTION: Optional[Literal["tls", "ssl", "null"]] = Field(
        None, description="'null' clears the encryption setting"
    )
    MAIL_FROM_ADDRESS: EmailStr
    MAIL_FROM_NAME: str = Field(..., min_length=1)


class TestEmailRequest(BaseModel):
    """Send test email request."""
    test_email: EmailStr


# ============================================
# ENDPOINTS
# ============================================

@router.get("/")
def get_mail_settings(store: EnvStore = Depends(get_env_store)):
    """
    Current mail settings.

    MAIL_ENCRYPTION defaults to 'tls' when the env file has no value.
    """
    mail_settings = store.get(MAIL_KEYS)
    mail_settings.setdefault("MAIL_ENCRYPTION", "tls")
    return {"mail_settings": mail_settings}


@router.post("/")
def update_mail_settings(
    payload: MailSettingsUpdate,
    store: EnvStore = Depends(get_env_store),
):
    """Validate and write mail settings to the env file."""
    values = payload.model_dump(exclude_unset=True)

    if values.get("MAIL_ENCRYPTION") == "null":
        values["MAIL_ENCRYPTION"] = None

    return persist_settings(store, values, "Mail")


@router.post("/test")
def send_mail_test(
    payload: TestEmailRequest,
    settings: Settings = Depends(get_settings),
):
    """Send a test email using the current mail settings."""
    try:
        send_test_email(settings, payload.test_email)
    except MailerError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "message": f"Failed to send test email: {e.message}"},
        )

    return {"success": True, "message": "Test email sent successfully."}

"""
Mailer Service

Sends the admin "test email" through the mailer configured by the MAIL_*
settings.

Supported mailers:
- smtp: delivered with smtplib (MAIL_ENCRYPTION ssl / tls / empty)
- log: written to the mail logger instead of being sent
- array: accepted and discarded
"""

import smtplib
from email.message import EmailMessage

from ..common.exceptions import MailerError
from ..common.logging_setup import get_service_logger
from .settings import Settings

logger = get_service_logger("mailer")

TEST_SUBJECT = "Test Email from MegaSkyShop"
TEST_BODY = "This is a test email from your application."


def build_message(settings: Settings, to: str, subject: str, body: str) -> EmailMessage:
    message = EmailMessage()
    message["Subject"] = subject
    if settings.mail_from_name:
        message["From"] = f"{settings.mail_from_name} <{settings.mail_from_address}>"
    else:
        message["From"] = settings.mail_from_address
    message["To"] = to
    message.set_content(body)
    return message


def send_test_email(settings: Settings, to: str, smtp_class=None) -> None:
    """
    Send the test email.

    Args:
        settings: Current settings (MAIL_* values)
        to: Recipient address
        smtp_class: SMTP client class override (defaults to smtplib)

    Raises:
        MailerError: If the mailer is unsupported or delivery failed
    """
    mailer = (settings.mail_mailer or "smtp").lower()
    message = build_message(settings, to, TEST_SUBJECT, TEST_BODY)

    if mailer == "array":
        return

    if mailer == "log":
        logger.info(
            f"Mail to {to}: {TEST_SUBJECT}",
            extra={"to": to, "subject": TEST_SUBJECT, "body": TEST_BODY},
        )
        return

    if mailer != "smtp":
        raise MailerError(f"Mailer '{mailer}' is not supported for test emails", mailer)

    if not settings.mail_host:
        raise MailerError("MAIL_HOST is not configured", mailer)

    try:
        port = int(settings.mail_port) if settings.mail_port else 587
    except ValueError:
        raise MailerError(f"Invalid MAIL_PORT: {settings.mail_port}", mailer)

    encryption = (settings.mail_encryption or "").lower()
    if smtp_class is None:
        smtp_class = smtplib.SMTP_SSL if encryption == "ssl" else smtplib.SMTP

    try:
        with smtp_class(settings.mail_host, port) as server:
            if encryption == "tls":
                server.starttls()
            if settings.mail_username:
                server.login(settings.mail_username, settings.mail_password or "")
            server.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"Failed to send test email to {to}: {e}")
        raise MailerError(str(e), mailer) from e

    logger.info(f"Test email sent to {to}", extra={"to": to, "mailer": mailer})

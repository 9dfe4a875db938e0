"""
Tests for test email delivery.
"""

import smtplib

import pytest

from shopadmin.common.exceptions import MailerError
from shopadmin.services.mailer import TEST_SUBJECT, send_test_email
from shopadmin.services.settings import Settings


class FakeSMTP:
    """Stands in for smtplib.SMTP and records what was done with it."""

    instances: list["FakeSMTP"] = []
    fail_with: Exception | None = None

    def __init__(self, host, port):
        self.host = host
        self.port = port
        self.started_tls = False
        self.login_args = None
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, username, password):
        self.login_args = (username, password)

    def send_message(self, message):
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        self.sent.append(message)


@pytest.fixture(autouse=True)
def reset_fake_smtp():
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None


def make_settings(**overrides) -> Settings:
    values = {
        "mail_mailer": "smtp",
        "mail_host": "smtp.example.com",
        "mail_port": "587",
        "mail_username": "mailer",
        "mail_password": "s3cret",
        "mail_encryption": "tls",
        "mail_from_address": "shop@example.com",
        "mail_from_name": "Mega Sky Shop",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def test_smtp_delivery_with_tls_and_login():
    send_test_email(make_settings(), "admin@example.com", smtp_class=FakeSMTP)

    server = FakeSMTP.instances[0]
    assert (server.host, server.port) == ("smtp.example.com", 587)
    assert server.started_tls is True
    assert server.login_args == ("mailer", "s3cret")

    message = server.sent[0]
    assert message["To"] == "admin@example.com"
    assert message["From"] == "Mega Sky Shop <shop@example.com>"
    assert message["Subject"] == TEST_SUBJECT


def test_smtp_without_encryption_or_credentials():
    settings = make_settings(mail_encryption="", mail_username=None)

    send_test_email(settings, "admin@example.com", smtp_class=FakeSMTP)

    server = FakeSMTP.instances[0]
    assert server.started_tls is False
    assert server.login_args is None


def test_smtp_failure_raises_mailer_error():
    FakeSMTP.fail_with = smtplib.SMTPRecipientsRefused({"admin@example.com": (550, b"nope")})

    with pytest.raises(MailerError):
        send_test_email(make_settings(), "admin@example.com", smtp_class=FakeSMTP)


def test_missing_host_raises_mailer_error():
    with pytest.raises(MailerError, match="MAIL_HOST"):
        send_test_email(make_settings(mail_host=""), "admin@example.com", smtp_class=FakeSMTP)


def test_invalid_port_raises_mailer_error():
    with pytest.raises(MailerError, match="MAIL_PORT"):
        send_test_email(make_settings(mail_port="abc"), "admin@example.com", smtp_class=FakeSMTP)


@pytest.mark.parametrize("mailer", ["log", "array"])
def test_log_and_array_mailers_do_not_connect(mailer):
    send_test_email(make_settings(mail_mailer=mailer), "admin@example.com", smtp_class=FakeSMTP)

    assert FakeSMTP.instances == []


def test_unsupported_mailer():
    with pytest.raises(MailerError, match="not supported"):
        send_test_email(make_settings(mail_mailer="ses"), "admin@example.com")

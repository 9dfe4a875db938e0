"""
Tests for the audit logging middleware.
"""

import logging

import pytest

from shopadmin.middleware.audit import method_to_action, parse_section_from_path


@pytest.fixture
def audit_records(caplog, monkeypatch):
    # caplog listens on the root logger
    monkeypatch.setattr(logging.getLogger("shopadmin.audit"), "propagate", True)
    caplog.set_level(logging.INFO, logger="shopadmin.audit")

    def records():
        return [record for record in caplog.records if record.name == "shopadmin.audit"]

    return records


def test_parse_section_from_path():
    assert parse_section_from_path("/api/settings/mail/") == "mail"
    assert parse_section_from_path("/api/settings/facebook-pixel/test") == "facebook-pixel"
    assert parse_section_from_path("/api/settings/") is None
    assert parse_section_from_path("/api/tracking/events") is None


def test_method_to_action():
    assert method_to_action("POST", "/api/settings/mail/") == "update"
    assert method_to_action("POST", "/api/settings/mail/test") == "test"
    assert method_to_action("DELETE", "/api/settings/mail/") == "delete"
    assert method_to_action("OPTIONS", "/api/settings/mail/") == "options"


def test_settings_update_is_audited(client, audit_records):
    response = client.post(
        "/api/settings/facebook-pixel/", json={"FACEBOOK_PIXEL_ID": "999"}
    )

    assert response.status_code == 200
    [record] = audit_records()
    assert record.getMessage() == "Settings update [facebook-pixel]: success"
    assert record.section == "facebook-pixel"
    assert record.action == "update"
    assert record.status_code == 200


def test_rejected_settings_update_is_audited_as_failed(client, audit_records):
    client.post("/api/settings/facebook-pixel/", json={"FACEBOOK_PIXEL_ID": "x" * 256})

    [record] = audit_records()
    assert record.status == "failed"
    assert record.status_code == 422


def test_reads_and_tracking_are_not_audited(client, audit_records):
    client.get("/api/settings/facebook-pixel/")
    client.get("/api/tracking/config")
    client.post("/api/tracking/events", json={"name": "Purchase"})

    assert audit_records() == []

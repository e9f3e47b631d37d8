import logging

import pytest

from conftest import load_app


@pytest.fixture()
def test_client(monkeypatch):
    return load_app(monkeypatch).test_client()


def test_request_id_header_and_propagation(test_client):
    resp = test_client.get("/__ok", headers={"X-Request-ID": "my-fixed-id-123"})
    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == "my-fixed-id-123"


def test_request_id_generated_when_missing(test_client):
    resp = test_client.get("/__ok")
    assert len(resp.headers.get("X-Request-ID", "")) == 32


def test_logs_include_request_id_attribute(monkeypatch, caplog):
    app = load_app(monkeypatch)
    caplog.set_level("INFO")
    client = app.test_client()
    resp = client.get("/__log", headers={"X-Request-ID": "rid-abc"})
    assert resp.status_code == 200
    assert any(getattr(r, "request_id", "") == "rid-abc" for r in caplog.records)


def test_customer_details_masked_in_info(monkeypatch, caplog):
    from app.logging import MaskingFilter
    app = load_app(monkeypatch, env={"LOG_LEVEL": "INFO"})
    caplog.set_level("INFO")
    caplog.handler.addFilter(MaskingFilter())
    logger = logging.getLogger("mask_test")
    with app.app_context():
        logger.info({
            "event": "order_created",
            "email": "user@example.com",
            "customer": {"customer_phone": "+4512345678", "city": "Aarhus"},
        })
    record = next(r for r in caplog.records if r.name == "mask_test")
    assert record.msg["email"] == "[REDACTED]"
    assert record.msg["customer"]["customer_phone"] == "[REDACTED]"
    assert record.msg["customer"]["city"] == "Aarhus"
    assert record.msg["event"] == "order_created"


def test_sensitive_fields_visible_in_debug(monkeypatch, caplog):
    from app.logging import MaskingFilter
    app = load_app(monkeypatch, env={"LOG_LEVEL": "DEBUG"})
    monkeypatch.setenv("APP_ENV", "development")
    caplog.set_level("DEBUG")
    caplog.handler.addFilter(MaskingFilter())
    logger = logging.getLogger("mask_test_debug")
    with app.app_context():
        logger.debug({"password": "secret"})
    record = next(r for r in caplog.records if r.name == "mask_test_debug")
    assert record.msg["password"] == "secret"


def test_json_formatter_merges_dict_messages():
    import json
    from app.logging import JsonFormatter

    record = logging.LogRecord("orders", logging.INFO, __file__, 1, {"event": "priced", "total": "10"}, None, None)
    data = json.loads(JsonFormatter().format(record))
    assert data["event"] == "priced"
    assert data["level"] == "INFO"
    assert "message" not in data

import pytest

from conftest import load_app


@pytest.fixture()
def test_client(monkeypatch):
    return load_app(monkeypatch).test_client()


def test_traceparent_header(test_client):
    resp = test_client.get("/__ok")
    assert resp.status_code == 200
    assert "traceparent" in resp.headers

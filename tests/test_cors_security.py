from conftest import load_app


def test_cors_preflight_allows_whitelisted_origin(monkeypatch):
    app = load_app(monkeypatch, env={"CORS_ALLOWED_ORIGINS": "http://localhost:3000,https://shop.example.com"})
    client = app.test_client()
    resp = client.open(
        "/__ok",
        method="OPTIONS",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert resp.status_code in (200, 204)
    assert resp.headers.get("Access-Control-Allow-Origin") == "http://localhost:3000"
    vary = resp.headers.get("Vary")
    if vary:
        assert "Origin" in vary


def test_cors_preflight_blocks_disallowed_origin(monkeypatch):
    app = load_app(monkeypatch, env={"CORS_ALLOWED_ORIGINS": "https://shop.example.com"})
    client = app.test_client()
    resp = client.open(
        "/__ok",
        method="OPTIONS",
        headers={
            "Origin": "http://evil.test",
            "Access-Control-Request-Method": "GET",
        },
    )
    assert resp.status_code in (200, 204)
    assert "Access-Control-Allow-Origin" not in resp.headers

def test_health_check(client):
    response = client.get('/health')
    assert response.status_code == 200
    json_data = response.get_json()
    assert json_data.get('status') == 'ok'


def test_metrics_endpoint(client):
    response = client.get('/metrics')
    assert response.status_code == 200


def test_security_headers(client):
    response = client.get('/health')
    assert response.headers['X-Content-Type-Options'] == 'nosniff'
    assert response.headers['X-Frame-Options'] == 'DENY'
    exposed = response.headers['Access-Control-Expose-Headers']
    assert 'X-Request-ID' in exposed
    assert 'traceparent' in exposed

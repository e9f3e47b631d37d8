import pytest

from conftest import load_app


@pytest.fixture()
def test_client(monkeypatch):
    return load_app(monkeypatch).test_client()


def test_404_json_envelope(test_client):
    resp = test_client.get('/no/such/route')
    assert resp.status_code == 404
    data = resp.get_json()
    assert data['status'] == 'error'
    assert data['code'] == 404
    assert isinstance(data.get('message'), str)


def test_unexpected_500_json_envelope(test_client):
    resp = test_client.get('/__boom')
    assert resp.status_code == 500
    data = resp.get_json()
    assert data['status'] == 'error'
    assert data['code'] == 500
    assert 'RuntimeError' not in data['message']


def test_ok_helper_endpoint(test_client):
    resp = test_client.get('/__ok')
    assert resp.status_code == 200
    data = resp.get_json()
    assert data == {
        'status': 'success',
        'message': 'success',
        'data': {'ping': 'pong'}
    }


def test_test_support_also_available_under_api_v1(test_client):
    resp = test_client.get('/api/v1/test_support/__ok')
    assert resp.status_code == 200
    assert resp.get_json()['data']['ping'] == 'pong'

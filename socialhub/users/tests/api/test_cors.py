import pytest
from rest_framework import status

ORIGIN = "http://localhost:3000"


@pytest.fixture(autouse=True)
def _web_client_origin(settings):
    settings.CORS_ALLOWED_ORIGINS = [ORIGIN]
    settings.CORS_ALLOW_CREDENTIALS = True


def test_preflight_allows_web_client_with_credentials(client):
    r = client.options(
        "/api/v1/posts/feed/",
        HTTP_ORIGIN=ORIGIN,
        HTTP_ACCESS_CONTROL_REQUEST_METHOD="GET",
    )

    assert r.status_code == status.HTTP_200_OK
    assert r["Access-Control-Allow-Origin"] == ORIGIN
    assert r["Access-Control-Allow-Credentials"] == "true"


def test_unknown_origin_gets_no_cors_headers(client):
    r = client.options(
        "/api/v1/posts/feed/",
        HTTP_ORIGIN="https://evil.example.com",
        HTTP_ACCESS_CONTROL_REQUEST_METHOD="GET",
    )

    assert "Access-Control-Allow-Origin" not in r


@pytest.mark.django_db
def test_simple_request_carries_cors_headers(client):
    r = client.get("/api/v1/notifications/", HTTP_ORIGIN=ORIGIN)

    assert r.status_code == status.HTTP_401_UNAUTHORIZED
    assert r["Access-Control-Allow-Origin"] == ORIGIN

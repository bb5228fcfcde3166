import pytest


@pytest.fixture
def api():
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def register(api):
    """Register `username` and return the JSON body of the 201 response."""
    def _register(username):
        r = api.post("/api/auth/register", {"username": username}, format="json")
        assert r.status_code == 201, r.content
        return r.json()
    return _register


@pytest.fixture
def authed():
    """APIClient carrying `Authorization: Bearer <token>`."""
    from rest_framework.test import APIClient

    def _authed(token):
        c = APIClient()
        c.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        return c
    return _authed

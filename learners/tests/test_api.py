# learners/tests/test_api.py
import pytest

from learners.models import Learner


@pytest.mark.django_db
def test_register_returns_credential_and_initial_state(api):
    r = api.post("/api/auth/register", {"username": "alice"}, format="json")
    assert r.status_code == 201
    body = r.json()
    assert body["username"] == "alice"
    assert body["lastTask"] == 1
    assert body["token"]
    learner = Learner.objects.get(username="alice")
    assert body["userId"] == str(learner.id)
    assert learner.last_task == 1


@pytest.mark.django_db
@pytest.mark.parametrize("payload", [{"username": "ab"}, {"username": ""}, {}])
def test_register_rejects_short_or_missing_username(api, payload):
    r = api.post("/api/auth/register", payload, format="json")
    assert r.status_code == 400
    assert Learner.objects.count() == 0


@pytest.mark.django_db
def test_register_twice_conflicts_and_first_token_stays_valid(api, register, authed):
    first = register("alice")

    r = api.post("/api/auth/register", {"username": "alice"}, format="json")
    assert r.status_code == 409
    assert "already exists" in r.json()["detail"]
    assert Learner.objects.filter(username="alice").count() == 1

    g = authed(first["token"]).get("/api/user/progress")
    assert g.status_code == 200
    assert g.json()["username"] == "alice"


@pytest.mark.django_db
def test_usernames_are_case_sensitive(register):
    a = register("alice")
    b = register("Alice")
    assert a["userId"] != b["userId"]


@pytest.mark.django_db
def test_login_unknown_username_is_404(api):
    r = api.post("/api/auth/login", {"username": "nobody"}, format="json")
    assert r.status_code == 404
    assert r.json()["detail"] == "User not found."


@pytest.mark.django_db
def test_login_returns_fresh_credential_and_last_task(api, register, authed):
    reg = register("alice")
    assert authed(reg["token"]).post("/api/user/last-task", {"taskId": 7}, format="json").status_code == 200

    r = api.post("/api/auth/login", {"username": "alice"}, format="json")
    assert r.status_code == 200
    body = r.json()
    assert body["userId"] == reg["userId"]
    assert body["lastTask"] == 7
    assert authed(body["token"]).get("/api/user/progress").status_code == 200


@pytest.mark.django_db
def test_login_does_not_trim_username(api, register):
    register("alice")
    r = api.post("/api/auth/login", {"username": " alice "}, format="json")
    assert r.status_code == 404


@pytest.mark.django_db
def test_health_needs_no_credential(api):
    r = api.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "OK"
    assert r["X-Request-ID"]

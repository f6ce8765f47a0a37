from fastapi import FastAPI, Depends
from fastapi.testclient import TestClient

from boutique.utils.security import (
    COOKIE_NAME,
    current_username,
    get_current_user,
    get_optional_user,
)


def _make_app():
    app = FastAPI()

    @app.get("/me")
    def me(user=Depends(get_current_user)):
        return user

    @app.get("/maybe")
    def maybe(user=Depends(get_optional_user)):
        return {"username": current_username(user)}

    return app


def _fake_user_from_token(token):
    if token == "good":
        return {"id": "u1", "email": "client@example.com", "metadata": {}, "token": token}
    return {"id": None}


def test_missing_token_is_401():
    client = TestClient(_make_app())
    r = client.get("/me")
    assert r.status_code == 401
    assert r.json()["detail"] == "Non authentifié"


def test_bearer_token_resolves_user(monkeypatch):
    monkeypatch.setattr("boutique.auth.service.get_user_from_token", _fake_user_from_token)
    client = TestClient(_make_app())
    r = client.get("/me", headers={"Authorization": "Bearer good"})
    assert r.status_code == 200
    assert r.json()["email"] == "client@example.com"


def test_cookie_token_is_fallback(monkeypatch):
    monkeypatch.setattr("boutique.auth.service.get_user_from_token", _fake_user_from_token)
    client = TestClient(_make_app())
    client.cookies.set(COOKIE_NAME, "good")
    assert client.get("/me").status_code == 200


def test_expired_token_is_401(monkeypatch):
    monkeypatch.setattr("boutique.auth.service.get_user_from_token", _fake_user_from_token)
    client = TestClient(_make_app())
    r = client.get("/me", headers={"Authorization": "Bearer stale"})
    assert r.status_code == 401
    assert "Session expirée" in r.json()["detail"]


def test_auth_backend_error_is_401(monkeypatch):
    def _boom(token):
        raise RuntimeError("supabase down")
    monkeypatch.setattr("boutique.auth.service.get_user_from_token", _boom)
    client = TestClient(_make_app())
    assert client.get("/me", headers={"Authorization": "Bearer good"}).status_code == 401


def test_optional_user_never_raises(monkeypatch):
    monkeypatch.setattr("boutique.auth.service.get_user_from_token", _fake_user_from_token)
    client = TestClient(_make_app())
    assert client.get("/maybe").json() == {"username": None}
    assert client.get("/maybe", headers={"Authorization": "Bearer good"}).json() == {"username": "client@example.com"}


def test_current_username():
    assert current_username(None) is None
    assert current_username({"email": "  "}) is None
    assert current_username({"email": " a@example.com "}) == "a@example.com"

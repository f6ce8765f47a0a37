import hashlib
from types import SimpleNamespace

from fastapi import FastAPI, Depends, Request
from fastapi.testclient import TestClient

from boutique.utils.rate_limit import optional_rate_limit, rate_limit_health_info


def _make_app(times=2, seconds=60):
    app = FastAPI()

    @app.post("/checkout", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def checkout():
        return {"ok": True}

    @app.post("/other", dependencies=[Depends(optional_rate_limit(times, seconds))])
    def other():
        return {"ok": True}

    @app.get("/rl_info")
    def rl_info(request: Request):
        return rate_limit_health_info(request)

    return app


def test_local_fallback_blocks_after_limit(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=2))

    assert client.post("/checkout").status_code == 200
    assert client.post("/checkout").status_code == 200
    assert client.post("/checkout").status_code == 429


def test_local_fallback_is_per_path_and_cookie(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    client = TestClient(_make_app(times=1))
    client.cookies.set("sb_access", "session-a")

    assert client.post("/checkout").status_code == 200
    assert client.post("/checkout").status_code == 429
    assert client.post("/other").status_code == 200

    # Autre session: compteur indépendant
    client.cookies.set("sb_access", "session-b")
    assert client.post("/checkout").status_code == 200


def test_disabled_flag_bypasses_limit(monkeypatch):
    monkeypatch.delenv("LOCAL_RATE_LIMIT_FALLBACK", raising=False)
    app = _make_app(times=1)
    app.state.rate_limit_enabled = False
    client = TestClient(app)
    for _ in range(3):
        assert client.post("/checkout").status_code == 200


def test_health_info_reports_state():
    app = _make_app()
    app.state.rate_limit_enabled = False
    info = TestClient(app).get("/rl_info").json()
    assert info["enabled"] is False
    assert set(info) == {"enabled", "ready", "backend"}


def test_local_fallback_drops_expired_keys(monkeypatch):
    monkeypatch.setenv("LOCAL_RATE_LIMIT_FALLBACK", "1")
    clock = [1000.0]
    monkeypatch.setattr("boutique.utils.rate_limit.time", SimpleNamespace(time=lambda: clock[0]))
    app = _make_app(times=2, seconds=1)
    client = TestClient(app)

    client.cookies.set("sb_access", "session-a")
    assert client.post("/checkout").status_code == 200
    assert len(app.state._rl_store[1]) == 1

    clock[0] += 1.5
    client.cookies.set("sb_access", "session-b")
    assert client.post("/checkout").status_code == 200

    store = app.state._rl_store[1]
    assert len(store) == 1
    expected = hashlib.sha256(b"session-b").hexdigest()[:16]
    assert expected in next(iter(store))

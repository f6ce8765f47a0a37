import os

# Pas de Redis pendant les tests: le lifespan désactive le rate limiting
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")

import pytest
from cryptography.fernet import Fernet

# Clé de chiffrement du coffre pour toute la session de tests
os.environ.setdefault("CARD_VAULT_KEY", Fernet.generate_key().decode("ascii"))

from typing import Any, Dict, Generator, Optional
from fastapi.testclient import TestClient
from unittest.mock import MagicMock

from boutique.app import app as fastapi_app
from boutique.cards.vault import CardVault
from boutique.utils.security import get_optional_user

# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/tests/unit/" in nodeid or nodeid.startswith("tests/unit/") or nodeid.startswith("unit/"):
            item.add_marker(pytest.mark.unit)
        elif "/tests/integration/" in nodeid or nodeid.startswith("tests/integration/") or nodeid.startswith("integration/"):
            item.add_marker(pytest.mark.integration)


class InMemoryCardStore:
    """Store find/upsert en mémoire (même contrat que les stores Supabase / fichier)."""

    def __init__(self, rows: Optional[Dict[str, Dict[str, Any]]] = None):
        self.rows: Dict[str, Dict[str, Any]] = {k: dict(v) for k, v in (rows or {}).items()}
        self.upserts = 0

    def find(self, owner_id):
        row = self.rows.get(owner_id)
        return dict(row, username=owner_id) if row else None

    def upsert(self, owner_id, row):
        self.upserts += 1
        self.rows[owner_id] = dict(row)


@pytest.fixture
def memory_store() -> InMemoryCardStore:
    return InMemoryCardStore()


@pytest.fixture
def memory_vault(memory_store) -> CardVault:
    return CardVault(memory_store)


@pytest.fixture(scope="session")
def app():
    return fastapi_app

@pytest.fixture()
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c

FAKE_USER: Dict[str, Any] = {
    "id": "test-user",
    "email": "client@example.com",
    "metadata": {"full_name": "Client Test"},
    "token": "fake-token",
}

# Simuler un utilisateur authentifié pour les endpoints du checkout
@pytest.fixture(autouse=True)
def _override_optional_user(app):
    app.dependency_overrides[get_optional_user] = lambda: FAKE_USER
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_optional_user, None)

# Aucun accès réseau à Supabase pendant les tests
@pytest.fixture(scope="function", autouse=True)
def mock_db_dependency(monkeypatch):
    monkeypatch.setattr("boutique.infra.supabase_client.get_supabase", lambda: MagicMock())
    monkeypatch.setattr("boutique.infra.supabase_client.get_service_supabase", lambda: MagicMock())
    monkeypatch.setattr("boutique.health.router.health_supabase_info", lambda: {"connect_ok": True})

"""
Accès aux données du coffre à cartes (une ligne par username).

Deux backends exposant la même interface find/upsert:
- SupabaseCardStore: table 'stored_credit_cards', upsert atomique on_conflict=username.
- JsonFileCardStore: document JSON local, écrit via fichier temporaire + os.replace.
Les lignes reçues portent déjà un card_number chiffré (voir cards.crypto).

Contrairement aux autres repositories, les erreurs ne sont pas converties en valeurs neutres:
une ligne absente renvoie None, toute autre panne lève VaultStorageError.
"""
import json
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional

import boutique.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)

TABLE = "stored_credit_cards"
COLUMNS = "username, card_number, expiry_month, expiry_year"


class VaultStorageError(RuntimeError):
    """Panne du stockage des cartes (I/O, document corrompu, erreur API)."""


class SupabaseCardStore:
    def find(self, owner_id: str) -> Optional[Dict[str, Any]]:
        try:
            res = (
                supabase_client.get_service_supabase()
                .table(TABLE)
                .select(COLUMNS)
                .eq("username", owner_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.exception("cards.repository.find failed username=%s", owner_id)
            raise VaultStorageError(f"Lecture du coffre impossible: {e}") from e
        rows = res.data or []
        return rows[0] if rows else None

    def upsert(self, owner_id: str, row: Dict[str, Any]) -> None:
        payload = dict(row, username=owner_id)
        try:
            (
                supabase_client.get_service_supabase()
                .table(TABLE)
                .upsert(payload, on_conflict="username")
                .execute()
            )
        except Exception as e:
            logger.exception("cards.repository.upsert failed username=%s", owner_id)
            raise VaultStorageError(f"Écriture du coffre impossible: {e}") from e


class JsonFileCardStore:
    """
    Coffre fichier: {"cards": {"<username>": {card_number, expiry_month, expiry_year}}}.
    Un verrou unique sérialise les lectures-modifications-écritures du document.
    """

    def __init__(self, path: Path):
        self._path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, Dict[str, Any]]:
        if not self._path.exists():
            return {}
        try:
            document = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            logger.exception("cards.repository read failed path=%s", self._path)
            raise VaultStorageError(f"Coffre illisible: {self._path}") from e
        cards = document.get("cards") if isinstance(document, dict) else None
        if not isinstance(cards, dict):
            raise VaultStorageError(f"Coffre corrompu: {self._path}")
        return cards

    def _write(self, cards: Dict[str, Dict[str, Any]]) -> None:
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps({"cards": cards}, indent=2, sort_keys=True), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            logger.exception("cards.repository write failed path=%s", self._path)
            raise VaultStorageError(f"Écriture du coffre impossible: {self._path}") from e

    def find(self, owner_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            row = self._read().get(owner_id)
        return dict(row, username=owner_id) if row else None

    def upsert(self, owner_id: str, row: Dict[str, Any]) -> None:
        with self._lock:
            cards = self._read()
            cards[owner_id] = {k: v for k, v in row.items() if k != "username"}
            self._write(cards)

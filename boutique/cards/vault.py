"""
Coffre à cartes: au plus une carte enregistrée par utilisateur.
- lookup(owner_id): résultat explicite présent/absent (jamais d'exception pour « absent »).
- load_card(owner_id): carte enregistrée, ou sentinelle vide si absente.
- save_card(owner_id, card): remplacement complet (upsert), idempotent.
Le numéro est chiffré (CardCipher) avant d'atteindre le store, quel que soit le backend.
Les pannes de stockage (VaultStorageError) remontent telles quelles à l'appelant.
"""
import logging
from typing import Any, Dict, Optional

from boutique.config import CARD_VAULT_BACKEND, CARD_VAULT_PATH
from .crypto import CardCipher, get_card_cipher
from .models import CardLookup, EffectiveCard, StoredCard
from .repository import JsonFileCardStore, SupabaseCardStore, VaultStorageError

logger = logging.getLogger(__name__)


class CardVault:
    def __init__(self, store, cipher: Optional[CardCipher] = None):
        self._store = store
        self._cipher = cipher or get_card_cipher()

    def _row_to_card(self, owner_id: str, row: Dict[str, Any]) -> StoredCard:
        try:
            month = int(row.get("expiry_month") or 0)
            year = int(row.get("expiry_year") or 0)
        except (TypeError, ValueError) as e:
            raise VaultStorageError(f"Carte enregistrée invalide pour {owner_id}") from e
        encrypted = row.get("card_number") or ""
        number = self._cipher.decrypt(str(encrypted)) if encrypted else ""
        return StoredCard(owner_id=owner_id, number=number, expiry_month=month, expiry_year=year)

    def lookup(self, owner_id: str) -> CardLookup:
        row = self._store.find(owner_id)
        if not row:
            return CardLookup(found=False)
        return CardLookup(found=True, card=self._row_to_card(owner_id, row))

    def load_card(self, owner_id: str) -> StoredCard:
        result = self.lookup(owner_id)
        if not result.found:
            return StoredCard.empty(owner_id)
        return result.card

    def save_card(self, owner_id: str, card: EffectiveCard) -> StoredCard:
        if not owner_id:
            raise ValueError("owner_id requis pour enregistrer une carte")
        saved = StoredCard(
            owner_id=owner_id,
            number=card.number,
            expiry_month=card.expiry_month,
            expiry_year=card.expiry_year,
        )
        # Chiffrement non déterministe: une carte identique n'est pas réécrite
        try:
            current = self.load_card(owner_id)
        except VaultStorageError:
            logger.warning("cards.vault unreadable stored card replaced username=%s", owner_id)
            current = None
        if current == saved:
            return saved
        self._store.upsert(owner_id, {
            "card_number": self._cipher.encrypt(card.number),
            "expiry_month": card.expiry_month,
            "expiry_year": card.expiry_year,
        })
        logger.info("cards.vault saved card=%s username=%s", card.masked_number, owner_id)
        return saved


_vault: Optional[CardVault] = None


def build_card_vault(backend: str = CARD_VAULT_BACKEND) -> CardVault:
    if backend == "file":
        return CardVault(JsonFileCardStore(CARD_VAULT_PATH))
    if backend == "supabase":
        return CardVault(SupabaseCardStore())
    raise RuntimeError(f"CARD_VAULT_BACKEND inconnu: {backend}")


def get_card_vault() -> CardVault:
    global _vault
    if _vault is None:
        _vault = build_card_vault()
    return _vault

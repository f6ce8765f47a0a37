"""
Chiffrement des numéros de carte au repos (Fernet: AES-128-CBC + HMAC-SHA256).
Seul le numéro complet est chiffré; le masque affiché est recalculé après déchiffrement.
"""
import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from boutique.config import CARD_VAULT_KEY
from .repository import VaultStorageError

logger = logging.getLogger(__name__)


class CardCipher:
    def __init__(self, key: str):
        try:
            self._fernet = Fernet(key.encode("utf-8") if isinstance(key, str) else key)
        except (TypeError, ValueError) as e:
            raise RuntimeError("CARD_VAULT_KEY invalide (clé Fernet attendue)") from e

    def encrypt(self, number: str) -> str:
        return self._fernet.encrypt((number or "").encode("utf-8")).decode("ascii")

    def decrypt(self, token: str) -> str:
        try:
            return self._fernet.decrypt((token or "").encode("ascii")).decode("utf-8")
        except (InvalidToken, UnicodeError) as e:
            logger.error("cards.crypto decrypt failed (clé différente ou donnée altérée)")
            raise VaultStorageError("Numéro de carte enregistré indéchiffrable") from e


_cipher: Optional[CardCipher] = None


def get_card_cipher() -> CardCipher:
    global _cipher
    if not CARD_VAULT_KEY:
        raise RuntimeError("CARD_VAULT_KEY manquant pour le coffre à cartes")
    if _cipher is None:
        _cipher = CardCipher(CARD_VAULT_KEY)
    return _cipher

"""
Module 'cards' (feature-first): point d'entrée public du coffre à cartes.
Réunit les types de cartes, les backends de stockage et l'adaptateur CardVault.
"""

from .models import (
    VISIBLE_DIGITS,
    CardLookup,
    EffectiveCard,
    StoredCard,
    SubmittedCardInput,
    mask_number,
)
from .repository import JsonFileCardStore, SupabaseCardStore, VaultStorageError
from .crypto import CardCipher, get_card_cipher
from .vault import CardVault, build_card_vault, get_card_vault

__all__ = [
    # models
    "VISIBLE_DIGITS",
    "CardLookup",
    "EffectiveCard",
    "StoredCard",
    "SubmittedCardInput",
    "mask_number",
    # crypto
    "CardCipher",
    "get_card_cipher",
    # repository
    "JsonFileCardStore",
    "SupabaseCardStore",
    "VaultStorageError",
    # vault
    "CardVault",
    "build_card_vault",
    "get_card_vault",
]

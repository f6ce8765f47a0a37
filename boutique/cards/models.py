# module boutique.cards.models
"""Types du coffre à cartes.
- StoredCard: la carte enregistrée d'un utilisateur (au plus une par username).
- SubmittedCardInput: ce que l'utilisateur a saisi dans le formulaire de checkout.
- EffectiveCard: la carte retenue après réconciliation (validée, débitée, éventuellement enregistrée).
- CardLookup: résultat explicite d'une lecture du coffre (présente / absente).
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict

# Nombre de chiffres laissés visibles par le formulaire (carte masquée)
VISIBLE_DIGITS = 4


def mask_number(number: str) -> str:
    """Masque un numéro en ne gardant que les 4 derniers caractères ("************1234")."""
    number = number or ""
    if len(number) <= VISIBLE_DIGITS:
        return number
    return "*" * (len(number) - VISIBLE_DIGITS) + number[-VISIBLE_DIGITS:]


class StoredCard(BaseModel):
    owner_id: str
    number: str = ""
    expiry_month: int = 0
    expiry_year: int = 0

    @classmethod
    def empty(cls, owner_id: str) -> "StoredCard":
        """Sentinelle 'aucune carte enregistrée': numéro vide, expiration à zéro."""
        return cls(owner_id=owner_id)

    @property
    def is_on_file(self) -> bool:
        # Un reliquat de 4 caractères ou moins ne compte pas comme une carte
        return len(self.number or "") > VISIBLE_DIGITS

    @property
    def last_four(self) -> str:
        return (self.number or "")[-VISIBLE_DIGITS:]

    @property
    def masked_number(self) -> str:
        return mask_number(self.number)


class SubmittedCardInput(BaseModel):
    number_field: str = ""
    expiry_month: int = 0
    expiry_year: int = 0


class EffectiveCard(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: str
    expiry_month: int
    expiry_year: int

    @property
    def expiry(self) -> date:
        """Premier jour du mois d'expiration (à n'utiliser qu'après validation)."""
        return date(self.expiry_year, self.expiry_month, 1)

    @property
    def masked_number(self) -> str:
        return mask_number(self.number)


class CardLookup(BaseModel):
    found: bool
    card: Optional[StoredCard] = None

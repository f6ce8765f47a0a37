# module boutique.checkout.reconciliation
"""
Réconciliation carte enregistrée / carte saisie (logique pure, pas de DB, pas de Stripe).

Précondition côté appelant: lorsqu'une carte est enregistrée, le formulaire a été pré-rempli
avec son numéro masqué (seuls les 4 derniers chiffres visibles). Un numéro soumis qui se termine
par les mêmes 4 caractères est donc un écho de la carte enregistrée, pas une nouvelle carte.
"""
import re
from datetime import date
from typing import List

from boutique.cards.models import VISIBLE_DIGITS, EffectiveCard, StoredCard, SubmittedCardInput

_SEPARATORS = re.compile(r"[\s-]+")


def reconcile(stored: StoredCard, submitted: SubmittedCardInput) -> EffectiveCard:
    """
    Détermine la carte à débiter.
    - Pas de carte enregistrée (numéro de 4 caractères ou moins): tout vient du formulaire.
    - Sinon, numéro et expiration sont décidés indépendamment:
      * 4 derniers caractères différents => numéro soumis, sinon numéro enregistré
      * (mois, année) différents => expiration soumise, sinon expiration enregistrée
    """
    number_field = submitted.number_field or ""
    if not stored.is_on_file:
        return EffectiveCard(
            number=number_field,
            expiry_month=submitted.expiry_month,
            expiry_year=submitted.expiry_year,
        )

    number = stored.number
    if number_field[-VISIBLE_DIGITS:] != stored.number[-VISIBLE_DIGITS:]:
        number = number_field

    expiry_month, expiry_year = stored.expiry_month, stored.expiry_year
    if submitted.expiry_month != stored.expiry_month or submitted.expiry_year != stored.expiry_year:
        expiry_month, expiry_year = submitted.expiry_month, submitted.expiry_year

    return EffectiveCard(number=number, expiry_month=expiry_month, expiry_year=expiry_year)


def normalize_number(number: str) -> str:
    """Retire espaces et tirets d'un numéro de carte."""
    return _SEPARATORS.sub("", number or "")


def validate_card(card: EffectiveCard) -> List[str]:
    """
    Règles de format de la carte retenue; retourne la liste des messages d'erreur ([] si valide).
    - numéro: chiffres uniquement, plus de 4 caractères
    - mois entre 1 et 12, année renseignée et représentable en date
    La date d'expiration dans le futur relève de l'autorisateur, pas de cette couche.
    """
    errors: List[str] = []
    number = normalize_number(card.number)
    if len(number) <= VISIBLE_DIGITS or not number.isdigit():
        errors.append("Cette carte n'est pas valide. Veuillez saisir une carte valide.")
    if not 1 <= card.expiry_month <= 12:
        errors.append("Le mois d'expiration doit être compris entre 1 et 12.")
    if card.expiry_year <= 0:
        errors.append("L'année d'expiration est requise.")
    elif card.expiry_year > date.max.year:
        errors.append("L'année d'expiration n'est pas valide.")
    return errors

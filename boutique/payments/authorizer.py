"""
Autorisation des paiements: charge_card(card, amount) -> code d'approbation.
- DemoAuthorizer: autorisation locale (code uuid), refuse les montants nuls et les cartes expirées.
- StripeAuthorizer: PaymentIntent confirmé immédiatement; refus carte => PaymentDeclinedError.
Un refus lève toujours PaymentDeclinedError; il n'est jamais traité comme un succès.
"""
import logging
from datetime import date
from typing import Optional
from uuid import uuid4

import stripe

from boutique.cards.models import EffectiveCard
from boutique.checkout.errors import PaymentDeclinedError
from boutique.checkout.reconciliation import normalize_number
from boutique.config import PAYMENT_AUTHORIZER
from . import stripe_client

logger = logging.getLogger(__name__)


def _is_expired(card: EffectiveCard, today: date) -> bool:
    return (card.expiry_year, card.expiry_month) < (today.year, today.month)


class DemoAuthorizer:
    def charge_card(self, card: EffectiveCard, amount: float) -> str:
        if amount <= 0:
            raise PaymentDeclinedError("Montant à débiter invalide.")
        if _is_expired(card, date.today()):
            raise PaymentDeclinedError("Cette carte est expirée.")
        approval_code = uuid4().hex
        logger.info("payments.authorizer demo approved card=%s amount=%.2f", card.masked_number, amount)
        return approval_code


class StripeAuthorizer:
    def charge_card(self, card: EffectiveCard, amount: float) -> str:
        try:
            intent = stripe_client.create_card_payment(
                amount=amount,
                number=normalize_number(card.number),
                exp_month=card.expiry_month,
                exp_year=card.expiry_year,
            )
        except stripe.CardError as e:
            logger.info("payments.authorizer stripe declined card=%s code=%s", card.masked_number, getattr(e, "code", None))
            raise PaymentDeclinedError(getattr(e, "user_message", None) or "Le paiement a été refusé.") from e

        status = intent.get("status") or ""
        if status != "succeeded":
            raise PaymentDeclinedError(f"Paiement non confirmé (status={status})")
        logger.info("payments.authorizer stripe approved card=%s intent=%s", card.masked_number, intent.get("id"))
        return str(intent.get("id"))


def get_authorizer(kind: Optional[str] = None):
    """Autorisateur configuré (PAYMENT_AUTHORIZER=demo|stripe)."""
    kind = kind or PAYMENT_AUTHORIZER
    if kind == "stripe":
        return StripeAuthorizer()
    if kind == "demo":
        return DemoAuthorizer()
    raise RuntimeError(f"PAYMENT_AUTHORIZER inconnu: {kind}")

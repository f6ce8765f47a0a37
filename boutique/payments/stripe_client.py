"""
Adaptateur Stripe: centralise les appels et la configuration Stripe.
"""
import stripe
from typing import Any, Dict, Optional
from boutique.config import STRIPE_SECRET_KEY, STRIPE_CURRENCY

# module boutique.payments.stripe_client
def require_stripe() -> stripe:
    """
    Prépare et retourne le module stripe prêt à l'emploi.
    - Configure stripe.api_key via STRIPE_SECRET_KEY si disponible.
    - En absence de clé, les appels Stripe échoueront côté SDK (ex: No API key provided).
    """
    if STRIPE_SECRET_KEY:
        stripe.api_key = STRIPE_SECRET_KEY
    return stripe

def to_minor_units(amount: float) -> int:
    """Montant en centimes (arrondi)."""
    return int(round(amount * 100))

def create_card_payment(
    *,
    amount: float,
    number: str,
    exp_month: int,
    exp_year: int,
    metadata: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Crée et confirme un PaymentIntent carte en une étape.
    - amount: montant en unités (converti en centimes)
    - number / exp_month / exp_year: carte retenue par le checkout
    - Pas de redirection (3DS) possible: allow_redirects="never"
    Retour: dict PaymentIntent incluant "id" et "status".
    """
    require_stripe()
    intent = stripe.PaymentIntent.create(
        amount=to_minor_units(amount),
        currency=STRIPE_CURRENCY,
        payment_method_data={
            "type": "card",
            "card": {"number": number, "exp_month": exp_month, "exp_year": exp_year},
        },
        confirm=True,
        automatic_payment_methods={"enabled": True, "allow_redirects": "never"},
        metadata=metadata or {},
    )
    # stripe retourne un objet; on le traite comme dict-compatible
    return dict(intent)

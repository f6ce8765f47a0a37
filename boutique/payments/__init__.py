"""
Module 'payments' (feature-first): point d'entrée public.
Réunit le client Stripe et les autorisateurs utilisés par le checkout.
"""

from .stripe_client import require_stripe, to_minor_units, create_card_payment
from .authorizer import DemoAuthorizer, StripeAuthorizer, get_authorizer

__all__ = [
    # stripe
    "require_stripe",
    "to_minor_units",
    "create_card_payment",
    # authorizers
    "DemoAuthorizer",
    "StripeAuthorizer",
    "get_authorizer",
]

# module boutique.checkout.models
"""Modèles d'entrée/sortie du checkout.
- CheckoutForm: formulaire soumis (livraison + carte + option « mémoriser la carte »).
- CheckoutContext: contexte explicite de la requête (identité, panier, commande en attente),
  construit par la vue à partir de la session pour garder le service testable sans session.
- CheckoutPage / CheckoutResult / PackageTracking: réponses des cas d'usage.
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from boutique.cards.models import SubmittedCardInput
from boutique.cart.models import Cart
from boutique.orders.models import Order
from boutique.shippers.models import ShippingOption


class CheckoutForm(BaseModel):
    ship_target: str = ""
    address: str = ""
    city: str = ""
    region: str = ""
    postal_code: str = ""
    country: str = ""
    shipping_method: int = 0
    credit_card: str = ""
    expiration_month: int = 0
    expiration_year: int = 0
    remember_credit_card: bool = False

    def card_input(self) -> SubmittedCardInput:
        return SubmittedCardInput(
            number_field=self.credit_card,
            expiry_month=self.expiration_month,
            expiry_year=self.expiration_year,
        )


class CheckoutContext(BaseModel):
    username: Optional[str] = None
    cart: Optional[Cart] = None
    pending_order_id: Optional[int] = None


class CheckoutPage(BaseModel):
    form: CheckoutForm = Field(default_factory=CheckoutForm)
    cart: Optional[Cart] = None
    shipping_options: List[ShippingOption] = Field(default_factory=list)
    available_expiration_years: List[int] = Field(default_factory=list)
    errors: List[dict] = Field(default_factory=list)


class CheckoutResult(BaseModel):
    order_id: int
    approval_code: str
    total: float


class PackageTracking(BaseModel):
    selected_carrier: Optional[str] = None
    selected_tracking_number: Optional[str] = None
    orders: List[Order] = Field(default_factory=list)

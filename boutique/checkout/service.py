"""Couche service du checkout.
Rôles:
- Préparer le formulaire (client, carte enregistrée masquée, panier, options de livraison).
- Soumettre le checkout: réconcilier la carte, la valider, l'autoriser, puis persister
  la commande et le paiement (et la carte si l'utilisateur l'a demandé).
- Reçus et suivi de colis pour le client courant.
Chaque cas d'usage reçoit un CheckoutContext explicite (identité, panier, commande en attente);
aucune lecture de session ici.
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional

from boutique.cards.repository import VaultStorageError
from boutique.cards.vault import get_card_vault
from boutique.cart.models import Cart
from boutique.config import CHECKOUT_EMPLOYEE_ID, EXPIRATION_YEARS_AHEAD
from boutique.customers import repository as customers_repository
from boutique.customers.repository import Customer
from boutique.orders import repository as orders_repository
from boutique.orders.models import Order, OrderLine, Shipment
from boutique.payments.authorizer import get_authorizer
from boutique.shippers import service as shippers_service
from boutique.shippers.models import Shipper
from .errors import (
    CardValidationError,
    CheckoutError,
    EmptyCartError,
    IdentificationError,
    OrderNotFoundError,
    UnknownShipperError,
)
from .models import CheckoutContext, CheckoutForm, CheckoutPage, CheckoutResult, PackageTracking
from .reconciliation import reconcile, validate_card

logger = logging.getLogger(__name__)

REQUIRED_DELAY = timedelta(days=7)
SHIPPED_DELAY = timedelta(days=3)
SHIPMENT_DELAY = timedelta(days=1)


def _resolve_customer(username: Optional[str]) -> Customer:
    if not username:
        raise IdentificationError()
    customer = customers_repository.get_customer_by_username(username)
    if customer is None:
        raise IdentificationError()
    return customer


def _require_cart(cart: Optional[Cart]) -> Cart:
    if cart is None or cart.is_empty():
        raise EmptyCartError()
    return cart


def expiration_years(today: Optional[date] = None) -> List[int]:
    """Années proposées dans le formulaire: année courante et les EXPIRATION_YEARS_AHEAD suivantes."""
    year = (today or date.today()).year
    return [year + i for i in range(EXPIRATION_YEARS_AHEAD + 1)]


def build_order(customer: Customer, form: CheckoutForm, cart: Cart, shipper: Shipper, now: datetime) -> Order:
    return Order(
        customer_id=customer.customer_id,
        employee_id=CHECKOUT_EMPLOYEE_ID,
        order_date=now,
        required_date=now + REQUIRED_DELAY,
        shipped_date=now + SHIPPED_DELAY,
        ship_via=shipper.shipper_id,
        freight=shipper.shipping_cost(cart.subtotal),
        ship_name=form.ship_target,
        ship_address=form.address,
        ship_city=form.city,
        ship_region=form.region,
        ship_postal_code=form.postal_code,
        ship_country=form.country,
        lines=[
            OrderLine(
                product_id=line.product_id,
                product_name=line.product_name,
                unit_price=line.unit_price,
                quantity=line.quantity,
                discount=line.discount,
            )
            for line in cart.lines
        ],
    )


def prepare_checkout(ctx: CheckoutContext) -> CheckoutPage:
    """Prépare le formulaire de checkout.
    - Utilisateur non identifiable: page vide + erreur d'identification.
    - Carte enregistrée: pré-remplit le numéro masqué et l'expiration (absence silencieuse).
    - Panier vide: page + erreur panier vide.
    - Sinon: adresse du client, années d'expiration et options de livraison pour le sous-total.
    """
    page = CheckoutPage()
    try:
        customer = _resolve_customer(ctx.username)
    except IdentificationError as e:
        page.errors.append(e.as_dict())
        return page

    stored = get_card_vault().load_card(ctx.username)
    if stored.is_on_file:
        page.form.credit_card = stored.masked_number
        page.form.expiration_month = stored.expiry_month
        page.form.expiration_year = stored.expiry_year

    try:
        cart = _require_cart(ctx.cart)
    except EmptyCartError as e:
        page.errors.append(e.as_dict())
        return page

    page.cart = cart
    page.form.ship_target = customer.company_name
    page.form.address = customer.address
    page.form.city = customer.city
    page.form.region = customer.region
    page.form.postal_code = customer.postal_code
    page.form.country = customer.country
    page.available_expiration_years = expiration_years()
    page.shipping_options = shippers_service.get_shipping_options(cart.subtotal)
    return page


def submit_checkout(ctx: CheckoutContext, form: CheckoutForm) -> CheckoutResult:
    """Soumet le checkout.
    Étapes:
      1) Identifier le client et vérifier le panier (aucune logique carte avant).
      2) Construire la commande (frais de port du transporteur choisi).
      3) Charger la carte enregistrée, réconcilier avec la saisie, valider.
      4) Autoriser le paiement (PaymentDeclinedError: rien n'est persisté).
      5) Mémoriser la carte si demandé (remplacement complet).
      6) Créer la commande avec son expédition, puis le paiement avec le code d'approbation.
    Après autorisation, un échec de persistance est consigné dans payment_incidents
    (code d'approbation à rapprocher) avant de remonter en RuntimeError.
    """
    customer = _resolve_customer(ctx.username)
    cart = _require_cart(ctx.cart)

    shipper = shippers_service.get_shipper_by_id(form.shipping_method)
    if shipper is None:
        raise UnknownShipperError()
    now = datetime.now()
    order = build_order(customer, form, cart, shipper, now)

    vault = get_card_vault()
    stored = vault.load_card(ctx.username)
    card = reconcile(stored, form.card_input())
    errors = validate_card(card)
    if errors:
        raise CardValidationError(" ".join(errors))
    try:
        expiry = card.expiry
    except ValueError as e:
        raise CardValidationError("La date d'expiration n'est pas valide.") from e

    approval_code = get_authorizer().charge_card(card, order.total)

    if form.remember_credit_card:
        try:
            vault.save_card(ctx.username, card)
        except VaultStorageError:
            # Paiement déjà accepté: la commande passe, seule la mémorisation est perdue
            logger.exception("checkout.service card not remembered approval=%s username=%s", approval_code, ctx.username)

    order.shipment = Shipment(
        shipment_date=now.date() + SHIPMENT_DELAY,
        shipper_id=shipper.shipper_id,
        tracking_number=shippers_service.next_tracking_number(shipper),
    )
    order_id = orders_repository.create_order(order)
    if order_id is None:
        logger.error("checkout.service order not created after approval=%s username=%s", approval_code, ctx.username)
        orders_repository.record_payment_incident(approval_code, order.total, customer.customer_id, "order_not_created")
        raise RuntimeError("Impossible de créer la commande")

    if not orders_repository.create_order_payment(order_id, order.total, card.number, expiry, approval_code):
        logger.error("checkout.service payment not recorded order_id=%s approval=%s", order_id, approval_code)
        orders_repository.record_payment_incident(approval_code, order.total, customer.customer_id, "payment_not_recorded", order_id=order_id)
        raise RuntimeError("Impossible d'enregistrer le paiement")

    logger.info("checkout.service order created order_id=%s total=%.2f username=%s", order_id, order.total, ctx.username)
    return CheckoutResult(order_id=order_id, approval_code=approval_code, total=order.total)


def get_receipt(ctx: CheckoutContext, order_id: Optional[int] = None) -> Order:
    """Reçu d'une commande: l'id explicite prime sur la commande en attente de la session.
    - Aucune commande indiquée => CheckoutError(no_order)
    - Commande absente ou appartenant à un autre client => OrderNotFoundError
    """
    customer = _resolve_customer(ctx.username)
    if order_id is None:
        order_id = ctx.pending_order_id
    if order_id is None:
        raise CheckoutError("Aucune commande indiquée. Veuillez réessayer.", code="no_order")

    order = orders_repository.get_order_by_id(order_id)
    if order.customer_id != customer.customer_id:
        raise OrderNotFoundError(order_id)
    return order


def list_receipts(ctx: CheckoutContext) -> List[Order]:
    customer = _resolve_customer(ctx.username)
    return orders_repository.get_all_orders_by_customer_id(customer.customer_id)


def package_tracking(ctx: CheckoutContext, carrier: Optional[str] = None, tracking_number: Optional[str] = None) -> PackageTracking:
    return PackageTracking(
        selected_carrier=carrier,
        selected_tracking_number=tracking_number,
        orders=list_receipts(ctx),
    )

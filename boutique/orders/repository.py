"""
Accès aux données 'orders' (tables orders, order_details, shipments, order_payments).
- Écritures via le client service-role (bypass RLS).
- create_order / create_order_payment: None/False en cas d'erreur (journalisée); create_order annule
  une commande partiellement écrite.
- record_payment_incident: trace d'un paiement autorisé sans commande/paiement enregistré.
- get_order_by_id: OrderNotFoundError si absente; les autres pannes remontent telles quelles
  pour rester distinctes d'une commande introuvable.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import boutique.infra.supabase_client as supabase_client
from boutique.cards.models import mask_number
from boutique.checkout.errors import OrderNotFoundError
from .models import Order, OrderLine, OrderPayment, Shipment

logger = logging.getLogger(__name__)

ORDER_SELECT = "*, order_details(*), shipments(*)"


def _row_to_order(row: Dict[str, Any]) -> Order:
    shipments = row.get("shipments") or []
    if isinstance(shipments, dict):
        shipments = [shipments]
    shipment = Shipment(**shipments[0]) if shipments else None
    return Order(
        order_id=row.get("order_id"),
        customer_id=str(row.get("customer_id") or ""),
        employee_id=row.get("employee_id") or 1,
        order_date=row.get("order_date"),
        required_date=row.get("required_date"),
        shipped_date=row.get("shipped_date"),
        ship_via=row.get("ship_via"),
        freight=float(row.get("freight") or 0),
        ship_name=row.get("ship_name") or "",
        ship_address=row.get("ship_address") or "",
        ship_city=row.get("ship_city") or "",
        ship_region=row.get("ship_region") or "",
        ship_postal_code=row.get("ship_postal_code") or "",
        ship_country=row.get("ship_country") or "",
        lines=[
            OrderLine(
                product_id=d.get("product_id"),
                product_name=d.get("product_name") or "",
                unit_price=float(d.get("unit_price") or 0),
                quantity=int(d.get("quantity") or 0),
                discount=float(d.get("discount") or 0),
            )
            for d in (row.get("order_details") or [])
        ],
        shipment=shipment,
    )


def create_order(order: Order) -> Optional[int]:
    """
    Insère la commande, ses lignes et son expédition; retourne order_id (None si échec).
    Si une insertion échoue après l'en-tête, les lignes déjà écrites sont supprimées
    pour ne pas laisser de commande partielle.
    """
    header = order.model_dump(
        mode="json",
        exclude={"order_id", "lines", "shipment", "subtotal", "total"},
    )
    client = None
    order_id = None
    try:
        client = supabase_client.get_service_supabase()
        res = client.table("orders").insert(header).execute()
        rows = res.data or []
        if not rows:
            return None
        order_id = int(rows[0]["order_id"])

        details = [
            dict(line.model_dump(mode="json", exclude={"line_total"}), order_id=order_id)
            for line in order.lines
        ]
        if details:
            client.table("order_details").insert(details).execute()
        if order.shipment:
            client.table("shipments").insert(
                dict(order.shipment.model_dump(mode="json"), order_id=order_id)
            ).execute()
        return order_id
    except Exception:
        logger.exception("orders.repository.create_order failed customer_id=%s order_id=%s", order.customer_id, order_id)
        if order_id is not None:
            _rollback_order(client, order_id)
        return None


def _rollback_order(client, order_id: int) -> None:
    for table in ("shipments", "order_details", "orders"):
        try:
            client.table(table).delete().eq("order_id", order_id).execute()
        except Exception:
            logger.exception("orders.repository rollback failed table=%s order_id=%s", table, order_id)


def record_payment_incident(approval_code: str, amount: float, customer_id: str, reason: str, order_id: Optional[int] = None) -> bool:
    """
    Consigne un paiement autorisé dont la commande ou le paiement n'a pas pu être enregistré
    (table payment_incidents), pour rapprochement ou remboursement ultérieur.
    """
    payload = {
        "approval_code": approval_code,
        "amount": round(amount, 2),
        "customer_id": customer_id,
        "order_id": order_id,
        "reason": reason,
        "created_at": datetime.now().isoformat(),
    }
    try:
        supabase_client.get_service_supabase().table("payment_incidents").insert(payload).execute()
        return True
    except Exception:
        logger.exception("orders.repository.record_payment_incident failed approval=%s", approval_code)
        return False


def create_order_payment(order_id: int, amount: float, card_number: str, expiry: date, approval_code: str) -> bool:
    """
    Enregistre le paiement d'une commande. Seuls les 4 derniers chiffres de la carte sont conservés.
    """
    payment = OrderPayment(
        order_id=order_id,
        amount=round(amount, 2),
        credit_card_number=mask_number(card_number),
        expiration_date=expiry,
        approval_code=approval_code,
        payment_date=datetime.now(),
    )
    try:
        (
            supabase_client.get_service_supabase()
            .table("order_payments")
            .insert(payment.model_dump(mode="json"))
            .execute()
        )
        return True
    except Exception:
        logger.exception("orders.repository.create_order_payment failed order_id=%s", order_id)
        return False


def get_order_by_id(order_id: int) -> Order:
    res = (
        supabase_client.get_supabase()
        .table("orders")
        .select(ORDER_SELECT)
        .eq("order_id", order_id)
        .limit(1)
        .execute()
    )
    rows = res.data or []
    if not rows:
        raise OrderNotFoundError(order_id)
    return _row_to_order(rows[0])


def get_all_orders_by_customer_id(customer_id: str) -> List[Order]:
    """Commandes d'un client, les plus récentes d'abord ([] si erreur)."""
    try:
        res = (
            supabase_client.get_supabase()
            .table("orders")
            .select(ORDER_SELECT)
            .eq("customer_id", customer_id)
            .order("order_date", desc=True)
            .execute()
        )
        return [_row_to_order(row) for row in (res.data or [])]
    except Exception:
        logger.exception("orders.repository.get_all_orders_by_customer_id failed customer_id=%s", customer_id)
        return []

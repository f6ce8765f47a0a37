"""
Stockage du panier et de la commande en attente dans la session signée (SessionMiddleware).
Le panier est sérialisé en dict JSON; un contenu illisible est traité comme un panier absent.
"""
import logging
from typing import Any, MutableMapping, Optional

from pydantic import ValidationError

from .models import Cart

logger = logging.getLogger(__name__)

CART_KEY = "cart"
ORDER_ID_KEY = "order_id"


def get_cart(session: MutableMapping[str, Any]) -> Optional[Cart]:
    raw = session.get(CART_KEY)
    if not raw:
        return None
    try:
        return Cart.model_validate(raw)
    except ValidationError:
        logger.warning("cart.session invalid cart payload dropped")
        session.pop(CART_KEY, None)
        return None


def save_cart(session: MutableMapping[str, Any], cart: Cart) -> None:
    session[CART_KEY] = cart.model_dump()


def clear_cart(session: MutableMapping[str, Any]) -> None:
    session.pop(CART_KEY, None)


def get_pending_order_id(session: MutableMapping[str, Any]) -> Optional[int]:
    value = session.get(ORDER_ID_KEY)
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def set_pending_order_id(session: MutableMapping[str, Any], order_id: int) -> None:
    session[ORDER_ID_KEY] = int(order_id)

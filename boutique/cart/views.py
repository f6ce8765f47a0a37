# module boutique.cart.views

"""Endpoints du panier (stocké en session).
- GET /api/v1/cart: contenu du panier et sous-total.
- POST /api/v1/cart/items: ajoute une ligne (cumule la quantité si le produit est déjà présent).
- DELETE /api/v1/cart: vide le panier.
"""
from fastapi import APIRouter, Request

from .models import Cart, CartLine
from .session import get_cart, save_cart, clear_cart

router = APIRouter(prefix="/api/v1/cart", tags=["Cart API"])


def _cart_payload(cart: Cart) -> dict:
    return cart.model_dump()


@router.get("")
def read_cart(request: Request):
    cart = get_cart(request.session) or Cart()
    return _cart_payload(cart)


@router.post("/items")
def add_cart_item(line: CartLine, request: Request):
    cart = get_cart(request.session) or Cart()
    cart.add(line)
    save_cart(request.session, cart)
    return _cart_payload(cart)


@router.delete("")
def empty_cart(request: Request):
    clear_cart(request.session)
    return _cart_payload(Cart())

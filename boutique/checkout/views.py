# module boutique.checkout.views

"""Endpoints du checkout.
- GET  /api/v1/checkout: formulaire pré-rempli (client, carte masquée, panier, livraison).
- POST /api/v1/checkout: soumission; crée la commande et le paiement, vide le panier.
- GET  /api/v1/checkout/receipt[/{order_id}]: reçu (commande en attente de la session par défaut).
- GET  /api/v1/checkout/receipts: commandes du client courant.
- GET  /api/v1/checkout/tracking: suivi de colis (transporteur / numéro sélectionnés).
Erreurs:
- Les erreurs métier (identification, panier vide, carte invalide, paiement refusé, commande
  introuvable) sont attachées à la réponse: {"errors": [{code, message}], "form": {...}}.
- Les pannes de stockage sont journalisées et renvoyées en 500.
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from boutique.cart.session import clear_cart, get_cart, get_pending_order_id, set_pending_order_id
from boutique.utils.rate_limit import optional_rate_limit
from boutique.utils.security import current_username, get_optional_user
from . import service as checkout_service
from .errors import CheckoutError
from .models import CheckoutContext, CheckoutForm

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/checkout", tags=["Checkout API"])


def _context(request: Request, user: Optional[Dict[str, Any]]) -> CheckoutContext:
    return CheckoutContext(
        username=current_username(user),
        cart=get_cart(request.session),
        pending_order_id=get_pending_order_id(request.session),
    )


def form_error_response(exc: CheckoutError, form: Optional[CheckoutForm] = None) -> JSONResponse:
    """Réponse « formulaire en erreur »: les valeurs saisies sont renvoyées telles quelles (carte comprise)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"errors": [exc.as_dict()], "form": form.model_dump() if form else None},
    )


@router.get("")
def checkout_page(request: Request, user: Optional[Dict[str, Any]] = Depends(get_optional_user)):
    """Formulaire de checkout.
    - Les erreurs d'identification et de panier vide sont dans page.errors (status 200).
    """
    try:
        page = checkout_service.prepare_checkout(_context(request, user))
    except RuntimeError:
        logger.exception("Erreur checkout_page")
        raise HTTPException(status_code=500, detail="Checkout indisponible")
    return page.model_dump(mode="json")


@router.post("", status_code=201, dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
def submit_checkout(form: CheckoutForm, request: Request, user: Optional[Dict[str, Any]] = Depends(get_optional_user)):
    """Soumet le checkout.
    - Succès: mémorise order_id en session, vide le panier, renvoie {order_id, approval_code, total, receipt_url}.
    - Erreur métier: formulaire renvoyé avec ses valeurs + errors (aucune commande créée).
    """
    try:
        result = checkout_service.submit_checkout(_context(request, user), form)
    except CheckoutError as e:
        return form_error_response(e, form)
    except RuntimeError:
        logger.exception("Erreur submit_checkout")
        raise HTTPException(status_code=500, detail="Impossible de finaliser la commande")

    set_pending_order_id(request.session, result.order_id)
    clear_cart(request.session)
    payload = result.model_dump()
    payload["receipt_url"] = str(request.url_for("checkout_receipt_by_id", order_id=result.order_id))
    return payload


@router.get("/receipt", name="checkout_receipt")
@router.get("/receipt/{order_id}", name="checkout_receipt_by_id")
def receipt(request: Request, order_id: Optional[int] = None, user: Optional[Dict[str, Any]] = Depends(get_optional_user)):
    """Reçu d'une commande: l'id explicite prime sur la commande en attente de la session."""
    try:
        order = checkout_service.get_receipt(_context(request, user), order_id)
    except CheckoutError as e:
        return form_error_response(e)
    except Exception:
        logger.exception("Erreur receipt order_id=%s", order_id)
        raise HTTPException(status_code=500, detail="Lecture de la commande impossible")
    return order.model_dump(mode="json")


@router.get("/receipts")
def receipts(request: Request, user: Optional[Dict[str, Any]] = Depends(get_optional_user)):
    try:
        orders = checkout_service.list_receipts(_context(request, user))
    except CheckoutError as e:
        return form_error_response(e)
    except RuntimeError:
        logger.exception("Erreur receipts")
        raise HTTPException(status_code=500, detail="Lecture des commandes impossible")
    return {"orders": [o.model_dump(mode="json") for o in orders]}


@router.get("/tracking")
def package_tracking(
    request: Request,
    carrier: Optional[str] = None,
    tracking_number: Optional[str] = None,
    user: Optional[Dict[str, Any]] = Depends(get_optional_user),
):
    try:
        tracking = checkout_service.package_tracking(_context(request, user), carrier, tracking_number)
    except CheckoutError as e:
        return form_error_response(e)
    except RuntimeError:
        logger.exception("Erreur package_tracking")
        raise HTTPException(status_code=500, detail="Suivi indisponible")
    return tracking.model_dump(mode="json")

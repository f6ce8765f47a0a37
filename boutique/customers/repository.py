"""Accès aux données (Supabase) pour les clients.
Le client est retrouvé par le username de l'identité courante (email Supabase).
Un client introuvable renvoie None (erreur d'identification côté checkout);
une panne Supabase lève CustomerLookupError, distincte d'un client inconnu.
"""
import logging
from typing import Optional

from pydantic import BaseModel

import boutique.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)


class CustomerLookupError(RuntimeError):
    """Panne de la table customers (réseau, API), à ne pas confondre avec un client inconnu."""


class Customer(BaseModel):
    customer_id: str
    username: str
    company_name: str = ""
    address: str = ""
    city: str = ""
    region: str = ""
    postal_code: str = ""
    country: str = ""


def get_customer_by_username(username: Optional[str]) -> Optional[Customer]:
    """Récupère le client associé à un username (table customers).
    - Retour: Customer ou None si username vide ou introuvable
    - Panne Supabase: CustomerLookupError
    """
    if not username:
        return None
    try:
        res = (
            supabase_client.get_supabase()
            .table("customers")
            .select("*")
            .eq("username", username)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        if not rows:
            return None
        row = rows[0]
        return Customer(
            customer_id=str(row.get("customer_id") or ""),
            username=row.get("username") or username,
            company_name=row.get("company_name") or "",
            address=row.get("address") or "",
            city=row.get("city") or "",
            region=row.get("region") or "",
            postal_code=row.get("postal_code") or "",
            country=row.get("country") or "",
        )
    except Exception as e:
        logger.exception("customers.repository.get_customer_by_username failed username=%s", username)
        raise CustomerLookupError(f"Lecture du client impossible: {e}") from e

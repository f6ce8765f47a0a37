"""
Accès aux données 'shippers' (transporteurs).
- list_shippers: tous les transporteurs, triés par id.
- get_shipper_row: un transporteur par id (None si introuvable/erreur).
"""
import logging
from typing import Any, Dict, List, Optional

import boutique.infra.supabase_client as supabase_client

logger = logging.getLogger(__name__)


def list_shippers() -> List[Dict[str, Any]]:
    try:
        res = (
            supabase_client.get_supabase()
            .table("shippers")
            .select("shipper_id, company_name, base_rate, rate")
            .order("shipper_id", desc=False)
            .execute()
        )
        return res.data or []
    except Exception:
        logger.exception("shippers.repository.list_shippers failed")
        return []


def get_shipper_row(shipper_id: int) -> Optional[Dict[str, Any]]:
    try:
        res = (
            supabase_client.get_supabase()
            .table("shippers")
            .select("shipper_id, company_name, base_rate, rate")
            .eq("shipper_id", shipper_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
    except Exception:
        logger.exception("shippers.repository.get_shipper_row failed shipper_id=%s", shipper_id)
        return None

from typing import Any, Dict, List, Optional
from uuid import uuid4

from . import repository
from .models import Shipper, ShippingOption


def _to_shipper(row: Dict[str, Any]) -> Shipper:
    return Shipper(
        shipper_id=int(row.get("shipper_id")),
        company_name=row.get("company_name") or "",
        base_rate=float(row.get("base_rate") or 0),
        rate=float(row.get("rate") or 0),
    )


def get_shipping_options(subtotal: float) -> List[ShippingOption]:
    """
    Options de livraison proposées pour un sous-total donné (un coût par transporteur).
    """
    options: List[ShippingOption] = []
    for row in repository.list_shippers():
        shipper = _to_shipper(row)
        options.append(ShippingOption(
            shipper_id=shipper.shipper_id,
            company_name=shipper.company_name,
            cost=shipper.shipping_cost(subtotal),
        ))
    return options


def get_shipper_by_id(shipper_id: int) -> Optional[Shipper]:
    row = repository.get_shipper_row(shipper_id)
    return _to_shipper(row) if row else None


def next_tracking_number(shipper: Shipper) -> str:
    """Alloue un numéro de suivi: initiales du transporteur + 12 caractères hexadécimaux."""
    prefix = "".join(word[0] for word in shipper.company_name.split() if word).upper() or "SHP"
    return f"{prefix}{uuid4().hex[:12].upper()}"

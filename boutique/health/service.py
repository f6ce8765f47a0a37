from urllib.parse import urlparse
import socket
from boutique.config import SUPABASE_URL, CARD_VAULT_BACKEND
from boutique.infra import supabase_client

CHECKOUT_TABLES = ["customers", "shippers", "orders", "order_details", "shipments", "order_payments", "payment_incidents"]

def _check_table(client, name: str):
    try:
        res = client.table(name).select("*").limit(1).execute()
        cnt = len(res.data or [])
        return {"ok": True, "rows": cnt}
    except Exception as e:
        return {"ok": False, "error": str(e)}

def health_supabase_info():
    """
    Diagnostic de la base: résolution DNS puis lecture d'une ligne par table du checkout.
    La table du coffre-fort n'est vérifiée que si le backend carte est Supabase.
    """
    parsed = urlparse(SUPABASE_URL) if SUPABASE_URL else None
    hostname = parsed.hostname if parsed else None
    dns_ok = None
    dns_error = None
    if hostname:
        try:
            socket.getaddrinfo(hostname, 443)
            dns_ok = True
        except Exception as e:
            dns_ok = False
            dns_error = str(e)

    info = {
        "supabase_url": SUPABASE_URL,
        "hostname": hostname,
        "dns_ok": dns_ok,
        "dns_error": dns_error,
        "connect_ok": False,
        "error": None,
        "card_vault_backend": CARD_VAULT_BACKEND,
        "tables": {},
    }
    tables = list(CHECKOUT_TABLES)
    if CARD_VAULT_BACKEND == "supabase":
        tables.append("stored_credit_cards")
    try:
        client = supabase_client.get_supabase()
        for t in tables:
            info["tables"][t] = _check_table(client, t)
        info["connect_ok"] = True
    except Exception as e:
        info["error"] = str(e)
    return info

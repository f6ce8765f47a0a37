"""
Résolution de l'identité à partir d'un access_token Supabase existant.
La connexion/inscription elles-mêmes sont hors du périmètre de la boutique.
"""
from typing import Any, Dict

import boutique.infra.supabase_client as supabase_client


def get_user_from_access_token(access_token: str) -> Dict[str, Any]:
    """Récupère et normalise l'utilisateur depuis supabase.auth.get_user(access_token)."""
    res = supabase_client.get_supabase().auth.get_user(access_token)
    user = getattr(res, "user", None) or {}
    if not isinstance(user, dict):
        user = {
            "id": getattr(user, "id", None),
            "email": getattr(user, "email", None),
            "user_metadata": getattr(user, "user_metadata", None),
        }
    return user or {}


def get_user_from_token(access_token: str) -> Dict[str, Any]:
    """Normalise l'utilisateur: {id, email, metadata, token}."""
    raw = get_user_from_access_token(access_token)
    return {
        "id": raw.get("id"),
        "email": raw.get("email"),
        "metadata": raw.get("user_metadata") or {},
        "token": access_token,
    }

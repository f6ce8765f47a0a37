from fastapi import Request, HTTPException
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

COOKIE_NAME = "sb_access"

def _token_from_request(request: Request) -> Optional[str]:
    # Hybride: priorité au Bearer, fallback cookie
    token = None
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:].strip()
    if not token:
        token = request.cookies.get(COOKIE_NAME)
    return token or None

def get_current_user(request: Request) -> Dict[str, Any]:
    token = _token_from_request(request)
    if not token:
        raise HTTPException(status_code=401, detail="Non authentifié")

    try:
        from boutique.auth.service import get_user_from_token as _svc_get_user_from_token
        user = _svc_get_user_from_token(token)
        if not user.get("id"):
            raise HTTPException(status_code=401, detail="Session expirée, veuillez vous connecter")
        return user
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(status_code=401, detail="Session expirée, veuillez vous connecter")

def get_optional_user(request: Request) -> Optional[Dict[str, Any]]:
    """
    Variante sans 401: None si aucun token ou token invalide.
    Le checkout transforme l'absence d'utilisateur en erreur d'identification sur le formulaire.
    """
    try:
        return get_current_user(request)
    except HTTPException:
        return None

def current_username(user: Optional[Dict[str, Any]]) -> Optional[str]:
    """Username de l'identité courante (email Supabase), None si non authentifié."""
    if not user:
        return None
    return (user.get("email") or "").strip() or None
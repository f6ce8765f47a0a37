from typing import Dict, Any
from fastapi import Request, Response, HTTPException
import os
import time
import hashlib
from boutique.utils.security import COOKIE_NAME

def _user_key_from_request(req: Request) -> str:
    # Priorité: session cookie (hashé) puis IP
    token = req.cookies.get(COOKIE_NAME)
    path = req.url.path
    if token:
        h = hashlib.sha256(token.encode("utf-8")).hexdigest()[:16]
        return f"user:{h}:{path}"
    ip = req.client.host if req.client else "local"
    return f"ip:{ip}:{path}"

def optional_rate_limit(times: int, seconds: int):
    async def _dep(request: Request, response: Response):
        # Forcer le fallback mémoire en DEV si demandé
        if os.getenv("LOCAL_RATE_LIMIT_FALLBACK") == "1":
            now = time.time()
            key = _user_key_from_request(request)
            # Un compartiment par durée de fenêtre
            buckets = getattr(request.app.state, "_rl_store", None)
            if buckets is None:
                buckets = {}
                request.app.state._rl_store = buckets
            store = buckets.setdefault(seconds, {})
            for stale in [k for k, ts in store.items() if not ts or now - ts[-1] >= seconds]:
                store.pop(stale, None)
            hits = [t for t in store.get(key, []) if now - t < seconds]
            if len(hits) >= times:
                store[key] = hits
                raise HTTPException(status_code=429, detail="Too Many Requests")
            hits.append(now)
            store[key] = hits
            return

        # Respecter le flag global
        if getattr(request.app.state, "rate_limit_enabled", None) is not True:
            return

        from fastapi_limiter.depends import RateLimiter

        async def _identifier(req: Request) -> str:
            return _user_key_from_request(req)
        return await RateLimiter(times=times, seconds=seconds, identifier=_identifier)(request, response)
    return _dep

def rate_limit_health_info(request: Request) -> Dict[str, Any]:
    enabled = getattr(request.app.state, "rate_limit_enabled", None)
    from fastapi_limiter import FastAPILimiter
    limiter_ready = getattr(FastAPILimiter, "redis", None) is not None
    return {
        "enabled": (bool(enabled) if enabled is not None else None),
        "ready": limiter_ready,
        "backend": "redis" if limiter_ready else None,
    }

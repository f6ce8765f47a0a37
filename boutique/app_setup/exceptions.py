"""
Gestionnaires d'exceptions.
- HTTPException: body JSON FastAPI standard {"detail": ...}.
- CheckoutError non interceptée par une vue: même forme que les erreurs de formulaire
  ({"errors": [{code, message}]}) plutôt qu'une page d'erreur générique.
"""
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from boutique.checkout.errors import CheckoutError

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(HTTPException)
    async def json_http_errors(request: Request, exc: HTTPException):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=getattr(exc, "headers", None))

    @app.exception_handler(CheckoutError)
    async def checkout_errors(request: Request, exc: CheckoutError):
        return JSONResponse(status_code=exc.status_code, content={"errors": [exc.as_dict()], "form": None})

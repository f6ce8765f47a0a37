"""
Erreurs « formulaire » du checkout.
Chacune porte un message destiné à l'utilisateur et un code stable; les vues les attachent
à la réponse (liste errors) au lieu de renvoyer une page d'erreur générique.
"""


class CheckoutError(Exception):
    status_code = 422

    def __init__(self, message: str, code: str = "checkout_error"):
        super().__init__(message)
        self.message = message
        self.code = code

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class IdentificationError(CheckoutError):
    def __init__(self, message: str = "Impossible de vous identifier. Veuillez vous connecter puis réessayer."):
        super().__init__(message, code="identification")


class EmptyCartError(CheckoutError):
    def __init__(self, message: str = "Votre panier est vide."):
        super().__init__(message, code="empty_cart")


class CardValidationError(CheckoutError):
    def __init__(self, message: str = "Cette carte n'est pas valide. Veuillez saisir une carte valide."):
        super().__init__(message, code="invalid_card")


class PaymentDeclinedError(CheckoutError):
    status_code = 402

    def __init__(self, message: str = "Le paiement a été refusé. Veuillez vérifier votre carte."):
        super().__init__(message, code="payment_declined")


class UnknownShipperError(CheckoutError):
    def __init__(self, message: str = "Mode de livraison inconnu."):
        super().__init__(message, code="invalid_shipping_method")


class OrderNotFoundError(CheckoutError):
    status_code = 404

    def __init__(self, order_id):
        super().__init__(f"La commande {order_id} est introuvable.", code="order_not_found")
        self.order_id = order_id

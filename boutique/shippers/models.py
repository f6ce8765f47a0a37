# module boutique.shippers.models
from pydantic import BaseModel


class Shipper(BaseModel):
    shipper_id: int
    company_name: str
    base_rate: float = 0.0
    # Part du sous-total facturée en plus du forfait (0.05 = 5 %)
    rate: float = 0.0

    def shipping_cost(self, subtotal: float) -> float:
        return round(self.base_rate + self.rate * subtotal, 2)


class ShippingOption(BaseModel):
    shipper_id: int
    company_name: str
    cost: float

# module boutique.orders.models
"""Modèles de commande: lignes, expédition, paiement.
Les montants sont des float arrondis au centime (sous-total des lignes + frais de port).
"""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field


class OrderLine(BaseModel):
    product_id: int
    product_name: str = ""
    unit_price: float
    quantity: int
    discount: float = 0.0

    @computed_field
    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity * (1 - self.discount), 2)


class Shipment(BaseModel):
    shipment_date: date
    shipper_id: int
    tracking_number: str


class Order(BaseModel):
    order_id: Optional[int] = None
    customer_id: str
    employee_id: int = 1
    order_date: datetime
    required_date: datetime
    shipped_date: Optional[datetime] = None
    ship_via: int
    freight: float = 0.0
    ship_name: str = ""
    ship_address: str = ""
    ship_city: str = ""
    ship_region: str = ""
    ship_postal_code: str = ""
    ship_country: str = ""
    lines: List[OrderLine] = Field(default_factory=list)
    shipment: Optional[Shipment] = None

    @computed_field
    @property
    def subtotal(self) -> float:
        return round(sum(line.line_total for line in self.lines), 2)

    @computed_field
    @property
    def total(self) -> float:
        return round(self.subtotal + self.freight, 2)


class OrderPayment(BaseModel):
    order_id: int
    amount: float
    credit_card_number: str
    expiration_date: date
    approval_code: str
    payment_date: datetime

# module boutique.cart.models
from typing import List

from pydantic import BaseModel, Field, computed_field


class CartLine(BaseModel):
    product_id: int
    product_name: str = ""
    unit_price: float = Field(ge=0)
    quantity: int = Field(gt=0)
    discount: float = Field(default=0.0, ge=0, le=1)

    @computed_field
    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity * (1 - self.discount), 2)


class Cart(BaseModel):
    lines: List[CartLine] = Field(default_factory=list)

    @computed_field
    @property
    def subtotal(self) -> float:
        return round(sum(line.line_total for line in self.lines), 2)

    def is_empty(self) -> bool:
        return not self.lines

    def add(self, line: CartLine) -> None:
        """Ajoute une ligne; cumule la quantité si le produit est déjà présent."""
        for existing in self.lines:
            if existing.product_id == line.product_id:
                existing.quantity += line.quantity
                return
        self.lines.append(line)

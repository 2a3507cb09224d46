from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class LineItem(BaseModel):
    """A product with the quantity being bought, priced at the live unit price."""

    product_id: str
    name: str
    unit_price: Decimal = Field(ge=0)
    quantity: int = Field(ge=0)
    image_url: Optional[str] = None

    @classmethod
    def from_cart_row(cls, row: dict) -> "LineItem":
        product = row["product"]
        return cls(
            product_id=product["id"],
            name=product["name"],
            unit_price=product["price"],
            quantity=row["quantity"],
            image_url=product.get("image_url"),
        )

    @classmethod
    def from_product_row(cls, product: dict, quantity: int) -> "LineItem":
        return cls(
            product_id=product["id"],
            name=product["name"],
            unit_price=product["price"],
            quantity=quantity,
            image_url=product.get("image_url"),
        )

    def to_dict(self):
        return {
            "product_id": self.product_id,
            "name": self.name,
            "price": float(self.unit_price),
            "quantity": self.quantity,
            "image_url": self.image_url,
        }


class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(default=1, ge=1)


class UpdateCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=0)


class RemoveFromCartRequest(BaseModel):
    product_id: str

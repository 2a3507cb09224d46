from typing import List, Literal, Optional
from pydantic import BaseModel, Field, model_validator

PaymentMethodName = Literal["cod", "upi", "card", "netbanking"]


class DirectBuyItem(BaseModel):
    product_id: str
    quantity: int = Field(default=1, ge=1)


class CheckoutRequest(BaseModel):
    payment_method: PaymentMethodName = "cod"
    upi_id: Optional[str] = None
    direct_buy: bool = False
    items: Optional[List[DirectBuyItem]] = None

    @model_validator(mode="after")
    def _check(self):
        if self.direct_buy and not self.items:
            raise ValueError("Direct buy needs at least one item")
        return self

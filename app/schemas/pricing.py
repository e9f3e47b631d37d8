from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, constr, model_validator

from app.pricing.types import ItemType, OrderType


class ToppingIn(BaseModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=100)
    price: Decimal = Field(default=Decimal("0"), ge=0)


class CartLineIn(BaseModel):
    line_id: constr(min_length=1, max_length=64)
    product_id: constr(min_length=1, max_length=64)
    item_type: ItemType = ItemType.PRODUCT
    quantity: int = Field(default=1, ge=1, le=99)
    toppings: List[ToppingIn] = []
    upsell_id: Optional[str] = None

    @model_validator(mode="after")
    def _upsell_on_products(self):
        if self.upsell_id and self.item_type != ItemType.PRODUCT:
            raise ValueError("only product lines can come from an upsell")
        return self


class CartFields(BaseModel):
    brand_id: constr(min_length=1)
    location_id: constr(min_length=1)
    delivery_type: OrderType
    pickup_time: Optional[datetime] = None
    lines: List[CartLineIn] = []

    @model_validator(mode="after")
    def _unique_lines(self):
        ids = [line.line_id for line in self.lines]
        if len(ids) != len(set(ids)):
            raise ValueError("line_id values must be unique")
        return self


class QuoteRequest(CartFields):
    lines: List[CartLineIn] = Field(min_length=1)
    voucher_code: Optional[constr(strip_whitespace=True, max_length=50)] = None
    include_bag_fee: bool = True


class UpsellMatchRequest(CartFields):
    pass


class CustomerIn(BaseModel):
    name: constr(strip_whitespace=True, min_length=1, max_length=120)
    email: constr(strip_whitespace=True, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: Optional[constr(strip_whitespace=True, max_length=30)] = None


class AddressIn(BaseModel):
    street: constr(strip_whitespace=True, min_length=1)
    zip_code: constr(strip_whitespace=True, min_length=1, max_length=10)
    city: constr(strip_whitespace=True, min_length=1)


class CheckoutRequest(QuoteRequest):
    customer: CustomerIn
    delivery_address: Optional[AddressIn] = None

    @model_validator(mode="after")
    def _address_for_delivery(self):
        if self.delivery_type == OrderType.DELIVERY and self.delivery_address is None:
            raise ValueError("delivery orders need a delivery address")
        return self

from decimal import Decimal, InvalidOperation
from typing import List, Literal

from pydantic import BaseModel, Field, constr, model_validator

from app.pricing.upsells import OfferType, TriggerType
from app.schemas.common import ScheduleFields


class TriggerIn(BaseModel):
    type: TriggerType
    reference_id: constr(strip_whitespace=True, min_length=1)

    @model_validator(mode="after")
    def _numeric_threshold(self):
        if self.type == TriggerType.CART_VALUE_OVER:
            try:
                Decimal(self.reference_id.replace(",", "."))
            except InvalidOperation:
                raise ValueError("cart_value_over needs a numeric reference")
        return self


class UpsellRequest(ScheduleFields):
    brand_id: constr(min_length=1)
    upsell_name: constr(strip_whitespace=True, min_length=1, max_length=100)
    offer_type: OfferType
    trigger_conditions: List[TriggerIn] = Field(min_length=1)
    offer_product_ids: List[str] = []
    offer_category_ids: List[str] = []
    discount_type: Literal["none", "percentage", "fixed_amount"] = "none"
    discount_value: Decimal = Field(default=Decimal("0"), ge=0)

    @model_validator(mode="after")
    def _check_offer(self):
        if self.offer_type == OfferType.PRODUCT and not self.offer_product_ids:
            raise ValueError("product upsells need at least one offered product")
        if self.offer_type == OfferType.CATEGORY and not self.offer_category_ids:
            raise ValueError("category upsells need at least one offered category")
        if self.discount_type != "none" and self.discount_value <= 0:
            raise ValueError("discount_value must be greater than 0")
        if self.discount_type == "percentage" and self.discount_value > 100:
            raise ValueError("percentage discounts cannot exceed 100")
        return self

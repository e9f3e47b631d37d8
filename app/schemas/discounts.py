from decimal import Decimal
from typing import List, Optional

from pydantic import Field, constr, field_validator, model_validator

from app.pricing.types import DiscountMethod, DiscountType, TimeSlotValidation
from app.schemas.common import ScheduleFields


class StandardDiscountRequest(ScheduleFields):
    brand_id: constr(min_length=1)
    discount_name: constr(strip_whitespace=True, min_length=1, max_length=100)
    discount_type: DiscountType
    reference_ids: List[str] = []
    discount_method: DiscountMethod = DiscountMethod.PERCENTAGE
    discount_value: Decimal = Field(default=Decimal("0"), ge=0)
    min_order_value: Decimal = Field(default=Decimal("0"), ge=0)
    time_slot_validation: TimeSlotValidation = TimeSlotValidation.ORDER_TIME
    allow_stacking: bool = False

    @model_validator(mode="after")
    def _check_shape(self):
        kind = self.discount_type
        if kind in (DiscountType.PRODUCT, DiscountType.CATEGORY) and not self.reference_ids:
            raise ValueError("product and category discounts need at least one reference id")
        if kind in (DiscountType.CART, DiscountType.FREE_DELIVERY) and self.min_order_value <= 0:
            raise ValueError("cart and free delivery discounts need a minimum order value")
        if kind != DiscountType.FREE_DELIVERY and self.discount_value <= 0:
            raise ValueError("discount_value must be greater than 0")
        if self.discount_method == DiscountMethod.PERCENTAGE and self.discount_value > 100:
            raise ValueError("percentage discounts cannot exceed 100")
        if not self.location_ids:
            raise ValueError("at least one location is required")
        return self


class VoucherRequest(ScheduleFields):
    brand_id: constr(min_length=1)
    code: constr(strip_whitespace=True, pattern=r"^[A-Za-z0-9_-]{3,50}$")
    discount_method: DiscountMethod
    discount_value: Decimal = Field(gt=0)
    min_order_value: Decimal = Field(default=Decimal("0"), ge=0)
    usage_limit: Optional[int] = Field(default=None, ge=1)
    per_customer_limit: Optional[int] = Field(default=None, ge=1)
    first_time_customer_only: bool = False

    @field_validator("code")
    @classmethod
    def _upper(cls, v):
        return v.upper()

    @model_validator(mode="after")
    def _check_percentage(self):
        if self.discount_method == DiscountMethod.PERCENTAGE and self.discount_value > 100:
            raise ValueError("percentage discounts cannot exceed 100")
        return self

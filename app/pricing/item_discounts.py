from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from .money import ZERO, to_amount
from .types import CartLine, DiscountType, ItemType, StandardDiscount, amount_off

ITEM_DISCOUNT_TYPES = (DiscountType.PRODUCT, DiscountType.CATEGORY)


@dataclass
class ItemResolution:
    lines: List[CartLine] = field(default_factory=list)
    item_discounts: Dict[str, Decimal] = field(default_factory=dict)
    names: List[str] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        return sum(self.item_discounts.values(), ZERO)

    def add_name(self, name: Optional[str]) -> None:
        if name and name not in self.names:
            self.names.append(name)


def matches_line(discount: StandardDiscount, line: CartLine) -> bool:
    if discount.discount_type == DiscountType.PRODUCT:
        return line.underlying_product_id in (discount.reference_ids or ())
    if discount.discount_type == DiscountType.CATEGORY:
        return bool(line.category_id) and line.category_id in (discount.reference_ids or ())
    return False


def discounted_unit_price(base_price, discount: StandardDiscount) -> Decimal:
    base = to_amount(base_price)
    return base - amount_off(discount.discount_method, base, discount.discount_value)


def best_item_discount(
    line: CartLine, discounts: Sequence[StandardDiscount]
) -> Optional[Tuple[StandardDiscount, Decimal]]:
    """Pick the candidate giving the lowest unit price; first one wins ties."""
    base = to_amount(line.base_price)
    best = None
    for discount in discounts:
        if discount.discount_type not in ITEM_DISCOUNT_TYPES or not matches_line(discount, line):
            continue
        price = discounted_unit_price(base, discount)
        if price >= base:
            continue
        if best is None or price < best[1]:
            best = (discount, price)
    return best


def resolve_item_discounts(lines: Sequence[CartLine], discounts: Sequence[StandardDiscount]) -> ItemResolution:
    resolution = ItemResolution()
    for line in lines:
        if line.item_type == ItemType.COMBO:
            resolution.lines.append(line)
            continue
        if line.is_locked:
            # Price fixed elsewhere (upsell, earlier resolution); keep it but
            # report the markdown so totals stay consistent with base prices.
            if line.markdown > ZERO:
                resolution.item_discounts[line.line_id] = line.markdown
                resolution.add_name(line.discount_label)
            resolution.lines.append(line)
            continue
        match = best_item_discount(line, discounts)
        if match is None:
            resolution.lines.append(line)
            continue
        discount, price = match
        priced = replace(line, price=price, discount_label=discount.discount_name)
        resolution.lines.append(priced)
        if priced.markdown > ZERO:
            resolution.item_discounts[line.line_id] = priced.markdown
            resolution.add_name(discount.discount_name)
    return resolution

from decimal import Decimal

from app.pricing import CartLine, DiscountMethod, DiscountType, ItemType, StandardDiscount, Topping
from app.pricing.item_discounts import best_item_discount, discounted_unit_price, resolve_item_discounts


def _line(line_id="l1", product_id="pizza-1", price="100", quantity=1, category_id="cat-pizza", **kw):
    price = Decimal(price)
    return CartLine(line_id, product_id, price, price, quantity=quantity, category_id=category_id, **kw)


def _product_discount(id="sd-p", value="10", method=DiscountMethod.PERCENTAGE, refs=("pizza-1",), name="Pizza deal"):
    return StandardDiscount(id, name, DiscountType.PRODUCT, method, Decimal(value), reference_ids=refs)


def _category_discount(id="sd-c", value="20", method=DiscountMethod.FIXED_AMOUNT, refs=("cat-pizza",), name="Category deal"):
    return StandardDiscount(id, name, DiscountType.CATEGORY, method, Decimal(value), reference_ids=refs)


def test_percentage_and_fixed_unit_prices():
    assert discounted_unit_price(Decimal("100"), _product_discount(value="15")) == Decimal("85")
    assert discounted_unit_price(Decimal("100"), _category_discount(value="30")) == Decimal("70")


def test_fixed_amount_never_goes_below_zero():
    assert discounted_unit_price(Decimal("20"), _category_discount(value="50")) == Decimal("0")


def test_lowest_price_wins_between_product_and_category():
    line = _line()
    discount, price = best_item_discount(line, [_product_discount(value="10"), _category_discount(value="20")])
    assert discount.id == "sd-c"
    assert price == Decimal("80")


def test_ties_go_to_the_first_candidate():
    first = _product_discount(id="first", value="10")
    second = _category_discount(id="second", value="10")
    discount, _ = best_item_discount(_line(), [first, second])
    assert discount.id == "first"


def test_offer_suffix_matches_underlying_product():
    line = _line(product_id="pizza-1-offer")
    assert best_item_discount(line, [_product_discount()]) is not None


def test_item_discount_covers_quantity_but_not_toppings():
    line = _line(quantity=2, toppings=(Topping("Cheese", Decimal("10")),))
    res = resolve_item_discounts([line], [_product_discount(value="10")])
    assert res.item_discounts == {"l1": Decimal("20")}
    assert res.lines[0].price == Decimal("90")
    assert res.lines[0].is_locked
    assert res.lines[0].discount_label == "Pizza deal"
    assert res.names == ["Pizza deal"]


def test_combos_are_never_item_discounted():
    combo = _line(line_id="c1", product_id="pizza-1", item_type=ItemType.COMBO)
    res = resolve_item_discounts([combo], [_product_discount()])
    assert res.item_discounts == {}
    assert res.lines[0] is combo


def test_prelocked_line_reports_its_markdown():
    locked = CartLine("u1", "cola-1-offer", Decimal("25"), Decimal("20"), quantity=2, discount_label="Drink upsell")
    res = resolve_item_discounts([locked], [_product_discount(refs=("cola-1",), value="50")])
    assert res.lines[0].price == Decimal("20")
    assert res.item_discounts == {"u1": Decimal("10")}
    assert res.names == ["Drink upsell"]


def test_unmatched_lines_pass_through():
    line = _line(product_id="pasta-1", category_id="cat-pasta")
    res = resolve_item_discounts([line], [_product_discount(), _category_discount()])
    assert res.lines == [line]
    assert res.total == Decimal("0")


def test_input_lines_are_not_mutated():
    line = _line()
    resolve_item_discounts([line], [_product_discount()])
    assert line.price == Decimal("100")
    assert not line.is_locked


def test_missing_reference_ids_match_nothing():
    product = StandardDiscount("sd-p", "Pizza deal", DiscountType.PRODUCT, DiscountMethod.PERCENTAGE,
                               Decimal("10"), reference_ids=None)
    category = StandardDiscount("sd-c", "Category deal", DiscountType.CATEGORY, DiscountMethod.PERCENTAGE,
                                Decimal("10"), reference_ids=None)
    resolution = resolve_item_discounts([_line()], [product, category])
    assert resolution.item_discounts == {}
    assert resolution.names == []


def test_malformed_numbers_give_no_item_discount():
    no_value = StandardDiscount("sd-1", "Empty", DiscountType.PRODUCT, DiscountMethod.PERCENTAGE,
                                None, reference_ids=("pizza-1",))
    nan_value = StandardDiscount("sd-2", "NaN", DiscountType.PRODUCT, DiscountMethod.FIXED_AMOUNT,
                                 Decimal("NaN"), reference_ids=("pizza-1",))
    no_method = StandardDiscount("sd-3", "No method", DiscountType.PRODUCT, None,
                                 Decimal("10"), reference_ids=("pizza-1",))
    assert best_item_discount(_line(), [no_value, nan_value, no_method]) is None

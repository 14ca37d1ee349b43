"""
Discount resolution for products and their weight options.

A weight option's own active discount overrides the product's discount; the
two never stack. Prices are resolved on demand and never cached.
"""

from typing import Optional

from ..models.cart import CartLineItem
from ..models.product import (
    DiscountDescriptor, PriceInfo, PricedEntity, PricedProduct, PricedWeightOption,
    Product, WeightOption
)
from .errors import UnpriceableProductError

PERCENTAGE = "percentage"
FIXED = "fixed"
SUPPORTED_DISCOUNT_TYPES = (PERCENTAGE, FIXED)


def calculate_discounted_price(original_price: float, discount_type: Optional[str],
                               discount_value: Optional[float]) -> float:
    """
    Apply a discount to a unit price.

    Percentage values are not clamped to [0, 100]; fixed discounts never take
    the price below zero. Missing or non-positive discounts leave the price as is.
    """
    if not discount_type or not discount_value or discount_value <= 0:
        return original_price

    if discount_type == PERCENTAGE:
        return original_price - (original_price * discount_value / 100)
    elif discount_type == FIXED:
        return max(0, original_price - discount_value)

    return original_price


def get_best_weight_option(product: Product) -> Optional[WeightOption]:
    """First weight option, in list order, with a positive price and known stock."""
    for option in product.weight_options:
        if option.price is not None and option.stock is not None and option.price > 0:
            return option
    return None


def _active_discount(source) -> Optional[DiscountDescriptor]:
    if source.is_discount_active and source.discount_type and source.discount_value:
        return DiscountDescriptor(type=source.discount_type, value=source.discount_value)
    return None


def as_priced_entity(product: Product, weight_option: Optional[WeightOption] = None) -> PricedEntity:
    if weight_option is not None:
        return PricedWeightOption(product=product, weight_option=weight_option)
    return PricedProduct(product=product)


def resolve_entity_price(entity: PricedEntity) -> Optional[PriceInfo]:
    """Price a product or product variant. Returns None when it cannot be priced."""
    product = entity.product

    if isinstance(entity, PricedWeightOption):
        option = entity.weight_option
    else:
        option = get_best_weight_option(product)

    if option is not None:
        original = option.price
        discount = _active_discount(option) or _active_discount(product)
    else:
        original = product.price or product.base_price
        discount = _active_discount(product)

    if not original:
        return None

    if discount is None or discount.type not in SUPPORTED_DISCOUNT_TYPES:
        return PriceInfo(original=original, discounted=original, has_discount=False)

    return PriceInfo(
        original=original,
        discounted=calculate_discounted_price(original, discount.type, discount.value),
        has_discount=True,
        discount_info=discount,
    )


def resolve_price(product: Product, weight_option: Optional[WeightOption] = None) -> Optional[PriceInfo]:
    return resolve_entity_price(as_priced_entity(product, weight_option))


def get_display_price(price_info: PriceInfo) -> float:
    return price_info.discounted if price_info.has_discount else price_info.original


def build_line_item(product: Product, weight_option: Optional[WeightOption] = None,
                    qty: int = 1) -> CartLineItem:
    """
    Snapshot a cart line for a product (or one of its weight options).

    Raises:
        UnpriceableProductError: if the product has no usable price
    """
    if weight_option is None:
        # priced at the best weight option, so record that pack size on the line
        weight_option = get_best_weight_option(product)

    price_info = resolve_price(product, weight_option)
    selected_weight = weight_option.weight if weight_option is not None else None

    if price_info is None:
        raise UnpriceableProductError(product.id, selected_weight)

    return CartLineItem(
        product_id=product.id,
        name=product.name,
        selected_weight=selected_weight,
        qty=qty,
        price=get_display_price(price_info),
        original_price=price_info.original,
    )

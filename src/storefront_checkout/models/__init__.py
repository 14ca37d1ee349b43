"""
Models package - data validation schemas for storefront pricing and checkout.
"""

# Product models
from .product import (
    WeightOption, Product, DiscountDescriptor, PriceInfo,
    PricedProduct, PricedWeightOption, PricedEntity
)

# Cart models
from .cart import CartLineItem, Cart

# Delivery models
from .delivery import DeliveryTier, DeliveryChargeRule

# Order models
from .order import OrderStatusDisplay

# API models
from .api import (
    DeliveryChargeRequest, DeliveryChargeResponse,
    PromoCartItem, PromoCodeValidationRequest, PromoCodeValidationResponse,
    PromoApplication
)

__all__ = [
    # Product
    "WeightOption",
    "Product",
    "DiscountDescriptor",
    "PriceInfo",
    "PricedProduct",
    "PricedWeightOption",
    "PricedEntity",
    # Cart
    "CartLineItem",
    "Cart",
    # Delivery
    "DeliveryTier",
    "DeliveryChargeRule",
    # Order
    "OrderStatusDisplay",
    # API
    "DeliveryChargeRequest",
    "DeliveryChargeResponse",
    "PromoCartItem",
    "PromoCodeValidationRequest",
    "PromoCodeValidationResponse",
    "PromoApplication",
]

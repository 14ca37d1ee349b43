"""
API request/response models for the storefront REST API.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DeliveryChargeRequest(WireModel):
    """Body of POST /api/delivery-charges/calculate."""
    order_amount: float = Field(ge=0)


class DeliveryChargeResponse(WireModel):
    delivery_charge: float = Field(ge=0)


class PromoCartItem(WireModel):
    price: float
    original_price: float


class PromoCodeValidationRequest(WireModel):
    """Body of POST /api/promo-codes/validate."""
    code: str
    order_amount: float
    user_id: Optional[str] = None
    cart_items: List[PromoCartItem] = Field(default_factory=list)


class PromoCodeValidationResponse(WireModel):
    valid: bool
    discount: float = 0.0
    code: Optional[str] = None
    message: str = ""


class PromoApplication(BaseModel):
    """Local outcome of applying a promo code at checkout."""
    applied: bool
    discount: float = 0.0
    code: Optional[str] = None
    message: str

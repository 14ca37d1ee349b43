"""
Delivery charge rule models, as configured in the admin back-office.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Literal, Optional


ChargeType = Literal["fixed", "percentage", "free_above", "tiered"]


class DeliveryTier(BaseModel):
    """Order-amount band of a tiered rule. A null max_amount is unbounded."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    min_amount: float = 0.0
    max_amount: Optional[float] = None
    charge: float = 0.0

    def contains(self, amount: float) -> bool:
        if amount < self.min_amount:
            return False
        return self.max_amount is None or amount < self.max_amount


class DeliveryChargeRule(BaseModel):
    """Server-side delivery charge policy."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = Field(default=None, alias="_id")
    name: Optional[str] = None
    description: Optional[str] = None
    charge_type: ChargeType
    fixed_amount: float = 0.0
    percentage: float = 0.0
    free_delivery_above: float = 0.0
    tiers: List[DeliveryTier] = Field(default_factory=list)
    min_order_amount: float = 0.0
    max_order_amount: Optional[float] = None
    priority: int = 0
    is_active: bool = True

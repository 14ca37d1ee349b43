"""
Validation for admin back-office forms (product discounts, delivery rules, promo codes).
Each function returns a user-facing error message, or None when the input is valid.
"""

from datetime import datetime
from typing import Optional

from ..models.delivery import DeliveryChargeRule, DeliveryTier


def get_discount_validation_error(discount_type: Optional[str],
                                  discount_value: Optional[float]) -> Optional[str]:
    """Product and weight option discounts."""
    if discount_type is None and discount_value is None:
        return None
    if discount_type not in ("percentage", "fixed"):
        return "Discount type must be 'percentage' or 'fixed'"
    if discount_value is None or discount_value < 0:
        return "Discount value must be a non-negative number"
    if discount_type == "percentage" and discount_value > 100:
        return "Percentage discount must be between 0 and 100"
    return None


def get_tier_validation_error(tier: DeliveryTier) -> Optional[str]:
    if tier.min_amount < 0 or tier.charge < 0:
        return "Tier minimum amount and charge must be >= 0"
    if tier.max_amount is not None and tier.max_amount <= tier.min_amount:
        return "Tier maximum amount must be greater than its minimum amount"
    return None


def get_delivery_rule_validation_error(rule: DeliveryChargeRule) -> Optional[str]:
    if not rule.name or not rule.name.strip():
        return "Name is required"

    if rule.charge_type == "fixed" and rule.fixed_amount < 0:
        return "Fixed amount is required and must be >= 0"
    if rule.charge_type == "percentage" and not 0 <= rule.percentage <= 100:
        return "Percentage must be between 0 and 100"
    if rule.charge_type == "free_above" and rule.free_delivery_above <= 0:
        return "Free delivery above amount is required"

    if rule.charge_type == "tiered":
        if not rule.tiers:
            return "At least one tier is required for tiered charge type"
        for tier in rule.tiers:
            error = get_tier_validation_error(tier)
            if error:
                return error
        for previous, current in zip(rule.tiers, rule.tiers[1:]):
            if current.min_amount < previous.min_amount:
                return "Tiers must be ordered by minimum amount"
            if previous.max_amount is None or current.min_amount < previous.max_amount:
                return "Tiers must not overlap"

    if rule.min_order_amount < 0:
        return "Minimum order amount must be >= 0"
    if rule.max_order_amount is not None and rule.max_order_amount < rule.min_order_amount:
        return "Maximum order amount must not be below the minimum order amount"

    return None


def get_promo_code_validation_error(code: str, discount_type: Optional[str],
                                    discount_value: Optional[float],
                                    start_date: Optional[datetime],
                                    end_date: Optional[datetime]) -> Optional[str]:
    if not code or not code.strip():
        return "Promo code is required"
    if not discount_type or not discount_value:
        return "Discount type and value are required"
    if discount_type == "percentage" and not 0 <= discount_value <= 100:
        return "Percentage discount must be between 0 and 100"
    if discount_type == "fixed" and discount_value < 0:
        return "Fixed discount must be positive"
    if start_date is None or end_date is None:
        return "Start date and end date are required"
    if start_date >= end_date:
        return "End date must be after start date"
    return None

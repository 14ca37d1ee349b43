"""
Delivery charge resolution.

Among the active rules whose order-amount window contains the amount, the
rule with the lowest priority value wins (first in list order on ties). When
no rule applies, delivery is free.
"""

import logging
from typing import Iterable, List, Optional

from ..models.delivery import DeliveryChargeRule

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)


def is_rule_applicable(rule: DeliveryChargeRule, order_amount: float) -> bool:
    if not rule.is_active:
        return False
    if order_amount < rule.min_order_amount:
        return False
    return rule.max_order_amount is None or order_amount <= rule.max_order_amount


def select_delivery_rule(order_amount: float,
                         rules: Iterable[DeliveryChargeRule]) -> Optional[DeliveryChargeRule]:
    applicable = [r for r in rules if is_rule_applicable(r, order_amount)]
    if not applicable:
        return None
    # min() keeps the first of equal priorities
    return min(applicable, key=lambda r: r.priority)


def apply_delivery_rule(rule: DeliveryChargeRule, order_amount: float) -> float:
    if rule.charge_type == "fixed":
        charge = rule.fixed_amount
    elif rule.charge_type == "percentage":
        charge = order_amount * rule.percentage / 100
    elif rule.charge_type == "free_above":
        # fixed_amount is the fee below the threshold (0 when unset)
        charge = 0.0 if order_amount >= rule.free_delivery_above else rule.fixed_amount
    elif rule.charge_type == "tiered":
        tier = next((t for t in rule.tiers if t.contains(order_amount)), None)
        charge = tier.charge if tier is not None else 0.0
    else:
        charge = 0.0

    return max(0.0, charge)


def calculate_delivery_charge(order_amount: float, rules: Iterable[DeliveryChargeRule]) -> float:
    """
    Delivery fee for a post-discount, post-promo order amount.

    Returns 0 when no active rule covers the amount.
    """
    rule = select_delivery_rule(order_amount, rules)
    if rule is None:
        logger.info(f"[DELIVERY] No delivery rule applies to {order_amount:.2f}, delivery is free")
        return 0.0

    charge = apply_delivery_rule(rule, order_amount)
    logger.info(
        f"[DELIVERY] Rule '{rule.name or rule.id}' ({rule.charge_type}, priority {rule.priority}) "
        f"-> {charge:.2f} for order amount {order_amount:.2f}"
    )
    return charge


class RuleBasedDeliveryCharges:
    """In-process delivery charge calculator with the same call shape as the remote endpoint."""

    def __init__(self, rules: List[DeliveryChargeRule]):
        self._rules = list(rules)

    @property
    def rules(self) -> List[DeliveryChargeRule]:
        return list(self._rules)

    def __call__(self, order_amount: float) -> float:
        return calculate_delivery_charge(order_amount, self._rules)

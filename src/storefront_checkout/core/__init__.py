"""
Core module initialization.
"""

from .discount import (
    calculate_discounted_price,
    get_best_weight_option,
    as_priced_entity,
    resolve_entity_price,
    resolve_price,
    get_display_price,
    build_line_item
)

from .delivery_charge import (
    is_rule_applicable,
    select_delivery_rule,
    apply_delivery_rule,
    calculate_delivery_charge,
    RuleBasedDeliveryCharges
)

from .retry_utils import (
    retry_with_backoff,
    RetryConfig,
    APIResponseValidator,
    APIError,
    TransientError,
    PermanentError
)

from .errors import CheckoutError, UnpriceableProductError
from .session import SessionContext, generate_guest_session_id
from .checkout import CheckoutSession

__all__ = [
    # Discount resolution
    "calculate_discounted_price",
    "get_best_weight_option",
    "as_priced_entity",
    "resolve_entity_price",
    "resolve_price",
    "get_display_price",
    "build_line_item",
    # Delivery charges
    "is_rule_applicable",
    "select_delivery_rule",
    "apply_delivery_rule",
    "calculate_delivery_charge",
    "RuleBasedDeliveryCharges",
    # Retry and validation
    "retry_with_backoff",
    "RetryConfig",
    "APIResponseValidator",
    "APIError",
    "TransientError",
    "PermanentError",
    # Checkout
    "CheckoutError",
    "UnpriceableProductError",
    "SessionContext",
    "generate_guest_session_id",
    "CheckoutSession",
]

"""
Utils module initialization.
"""

from .order_utils import (
    format_order_number,
    get_display_order_number,
    get_order_status,
    get_delivery_status_options,
    format_order_date
)
from .storefront_api_utils import (
    fetch_delivery_charge,
    validate_promo_code,
    list_delivery_charge_rules,
    get_delivery_charge_rule,
    create_delivery_charge_rule,
    update_delivery_charge_rule,
    delete_delivery_charge_rule,
    toggle_delivery_charge_rule
)

__all__ = [
    # Order display
    "format_order_number",
    "get_display_order_number",
    "get_order_status",
    "get_delivery_status_options",
    "format_order_date",
    # Storefront API
    "fetch_delivery_charge",
    "validate_promo_code",
    "list_delivery_charge_rules",
    "get_delivery_charge_rule",
    "create_delivery_charge_rule",
    "update_delivery_charge_rule",
    "delete_delivery_charge_rule",
    "toggle_delivery_charge_rule",
]

"""
Order display helpers shared by the customer and admin order pages.
"""

from datetime import datetime
from typing import List, Optional, Union

from ..models.order import OrderStatusDisplay

DELIVERY_STATUS_LABELS = {
    "pending": "Order Placed",
    "processing": "Processing",
    "shipped": "Shipped",
    "out_for_delivery": "Out for Delivery",
    "delivered": "Delivered",
    "cancelled": "Cancelled",
}

_GREEN = ("#2e7d32", "#e8f5e9")
_ORANGE = ("#f57c00", "#fff3e0")
_BLUE = ("#1976d2", "#e3f2fd")
_PURPLE = ("#7b1fa2", "#f3e5f5")
_RED = ("#d32f2f", "#ffebee")

_DELIVERY_STATUS_COLORS = {
    "pending": _ORANGE,
    "processing": _BLUE,
    "shipped": _PURPLE,
    "out_for_delivery": _ORANGE,
    "delivered": _GREEN,
    "cancelled": _RED,
}

_PAYMENT_STATUSES = {
    "success": ("Paid", _GREEN),
    "failed": ("Payment Failed", _RED),
    "cancelled": ("Cancelled", _ORANGE),
}


def _status(text: str, colors) -> OrderStatusDisplay:
    return OrderStatusDisplay(text=text, color=colors[0], bg_color=colors[1])


def format_order_number(order_id: Optional[str]) -> str:
    """``ORD-`` plus the last 8 characters of the order id, upper-cased."""
    if not order_id:
        return "N/A"
    return f"ORD-{order_id[-8:].upper()}"


def get_display_order_number(order_id: Optional[str], show_prefix: bool = True) -> str:
    formatted = format_order_number(order_id)
    return f"Order {formatted}" if show_prefix else formatted


def get_order_status(payment_status: Optional[str], is_delivered: bool = False,
                     delivery_status: Optional[str] = None) -> OrderStatusDisplay:
    """
    Status badge for an order.

    Delivery wins over everything, then a known delivery status, then the
    payment status (unknown or missing payment status reads as Pending).
    """
    if is_delivered or delivery_status == "delivered":
        return _status("Delivered", _GREEN)

    if delivery_status in DELIVERY_STATUS_LABELS:
        return _status(DELIVERY_STATUS_LABELS[delivery_status], _DELIVERY_STATUS_COLORS[delivery_status])

    text, colors = _PAYMENT_STATUSES.get(payment_status, ("Pending", _ORANGE))
    return _status(text, colors)


def get_delivery_status_options() -> List[dict]:
    return [{"value": value, "label": label} for value, label in DELIVERY_STATUS_LABELS.items()]


def format_order_date(date: Union[str, datetime, None], fmt: str = "long") -> str:
    if not date:
        return "N/A"

    if isinstance(date, str):
        date = datetime.fromisoformat(date.replace("Z", "+00:00"))

    if fmt == "short":
        return f"{date:%b} {date.day}, {date.year}"
    return f"{date:%B} {date.day}, {date.year}"

"""
Order display models.
"""

from pydantic import BaseModel


class OrderStatusDisplay(BaseModel):
    """Label and badge colours for an order's status."""
    text: str
    color: str
    bg_color: str

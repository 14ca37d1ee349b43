"""
Local checkout errors (not raised by the remote API).
"""


class CheckoutError(Exception):
    """Base exception for local pricing and checkout failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class UnpriceableProductError(CheckoutError):
    """No positive base price could be determined for a product."""

    def __init__(self, product_id: str, selected_weight=None):
        self.product_id = product_id
        self.selected_weight = selected_weight
        suffix = f" ({selected_weight}g)" if selected_weight else ""
        super().__init__(f"Cannot add product {product_id}{suffix} to cart: no price available")

"""
Checkout aggregation: subtotal, promo discount, delivery charge and total.

The delivery charge is re-queried whenever the order amount changes. A
response computed for an amount that is no longer current is discarded, so a
slow request can never overwrite a newer charge. An applied promo code is
re-validated whenever the subtotal changes. Every remote failure degrades to
a safe default instead of blocking checkout.
"""

import asyncio
import logging
import threading
from typing import Callable, Optional

from ..models.api import PromoApplication, PromoCodeValidationResponse
from ..models.cart import Cart, CartLineItem
from ..models.product import Product, WeightOption
from .discount import build_line_item
from .retry_utils import APIError
from .session import SessionContext
from ..utils import storefront_api_utils

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

PROMO_EXCLUSIVE_MESSAGE = (
    "Promo codes cannot be combined with discounted products. "
    "Remove discounted items from your cart to use a promo code."
)
PROMO_REQUIRED_MESSAGE = "Please enter a promo code"
PROMO_FAILED_MESSAGE = "Failed to apply promo code. Please try again."
PROMO_INVALID_MESSAGE = "Invalid promo code"
PROMO_REMOVED_MESSAGE = "Promo code removed because your cart now has discounted products"
DELIVERY_CHARGE_FAILED_MESSAGE = "Delivery charge unavailable"

DeliveryChargeFetcher = Callable[[float], float]
PromoValidator = Callable[..., PromoCodeValidationResponse]


class CheckoutSession:
    """Checkout state for one cart: promo discount, delivery charge and totals."""

    def __init__(
        self,
        cart: Cart,
        session: Optional[SessionContext] = None,
        user_id: Optional[str] = None,
        delivery_charge_fetcher: Optional[DeliveryChargeFetcher] = None,
        promo_validator: Optional[PromoValidator] = None,
    ):
        self.cart = cart
        self.session = session or SessionContext(session_id=cart.session_id)
        self.user_id = user_id
        self._fetch_delivery_charge = delivery_charge_fetcher or storefront_api_utils.fetch_delivery_charge
        self._validate_promo = promo_validator or storefront_api_utils.validate_promo_code

        self.promo_code: Optional[str] = None
        self.promo_discount: float = 0.0
        self.delivery_charge: float = 0.0
        self.delivery_charge_error: Optional[str] = None

        self._lock = threading.Lock()
        self._charge_generation = 0

    # Totals

    @property
    def subtotal(self) -> float:
        return self.cart.subtotal

    @property
    def order_amount(self) -> float:
        return max(0.0, self.subtotal - self.promo_discount)

    @property
    def total(self) -> float:
        return self.order_amount + self.delivery_charge

    def summary(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "promo_code": self.promo_code,
            "discount": self.promo_discount,
            "order_amount": self.order_amount,
            "delivery_charge": self.delivery_charge,
            "total": self.total,
        }

    # Delivery charge

    def refresh_delivery_charge(self) -> float:
        """
        Re-query the delivery charge for the current order amount.

        Failures default the charge to 0. Returns the charge in effect afterwards.
        """
        order_amount = self.order_amount
        with self._lock:
            self._charge_generation += 1
            generation = self._charge_generation

        error = None
        try:
            charge = self._fetch_delivery_charge(order_amount)
        except APIError as e:
            logger.warning(f"[CHECKOUT] Delivery charge unavailable for {order_amount:.2f}, using 0: {e.message}")
            charge = 0.0
            error = e.message
        except Exception as e:
            logger.warning(f"[CHECKOUT] Delivery charge lookup failed for {order_amount:.2f}, using 0: {e}")
            charge = 0.0
            error = str(e) or DELIVERY_CHARGE_FAILED_MESSAGE

        with self._lock:
            if generation != self._charge_generation or order_amount != self.order_amount:
                logger.info(f"[CHECKOUT] Discarding stale delivery charge computed for {order_amount:.2f}")
                return self.delivery_charge
            self.delivery_charge = max(0.0, charge)
            self.delivery_charge_error = error

        return self.delivery_charge

    async def refresh_delivery_charge_async(self) -> float:
        return await asyncio.to_thread(self.refresh_delivery_charge)

    # Promo codes

    def apply_promo_code(self, code: str) -> PromoApplication:
        code = (code or "").strip()
        if not code:
            return PromoApplication(applied=False, message=PROMO_REQUIRED_MESSAGE)

        if self.cart.has_discounted_items:
            logger.info(f"[CHECKOUT] Promo code {code} refused: cart has discounted products")
            return PromoApplication(applied=False, code=code, message=PROMO_EXCLUSIVE_MESSAGE)

        result = self._check_promo(code)
        if not result.valid:
            self.remove_promo_code()
            return PromoApplication(applied=False, code=code, message=result.message or PROMO_INVALID_MESSAGE)

        self.promo_code = result.code or code
        self.promo_discount = result.discount
        logger.info(f"[CHECKOUT] Promo code {self.promo_code} applied: -{self.promo_discount:.2f}")
        self.refresh_delivery_charge()

        return PromoApplication(
            applied=True,
            discount=self.promo_discount,
            code=self.promo_code,
            message=result.message,
        )

    def remove_promo_code(self):
        if self.promo_code is None and not self.promo_discount:
            return
        logger.info(f"[CHECKOUT] Promo code {self.promo_code} removed")
        self._clear_promo()
        self.refresh_delivery_charge()

    def _check_promo(self, code: str) -> PromoCodeValidationResponse:
        """Validate code against the current subtotal. Failures come back as an invalid result."""
        try:
            return self._validate_promo(
                code,
                self.subtotal,
                self.cart.items,
                user_id=self.user_id,
                session=self.session,
            )
        except APIError as e:
            logger.warning(f"[CHECKOUT] Promo code {code} validation failed: {e.message}")
            return PromoCodeValidationResponse(valid=False, code=code, message=e.message or PROMO_FAILED_MESSAGE)
        except Exception as e:
            logger.warning(f"[CHECKOUT] Promo code {code} validation error: {e}")
            return PromoCodeValidationResponse(valid=False, code=code, message=PROMO_FAILED_MESSAGE)

    def _revalidate_promo(self):
        code = self.promo_code
        if self.cart.is_empty:
            logger.info(f"[CHECKOUT] Promo code {code} removed with the last cart item")
            self._clear_promo()
            return

        result = self._check_promo(code)
        if result.valid:
            self.promo_discount = result.discount
            logger.info(f"[CHECKOUT] Promo code {code} re-validated for {self.subtotal:.2f}: -{self.promo_discount:.2f}")
        else:
            logger.info(f"[CHECKOUT] Promo code {code} no longer applies: {result.message}")
            self._clear_promo()

    def _clear_promo(self):
        self.promo_code = None
        self.promo_discount = 0.0

    # Cart mutations

    def add_product(self, product: Product, weight_option: Optional[WeightOption] = None,
                    qty: int = 1) -> CartLineItem:
        """Price and add a product. Raises UnpriceableProductError when it has no price."""
        item = build_line_item(product, weight_option, qty)
        self.add_item(item)
        return item

    def add_item(self, item: CartLineItem):
        self._mutate_cart(lambda: self.cart.add_item(item))

    def update_quantity(self, product_id: str, qty: int, selected_weight: Optional[int] = None):
        self._mutate_cart(lambda: self.cart.update_quantity(product_id, qty, selected_weight))

    def remove_item(self, product_id: str, selected_weight: Optional[int] = None):
        self._mutate_cart(lambda: self.cart.remove_item(product_id, selected_weight))

    def clear(self):
        self._mutate_cart(self.cart.clear)

    def _mutate_cart(self, mutation: Callable[[], None]):
        before_subtotal = self.subtotal
        before = self.order_amount
        mutation()

        if self.promo_code is not None:
            if self.cart.has_discounted_items:
                logger.info(f"[CHECKOUT] {PROMO_REMOVED_MESSAGE}")
                self._clear_promo()
            elif self.subtotal != before_subtotal:
                self._revalidate_promo()

        if self.order_amount != before:
            self.refresh_delivery_charge()

import asyncio
import threading

import pytest
import requests

from storefront_checkout.core.checkout import (
    PROMO_EXCLUSIVE_MESSAGE,
    PROMO_FAILED_MESSAGE,
    PROMO_REQUIRED_MESSAGE,
    CheckoutSession,
)
from storefront_checkout.core.delivery_charge import RuleBasedDeliveryCharges
from storefront_checkout.core.errors import UnpriceableProductError
from storefront_checkout.core.retry_utils import PermanentError, TransientError
from storefront_checkout.models import (
    Cart, CartLineItem, DeliveryChargeRule, Product, PromoCodeValidationResponse
)


class FakeDeliveryCharges:
    def __init__(self, charge=40.0, error=None):
        self.charge = charge
        self.error = error
        self.calls = []

    def __call__(self, order_amount):
        self.calls.append(order_amount)
        if self.error:
            raise self.error
        return self.charge


class FakePromoValidator:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def __call__(self, code, order_amount, cart_items, user_id=None, session=None):
        self.calls.append((code, order_amount, len(cart_items), user_id))
        if self.error:
            raise self.error
        return self.response


def line(product_id="p1", qty=1, price=100.0, original_price=None, weight=250):
    return CartLineItem(
        product_id=product_id,
        selected_weight=weight,
        qty=qty,
        price=price,
        original_price=price if original_price is None else original_price,
    )


def make_checkout(items=(), delivery=None, promo=None):
    cart = Cart(session_id="session_test")
    for item in items:
        cart.add_item(item)
    return CheckoutSession(
        cart,
        user_id="u1",
        delivery_charge_fetcher=delivery or FakeDeliveryCharges(),
        promo_validator=promo or FakePromoValidator(),
    )


# Totals

def test_totals_compose_subtotal_promo_and_delivery():
    promo = FakePromoValidator(PromoCodeValidationResponse(valid=True, discount=50, code="SAVE50",
                                                           message="Promo applied"))
    delivery = FakeDeliveryCharges(charge=30)
    checkout = make_checkout([line(qty=3, price=100)], delivery=delivery, promo=promo)

    result = checkout.apply_promo_code("save50")

    assert result.applied
    assert result.code == "SAVE50"
    assert checkout.subtotal == 300
    assert checkout.order_amount == 250
    assert checkout.delivery_charge == 30
    assert checkout.total == 280
    # delivery charge is always asked for the post-promo amount
    assert delivery.calls[-1] == 250
    assert promo.calls == [("save50", 300, 1, "u1")]


def test_order_amount_never_negative():
    promo = FakePromoValidator(PromoCodeValidationResponse(valid=True, discount=500, message="ok"))
    checkout = make_checkout([line(price=100)], promo=promo)
    checkout.apply_promo_code("BIG")
    assert checkout.order_amount == 0


def test_summary():
    checkout = make_checkout([line(qty=2, price=150)], delivery=FakeDeliveryCharges(charge=50))
    checkout.refresh_delivery_charge()
    assert checkout.summary() == {
        "subtotal": 300,
        "promo_code": None,
        "discount": 0.0,
        "order_amount": 300,
        "delivery_charge": 50,
        "total": 350,
    }


# Promo exclusivity

def test_promo_refused_locally_when_cart_has_discounted_items():
    promo = FakePromoValidator(PromoCodeValidationResponse(valid=True, discount=20, message="ok"))
    checkout = make_checkout([line(price=100, original_price=120)], promo=promo)

    result = checkout.apply_promo_code("WELCOME10")

    assert not result.applied
    assert result.message == PROMO_EXCLUSIVE_MESSAGE
    assert checkout.promo_discount == 0
    assert promo.calls == []


def test_blank_promo_code_is_rejected():
    promo = FakePromoValidator()
    checkout = make_checkout([line()], promo=promo)
    result = checkout.apply_promo_code("   ")
    assert not result.applied
    assert result.message == PROMO_REQUIRED_MESSAGE
    assert promo.calls == []


def test_invalid_promo_message_is_surfaced():
    promo = FakePromoValidator(PromoCodeValidationResponse(valid=False, message="Promo code has expired"))
    checkout = make_checkout([line()], promo=promo)

    result = checkout.apply_promo_code("OLD")

    assert not result.applied
    assert result.message == "Promo code has expired"
    assert checkout.promo_discount == 0


def test_promo_api_failure_keeps_checkout_usable():
    promo = FakePromoValidator(error=PermanentError("Minimum order amount is 500", "/api/promo-codes/validate"))
    checkout = make_checkout([line()], promo=promo)

    result = checkout.apply_promo_code("BIGSPEND")

    assert not result.applied
    assert result.message == "Minimum order amount is 500"
    assert checkout.promo_discount == 0
    assert checkout.total == checkout.subtotal + checkout.delivery_charge


def test_remove_promo_recomputes_delivery_charge():
    promo = FakePromoValidator(PromoCodeValidationResponse(valid=True, discount=50, message="ok"))
    delivery = FakeDeliveryCharges(charge=20)
    checkout = make_checkout([line(qty=2)], delivery=delivery, promo=promo)
    checkout.apply_promo_code("SAVE")

    checkout.remove_promo_code()

    assert checkout.promo_code is None
    assert checkout.order_amount == 200
    assert delivery.calls[-1] == 200


def test_adding_discounted_item_drops_applied_promo():
    promo = FakePromoValidator(PromoCodeValidationResponse(valid=True, discount=50, message="ok"))
    delivery = FakeDeliveryCharges()
    checkout = make_checkout([line(qty=2)], delivery=delivery, promo=promo)
    checkout.apply_promo_code("SAVE")

    checkout.add_item(line(product_id="p2", price=80, original_price=100))

    assert checkout.promo_code is None
    assert checkout.promo_discount == 0
    assert delivery.calls[-1] == 280


class MinimumOrderPromo:
    """Ten percent off, valid from a minimum order amount."""

    def __init__(self, minimum=250):
        self.minimum = minimum
        self.calls = []

    def __call__(self, code, order_amount, cart_items, user_id=None, session=None):
        self.calls.append(order_amount)
        if order_amount < self.minimum:
            return PromoCodeValidationResponse(valid=False, code=code,
                                               message=f"Minimum order amount is {self.minimum}")
        return PromoCodeValidationResponse(valid=True, discount=order_amount * 0.1, code=code, message="ok")


def test_promo_is_revalidated_when_quantity_changes():
    promo = MinimumOrderPromo()
    delivery = FakeDeliveryCharges()
    checkout = make_checkout([line(qty=3)], delivery=delivery, promo=promo)
    checkout.apply_promo_code("TEN")
    assert checkout.promo_discount == pytest.approx(30)

    checkout.update_quantity("p1", 4, 250)

    assert promo.calls == [300, 400]
    assert checkout.promo_code == "TEN"
    assert checkout.promo_discount == pytest.approx(40)
    assert delivery.calls[-1] == pytest.approx(360)


def test_promo_dropped_when_cart_falls_below_minimum():
    promo = MinimumOrderPromo()
    delivery = FakeDeliveryCharges()
    checkout = make_checkout([line(qty=3)], delivery=delivery, promo=promo)
    checkout.apply_promo_code("TEN")

    checkout.update_quantity("p1", 1, 250)

    assert promo.calls == [300, 100]
    assert checkout.promo_code is None
    assert checkout.promo_discount == 0
    assert checkout.order_amount == 100
    assert delivery.calls[-1] == 100


def test_promo_dropped_when_revalidation_fails():
    promo = MinimumOrderPromo()
    checkout = make_checkout([line(qty=3)], promo=promo)
    checkout.apply_promo_code("TEN")

    promo_error = FakePromoValidator(error=TransientError("Storefront API unreachable", "/api/promo-codes/validate"))
    checkout._validate_promo = promo_error
    checkout.update_quantity("p1", 5, 250)

    assert promo_error.calls == [("TEN", 500, 1, "u1")]
    assert checkout.promo_code is None
    assert checkout.order_amount == 500


def test_unexpected_promo_validator_error_is_contained():
    promo = FakePromoValidator(error=ValueError("bad payload"))
    checkout = make_checkout([line()], promo=promo)

    result = checkout.apply_promo_code("SAVE")

    assert not result.applied
    assert result.message == PROMO_FAILED_MESSAGE
    assert checkout.promo_discount == 0


# Delivery charge

def test_delivery_charge_failure_defaults_to_zero():
    delivery = FakeDeliveryCharges(error=TransientError("Storefront API unreachable", "/api/delivery-charges/calculate"))
    checkout = make_checkout([line(qty=2)], delivery=delivery)
    checkout.delivery_charge = 40

    charge = checkout.refresh_delivery_charge()

    assert charge == 0
    assert checkout.delivery_charge == 0
    assert checkout.delivery_charge_error == "Storefront API unreachable"
    assert checkout.total == 200


def test_unexpected_delivery_charge_error_defaults_to_zero():
    delivery = FakeDeliveryCharges(error=requests.ConnectionError("boom"))
    checkout = make_checkout([line(qty=2)], delivery=delivery)
    checkout.delivery_charge = 40

    assert checkout.refresh_delivery_charge() == 0
    assert checkout.delivery_charge_error == "boom"
    assert checkout.total == 200


def test_cart_mutations_trigger_recalculation():
    delivery = FakeDeliveryCharges()
    checkout = make_checkout(delivery=delivery)

    checkout.add_item(line(qty=1))
    checkout.update_quantity("p1", 3, 250)
    checkout.update_quantity("p1", 3, 250)  # unchanged amount, no new query
    checkout.remove_item("p1")

    assert delivery.calls == [100, 300, 0]


def test_stale_delivery_charge_is_discarded():
    release = threading.Event()
    started = threading.Event()

    def fetch(order_amount):
        if order_amount == 100:
            started.set()
            release.wait(5)
            return 50.0
        return 20.0

    checkout = make_checkout([line(qty=1)], delivery=fetch)
    worker = threading.Thread(target=checkout.refresh_delivery_charge)
    worker.start()
    assert started.wait(5)

    # newer amount completes first
    checkout.add_item(line(qty=9))
    assert checkout.delivery_charge == 20

    release.set()
    worker.join(5)

    assert checkout.order_amount == 1000
    assert checkout.delivery_charge == 20


def test_refresh_delivery_charge_async():
    checkout = make_checkout([line(qty=2)], delivery=FakeDeliveryCharges(charge=25))
    assert asyncio.run(checkout.refresh_delivery_charge_async()) == 25
    assert checkout.total == 225


def test_in_process_rules_as_fetcher():
    rules = RuleBasedDeliveryCharges([
        DeliveryChargeRule(charge_type="tiered", tiers=[
            {"minAmount": 0, "maxAmount": 499, "charge": 50},
            {"minAmount": 500, "maxAmount": None, "charge": 0},
        ], priority=1),
    ])
    checkout = make_checkout(delivery=rules)

    checkout.add_item(line(qty=3))
    assert checkout.delivery_charge == 50

    checkout.update_quantity("p1", 6)
    assert checkout.delivery_charge == 0


# Adding products

def test_add_product_prices_through_discount_resolver():
    product = Product.model_validate({
        "_id": "p9",
        "weightOptions": [{"weight": 500, "price": 400, "stock": 3,
                           "isDiscountActive": True, "discountType": "percentage", "discountValue": 25}],
    })
    checkout = make_checkout()

    item = checkout.add_product(product, product.weight_options[0], qty=2)

    assert item.price == 300
    assert item.original_price == 400
    assert checkout.subtotal == 600


def test_unpriceable_product_cannot_be_added():
    checkout = make_checkout()
    with pytest.raises(UnpriceableProductError):
        checkout.add_product(Product(id="p0"))
    assert checkout.cart.is_empty

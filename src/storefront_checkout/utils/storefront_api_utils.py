"""
Storefront API utilities - delivery charge and promo code calls with error mapping.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..core.config import API_TIMEOUT_SECONDS, STOREFRONT_API_URL
from ..core.retry_utils import (
    APIResponseValidator, PermanentError, TransientError, retry_with_backoff
)
from ..core.session import SessionContext
from ..models.api import (
    DeliveryChargeRequest, PromoCartItem, PromoCodeValidationRequest,
    PromoCodeValidationResponse
)
from ..models.cart import CartLineItem
from ..models.delivery import DeliveryChargeRule

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

DELIVERY_CHARGES_PATH = "/api/delivery-charges"
PROMO_CODES_PATH = "/api/promo-codes"


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {response.status_code}"


def _request(method: str, path: str, json: Optional[dict] = None,
             headers: Optional[Dict[str, str]] = None) -> Any:
    """
    Send a request to the storefront API and decode its JSON body.

    Raises:
        TransientError: network failure, timeout or 5xx
        PermanentError: 4xx or a body that is not JSON
    """
    url = f"{STOREFRONT_API_URL}{path}"
    try:
        response = requests.request(
            method,
            url,
            json=json,
            headers={"Content-Type": "application/json", **(headers or {})},
            timeout=API_TIMEOUT_SECONDS
        )
    except requests.RequestException as e:
        logger.error(f"[STOREFRONT-API] {method} {path} failed: {str(e)}")
        raise TransientError(f"Storefront API unreachable: {str(e)}", path)

    if response.status_code >= 500:
        message = _error_message(response)
        logger.error(f"[STOREFRONT-API] {method} {path} server error: {message}")
        raise TransientError(message, path, status_code=response.status_code)

    if response.status_code >= 400:
        message = _error_message(response)
        logger.warning(f"[STOREFRONT-API] {method} {path} rejected ({response.status_code}): {message}")
        raise PermanentError(message, path, status_code=response.status_code)

    try:
        return response.json()
    except ValueError:
        raise PermanentError("Response body is not valid JSON", path, status_code=response.status_code)


@retry_with_backoff
def fetch_delivery_charge(order_amount: float) -> float:
    """Ask the API for the delivery fee of a post-discount, post-promo order amount."""
    path = f"{DELIVERY_CHARGES_PATH}/calculate"
    logger.info(f"[STOREFRONT-API] Calculating delivery charge for {order_amount:.2f}")

    body = DeliveryChargeRequest(order_amount=order_amount).model_dump(by_alias=True)
    data = _request("POST", path, json=body)
    result = APIResponseValidator.validate_delivery_charge_response(data, path)

    logger.info(f"[STOREFRONT-API] Delivery charge for {order_amount:.2f}: {result.delivery_charge:.2f}")
    return result.delivery_charge


@retry_with_backoff
def validate_promo_code(
    code: str,
    order_amount: float,
    cart_items: List[CartLineItem],
    user_id: Optional[str] = None,
    session: Optional[SessionContext] = None
) -> PromoCodeValidationResponse:
    """
    Validate a promo code for the current cart.

    Callers must enforce promo/product-discount exclusivity before calling.
    """
    path = f"{PROMO_CODES_PATH}/validate"
    logger.info(f"[STOREFRONT-API] Validating promo code {code} for {order_amount:.2f}")

    request = PromoCodeValidationRequest(
        code=code,
        order_amount=order_amount,
        user_id=user_id,
        cart_items=[PromoCartItem(price=i.price, original_price=i.original_price) for i in cart_items],
    )
    headers = session.headers(include_auth=True) if session else {}
    data = _request("POST", path, json=request.model_dump(by_alias=True, exclude_none=True), headers=headers)
    result = APIResponseValidator.validate_promo_code_response(data, path)

    logger.info(f"[STOREFRONT-API] Promo code {code}: valid={result.valid} discount={result.discount:.2f}")
    return result


# Admin: delivery charge rules

def list_delivery_charge_rules(session: SessionContext) -> List[DeliveryChargeRule]:
    data = _request("GET", DELIVERY_CHARGES_PATH, headers=session.headers(include_auth=True))
    rules = APIResponseValidator.validate_delivery_rules(data, DELIVERY_CHARGES_PATH)
    logger.info(f"[STOREFRONT-API] Loaded {len(rules)} delivery charge rules")
    return rules


def get_delivery_charge_rule(session: SessionContext, rule_id: str) -> DeliveryChargeRule:
    path = f"{DELIVERY_CHARGES_PATH}/{rule_id}"
    data = _request("GET", path, headers=session.headers(include_auth=True))
    return APIResponseValidator.validate_delivery_rules([data], path)[0]


def create_delivery_charge_rule(session: SessionContext, rule: DeliveryChargeRule) -> DeliveryChargeRule:
    body = rule.model_dump(by_alias=True, exclude={"id"})
    data = _request("POST", DELIVERY_CHARGES_PATH, json=body, headers=session.headers(include_auth=True))
    return APIResponseValidator.validate_delivery_rules([data], DELIVERY_CHARGES_PATH)[0]


def update_delivery_charge_rule(session: SessionContext, rule_id: str,
                                rule: DeliveryChargeRule) -> DeliveryChargeRule:
    path = f"{DELIVERY_CHARGES_PATH}/{rule_id}"
    body = rule.model_dump(by_alias=True, exclude={"id"})
    data = _request("PUT", path, json=body, headers=session.headers(include_auth=True))
    return APIResponseValidator.validate_delivery_rules([data], path)[0]


def delete_delivery_charge_rule(session: SessionContext, rule_id: str) -> dict:
    path = f"{DELIVERY_CHARGES_PATH}/{rule_id}"
    return _request("DELETE", path, headers=session.headers(include_auth=True))


def toggle_delivery_charge_rule(session: SessionContext, rule_id: str) -> DeliveryChargeRule:
    path = f"{DELIVERY_CHARGES_PATH}/{rule_id}/toggle"
    data = _request("PATCH", path, json={}, headers=session.headers(include_auth=True))
    return APIResponseValidator.validate_delivery_rules([data], path)[0]

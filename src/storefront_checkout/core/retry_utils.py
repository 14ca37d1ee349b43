"""
Storefront API error types, response validation and optional retry with backoff.
Retries are off unless STOREFRONT_API_MAX_RETRIES is raised above zero.
"""

import logging
import random
import time
from typing import Callable, Optional, TypeVar
from functools import wraps

from pydantic import ValidationError

from ..models.api import DeliveryChargeResponse, PromoCodeValidationResponse
from ..models.delivery import DeliveryChargeRule
from .config import API_MAX_RETRIES

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)

T = TypeVar('T')


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_retries: int = 0,
        initial_backoff: float = 1.0,
        backoff_multiplier: float = 2.0,
        max_backoff: float = 32.0,
        jitter: bool = True
    ):
        self.max_retries = max_retries
        self.initial_backoff = initial_backoff
        self.backoff_multiplier = backoff_multiplier
        self.max_backoff = max_backoff
        self.jitter = jitter

    def get_backoff_time(self, attempt: int) -> float:
        """Calculate backoff time for attempt number."""
        backoff = min(
            self.initial_backoff * (self.backoff_multiplier ** attempt),
            self.max_backoff
        )

        if self.jitter:
            backoff = backoff * (0.5 + random.random())

        return backoff


class APIError(Exception):
    """Base exception for storefront API errors."""

    def __init__(
        self,
        message: str,
        endpoint: str,
        retry_possible: bool = True,
        status_code: Optional[int] = None
    ):
        self.message = message
        self.endpoint = endpoint
        self.retry_possible = retry_possible
        self.status_code = status_code
        super().__init__(self.message)


class TransientError(APIError):
    """Error that might be transient (network failure, 5xx)."""
    pass


class PermanentError(APIError):
    """Error that won't be resolved by retrying (4xx, malformed response)."""

    def __init__(self, message: str, endpoint: str, status_code: Optional[int] = None):
        super().__init__(message, endpoint, retry_possible=False, status_code=status_code)


def retry_with_backoff(
    func: Optional[Callable[..., T]] = None,
    config: Optional[RetryConfig] = None,
    error_handler: Optional[Callable[[Exception, int], None]] = None
):
    """
    Decorator to retry a function with exponential backoff.

    Usable bare (``@retry_with_backoff``) or with arguments
    (``@retry_with_backoff(config=RetryConfig(max_retries=2))``).

    Args:
        func: Function to retry
        config: Retry configuration, defaults to STOREFRONT_API_MAX_RETRIES retries
        error_handler: Callback on errors

    Returns:
        Wrapped function with retry logic
    """
    if func is None:
        return lambda f: retry_with_backoff(f, config=config, error_handler=error_handler)

    if config is None:
        config = RetryConfig(max_retries=API_MAX_RETRIES)

    @wraps(func)
    def wrapper(*args, **kwargs) -> T:
        last_exception = None

        for attempt in range(config.max_retries + 1):
            try:
                result = func(*args, **kwargs)
                if attempt > 0:
                    logger.info(f"[RETRY] {func.__name__} succeeded on attempt {attempt + 1}")
                return result

            except PermanentError as e:
                logger.error(f"[RETRY] Permanent error from {func.__name__}: {e.message}")
                raise

            except TransientError as e:
                last_exception = e

                if attempt < config.max_retries:
                    backoff = config.get_backoff_time(attempt)
                    logger.warning(
                        f"[RETRY] Attempt {attempt + 1} failed: {str(e)}. "
                        f"Retrying in {backoff:.2f} seconds..."
                    )

                    if error_handler:
                        error_handler(e, attempt)

                    time.sleep(backoff)
                elif config.max_retries:
                    logger.error(f"[RETRY] All {config.max_retries + 1} attempts failed")

            except Exception as e:
                logger.error(f"[RETRY] Unexpected error in {func.__name__}: {str(e)}")
                raise

        raise last_exception

    return wrapper


class APIResponseValidator:
    """Validates storefront API responses before using them."""

    @staticmethod
    def validate_delivery_charge_response(response: dict, endpoint: str) -> DeliveryChargeResponse:
        if not isinstance(response, dict):
            raise PermanentError(f"Invalid response type: {type(response)}", endpoint)

        if "deliveryCharge" not in response:
            raise PermanentError("Missing deliveryCharge in response", endpoint)

        try:
            return DeliveryChargeResponse.model_validate(response)
        except ValidationError as e:
            raise PermanentError(f"Invalid delivery charge response: {e}", endpoint)

    @staticmethod
    def validate_promo_code_response(response: dict, endpoint: str) -> PromoCodeValidationResponse:
        if not isinstance(response, dict):
            raise PermanentError(f"Invalid response type: {type(response)}", endpoint)

        if "valid" not in response:
            raise PermanentError("Missing valid flag in response", endpoint)

        try:
            result = PromoCodeValidationResponse.model_validate(response)
        except ValidationError as e:
            raise PermanentError(f"Invalid promo code response: {e}", endpoint)

        if result.discount < 0:
            raise PermanentError("Negative promo discount in response", endpoint)

        return result

    @staticmethod
    def validate_delivery_rules(response, endpoint: str) -> list:
        """Validate a list of delivery charge rules."""
        if not isinstance(response, list):
            raise PermanentError("Delivery charge rules must be a list", endpoint)

        try:
            return [DeliveryChargeRule.model_validate(rule) for rule in response]
        except ValidationError as e:
            raise PermanentError(f"Invalid delivery charge rule: {e}", endpoint)

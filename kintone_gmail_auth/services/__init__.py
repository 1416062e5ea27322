"""Service layer exports."""

from .callback_flow import CallbackOutcome, OAuthCallbackFlow, validate_request
from .customer_keys import (
    CustomerKeyStrategy,
    RandomCustomerKeyStrategy,
    SubdomainCustomerKeyStrategy,
    build_customer_key_strategy,
)

__all__ = [
    "CallbackOutcome",
    "CustomerKeyStrategy",
    "OAuthCallbackFlow",
    "RandomCustomerKeyStrategy",
    "SubdomainCustomerKeyStrategy",
    "build_customer_key_strategy",
    "validate_request",
]

"""Customer key strategies.

A customer key correlates one completed Google sign-in with the Kintone record
the Zapier hook creates for it. Keys are generated once per successful
exchange and never re-derived.
"""

from __future__ import annotations

import re
import secrets
import time
from typing import Callable, Protocol

from kintone_gmail_auth.schemas.auth import CallbackContext

_KINTONE_HOST = re.compile(r"^https://([^./]+)\.(?:cybozu\.com|kintone\.com)(?::\d+)?(?:/|$)")


def _epoch_millis() -> int:
    return int(time.time() * 1000)


class CustomerKeyStrategy(Protocol):
    def derive(self, context: CallbackContext) -> str:
        ...


class SubdomainCustomerKeyStrategy:
    """``customer_<subdomain>_<epoch ms>``, with ``unknown`` for other hosts."""

    def __init__(self, clock: Callable[[], int] = _epoch_millis) -> None:
        self._clock = clock

    def derive(self, context: CallbackContext) -> str:
        match = _KINTONE_HOST.match(context.return_domain)
        subdomain = match.group(1) if match else "unknown"
        return f"customer_{subdomain}_{self._clock()}"


class RandomCustomerKeyStrategy:
    """``customer_<epoch ms>_<random hex>``, independent of the host."""

    def __init__(
        self, clock: Callable[[], int] = _epoch_millis, token_bytes: int = 4
    ) -> None:
        self._clock = clock
        self._token_bytes = token_bytes

    def derive(self, context: CallbackContext) -> str:
        return f"customer_{self._clock()}_{secrets.token_hex(self._token_bytes)}"


_STRATEGIES: dict[str, Callable[[], CustomerKeyStrategy]] = {
    "subdomain": SubdomainCustomerKeyStrategy,
    "random": RandomCustomerKeyStrategy,
}


def build_customer_key_strategy(name: str) -> CustomerKeyStrategy:
    """Look up a strategy by its configured name."""
    try:
        factory = _STRATEGIES[name]
    except KeyError as exc:
        raise ValueError(f"Unknown customer key strategy: {name!r}") from exc
    return factory()


__all__ = [
    "CustomerKeyStrategy",
    "RandomCustomerKeyStrategy",
    "SubdomainCustomerKeyStrategy",
    "build_customer_key_strategy",
]

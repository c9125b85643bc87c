from __future__ import annotations

from typing import Any, Protocol


class CheckoutGateway(Protocol):
    def create_checkout_order(self, request: dict[str, Any]) -> dict[str, Any]:
        """Create a hosted checkout order at the payment provider and return its response body."""
        ...

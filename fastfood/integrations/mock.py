from __future__ import annotations

from typing import Any


class MockCheckoutGateway:
    """Answers checkout requests locally with a predictable ticket URL."""

    def __init__(self, base_url: str = "https://checkout.example.test") -> None:
        self.base_url = base_url.rstrip("/")
        self.requests: list[dict[str, Any]] = []

    def create_checkout_order(self, request: dict[str, Any]) -> dict[str, Any]:
        self.requests.append(request)
        reference = request.get("external_reference") or "order"
        payments = (request.get("transactions") or {}).get("payments") or []
        return {
            "id": f"mock-{reference}",
            "status": "action_required",
            "external_reference": reference,
            "transactions": {
                "payments": [
                    {
                        "id": f"mock-pay-{reference}-{index}",
                        "amount": payment.get("amount"),
                        "status": "action_required",
                        "payment_method": {
                            **(payment.get("payment_method") or {}),
                            "ticket_url": f"{self.base_url}/pix/{reference}",
                        },
                    }
                    for index, payment in enumerate(payments, start=1)
                ]
            },
        }

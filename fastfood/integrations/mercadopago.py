from __future__ import annotations

import logging
import time
from decimal import Decimal
from typing import Any, Callable

import httpx

from fastfood.core.config import (
    MERCADOPAGO_ACCESS_TOKEN,
    MERCADOPAGO_BASE_URL,
    MERCADOPAGO_MAX_RETRIES,
    MERCADOPAGO_TIMEOUT_SECONDS,
)
from fastfood.core.errors import PaymentProviderError
from fastfood.domain import to_money

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (500, 502, 503, 504)


def _backoff_seconds(attempt: int) -> float:
    # 1s, 2s, 4s... (max 8s)
    sec = 1.0 * (2 ** max(0, attempt - 1))
    return min(sec, 8.0)


def _format_amount(amount: Decimal | float | str) -> str:
    return f"{to_money(amount):.2f}"


def external_reference(order_id: int) -> str:
    return f"order-{order_id}"


def build_checkout_request(order_id: int, email: str, amount: Decimal | float | str) -> dict[str, Any]:
    total = _format_amount(amount)
    return {
        "type": "online",
        "total_amount": total,
        "external_reference": external_reference(order_id),
        "transactions": {
            "payments": [
                {
                    "amount": total,
                    "payment_method": {"id": "pix", "type": "bank_transfer"},
                }
            ]
        },
        "payer": {"email": email},
    }


def extract_ticket_url(response: dict[str, Any]) -> str:
    payments = ((response or {}).get("transactions") or {}).get("payments") or []
    if not payments:
        raise PaymentProviderError("no transactions returned by payment provider")
    ticket_url = ((payments[0] or {}).get("payment_method") or {}).get("ticket_url")
    if not ticket_url:
        raise PaymentProviderError("payment provider returned no ticket url")
    return ticket_url


class MercadoPagoClient:
    """Blocking client for the MercadoPago Orders API."""

    def __init__(
        self,
        access_token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.access_token = access_token if access_token is not None else MERCADOPAGO_ACCESS_TOKEN
        self.base_url = (base_url or MERCADOPAGO_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else MERCADOPAGO_TIMEOUT_SECONDS
        self.max_retries = max(1, max_retries if max_retries is not None else MERCADOPAGO_MAX_RETRIES)
        self._client = client
        self._sleep = sleep

    def create_checkout_order(self, request: dict[str, Any]) -> dict[str, Any]:
        if not self.access_token:
            raise PaymentProviderError("MERCADOPAGO_ACCESS_TOKEN is not configured")

        url = f"{self.base_url}/v1/orders"
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
            "X-Idempotency-Key": str(request.get("external_reference") or ""),
        }

        if self._client is not None:
            return self._post(self._client, url, headers, request)
        with httpx.Client(timeout=self.timeout) as client:
            return self._post(client, url, headers, request)

    def _post(self, client: httpx.Client, url: str, headers: dict, request: dict) -> dict[str, Any]:
        reference = request.get("external_reference")
        for attempt in range(1, self.max_retries + 1):
            try:
                response = client.post(url, headers=headers, json=request)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                logger.warning(
                    "MercadoPago request failed attempt=%s reference=%s error=%s", attempt, reference, exc
                )
                if attempt < self.max_retries:
                    self._sleep(_backoff_seconds(attempt))
                    continue
                raise PaymentProviderError(f"payment provider unreachable: {exc}") from exc

            if 200 <= response.status_code < 300:
                try:
                    return response.json()
                except ValueError as exc:
                    raise PaymentProviderError(
                        "payment provider returned invalid JSON",
                        status_code=response.status_code,
                        body_text=response.text,
                    ) from exc

            if response.status_code in RETRYABLE_STATUS_CODES and attempt < self.max_retries:
                logger.warning(
                    "MercadoPago returned %s attempt=%s reference=%s", response.status_code, attempt, reference
                )
                self._sleep(_backoff_seconds(attempt))
                continue

            logger.error(
                "MercadoPago rejected checkout status=%s reference=%s", response.status_code, reference
            )
            raise PaymentProviderError(
                f"payment provider error {response.status_code}",
                status_code=response.status_code,
                body_text=response.text,
            )

        raise PaymentProviderError("payment provider retries exhausted")

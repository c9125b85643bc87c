import json
from decimal import Decimal

import httpx
import pytest

from fastfood.core.errors import PaymentProviderError
from fastfood.integrations.mercadopago import MercadoPagoClient, build_checkout_request, extract_ticket_url
from tests.fixtures_data import CHECKOUT_TICKET_RESPONSE


def _client(handler, **kwargs):
    sleeps = []
    client = MercadoPagoClient(
        access_token="TEST-token",
        base_url="https://api.mercadopago.test/",
        max_retries=kwargs.pop("max_retries", 3),
        client=httpx.Client(transport=httpx.MockTransport(handler)),
        sleep=sleeps.append,
    )
    return client, sleeps


def test_build_checkout_request_shape():
    request = build_checkout_request(12, "cliente@example.com", Decimal("25.5"))

    assert request == {
        "type": "online",
        "total_amount": "25.50",
        "external_reference": "order-12",
        "transactions": {
            "payments": [
                {"amount": "25.50", "payment_method": {"id": "pix", "type": "bank_transfer"}},
            ]
        },
        "payer": {"email": "cliente@example.com"},
    }


def test_extract_ticket_url_from_first_payment():
    assert extract_ticket_url(CHECKOUT_TICKET_RESPONSE) == "https://www.mercadopago.com.br/payments/123/ticket"


@pytest.mark.parametrize(
    "response",
    [{}, {"transactions": {}}, {"transactions": {"payments": []}}, {"transactions": {"payments": [{}]}}],
)
def test_extract_ticket_url_without_ticket_fails(response):
    with pytest.raises(PaymentProviderError):
        extract_ticket_url(response)


def test_posts_order_with_auth_and_idempotency_headers():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["key"] = request.headers["X-Idempotency-Key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json=CHECKOUT_TICKET_RESPONSE)

    client, sleeps = _client(handler)
    response = client.create_checkout_order(build_checkout_request(1, "a@b.com", "25.50"))

    assert response["id"] == "ORD01JABC"
    assert seen["url"] == "https://api.mercadopago.test/v1/orders"
    assert seen["auth"] == "Bearer TEST-token"
    assert seen["key"] == "order-1"
    assert seen["body"]["payer"] == {"email": "a@b.com"}
    assert sleeps == []


def test_retries_server_errors_with_backoff():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) < 3:
            return httpx.Response(503, text="unavailable")
        return httpx.Response(200, json=CHECKOUT_TICKET_RESPONSE)

    client, sleeps = _client(handler)
    response = client.create_checkout_order(build_checkout_request(1, "a@b.com", "25.50"))

    assert len(calls) == 3
    assert sleeps == [1.0, 2.0]
    assert extract_ticket_url(response).endswith("/ticket")


def test_retries_timeouts_then_gives_up():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    client, sleeps = _client(handler)

    with pytest.raises(PaymentProviderError):
        client.create_checkout_order(build_checkout_request(1, "a@b.com", "25.50"))
    assert sleeps == [1.0, 2.0]


def test_client_errors_are_not_retried():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(400, json={"message": "invalid payer"})

    client, sleeps = _client(handler)

    with pytest.raises(PaymentProviderError) as exc_info:
        client.create_checkout_order(build_checkout_request(1, "a@b.com", "25.50"))

    assert len(calls) == 1
    assert exc_info.value.status_code == 400
    assert "invalid payer" in exc_info.value.body_text
    assert sleeps == []


def test_missing_access_token_fails_without_calling_provider():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("provider must not be called")

    client = MercadoPagoClient(access_token="", client=httpx.Client(transport=httpx.MockTransport(handler)))

    with pytest.raises(PaymentProviderError):
        client.create_checkout_order(build_checkout_request(1, "a@b.com", "25.50"))

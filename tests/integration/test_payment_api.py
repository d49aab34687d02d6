"""Integration tests for the payment endpoints, including the processor webhook."""

from marketplace.order.order import Order
from marketplace.payment.payment import Payment
from marketplace.payment.queries import payment_for_order
from marketplace.vendor.vendor import Vendor
from protean import current_domain
from support import as_customer, webhook_payload

SIGNED = {"Stripe-Signature": "test-signature", "Content-Type": "application/json"}


def _create_intent(client, headers, order_id):
    return client.post("/payments/create-intent", json={"order_id": order_id}, headers=headers)


class TestCreateIntentEndpoint:
    def test_returns_client_secret(self, client, gateway, customer_headers, two_vendor_order):
        response = _create_intent(client, customer_headers, str(two_vendor_order.id))

        assert response.status_code == 200
        body = response.json()
        assert body["client_secret"].startswith(body["intent_id"])
        assert gateway.calls[0]["amount_cents"] == 7248

    def test_repeat_returns_same_intent(self, client, gateway, customer_headers, two_vendor_order):
        first = _create_intent(client, customer_headers, str(two_vendor_order.id)).json()
        second = _create_intent(client, customer_headers, str(two_vendor_order.id)).json()
        assert first["intent_id"] == second["intent_id"]

    def test_other_customers_order(self, client, gateway, two_vendor_order):
        response = _create_intent(client, as_customer("cust-other"), str(two_vendor_order.id))
        assert response.status_code == 404

    def test_gateway_timeout_is_retryable(self, client, gateway, customer_headers, two_vendor_order):
        gateway.configure(available=False)

        response = _create_intent(client, customer_headers, str(two_vendor_order.id))

        assert response.status_code == 503
        assert payment_for_order(two_vendor_order.id) is None

    def test_cancelled_order_conflicts(self, client, gateway, customer_headers, two_vendor_order):
        client.patch(f"/orders/{two_vendor_order.id}/cancel", headers=customer_headers)
        response = _create_intent(client, customer_headers, str(two_vendor_order.id))
        assert response.status_code == 409


class TestWebhookEndpoint:
    def test_success_confirms_order(self, client, gateway, customer_headers, two_vendor_order, vendor_a):
        intent_id = _create_intent(client, customer_headers, str(two_vendor_order.id)).json()["intent_id"]

        response = client.post(
            "/payments/webhook",
            content=webhook_payload("payment_intent.succeeded", intent_id, charge_id="ch_123"),
            headers=SIGNED,
        )

        assert response.status_code == 200
        assert response.json() == {"received": True}
        order = current_domain.repository_for(Order).get(two_vendor_order.id)
        assert order.status == "CONFIRMED"
        payment = current_domain.repository_for(Payment).get(payment_for_order(order.id).id)
        assert payment.status == "PAID"
        assert payment.charge_id == "ch_123"
        assert current_domain.repository_for(Vendor).get(vendor_a.id).total_revenue_cents == 5398

    def test_failure_marks_payment_failed(self, client, gateway, customer_headers, two_vendor_order):
        intent_id = _create_intent(client, customer_headers, str(two_vendor_order.id)).json()["intent_id"]

        response = client.post(
            "/payments/webhook",
            content=webhook_payload("payment_intent.payment_failed", intent_id, failure_message="Card declined"),
            headers=SIGNED,
        )

        assert response.status_code == 200
        payment = payment_for_order(two_vendor_order.id)
        assert payment.status == "FAILED"
        assert payment.failure_reason == "Card declined"
        assert current_domain.repository_for(Order).get(two_vendor_order.id).status == "PENDING"

    def test_bad_signature_is_unauthorized(self, client, gateway, customer_headers, two_vendor_order):
        intent_id = _create_intent(client, customer_headers, str(two_vendor_order.id)).json()["intent_id"]

        response = client.post(
            "/payments/webhook",
            content=webhook_payload("payment_intent.succeeded", intent_id),
            headers={"Stripe-Signature": "forged", "Content-Type": "application/json"},
        )

        assert response.status_code == 401
        assert current_domain.repository_for(Order).get(two_vendor_order.id).status == "PENDING"

    def test_malformed_body_is_rejected(self, client, gateway):
        response = client.post("/payments/webhook", content=b"{not json", headers=SIGNED)

        assert response.status_code == 401
        assert response.json() == {"error": {"payload": ["Malformed webhook payload"]}}

    def test_unknown_event_type_acknowledged(self, client, gateway):
        response = client.post(
            "/payments/webhook",
            content=webhook_payload("charge.refunded", "pi_whatever"),
            headers=SIGNED,
        )
        assert response.status_code == 200

    def test_unknown_intent_acknowledged(self, client, gateway):
        response = client.post(
            "/payments/webhook",
            content=webhook_payload("payment_intent.succeeded", "pi_unknown"),
            headers=SIGNED,
        )
        assert response.status_code == 200

    def test_redelivery_credits_vendor_once(self, client, gateway, customer_headers, two_vendor_order, vendor_b):
        intent_id = _create_intent(client, customer_headers, str(two_vendor_order.id)).json()["intent_id"]
        payload = webhook_payload("payment_intent.succeeded", intent_id, charge_id="ch_1")

        client.post("/payments/webhook", content=payload, headers=SIGNED)
        client.post("/payments/webhook", content=payload, headers=SIGNED)

        vendor = current_domain.repository_for(Vendor).get(vendor_b.id)
        assert vendor.total_orders == 1
        assert vendor.total_revenue_cents == 1063


class TestPaymentStatusEndpoint:
    def test_status_after_payment(self, client, gateway, customer_headers, two_vendor_order):
        intent_id = _create_intent(client, customer_headers, str(two_vendor_order.id)).json()["intent_id"]
        client.post(
            "/payments/webhook",
            content=webhook_payload("payment_intent.succeeded", intent_id, charge_id="ch_1"),
            headers=SIGNED,
        )

        response = client.get(f"/payments/status/{two_vendor_order.id}", headers=customer_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["order_status"] == "CONFIRMED"
        assert body["payment"]["status"] == "PAID"

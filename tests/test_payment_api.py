"""Integration tests for the payment endpoints."""

import pytest
from fastapi.testclient import TestClient

from conftest import KEY_ID, KEY_SECRET, FakeGateway, FakeTransport, make_settings, sign, tamper
from invoicebolt.errors import GatewayError, StoreError
from invoicebolt.main import create_app
from invoicebolt.store import MemoryRecordStore, PaymentStatus


def create_order(client, **body):
    response = client.post("/api/payment/create", json=body)
    assert response.status_code == 200, response.text
    return response.json()


def verify_body(order, payment_id="pay_123", signature=None, email="buyer@example.com", **extra):
    body = {
        "razorpay_order_id": order["orderId"],
        "razorpay_payment_id": payment_id,
        "razorpay_signature": signature or sign(order["orderId"], payment_id),
        "merchantTransactionId": order["merchantTransactionId"],
        "email": email,
    }
    body.update(extra)
    return body


class TestCreatePayment:
    def test_returns_order_details_and_public_key(self, client, gateway):
        data = create_order(client, userId="user-1", ctaVariant="hero")

        assert data["success"] is True
        assert data["orderId"] == "order_0001"
        assert data["amount"] == 99900
        assert data["currency"] == "INR"
        assert data["key"] == KEY_ID
        assert data["merchantTransactionId"].startswith("TXN_")
        assert KEY_SECRET not in str(data)

        call = gateway.calls[0]
        assert call["receipt"] == data["merchantTransactionId"]
        assert call["notes"] == {
            "description": "InvoiceBolt Lifetime Access",
            "userId": "user-1",
            "ctaVariant": "hero",
        }

    def test_client_amount_is_ignored(self, client, gateway, store):
        data = create_order(client, amount=1, description="cheap")

        assert gateway.calls[0]["amount_minor"] == 99900
        record = store.get_payment_by_merchant_transaction_id(data["merchantTransactionId"])
        assert record.amount == 99900
        assert record.description == "InvoiceBolt Lifetime Access"

    def test_persists_pending_record(self, client, store):
        data = create_order(client)

        record = store.get_payment_by_merchant_transaction_id(data["merchantTransactionId"])
        assert record.status is PaymentStatus.PENDING
        assert record.gateway_order_id == data["orderId"]
        assert record.user_id is None
        assert record.payment_method is None

    def test_anonymous_defaults_in_gateway_notes(self, client, gateway):
        create_order(client)
        assert gateway.calls[0]["notes"]["userId"] == "anonymous"
        assert gateway.calls[0]["notes"]["ctaVariant"] == "na"

    def test_gateway_failure_persists_nothing(self, client, gateway, store):
        gateway.error = GatewayError("Payment gateway unavailable")

        response = client.post("/api/payment/create", json={})

        assert response.status_code == 502
        assert response.json() == {
            "success": False,
            "error": "Payment gateway unavailable",
            "error_code": "GATEWAY_ERROR",
        }
        assert store.count_payments() == 0

    def test_missing_keys_is_configuration_error(self, store, gateway, transport):
        app = create_app(
            settings=make_settings(RAZORPAY_KEY_ID="", RAZORPAY_KEY_SECRET=""),
            store=store, gateway=gateway, transport=transport,
        )
        response = TestClient(app).post("/api/payment/create", json={})

        assert response.status_code == 500
        assert response.json()["error_code"] == "CONFIG_ERROR"
        assert gateway.calls == []
        assert store.count_payments() == 0

    def test_store_failure_after_gateway_is_reported(self, settings, gateway, transport):
        class BrokenStore(MemoryRecordStore):
            def create_payment(self, *args, **kwargs):
                raise StoreError("disk full")

        app = create_app(settings=settings, store=BrokenStore(), gateway=gateway, transport=transport)
        response = TestClient(app).post("/api/payment/create", json={})

        assert response.status_code == 500
        assert response.json()["error_code"] == "STORE_ERROR"
        assert len(gateway.calls) == 1

    @pytest.mark.parametrize("price", [0, -10])
    def test_non_positive_amount_never_reaches_gateway(self, client, settings, gateway, store, price):
        # Settings refuse such a price at load time; this covers one changed afterwards
        settings.PRICE_INR = price

        response = client.post("/api/payment/create", json={})

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        assert gateway.calls == []
        assert store.count_payments() == 0

    def test_repeated_creates_get_distinct_transaction_ids(self, client):
        ids = {create_order(client)["merchantTransactionId"] for _ in range(20)}
        assert len(ids) == 20


class TestVerifyPayment:
    def test_valid_signature_marks_success(self, client, store):
        order = create_order(client)

        response = client.post("/api/payment/verify", json=verify_body(order))

        assert response.status_code == 200
        assert response.json() == {"success": True, "verified": True}
        record = store.get_payment_by_merchant_transaction_id(order["merchantTransactionId"])
        assert record.status is PaymentStatus.SUCCESS
        assert record.gateway_payment_id == "pay_123"
        assert record.payment_method == "UPI/Card/NetBanking"

    def test_sends_confirmation_email(self, client, transport):
        order = create_order(client)

        client.post("/api/payment/verify", json=verify_body(order, firstName="Asha"))

        assert len(transport.sent) == 1
        message = transport.sent[0]
        assert message.to == "buyer@example.com"
        assert message.subject.startswith("Payment confirmed")
        assert order["merchantTransactionId"] in message.text
        assert "₹999" in message.text
        assert "Asha" in message.html

    def test_repeat_verification_is_idempotent(self, client, store, transport):
        order = create_order(client)

        first = client.post("/api/payment/verify", json=verify_body(order))
        second = client.post("/api/payment/verify", json=verify_body(order))

        assert first.status_code == second.status_code == 200
        assert first.json() == second.json()
        assert len(transport.sent) == 1
        record = store.get_payment_by_merchant_transaction_id(order["merchantTransactionId"])
        assert record.status is PaymentStatus.SUCCESS

    def test_tampered_signature_marks_failed(self, client, store, transport):
        order = create_order(client)
        body = verify_body(order, signature=tamper(sign(order["orderId"], "pay_123")))

        response = client.post("/api/payment/verify", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid signature"
        assert response.json()["error_code"] == "INVALID_SIGNATURE"
        record = store.get_payment_by_merchant_transaction_id(order["merchantTransactionId"])
        assert record.status is PaymentStatus.FAILED
        assert transport.sent == []

    def test_mismatch_response_does_not_leak_expected_signature(self, client):
        order = create_order(client)
        expected = sign(order["orderId"], "pay_123")

        response = client.post("/api/payment/verify", json=verify_body(order, signature="bogus"))

        assert expected not in response.text

    def test_tampered_signature_cannot_undo_success(self, client, store):
        order = create_order(client)
        client.post("/api/payment/verify", json=verify_body(order))

        response = client.post(
            "/api/payment/verify",
            json=verify_body(order, signature=tamper(sign(order["orderId"], "pay_123"))),
        )

        assert response.status_code == 400
        record = store.get_payment_by_merchant_transaction_id(order["merchantTransactionId"])
        assert record.status is PaymentStatus.SUCCESS

    def test_valid_signature_cannot_undo_failure(self, client, store, transport):
        order = create_order(client)
        client.post("/api/payment/verify", json=verify_body(order, signature="bogus"))

        response = client.post("/api/payment/verify", json=verify_body(order))

        assert response.status_code == 409
        assert response.json()["error_code"] == "PAYMENT_ALREADY_FAILED"
        record = store.get_payment_by_merchant_transaction_id(order["merchantTransactionId"])
        assert record.status is PaymentStatus.FAILED
        assert transport.sent == []

    def test_email_failure_does_not_fail_verification(self, client, store, transport):
        transport.error = ConnectionError("SMTP down")
        order = create_order(client)

        response = client.post("/api/payment/verify", json=verify_body(order))

        assert response.status_code == 200
        assert response.json() == {"success": True, "verified": True}
        record = store.get_payment_by_merchant_transaction_id(order["merchantTransactionId"])
        assert record.status is PaymentStatus.SUCCESS

    def test_email_skipped_when_transport_not_configured(self, client, transport):
        transport.is_configured = False
        order = create_order(client)

        response = client.post("/api/payment/verify", json=verify_body(order))

        assert response.status_code == 200
        assert transport.sent == []

    def test_no_email_without_payer_address(self, client, transport):
        order = create_order(client)

        response = client.post("/api/payment/verify", json=verify_body(order, email=None))

        assert response.status_code == 200
        assert transport.sent == []

    def test_unknown_transaction_with_valid_signature_is_not_found(self, client):
        body = {
            "razorpay_order_id": "order_abc",
            "razorpay_payment_id": "pay_123",
            "razorpay_signature": sign("order_abc", "pay_123"),
            "merchantTransactionId": "TXN_0_deadbeef",
        }
        response = client.post("/api/payment/verify", json=body)

        assert response.status_code == 404
        assert response.json()["error_code"] == "PAYMENT_NOT_FOUND"

    def test_unknown_transaction_with_bad_signature_reports_mismatch(self, client):
        body = {
            "razorpay_order_id": "order_abc",
            "razorpay_payment_id": "pay_123",
            "razorpay_signature": tamper(sign("order_abc", "pay_123")),
            "merchantTransactionId": "TXN_0_deadbeef",
        }
        response = client.post("/api/payment/verify", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid signature"

    def test_signature_for_another_order_is_rejected(self, client, store):
        order = create_order(client)
        other = create_order(client)
        body = verify_body(order)
        body["razorpay_order_id"] = other["orderId"]
        body["razorpay_signature"] = sign(other["orderId"], "pay_123")

        response = client.post("/api/payment/verify", json=body)

        assert response.status_code == 400
        assert response.json()["error_code"] == "ORDER_MISMATCH"
        record = store.get_payment_by_merchant_transaction_id(order["merchantTransactionId"])
        assert record.status is PaymentStatus.PENDING

    def test_missing_secret_is_server_error(self, store, gateway, transport):
        app = create_app(
            settings=make_settings(RAZORPAY_KEY_SECRET=""),
            store=store, gateway=gateway, transport=transport,
        )
        body = {
            "razorpay_order_id": "order_abc",
            "razorpay_payment_id": "pay_123",
            "razorpay_signature": sign("order_abc", "pay_123"),
            "merchantTransactionId": "TXN_0_deadbeef",
        }
        response = TestClient(app).post("/api/payment/verify", json=body)

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Missing Razorpay secret",
            "error_code": "CONFIG_ERROR",
        }

    @pytest.mark.parametrize("missing", ["razorpay_signature", "merchantTransactionId", "razorpay_order_id"])
    def test_missing_fields_are_rejected(self, client, missing):
        body = {
            "razorpay_order_id": "order_abc",
            "razorpay_payment_id": "pay_123",
            "razorpay_signature": "sig",
            "merchantTransactionId": "TXN_0_deadbeef",
        }
        del body[missing]

        response = client.post("/api/payment/verify", json=body)

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.parametrize("email", ["not-an-email", "buyer@example", 12345])
    def test_malformed_payer_email_still_settles(self, client, store, transport, email):
        order = create_order(client)

        response = client.post("/api/payment/verify", json=verify_body(order, email=email))

        assert response.status_code == 200
        assert response.json() == {"success": True, "verified": True}
        record = store.get_payment_by_merchant_transaction_id(order["merchantTransactionId"])
        assert record.status is PaymentStatus.SUCCESS
        assert transport.sent == []


class TestPaymentFailed:
    def test_marks_pending_payment_failed(self, client, store):
        order = create_order(client)

        response = client.post(
            "/api/payment/failed",
            json={"merchantTransactionId": order["merchantTransactionId"], "error": {"code": "BAD_REQUEST_ERROR"}},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "status": "failed"}
        record = store.get_payment_by_merchant_transaction_id(order["merchantTransactionId"])
        assert record.status is PaymentStatus.FAILED
        assert "BAD_REQUEST_ERROR" in record.failure_reason

    def test_does_not_override_success(self, client, store):
        order = create_order(client)
        client.post("/api/payment/verify", json=verify_body(order))

        response = client.post(
            "/api/payment/failed",
            json={"merchantTransactionId": order["merchantTransactionId"], "reason": "user closed"},
        )

        assert response.json() == {"success": True, "status": "success"}
        record = store.get_payment_by_merchant_transaction_id(order["merchantTransactionId"])
        assert record.status is PaymentStatus.SUCCESS

    def test_unknown_transaction_is_a_noop(self, client):
        response = client.post("/api/payment/failed", json={"merchantTransactionId": "TXN_missing"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "status": None}


class TestPaymentStatus:
    def test_unknown_transaction(self, client):
        response = client.get("/api/payment/status/TXN_missing")

        assert response.status_code == 404
        assert response.json()["error"] == "Payment not found"

    def test_pending_then_success(self, client):
        order = create_order(client)
        url = f"/api/payment/status/{order['merchantTransactionId']}"

        pending = client.get(url).json()["payment"]
        assert pending["status"] == "pending"
        assert pending["amount"] == 99900
        assert pending["paymentMethod"] is None
        assert pending["razorpayPaymentId"] is None

        client.post("/api/payment/verify", json=verify_body(order))

        settled = client.get(url).json()
        assert settled["success"] is True
        assert settled["payment"]["status"] == "success"
        assert settled["payment"]["paymentMethod"] == "UPI/Card/NetBanking"
        assert settled["payment"]["razorpayPaymentId"] == "pay_123"
        assert settled["payment"]["merchantTransactionId"] == order["merchantTransactionId"]


class TestAmbient:
    def test_security_headers_on_every_response(self, client):
        response = client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
        assert "checkout.razorpay.com" in response.headers["Content-Security-Policy"]

    def test_health_reports_configuration(self, client):
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["store"] == "memory"
        assert data["payments"] == "configured"
        assert data["email"] == "configured"

    def test_health_with_everything_disabled(self):
        app = create_app(
            settings=make_settings(RAZORPAY_KEY_ID="", RAZORPAY_KEY_SECRET=""),
            store=MemoryRecordStore(), gateway=FakeGateway(), transport=FakeTransport(is_configured=False),
        )
        data = TestClient(app).get("/health").json()

        assert data["payments"] == "disabled"
        assert data["email"] == "disabled"

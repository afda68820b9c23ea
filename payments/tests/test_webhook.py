import json
from unittest.mock import patch

from django.test import TestCase, override_settings
from django.urls import reverse

from orders.models import Order
from payments.signatures import compute_signature

from .fakes import make_order, tara_settings


@override_settings(TARAMONEY=tara_settings())
class TaraMoneyWebhookTests(TestCase):
    def setUp(self):
        self.order = make_order(
            payment_status=Order.STATUS_PENDING,
            payment_metadata={"_taramoney_payment_id": "pay_1", "_taramoney_payment_type": "mobile_money"},
        )
        self.url = reverse("payments:webhook_taramoney")

    def _post(self, payload, raw=None, **headers):
        body = raw if raw is not None else json.dumps(payload)
        return self.client.post(self.url, data=body, content_type="application/json", headers=headers)

    def _success_payload(self, **extra):
        return {
            "businessId": "biz_test",
            "paymentId": "pay_1",
            "status": "SUCCESS",
            "transactionCode": "tx_9",
            **extra,
        }

    def test_success_reconciles_order(self):
        resp = self._post(self._success_payload())
        self.assertEqual(resp.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.STATUS_PROCESSING)
        self.assertEqual(self.order.transaction_ref, "tx_9")
        self.assertEqual(self.order.payment_metadata["_taramoney_payment_type"], "mobile_money")
        self.assertEqual(
            list(self.order.notes.values_list("note", flat=True)),
            ["TaraMoney payment completed. Transaction ID: tx_9"],
        )

    def test_redelivery_adds_no_second_note(self):
        self._post(self._success_payload())
        resp = self._post(self._success_payload())
        self.assertEqual(resp.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.notes.count(), 1)

    def test_late_failure_does_not_undo_success(self):
        self._post(self._success_payload())
        resp = self._post({"businessId": "biz_test", "paymentId": "pay_1", "status": "FAILED"})
        self.assertEqual(resp.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.STATUS_PROCESSING)
        self.assertEqual(self.order.transaction_ref, "tx_9")

    def test_failure_marks_order_failed(self):
        resp = self._post({"businessId": "biz_test", "paymentId": "pay_1", "status": "EXPIRED"})
        self.assertEqual(resp.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.STATUS_FAILED)
        self.assertEqual(self.order.notes.get().note, "TaraMoney payment failed. Status: EXPIRED")

    def test_order_link_payment_matched_by_product_id(self):
        order = make_order(payment_status=Order.STATUS_PENDING)
        payload = {"businessId": "biz_test", "productId": str(order.pk), "status": "SUCCESS", "paymentId": "p9"}
        resp = self._post(payload)
        self.assertEqual(resp.status_code, 200)
        order.refresh_from_db()
        self.assertEqual(order.payment_status, Order.STATUS_PROCESSING)
        self.assertEqual(order.transaction_ref, "p9")

    def test_tenant_mismatch_rejected_before_lookup(self):
        with patch("payments.gateways.match_order") as matcher:
            resp = self._post(self._success_payload(businessId="someone_else"))
        self.assertEqual(resp.status_code, 401)
        matcher.assert_not_called()
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.STATUS_PENDING)
        self.assertEqual(self.order.notes.count(), 0)

    def test_missing_status_is_bad_request(self):
        resp = self._post({"businessId": "biz_test", "paymentId": "pay_1"})
        self.assertEqual(resp.status_code, 400)

    def test_invalid_json(self):
        self.assertEqual(self._post(None, raw="{not json").status_code, 400)
        self.assertEqual(self._post(None, raw="[1, 2]").status_code, 400)

    def test_unmatched_order_is_server_error(self):
        with self.assertLogs("payments.gateways.taramoney", level="ERROR") as cm:
            resp = self._post(self._success_payload(paymentId="pay_unknown"))
        self.assertEqual(resp.status_code, 500)
        self.assertIn("pay_unknown", "\n".join(cm.output))

    def test_webhook_payload_is_masked_in_logs(self):
        with self.assertLogs("payments.gateways.taramoney", level="INFO") as cm:
            self._post(self._success_payload(paymentId="pay_unknown", apiKey="sk_live_verysecret"))
        output = "\n".join(cm.output)
        self.assertIn("sk_l...", output)
        self.assertNotIn("sk_live_verysecret", output)

    def test_get_not_allowed(self):
        self.assertEqual(self.client.get(self.url).status_code, 405)

    def test_unexpected_error_is_server_error(self):
        with patch("payments.gateways.TaraMoneyGateway.process_webhook", side_effect=RuntimeError("db down")):
            with self.assertLogs("payments.webhook", level="ERROR"):
                resp = self._post(self._success_payload())
        self.assertEqual(resp.status_code, 500)


class SignedWebhookTests(TestCase):
    def setUp(self):
        self.order = make_order(payment_status=Order.STATUS_PENDING)
        self.url = reverse("payments:webhook_taramoney")
        self.body = json.dumps({
            "businessId": "biz_test",
            "productId": str(self.order.pk),
            "status": "SUCCESS",
            "transactionCode": "tx_1",
        })

    def _post(self, body, signature=None):
        headers = {"X-Webhook-Signature": signature} if signature is not None else {}
        return self.client.post(self.url, data=body, content_type="application/json", headers=headers)

    @override_settings(TARAMONEY=tara_settings(WEBHOOK_SECRET="whsec"))
    def test_valid_signature_accepted(self):
        resp = self._post(self.body, compute_signature(self.body.encode(), "whsec"))
        self.assertEqual(resp.status_code, 200)
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.STATUS_PROCESSING)

    @override_settings(TARAMONEY=tara_settings(WEBHOOK_SECRET="whsec"))
    def test_tampered_body_rejected(self):
        signature = compute_signature(self.body.encode(), "whsec")
        tampered = self.body.replace("tx_1", "tx_2")
        resp = self._post(tampered, signature)
        self.assertEqual(resp.status_code, 401)
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.STATUS_PENDING)

    @override_settings(TARAMONEY=tara_settings(WEBHOOK_SECRET="whsec"))
    def test_missing_signature_rejected(self):
        self.assertEqual(self._post(self.body).status_code, 401)

    @override_settings(TARAMONEY=tara_settings(REQUIRE_SIGNED_REFERENCE_MATCH=True))
    def test_unsigned_reference_match_can_be_refused(self):
        resp = self._post(self.body)
        self.assertEqual(resp.status_code, 500)
        self.order.refresh_from_db()
        self.assertEqual(self.order.payment_status, Order.STATUS_PENDING)

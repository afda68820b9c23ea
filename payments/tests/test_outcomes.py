from django.test import SimpleTestCase

from payments.exceptions import MissingField, TenantMismatch
from payments.outcomes import FAILED, SUCCEEDED, map_outcome


class MapOutcomeTests(SimpleTestCase):
    def test_success_with_transaction_code(self):
        payload = {"businessId": "biz", "paymentId": "pay_1", "status": "SUCCESS", "transactionCode": "tx_9"}
        outcome = map_outcome("biz", "biz", payload)
        self.assertEqual(outcome.outcome, SUCCEEDED)
        self.assertTrue(outcome.succeeded)
        self.assertEqual(outcome.transaction_ref, "tx_9")
        self.assertEqual(outcome.provider_payment_id, "pay_1")
        self.assertEqual(outcome.raw_payload, payload)

    def test_alternate_success_spellings(self):
        for status in ("API_ORDER_SUCESSFULL", "API_ORDER_SUCCESSFUL", "success"):
            with self.subTest(status=status):
                outcome = map_outcome("biz", "biz", {"businessId": "biz", "status": status})
                self.assertEqual(outcome.outcome, SUCCEEDED)

    def test_unknown_status_is_failure(self):
        outcome = map_outcome("biz", "biz", {"businessId": "biz", "status": "CANCELLED", "paymentId": "p"})
        self.assertEqual(outcome.outcome, FAILED)
        self.assertEqual(outcome.status, "CANCELLED")

    def test_transaction_ref_falls_back_to_payment_id(self):
        outcome = map_outcome("biz", "biz", {"businessId": "biz", "status": "SUCCESS", "paymentId": "pay_2"})
        self.assertEqual(outcome.transaction_ref, "pay_2")

    def test_missing_optional_fields_become_empty(self):
        outcome = map_outcome("biz", "biz", {"businessId": "biz", "status": "SUCCESS"})
        self.assertEqual(outcome.transaction_ref, "")
        self.assertEqual(outcome.provider_payment_id, "")

    def test_tenant_mismatch(self):
        with self.assertRaises(TenantMismatch):
            map_outcome("other", "biz", {"businessId": "other", "status": "SUCCESS"})

    def test_missing_required_fields(self):
        with self.assertRaises(MissingField) as ctx:
            map_outcome(None, "biz", {"status": "SUCCESS"})
        self.assertEqual(ctx.exception.field, "businessId")
        with self.assertRaises(MissingField) as ctx:
            map_outcome("biz", "biz", {"businessId": "biz"})
        self.assertEqual(ctx.exception.field, "status")

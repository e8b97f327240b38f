"""
Integration tests - exceptions raised inside DRF views.

Endpoints under test (``demo.urls``):
    POST /api/demo/orders/              raised ValidationError
    GET  /api/demo/orders/{id}/         raised OrderNotFound
    POST /api/demo/orders/{id}/pay/     conditional PaymentDeclined rules
    GET  /api/demo/inventory/           ignored TimeoutError
    GET  /api/demo/reports/             unclassified and DRF exceptions

Every converted response must be ``application/problem+json`` with the
RFC 7807 members.
"""

from __future__ import annotations

from django.test import SimpleTestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

PROBLEM_CONTENT_TYPE = "application/problem+json"


class ProblemAssertionsMixin:

    def assertProblem(self, resp, expected_status: int) -> dict:
        self.assertEqual(resp.status_code, expected_status, msg=resp.content)
        self.assertEqual(resp["Content-Type"], PROBLEM_CONTENT_TYPE)
        body = resp.json()
        self.assertEqual(body["status"], expected_status)
        self.assertEqual(body["type"], f"https://httpstatuscodes.io/{expected_status}")
        self.assertIn("title", body)
        self.assertIn("traceId", body)
        return body


class TestRaisedDomainExceptions(ProblemAssertionsMixin, SimpleTestCase):

    def setUp(self):
        self.client = APIClient()

    def test_existing_order_is_untouched(self):
        """Successful responses are not wrapped."""
        resp = self.client.get(reverse("demo:order-detail", args=[1]))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json(), {"id": 1, "sku": "BOOK42", "quantity": 1})

    def test_missing_order_maps_to_404(self):
        """OrderNotFound maps to a 404 without leaking detail."""
        url = reverse("demo:order-detail", args=[999])

        body = self.assertProblem(self.client.get(url), status.HTTP_404_NOT_FOUND)

        self.assertEqual(body["title"], "Not Found")
        self.assertEqual(body["instance"], url)
        self.assertNotIn("detail", body)

    def test_request_id_header_becomes_trace_id(self):
        """The request id travels into the problem body."""
        resp = self.client.get(reverse("demo:order-detail", args=[999]), HTTP_X_REQUEST_ID="trace-77")

        self.assertEqual(resp.json()["traceId"], "trace-77")

    def test_insufficient_funds_matches_first_rule(self):
        """An insufficient_funds decline maps to 402."""
        resp = self.client.post(
            reverse("demo:order-pay", args=[1]),
            {"decline_code": "insufficient_funds"},
            format="json",
        )

        self.assertProblem(resp, status.HTTP_402_PAYMENT_REQUIRED)

    def test_other_decline_falls_through_to_second_rule(self):
        """Other declines fall through to 422."""
        resp = self.client.post(
            reverse("demo:order-pay", args=[1]),
            {"decline_code": "card_expired"},
            format="json",
        )

        self.assertProblem(resp, status.HTTP_422_UNPROCESSABLE_ENTITY)

    def test_successful_payment(self):
        resp = self.client.post(reverse("demo:order-pay", args=[1]), {}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)

    @override_settings(DEBUG=True)
    def test_debug_includes_exception_details(self):
        """DEBUG adds exception details to the body."""
        body = self.assertProblem(
            self.client.get(reverse("demo:order-detail", args=[999])),
            status.HTTP_404_NOT_FOUND,
        )

        self.assertEqual(body["detail"], "Order 999 does not exist.")
        self.assertEqual(body["exceptionDetails"][0]["type"], "OrderNotFound")


class TestRaisedValidationErrors(ProblemAssertionsMixin, SimpleTestCase):

    def setUp(self):
        self.client = APIClient()

    def test_invalid_order_returns_validation_problem(self):
        resp = self.client.post(
            reverse("demo:order-list"),
            {"sku": "bad sku!", "quantity": 0},
            format="json",
        )

        body = self.assertProblem(resp, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(body["title"], "One or more validation errors occurred.")
        self.assertEqual(set(body["errors"]), {"sku", "quantity"})
        self.assertEqual(body["errors"]["sku"], ["SKU must be alphanumeric."])

    def test_valid_order_is_created(self):
        resp = self.client.post(
            reverse("demo:order-list"),
            {"sku": "pen5", "quantity": 3},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.json()["sku"], "PEN5")


class TestUnclassifiedAndFrameworkExceptions(ProblemAssertionsMixin, SimpleTestCase):

    def setUp(self):
        self.client = APIClient()

    def test_unclassified_exception_becomes_500(self):
        with self.assertLogs("problem_details.factory", level="ERROR") as logs:
            resp = self.client.get(reverse("demo:reports"), {"kind": "crash"})

        body = self.assertProblem(resp, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertNotIn("Report renderer crashed", resp.content.decode())
        self.assertNotIn("detail", body)
        self.assertIn("Unhandled exception [RuntimeError]", logs.output[0])

    def test_drf_exception_keeps_its_status_and_detail(self):
        resp = self.client.get(reverse("demo:reports"), {"kind": "forbidden"})

        body = self.assertProblem(resp, status.HTTP_403_FORBIDDEN)
        self.assertEqual(body["detail"], "Reports are restricted to auditors.")

    def test_ignored_exception_propagates(self):
        with self.assertRaises(TimeoutError):
            self.client.get(reverse("demo:inventory"))


class TestRethrowAll(SimpleTestCase):

    def setUp(self):
        self.client = APIClient()

    def test_rethrow_all_disables_conversion(self):
        with override_settings(PROBLEM_DETAILS={"CONFIGURE": lambda options: options.rethrow_all()}):
            with self.assertRaises(RuntimeError):
                self.client.get(reverse("demo:reports"), {"kind": "crash"})

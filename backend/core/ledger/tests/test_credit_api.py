from unittest.mock import patch

from django.test import TestCase
from rest_framework.test import APIClient

from ledger.models import CreditTransaction
from tenants.models import Tenant

LANDLORD = {"HTTP_X_USER_ID": "landlord-1", "HTTP_X_ORG_ID": "org-a", "HTTP_X_ROLE": "landlord"}
ADMIN_ORG_B = {"HTTP_X_USER_ID": "admin-9", "HTTP_X_ORG_ID": "org-b", "HTTP_X_ROLE": "admin"}
TENANT_SELF = {"HTTP_X_USER_ID": "tenant-001", "HTTP_X_ORG_ID": "org-a", "HTTP_X_ROLE": "tenant"}
TENANT_OTHER = {"HTTP_X_USER_ID": "tenant-002", "HTTP_X_ORG_ID": "org-a", "HTTP_X_ROLE": "tenant"}


class CreditAPITestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.tenant = Tenant.all_objects.create(
            id="tenant-001",
            org_id="org-a",
            unit_id="unit-1",
            user_id="tenant-001",
            name="Jane",
            email="jane@example.com",
        )
        Tenant.all_objects.create(
            id="tenant-002",
            org_id="org-a",
            unit_id="unit-2",
            user_id="tenant-002",
            name="John",
            email="john@example.com",
        )

    def url(self, action, tenant_id="tenant-001"):
        return f"/v1/tenants/{tenant_id}/credits/{action}"

    def earn(self, amount, memo=None, headers=LANDLORD, tenant_id="tenant-001"):
        body = {"amount": amount}
        if memo is not None:
            body["memo"] = memo
        return self.client.post(self.url("earn", tenant_id), body, format="json", **headers)

    def redeem(self, amount, headers=LANDLORD, tenant_id="tenant-001"):
        return self.client.post(self.url("redeem", tenant_id), {"amount": amount}, format="json", **headers)

    def balance(self, headers=LANDLORD, tenant_id="tenant-001"):
        return self.client.get(self.url("balance", tenant_id), **headers)


class CreditScenarioTests(CreditAPITestCase):
    def test_earn_then_balance(self):
        response = self.earn(100, memo="welcome bonus")
        self.assertEqual(response.status_code, 201)
        entry = response.json()
        self.assertEqual(entry["type"], "EARN")
        self.assertEqual(entry["amount"], 100)
        self.assertEqual(entry["tenantId"], "tenant-001")
        self.assertEqual(entry["orgId"], "org-a")
        self.assertEqual(entry["unitId"], "unit-1")
        self.assertEqual(entry["memo"], "welcome bonus")
        self.assertEqual(
            set(entry), {"id", "orgId", "tenantId", "unitId", "type", "amount", "memo", "createdAt"}
        )

        self.assertEqual(self.balance().json(), {"balance": 100})

    def test_redeem_over_balance_is_rejected(self):
        self.earn(100)
        response = self.redeem(150)
        self.assertEqual(response.status_code, 400)
        message = response.json()["message"]
        self.assertIn("Current balance: 100", message)
        self.assertIn("Requested: 150", message)

        self.assertEqual(self.balance().json(), {"balance": 100})
        self.assertEqual(CreditTransaction.all_objects.filter(tenant=self.tenant).count(), 1)

    def test_redeem_within_balance(self):
        self.earn(100)
        response = self.redeem(50)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["type"], "REDEEM")
        self.assertEqual(response.json()["amount"], -50)
        self.assertEqual(self.balance().json(), {"balance": 50})

    def test_mixed_sequence_balance(self):
        self.earn(100)
        self.redeem(30)
        self.earn(50)
        self.redeem(20)
        self.assertEqual(self.balance().json(), {"balance": 100})

    def test_balance_without_entries_is_zero(self):
        response = self.balance()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"balance": 0})

    def test_ledger_default_sort_is_newest_first(self):
        for memo in ("first", "second", "third"):
            self.earn(10, memo=memo)

        response = self.client.get(self.url("ledger"), **LANDLORD)
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual([row["memo"] for row in payload["results"]], ["third", "second", "first"])
        self.assertEqual(payload["totalResults"], 3)
        self.assertEqual(payload["totalPages"], 1)
        self.assertEqual(payload["page"], 1)
        self.assertEqual(payload["limit"], 10)

    def test_cross_org_actor_gets_not_found(self):
        self.earn(100)

        earn = self.earn(10, headers=ADMIN_ORG_B)
        balance = self.balance(headers=ADMIN_ORG_B)
        missing = self.balance(headers=ADMIN_ORG_B, tenant_id="tenant-404")

        self.assertEqual(earn.status_code, 404)
        self.assertEqual(balance.status_code, 404)
        self.assertEqual(balance.json(), {"message": "Tenant not found"})
        self.assertEqual(balance.json(), missing.json())
        self.assertEqual(earn.json(), missing.json())
        self.assertEqual(CreditTransaction.all_objects.count(), 1)


class CreditAuthorizationTests(CreditAPITestCase):
    def test_tenant_cannot_earn(self):
        response = self.earn(100, headers=TENANT_SELF)
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"message": "Insufficient permissions"})

    def test_tenant_cannot_adjust(self):
        response = self.client.post(self.url("adjust"), {"amount": 5}, format="json", **TENANT_SELF)
        self.assertEqual(response.status_code, 403)

    def test_tenant_redeems_and_reads_own_record(self):
        self.earn(100)
        self.assertEqual(self.redeem(40, headers=TENANT_SELF).status_code, 201)
        self.assertEqual(self.balance(headers=TENANT_SELF).json(), {"balance": 60})
        ledger = self.client.get(self.url("ledger"), **TENANT_SELF)
        self.assertEqual(ledger.status_code, 200)
        self.assertEqual(ledger.json()["totalResults"], 2)

    def test_tenant_cannot_touch_other_tenant(self):
        self.earn(100)
        for response in (
            self.redeem(10, headers=TENANT_OTHER),
            self.balance(headers=TENANT_OTHER),
            self.client.get(self.url("ledger"), **TENANT_OTHER),
        ):
            with self.subTest(path=response.request["PATH_INFO"]):
                self.assertEqual(response.status_code, 403)
                self.assertEqual(response.json(), {"message": "Forbidden"})

    def test_management_redeems_on_behalf_of_tenant(self):
        self.earn(100)
        response = self.redeem(25)
        self.assertEqual(response.status_code, 201)
        self.assertEqual(self.balance().json(), {"balance": 75})

    def test_missing_identity_is_401(self):
        response = self.client.get(self.url("balance"))
        self.assertEqual(response.status_code, 401)


class CreditValidationTests(CreditAPITestCase):
    def test_non_positive_amounts_are_rejected(self):
        for amount in (0, -5):
            with self.subTest(amount=amount):
                response = self.earn(amount)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"message": "amount: Amount must be positive"})
                response = self.redeem(amount)
                self.assertEqual(response.status_code, 400)
        self.assertEqual(CreditTransaction.all_objects.count(), 0)

    def test_errors_are_aggregated(self):
        response = self.earn(0, memo="x" * 501)
        self.assertEqual(response.status_code, 400)
        message = response.json()["message"]
        self.assertIn("amount: Amount must be positive", message)
        self.assertIn("memo:", message)

    def test_missing_amount(self):
        response = self.client.post(self.url("earn"), {}, format="json", **LANDLORD)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"message": "amount: Amount is required"})

    def test_adjust_rejects_zero(self):
        response = self.client.post(self.url("adjust"), {"amount": 0}, format="json", **LANDLORD)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"message": "amount: Amount must be a nonzero integer"})

    def test_adjust_can_drive_balance_negative(self):
        self.earn(10)
        response = self.client.post(
            self.url("adjust"), {"amount": -25, "memo": "chargeback"}, format="json", **LANDLORD
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["type"], "ADJUST")
        self.assertEqual(response.json()["amount"], -25)
        self.assertEqual(self.balance().json(), {"balance": -15})

        rejected = self.redeem(1)
        self.assertEqual(rejected.status_code, 400)
        self.assertIn("Current balance: -15", rejected.json()["message"])


class CreditLimitTests(CreditAPITestCase):
    def test_amount_above_ceiling_is_rejected(self):
        response = self.earn(10**20)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"message": "amount: Amount must not exceed 1000000000000"})

        self.assertEqual(self.redeem(10**13).status_code, 400)

        response = self.client.post(self.url("adjust"), {"amount": -(10**20)}, format="json", **LANDLORD)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json(), {"message": "amount: Amount magnitude must not exceed 1000000000000"}
        )
        self.assertEqual(CreditTransaction.all_objects.count(), 0)

    def test_largest_amount_is_accepted(self):
        self.assertEqual(self.earn(10**12).status_code, 201)
        self.assertEqual(self.balance().json(), {"balance": 10**12})

    @patch("ledger.services.MAX_CREDIT_BALANCE", 150)
    def test_running_balance_is_bounded(self):
        self.assertEqual(self.earn(100).status_code, 201)

        response = self.earn(100)
        self.assertEqual(response.status_code, 400)
        self.assertIn("amount: Resulting balance would exceed the limit", response.json()["message"])

        adjust = self.client.post(self.url("adjust"), {"amount": -300}, format="json", **LANDLORD)
        self.assertEqual(adjust.status_code, 400)

        balance = self.balance()
        self.assertEqual(balance.status_code, 200)
        self.assertEqual(balance.json(), {"balance": 100})
        self.assertEqual(self.redeem(100).status_code, 201)


class LedgerPaginationTests(CreditAPITestCase):
    def setUp(self):
        super().setUp()
        for amount, memo in ((30, "a"), (10, "b"), (20, "c")):
            self.earn(amount, memo=memo)
        self.redeem(5)

    def test_sort_by_amount_ascending(self):
        response = self.client.get(self.url("ledger"), {"sortBy": "amount:asc"}, **LANDLORD)
        self.assertEqual([row["amount"] for row in response.json()["results"]], [-5, 10, 20, 30])

    def test_limit_and_page(self):
        response = self.client.get(
            self.url("ledger"), {"sortBy": "amount:desc", "limit": 3, "page": 2}, **LANDLORD
        )
        payload = response.json()
        self.assertEqual(payload["totalResults"], 4)
        self.assertEqual(payload["totalPages"], 2)
        self.assertEqual(payload["page"], 2)
        self.assertEqual(payload["limit"], 3)
        self.assertEqual([row["amount"] for row in payload["results"]], [-5])

    def test_page_past_end_is_empty(self):
        response = self.client.get(self.url("ledger"), {"page": 9}, **LANDLORD)
        self.assertEqual(response.json()["results"], [])
        self.assertEqual(response.json()["totalResults"], 4)

    def test_unknown_sort_field_falls_back_to_newest_first(self):
        response = self.client.get(self.url("ledger"), {"sortBy": "password:asc"}, **LANDLORD)
        self.assertEqual(response.json()["results"][0]["type"], "REDEEM")

    def test_page_beyond_ceiling_is_rejected(self):
        response = self.client.get(self.url("ledger"), {"page": 10**19}, **LANDLORD)
        self.assertEqual(response.status_code, 400)
        self.assertIn("page:", response.json()["message"])

    def test_invalid_limit_is_rejected(self):
        response = self.client.get(self.url("ledger"), {"limit": 0}, **LANDLORD)
        self.assertEqual(response.status_code, 400)
        self.assertIn("limit:", response.json()["message"])

import hashlib
from io import StringIO

from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.models import Contract, ContractClause, ContractSignature, ContractVersion
from marketplace.tests.factories import ContractFactory, QuoteFactory, UserFactory


class ContractSigningTest(TestCase):
    def setUp(self):
        self.bus = container.configure_for_testing()
        self.client = APIClient()
        self.contract = ContractFactory()
        self.buyer = self.contract.buyer
        self.seller = self.contract.seller

    def sign(self, user):
        self.client.force_authenticate(user=user)
        return self.client.post(
            reverse("marketplace:contract-sign", args=[self.contract.id]), HTTP_X_FORWARDED_FOR="10.1.2.3, 172.16.0.1"
        )

    def test_seller_may_sign_first(self):
        response = self.sign(self.seller)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "pending_buyer")
        self.assertIsNotNone(response.data["signed_at_seller"])

    def test_signature_leaves_audit_row(self):
        self.sign(self.buyer)

        signature = ContractSignature.objects.get(contract=self.contract)
        self.assertEqual(signature.user, self.buyer)
        self.assertEqual(signature.version, 1)
        self.assertEqual(signature.method, "digital")
        self.assertEqual(signature.ip_address, "10.1.2.3")
        self.assertEqual(len(signature.signature_hash), 64)

    def test_signing_twice_is_conflict(self):
        self.sign(self.buyer)

        response = self.sign(self.buyer)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "already_signed")

    def test_outsider_cannot_sign(self):
        response = self.sign(UserFactory())

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(ContractSignature.objects.exists())

    def test_both_signatures_execute_and_assign(self):
        self.sign(self.buyer)
        response = self.sign(self.seller)

        self.assertEqual(response.data["status"], "executed")
        self.contract.refresh_from_db()
        self.assertIsNotNone(self.contract.executed_at)
        self.assertEqual(self.contract.request.status, "assigned")
        self.assertEqual(ContractSignature.objects.filter(contract=self.contract).count(), 2)

    def test_buyer_withdraws_before_seller_signs(self):
        self.sign(self.buyer)
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(reverse("marketplace:contract-withdraw-signature", args=[self.contract.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "pending_buyer")
        self.assertIsNone(response.data["signed_at_buyer"])
        self.assertEqual(ContractSignature.objects.filter(contract=self.contract).count(), 1)

    def test_withdraw_without_signature_is_conflict(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(reverse("marketplace:contract-withdraw-signature", args=[self.contract.id]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_seller_cannot_withdraw(self):
        self.sign(self.buyer)
        self.client.force_authenticate(user=self.seller)

        response = self.client.post(reverse("marketplace:contract-withdraw-signature", args=[self.contract.id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ContractTermsTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.contract = ContractFactory()
        self.client.force_authenticate(user=self.contract.buyer)
        self.url = reverse("marketplace:contract-terms", args=[self.contract.id])

    def test_update_bumps_version(self):
        response = self.client.patch(
            self.url,
            {
                "warranty_days": 180,
                "payment_schedule": {"deposit": 20, "progress": 50, "completion": 30},
                "language_mode": "english_only",
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["version"], 2)
        self.assertEqual(response.data["language_mode"], "english_only")
        self.assertEqual(response.data["binding_terms"]["warranty_days"], 180)

    def test_schedule_must_add_up_to_100(self):
        response = self.client.patch(
            self.url, {"payment_schedule": {"deposit": 50, "progress": 40, "completion": 30}}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.contract.refresh_from_db()
        self.assertEqual(self.contract.version, 1)

    def test_completion_before_start_is_rejected(self):
        response = self.client.patch(
            self.url, {"start_date": "2026-12-10", "completion_date": "2026-12-01"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_terms_are_locked_once_signed(self):
        self.client.post(reverse("marketplace:contract-sign", args=[self.contract.id]))

        response = self.client.patch(self.url, {"warranty_days": 30}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)


class ContractDocumentTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        call_command("seed_contract_clauses", stdout=StringIO())
        self.client = APIClient()
        self.contract = ContractFactory(quote=QuoteFactory(price="1000.00"))
        self.client.force_authenticate(user=self.contract.seller)
        self.url = reverse("marketplace:contract-document", args=[self.contract.id])

    def test_document_is_rendered_and_hashed(self):
        response = self.client.post(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        html = response.data["html"]
        self.assertIn("english-version", html)
        self.assertIn("arabic-version", html)
        self.assertIn("1000.00", html)
        self.assertEqual(response.data["content_hash"], hashlib.sha256(html.encode("utf-8")).hexdigest())

        version = ContractVersion.objects.get(contract=self.contract)
        self.assertEqual(version.content_hash, response.data["content_hash"])
        self.assertEqual(version.changed_by, self.contract.seller)
        self.assertEqual(Contract.objects.get(id=self.contract.id).content_hash, response.data["content_hash"])

    def test_escrow_clause_only_with_escrow(self):
        html = self.client.post(self.url).data["html"]
        self.assertNotIn("Deposit Escrow", html)

        self.contract.binding_terms.use_deposit_escrow = True
        self.contract.binding_terms.save()

        html = self.client.post(self.url).data["html"]
        self.assertIn("Deposit Escrow", html)

    def test_single_language_document(self):
        Contract.objects.filter(id=self.contract.id).update(language_mode="arabic_only")

        html = self.client.post(self.url).data["html"]

        self.assertIn('dir="rtl"', html)
        self.assertNotIn("Scope of Work", html)

    def test_outsider_gets_forbidden(self):
        self.client.force_authenticate(user=UserFactory())

        response = self.client.post(self.url)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_signed_document_is_not_rerendered(self):
        first = self.client.post(self.url).data
        self.client.force_authenticate(user=self.contract.buyer)
        self.client.post(reverse("marketplace:contract-sign", args=[self.contract.id]))

        self.contract.binding_terms.use_deposit_escrow = True
        self.contract.binding_terms.save()
        response = self.client.post(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["html"], first["html"])
        self.assertEqual(response.data["content_hash"], first["content_hash"])
        self.assertEqual(ContractVersion.objects.filter(contract=self.contract).count(), 1)


class SeedContractClausesCommandTest(TestCase):
    def test_seed_is_idempotent(self):
        out = StringIO()
        call_command("seed_contract_clauses", stdout=out)
        call_command("seed_contract_clauses", stdout=out)

        self.assertEqual(ContractClause.objects.count(), 7)
        self.assertTrue(ContractClause.objects.get(key="deposit-escrow").requires_escrow)
        self.assertIn("Updated clause: parties", out.getvalue())


class ContractListTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.contract = ContractFactory()
        ContractFactory()

    def test_party_sees_only_own_contracts(self):
        self.client.force_authenticate(user=self.contract.buyer)

        response = self.client.get(reverse("marketplace:contract-list"))

        self.assertEqual([row["id"] for row in response.data], [str(self.contract.id)])

    def test_role_filter(self):
        self.client.force_authenticate(user=self.contract.buyer)

        response = self.client.get(reverse("marketplace:contract-list"), {"role": "seller"})

        self.assertEqual(response.data, [])

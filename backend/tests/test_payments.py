"""
Tests for the payment ledger.

Covers:
1. Recording against a lease or a property (with explicit tenant)
2. Reference resolution and ownership
3. Status updates (unrestricted) and audit
4. Lists with stats, detail visibility
"""

import uuid
from datetime import date, datetime

import pytest
from sqlalchemy import select

from conftest import (
    ADMIN,
    MANAGER,
    OTHER_MANAGER,
    OTHER_TENANT,
    TENANT,
    make_application,
    make_lease,
)
from rehaish.models import AuditLog, Payment
from rehaish.models.enums import (
    ApplicationStatus,
    AuditAction,
    LeaseStatus,
    PaymentMethod,
    PaymentStatus,
    PaymentType,
)


def payment_body(**overrides):
    body = {
        "amount": 85000,
        "payment_type": "RENT",
        "method": "BANK_TRANSFER",
        "payment_date": "2024-02-05T10:00:00",
    }
    body.update({k: str(v) if isinstance(v, uuid.UUID) else v for k, v in overrides.items()})
    return body


async def record(client, headers=MANAGER, **overrides):
    return await client.post("/v1/managers/payments", json=payment_body(**overrides), headers=headers)


@pytest.fixture
async def lease(seed, tenant, listing):
    application = await seed(make_application(tenant, listing, ApplicationStatus.APPROVED))
    return await seed(make_lease(application, date(2024, 1, 1), date(2024, 12, 31), LeaseStatus.ACTIVE))


# =============================================================================
# record
# =============================================================================


class TestRecordPayment:
    async def test_against_lease_infers_tenant_and_property(self, client, tenant, listing, lease):
        response = await record(client, lease_id=lease.id)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "PENDING"
        assert data["tenant_id"] == str(tenant.id)
        assert data["property_id"] == str(listing.id)
        assert data["lease_id"] == str(lease.id)
        assert data["currency"] == "PKR"
        assert data["amount"] == 85000

    async def test_currency_is_upper_cased(self, client, lease):
        response = await record(client, lease_id=lease.id, currency="usd")
        assert response.json()["data"]["currency"] == "USD"

    async def test_property_only_with_tenant(self, client, tenant, listing):
        response = await record(
            client,
            property_id=listing.id,
            tenant_id=tenant.id,
            payment_type="APPLICATION_FEE",
            amount=2500,
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["lease_id"] is None
        assert data["property_id"] == str(listing.id)
        assert data["tenant_id"] == str(tenant.id)

    async def test_property_only_requires_tenant(self, client, listing):
        response = await record(client, property_id=listing.id)
        assert response.status_code == 400
        assert response.json()["code"] == "TENANT_REQUIRED"

    async def test_property_only_unknown_tenant(self, client, listing):
        response = await record(client, property_id=listing.id, tenant_id=uuid.uuid4())
        assert response.status_code == 404
        assert response.json()["code"] == "TENANT_NOT_FOUND"

    async def test_requires_lease_or_property(self, client, session_factory, manager):
        response = await record(client)
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert "Either lease_id or property_id is required" in body["errors"][0]["message"]

        async with session_factory() as session:
            assert (await session.execute(select(Payment))).scalars().all() == []

    @pytest.mark.parametrize("amount", [0, -100])
    async def test_amount_must_be_positive(self, client, lease, amount):
        response = await record(client, lease_id=lease.id, amount=amount)
        assert response.status_code == 400

    async def test_other_managers_lease_is_not_found(self, client, other_manager, lease):
        response = await record(client, headers=OTHER_MANAGER, lease_id=lease.id)
        assert response.status_code == 404
        assert response.json()["code"] == "LEASE_NOT_FOUND"

    async def test_other_managers_property_is_not_found(self, client, other_manager, tenant, listing):
        response = await record(client, headers=OTHER_MANAGER, property_id=listing.id, tenant_id=tenant.id)
        assert response.status_code == 404
        assert response.json()["code"] == "PROPERTY_NOT_FOUND"

    async def test_mismatched_tenant_is_rejected(self, client, other_tenant, lease):
        response = await record(client, lease_id=lease.id, tenant_id=other_tenant.id)
        assert response.status_code == 400
        assert response.json()["code"] == "REFERENCE_MISMATCH"

    async def test_mismatched_property_is_rejected(self, client, lease):
        response = await record(client, lease_id=lease.id, property_id=uuid.uuid4())
        assert response.status_code == 400
        assert response.json()["code"] == "REFERENCE_MISMATCH"

    async def test_tenant_cannot_record(self, client, lease):
        response = await record(client, headers=TENANT, lease_id=lease.id)
        assert response.status_code == 403

    async def test_writes_audit_entry(self, client, session_factory, lease):
        response = await record(client, lease_id=lease.id)
        payment_id = uuid.UUID(response.json()["data"]["id"])

        async with session_factory() as session:
            result = await session.execute(select(AuditLog).where(AuditLog.resource_id == payment_id))
            entry = result.scalar_one()
        assert entry.action == AuditAction.PAYMENT_RECORDED
        assert entry.details["amount"] == 85000


# =============================================================================
# update
# =============================================================================


class TestUpdatePayment:
    @pytest.fixture
    async def payment(self, client, lease):
        response = await record(client, lease_id=lease.id)
        return response.json()["data"]

    async def update(self, client, payment_id, headers=MANAGER, **body):
        return await client.patch(f"/v1/managers/payments/{payment_id}", json=body, headers=headers)

    async def test_complete_with_reference(self, client, payment):
        response = await self.update(
            client, payment["id"], status="COMPLETED", reference_id="TXN-001", receipt_url="https://r.example/1"
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "COMPLETED"
        assert data["reference_id"] == "TXN-001"
        assert data["receipt_url"] == "https://r.example/1"

    @pytest.mark.parametrize(
        "path",
        [
            ["COMPLETED", "REFUNDED", "PENDING"],
            ["FAILED", "COMPLETED"],
            ["REFUNDED", "FAILED", "PENDING"],
        ],
    )
    async def test_any_status_to_any_status(self, client, payment, path):
        for target in path:
            response = await self.update(client, payment["id"], status=target)
            assert response.status_code == 200
            assert response.json()["data"]["status"] == target

    async def test_omitted_fields_are_kept(self, client, payment):
        await self.update(client, payment["id"], status="PENDING", note="Awaiting bank confirmation")
        response = await self.update(client, payment["id"], status="COMPLETED")
        assert response.json()["data"]["note"] == "Awaiting bank confirmation"

    async def test_other_manager_gets_not_found(self, client, other_manager, payment):
        response = await self.update(client, payment["id"], headers=OTHER_MANAGER, status="COMPLETED")
        assert response.status_code == 404
        assert response.json()["code"] == "PAYMENT_NOT_FOUND"

    async def test_unknown_payment(self, client, manager):
        response = await self.update(client, uuid.uuid4(), status="COMPLETED")
        assert response.status_code == 404


# =============================================================================
# read
# =============================================================================


def _payment(lease, amount, status, day):
    return Payment(
        tenant_id=lease.tenant_id,
        lease_id=lease.id,
        property_id=lease.property_id,
        amount=amount,
        payment_type=PaymentType.RENT,
        status=status,
        method=PaymentMethod.JAZZCASH,
        payment_date=datetime(2024, 1, day, 9, 0),
    )


class TestReadPayments:
    @pytest.fixture
    async def ledger(self, seed, lease):
        return await seed(
            _payment(lease, 85000, PaymentStatus.COMPLETED, 5),
            _payment(lease, 85000, PaymentStatus.COMPLETED, 6),
            _payment(lease, 85000, PaymentStatus.PENDING, 7),
            _payment(lease, 1000, PaymentStatus.FAILED, 8),
        )

    async def test_manager_list_stats(self, client, ledger):
        response = await client.get("/v1/managers/payments", headers=MANAGER)

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data["items"]) == 4
        assert data["stats"] == {
            "total": 4,
            "completed": 2,
            "pending": 1,
            "failed": 1,
            "refunded": 0,
            "total_completed_amount": 170000,
        }

    async def test_default_sort_is_newest_first(self, client, ledger):
        response = await client.get("/v1/managers/payments", headers=MANAGER)
        dates = [item["payment_date"][:10] for item in response.json()["data"]["items"]]
        assert dates == ["2024-01-08", "2024-01-07", "2024-01-06", "2024-01-05"]

    async def test_filter_by_status(self, client, ledger):
        response = await client.get("/v1/managers/payments?status=COMPLETED", headers=MANAGER)
        data = response.json()["data"]
        assert {item["status"] for item in data["items"]} == {"COMPLETED"}
        assert data["stats"]["total"] == 2

    async def test_tenant_sees_own_payments(self, client, ledger):
        response = await client.get("/v1/tenants/payments", headers=TENANT)
        assert response.json()["data"]["pagination"]["total_count"] == 4

    async def test_other_tenant_sees_nothing(self, client, other_tenant, ledger):
        response = await client.get("/v1/tenants/payments", headers=OTHER_TENANT)
        assert response.json()["data"]["items"] == []

    async def test_other_manager_sees_nothing(self, client, other_manager, ledger):
        response = await client.get("/v1/managers/payments", headers=OTHER_MANAGER)
        assert response.json()["data"]["stats"]["total"] == 0

    async def test_detail_visibility(self, client, other_tenant, other_manager, ledger):
        payment_id = ledger[0].id

        assert (await client.get(f"/v1/payments/{payment_id}", headers=TENANT)).status_code == 200
        assert (await client.get(f"/v1/payments/{payment_id}", headers=MANAGER)).status_code == 200
        assert (await client.get(f"/v1/payments/{payment_id}", headers=ADMIN)).status_code == 200

        response = await client.get(f"/v1/payments/{payment_id}", headers=OTHER_TENANT)
        assert response.status_code == 404
        assert response.json()["code"] == "PAYMENT_NOT_FOUND"
        assert (await client.get(f"/v1/payments/{payment_id}", headers=OTHER_MANAGER)).status_code == 404

    async def test_lease_total_paid_counts_completed_only(self, client, ledger, lease):
        response = await client.get(f"/v1/leases/{lease.id}", headers=TENANT)
        metrics = response.json()["data"]["metrics"]
        assert metrics["total_paid"] == 170000
        assert metrics["total_payments"] == 4

    async def test_manager_cannot_use_tenant_list(self, client, manager):
        response = await client.get("/v1/tenants/payments", headers=MANAGER)
        assert response.status_code == 403
        assert response.json()["data"]["allowed_roles"] == ["admin", "tenant"]

    async def test_admin_reads_both_lists(self, client, ledger):
        for path in ("/v1/tenants/payments", "/v1/managers/payments"):
            response = await client.get(path, headers=ADMIN)
            assert response.status_code == 200
            assert response.json()["data"]["pagination"]["total_count"] == 4

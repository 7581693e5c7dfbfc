"""
Tests for the application lifecycle over HTTP.

Covers:
1. Submission creates a PENDING application with a contact snapshot
2. One application per (tenant, property), whatever its status
3. Withdraw / decide only from PENDING
4. Ownership misses surface as 404
5. Role checks and missing-profile handling
"""

import uuid

from sqlalchemy import select

from conftest import (
    ADMIN,
    MANAGER,
    OTHER_MANAGER,
    OTHER_TENANT,
    TENANT,
    bearer,
    make_application,
    make_property,
)
from rehaish.models import Application, AuditLog
from rehaish.models.enums import ApplicationStatus, AuditAction


async def submit(client, listing, headers=TENANT, **extra):
    return await client.post(
        "/v1/applications",
        json={"property_id": str(listing.id), **extra},
        headers=headers,
    )


# =============================================================================
# submit
# =============================================================================


class TestSubmit:
    async def test_creates_pending_application(self, client, tenant, listing):
        response = await submit(client, listing, message="Family of four, non-smokers.")

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Application submitted successfully"
        data = body["data"]
        assert data["status"] == "PENDING"
        assert data["tenant_id"] == str(tenant.id)
        assert data["property_id"] == str(listing.id)
        # Contact snapshot defaults to the tenant profile
        assert data["full_name"] == tenant.name
        assert data["email"] == tenant.email
        assert data["message"] == "Family of four, non-smokers."

    async def test_explicit_contact_overrides_profile(self, client, tenant, listing):
        response = await submit(
            client,
            listing,
            full_name="Ayesha Khan",
            email="ayesha@example.com",
            phone_number="+92 333 0000000",
        )
        assert response.status_code == 201
        assert response.json()["data"]["full_name"] == "Ayesha Khan"
        assert response.json()["data"]["email"] == "ayesha@example.com"

    async def test_unknown_property(self, client, tenant):
        response = await client.post(
            "/v1/applications",
            json={"property_id": str(uuid.uuid4())},
            headers=TENANT,
        )
        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": "Property not found",
            "code": "PROPERTY_NOT_FOUND",
        }

    async def test_second_submission_conflicts(self, client, tenant, listing):
        first = await submit(client, listing)
        second = await submit(client, listing)

        assert second.status_code == 409
        body = second.json()
        assert body["code"] == "APPLICATION_EXISTS"
        assert body["data"]["existing_application"]["id"] == first.json()["data"]["id"]
        assert body["data"]["existing_application"]["status"] == "PENDING"

    async def test_conflicts_even_after_withdrawal(self, client, tenant, listing):
        first = await submit(client, listing)
        await client.post(f"/v1/applications/{first.json()['data']['id']}/withdraw", headers=TENANT)

        again = await submit(client, listing)
        assert again.status_code == 409
        assert again.json()["data"]["existing_application"]["status"] == "WITHDRAWN"

    async def test_other_tenant_may_apply(self, client, tenant, other_tenant, listing):
        assert (await submit(client, listing)).status_code == 201
        assert (await submit(client, listing, headers=OTHER_TENANT)).status_code == 201

    async def test_writes_audit_entry(self, client, session_factory, tenant, listing):
        response = await submit(client, listing)
        application_id = uuid.UUID(response.json()["data"]["id"])

        async with session_factory() as session:
            result = await session.execute(
                select(AuditLog).where(AuditLog.resource_id == application_id)
            )
            entry = result.scalar_one()
        assert entry.action == AuditAction.APPLICATION_SUBMITTED
        assert entry.actor_id == tenant.id

    async def test_manager_cannot_submit(self, client, manager, listing):
        response = await submit(client, listing, headers=MANAGER)
        assert response.status_code == 403
        assert response.json()["code"] == "ACCESS_DENIED"

    async def test_requires_authentication(self, client, listing):
        response = await client.post("/v1/applications", json={"property_id": str(listing.id)})
        assert response.status_code == 401
        assert response.json()["code"] == "AUTH_REQUIRED"

    async def test_requires_synced_profile(self, client, listing):
        response = await submit(client, listing, headers=bearer("stranger:tenant"))
        assert response.status_code == 403
        assert response.json()["code"] == "PROFILE_NOT_FOUND"

    async def test_rejects_malformed_body(self, client, tenant):
        response = await client.post("/v1/applications", json={"property_id": "nope"}, headers=TENANT)
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["errors"][0]["field"] == "property_id"


# =============================================================================
# withdraw
# =============================================================================


class TestWithdraw:
    async def test_withdraws_pending(self, client, tenant, listing):
        created = await submit(client, listing)
        app_id = created.json()["data"]["id"]

        response = await client.post(f"/v1/applications/{app_id}/withdraw", headers=TENANT)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "WITHDRAWN"

    async def test_withdraw_after_approval_reports_current_status(self, client, seed, tenant, listing):
        application = await seed(make_application(tenant, listing, ApplicationStatus.APPROVED))

        response = await client.post(f"/v1/applications/{application.id}/withdraw", headers=TENANT)
        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "INVALID_STATUS_FOR_WITHDRAWAL"
        assert body["data"]["current_status"] == "APPROVED"
        assert body["data"]["allowed_status"] == "PENDING"

    async def test_cannot_withdraw_twice(self, client, tenant, listing):
        created = await submit(client, listing)
        app_id = created.json()["data"]["id"]
        await client.post(f"/v1/applications/{app_id}/withdraw", headers=TENANT)

        response = await client.post(f"/v1/applications/{app_id}/withdraw", headers=TENANT)
        assert response.status_code == 400
        assert response.json()["data"]["current_status"] == "WITHDRAWN"

    async def test_other_tenants_application_is_not_found(self, client, seed, tenant, other_tenant, listing):
        application = await seed(make_application(tenant, listing))

        response = await client.post(f"/v1/applications/{application.id}/withdraw", headers=OTHER_TENANT)
        assert response.status_code == 404
        assert response.json()["code"] == "APPLICATION_NOT_FOUND"


# =============================================================================
# decide
# =============================================================================


class TestDecide:
    async def test_manager_approves(self, client, session_factory, seed, tenant, listing):
        application = await seed(make_application(tenant, listing))

        response = await client.patch(
            f"/v1/applications/managers/{application.id}/status",
            json={"status": "APPROVED"},
            headers=MANAGER,
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "APPROVED"

        async with session_factory() as session:
            stored = await session.get(Application, application.id)
        assert stored.status == ApplicationStatus.APPROVED

    async def test_manager_rejects(self, client, seed, tenant, listing):
        application = await seed(make_application(tenant, listing))

        response = await client.patch(
            f"/v1/applications/managers/{application.id}/status",
            json={"status": "REJECTED"},
            headers=MANAGER,
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "REJECTED"

    async def test_second_decision_is_invalid(self, client, seed, tenant, listing):
        application = await seed(make_application(tenant, listing, ApplicationStatus.REJECTED))

        response = await client.patch(
            f"/v1/applications/managers/{application.id}/status",
            json={"status": "APPROVED"},
            headers=MANAGER,
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_STATUS_FOR_UPDATE"
        assert response.json()["data"]["current_status"] == "REJECTED"

    async def test_withdrawn_is_not_a_decision(self, client, seed, tenant, listing):
        application = await seed(make_application(tenant, listing))

        response = await client.patch(
            f"/v1/applications/managers/{application.id}/status",
            json={"status": "WITHDRAWN"},
            headers=MANAGER,
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_other_managers_property_is_not_found(self, client, seed, tenant, other_manager, listing):
        application = await seed(make_application(tenant, listing))

        response = await client.patch(
            f"/v1/applications/managers/{application.id}/status",
            json={"status": "APPROVED"},
            headers=OTHER_MANAGER,
        )
        assert response.status_code == 404

    async def test_tenant_cannot_decide(self, client, seed, tenant, listing):
        application = await seed(make_application(tenant, listing))

        response = await client.patch(
            f"/v1/applications/managers/{application.id}/status",
            json={"status": "APPROVED"},
            headers=TENANT,
        )
        assert response.status_code == 403
        assert response.json()["data"]["allowed_roles"] == ["admin", "manager"]


# =============================================================================
# lists
# =============================================================================


class TestLists:
    async def test_tenant_sees_only_own(self, client, seed, tenant, other_tenant, listing):
        await seed(make_application(tenant, listing), make_application(other_tenant, listing))

        response = await client.get("/v1/applications", headers=TENANT)
        assert response.status_code == 200
        data = response.json()["data"]
        assert [item["tenant_id"] for item in data["items"]] == [str(tenant.id)]
        assert data["items"][0]["property_title"] == listing.title
        assert data["pagination"]["total_count"] == 1

    async def test_manager_filters_by_status(self, client, seed, tenant, other_tenant, listing):
        await seed(
            make_application(tenant, listing, ApplicationStatus.APPROVED),
            make_application(other_tenant, listing),
        )

        response = await client.get("/v1/applications/managers?status=PENDING", headers=MANAGER)
        items = response.json()["data"]["items"]
        assert len(items) == 1
        assert items[0]["tenant_id"] == str(other_tenant.id)

    async def test_other_manager_sees_nothing(self, client, seed, tenant, other_manager, listing):
        await seed(make_application(tenant, listing))

        response = await client.get("/v1/applications/managers", headers=OTHER_MANAGER)
        assert response.json()["data"]["items"] == []

    async def test_pagination_meta(self, client, seed, manager, tenant):
        properties = [make_property(manager) for _ in range(3)]
        await seed(*properties)
        await seed(*[make_application(tenant, p) for p in properties])

        response = await client.get("/v1/applications?page=2&limit=2", headers=TENANT)
        pagination = response.json()["data"]["pagination"]
        assert pagination == {
            "current_page": 2,
            "total_pages": 2,
            "total_count": 3,
            "limit": 2,
            "has_next_page": False,
            "has_prev_page": True,
        }
        assert len(response.json()["data"]["items"]) == 1

    async def test_limit_above_maximum_is_rejected(self, client, tenant):
        response = await client.get("/v1/applications?limit=51", headers=TENANT)
        assert response.status_code == 400

    async def test_admin_reads_both_lists(self, client, seed, tenant, other_tenant, listing):
        await seed(make_application(tenant, listing), make_application(other_tenant, listing))

        for path in ("/v1/applications", "/v1/applications/managers"):
            response = await client.get(path, headers=ADMIN)
            assert response.status_code == 200
            assert response.json()["data"]["pagination"]["total_count"] == 2

    async def test_admin_cannot_decide(self, client, seed, tenant, listing):
        application = await seed(make_application(tenant, listing))

        response = await client.patch(
            f"/v1/applications/managers/{application.id}/status",
            json={"status": "APPROVED"},
            headers=ADMIN,
        )
        assert response.status_code == 403
        assert response.json()["data"]["required"] == ["update:applications"]

"""
Tests for tenant favourites.

Covers:
1. Saving a property, duplicates and unknown properties
2. Paginated list, newest listing first
3. Removal and removal of something never saved
4. Tenant-only access
"""

import uuid
from datetime import datetime

from sqlalchemy import func, select

from conftest import ADMIN, MANAGER, OTHER_TENANT, TENANT, make_property
from rehaish.models import Favorite


async def add(client, property_id, headers=TENANT):
    return await client.post(f"/v1/tenants/favorites/{property_id}", headers=headers)


# =============================================================================
# add
# =============================================================================


class TestAddFavorite:
    async def test_saves_property(self, client, tenant, listing):
        response = await add(client, listing.id)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Property added to favorites"
        assert body["data"]["property_id"] == str(listing.id)
        assert body["data"]["property_title"] == listing.title
        assert body["data"]["added_at"]

    async def test_duplicate_conflicts(self, client, session_factory, tenant, listing):
        await add(client, listing.id)

        response = await add(client, listing.id)
        assert response.status_code == 409
        assert response.json()["code"] == "ALREADY_FAVORITED"

        async with session_factory() as session:
            assert await session.scalar(select(func.count()).select_from(Favorite)) == 1

    async def test_unknown_property(self, client, tenant):
        response = await add(client, uuid.uuid4())
        assert response.status_code == 404
        assert response.json()["code"] == "PROPERTY_NOT_FOUND"

    async def test_tenants_keep_separate_lists(self, client, tenant, other_tenant, listing):
        assert (await add(client, listing.id)).status_code == 200
        assert (await add(client, listing.id, headers=OTHER_TENANT)).status_code == 200

        response = await client.get("/v1/tenants/favorites", headers=OTHER_TENANT)
        assert [item["id"] for item in response.json()["data"]["items"]] == [str(listing.id)]


# =============================================================================
# list
# =============================================================================


class TestListFavorites:
    async def test_newest_listing_first_and_paginated(self, client, seed, tenant, manager):
        older, newest, middle = await seed(
            make_property(manager, posted_date=datetime(2024, 1, 1)),
            make_property(manager, posted_date=datetime(2024, 3, 1)),
            make_property(manager, posted_date=datetime(2024, 2, 1)),
        )
        for prop in (older, newest, middle):
            await add(client, prop.id)

        response = await client.get("/v1/tenants/favorites?limit=2", headers=TENANT)
        assert response.status_code == 200
        data = response.json()["data"]
        assert [item["id"] for item in data["items"]] == [str(newest.id), str(middle.id)]
        assert data["pagination"]["total_count"] == 3
        assert data["pagination"]["has_next_page"] is True

        second = await client.get("/v1/tenants/favorites?limit=2&page=2", headers=TENANT)
        assert [item["id"] for item in second.json()["data"]["items"]] == [str(older.id)]

    async def test_empty(self, client, tenant):
        response = await client.get("/v1/tenants/favorites", headers=TENANT)
        assert response.json()["data"]["items"] == []
        assert response.json()["data"]["pagination"]["total_count"] == 0


# =============================================================================
# remove
# =============================================================================


class TestRemoveFavorite:
    async def test_removes(self, client, tenant, listing):
        await add(client, listing.id)

        response = await client.delete(f"/v1/tenants/favorites/{listing.id}", headers=TENANT)
        assert response.status_code == 200
        assert response.json()["message"] == "Property removed from favorites"

        listed = await client.get("/v1/tenants/favorites", headers=TENANT)
        assert listed.json()["data"]["items"] == []

    async def test_not_saved(self, client, tenant, listing):
        response = await client.delete(f"/v1/tenants/favorites/{listing.id}", headers=TENANT)
        assert response.status_code == 404
        assert response.json()["code"] == "FAVORITE_NOT_FOUND"

    async def test_other_tenants_favorite_is_untouched(self, client, tenant, other_tenant, listing):
        await add(client, listing.id)

        response = await client.delete(f"/v1/tenants/favorites/{listing.id}", headers=OTHER_TENANT)
        assert response.status_code == 404

        listed = await client.get("/v1/tenants/favorites", headers=TENANT)
        assert len(listed.json()["data"]["items"]) == 1

    async def test_deleting_property_clears_favorites(self, client, session_factory, tenant, listing):
        await add(client, listing.id)

        response = await client.delete(f"/v1/managers/properties/{listing.id}", headers=MANAGER)
        assert response.status_code == 200

        async with session_factory() as session:
            assert await session.scalar(select(func.count()).select_from(Favorite)) == 0


# =============================================================================
# access
# =============================================================================


class TestFavoriteAccess:
    async def test_manager_is_refused(self, client, manager, listing):
        response = await add(client, listing.id, headers=MANAGER)
        assert response.status_code == 403
        assert response.json()["data"]["allowed_roles"] == ["tenant"]

    async def test_admin_is_refused(self, client, listing):
        response = await client.get("/v1/tenants/favorites", headers=ADMIN)
        assert response.status_code == 403

    async def test_requires_synced_profile(self, client, listing):
        response = await add(client, listing.id)
        assert response.status_code == 403
        assert response.json()["code"] == "PROFILE_NOT_FOUND"

    async def test_requires_authentication(self, client, listing):
        response = await add(client, listing.id, headers={})
        assert response.status_code == 401

"""
Shared fixtures: in-memory SQLite database, app client with auth override.

Bearer tokens in tests are "<uid>:<role>" strings; verification is replaced
so no Firebase project is needed.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["FIREBASE_PROJECT_ID"] = "rehaish-test"
os.environ["ENVIRONMENT"] = "test"

import uuid
from datetime import date
from typing import Optional

import pytest_asyncio
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from rehaish.core.database import Base, get_db
from rehaish.core.errors import AuthRequired
from rehaish.core.security import AuthenticatedUser, parse_role, security, verify_firebase_token
from rehaish.main import app
from rehaish.models import Application, Lease, Manager, Property, Tenant
from rehaish.models.enums import ApplicationStatus, LeaseStatus, PropertyType


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


TENANT = bearer("tenant-1:tenant")
OTHER_TENANT = bearer("tenant-2:tenant")
MANAGER = bearer("manager-1:manager")
OTHER_MANAGER = bearer("manager-2:manager")
ADMIN = bearer("admin-1:admin")


async def fake_verify_firebase_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthenticatedUser:
    if credentials is None or not credentials.credentials:
        raise AuthRequired("Authentication required")
    uid, _, role = credentials.credentials.partition(":")
    return AuthenticatedUser(
        uid=uid,
        role=parse_role(role),
        email=f"{uid}@example.com",
        email_verified=True,
        name=uid.replace("-", " ").title(),
    )


# =============================================================================
# Database
# =============================================================================


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def seed(session_factory):
    """Persist model instances in a short-lived session."""

    async def _seed(*objects):
        async with session_factory() as session:
            session.add_all(objects)
            await session.commit()
        return objects[0] if len(objects) == 1 else objects

    return _seed


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[verify_firebase_token] = fake_verify_firebase_token
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# =============================================================================
# Domain objects
# =============================================================================


def make_tenant(uid: str) -> Tenant:
    return Tenant(
        id=uuid.uuid4(),
        firebase_uid=uid,
        name=uid.replace("-", " ").title(),
        email=f"{uid}@example.com",
        phone_number="+92 300 1234567",
    )


def make_manager(uid: str) -> Manager:
    return Manager(
        id=uuid.uuid4(),
        firebase_uid=uid,
        name=uid.replace("-", " ").title(),
        email=f"{uid}@example.com",
        phone_number="+92 321 7654321",
    )


def make_property(manager: Manager, **overrides) -> Property:
    values = dict(
        id=uuid.uuid4(),
        manager_id=manager.id,
        slug=f"property-{uuid.uuid4().hex[:8]}",
        title="Furnished Upper Portion in DHA Phase 5",
        description="Spacious upper portion with separate entrance.",
        photo_urls=[],
        price_per_month=85000,
        security_deposit=170000,
        property_type=PropertyType.UPPER_PORTION,
        bedrooms=3,
        bathrooms=2,
        area=1800,
        is_pets_allowed=False,
        is_parking_included=True,
        is_furnished=True,
        highlights=["SEPARATE_ENTRANCE"],
        amenities=["UPS", "GEYSER"],
        address="Street 12, DHA Phase 5",
        city="Lahore",
        state="Punjab",
        postal_code="54000",
        country="Pakistan",
        latitude=31.4697,
        longitude=74.4088,
    )
    values.update(overrides)
    return Property(**values)


def make_application(
    tenant: Tenant,
    prop: Property,
    status: ApplicationStatus = ApplicationStatus.PENDING,
) -> Application:
    return Application(
        id=uuid.uuid4(),
        property_id=prop.id,
        tenant_id=tenant.id,
        full_name=tenant.name,
        email=tenant.email,
        phone_number=tenant.phone_number,
        status=status,
    )


def make_lease(
    application: Application,
    start: date,
    end: date,
    status: LeaseStatus = LeaseStatus.PENDING_SIGNATURE,
) -> Lease:
    return Lease(
        id=uuid.uuid4(),
        property_id=application.property_id,
        tenant_id=application.tenant_id,
        application_id=application.id,
        status=status,
        start_date=start,
        end_date=end,
        rent_amount=85000,
        security_deposit=170000,
        payment_due_day=5,
    )


@pytest_asyncio.fixture
async def tenant(seed):
    return await seed(make_tenant("tenant-1"))


@pytest_asyncio.fixture
async def other_tenant(seed):
    return await seed(make_tenant("tenant-2"))


@pytest_asyncio.fixture
async def manager(seed):
    return await seed(make_manager("manager-1"))


@pytest_asyncio.fixture
async def other_manager(seed):
    return await seed(make_manager("manager-2"))


@pytest_asyncio.fixture
async def listing(seed, manager):
    return await seed(make_property(manager))

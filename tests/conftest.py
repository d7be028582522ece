"""Shared pytest fixtures.

Every test gets its own in-memory SQLite database, so no external services
are needed. Settings are pinned through the environment before the
application is imported.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RESEND_API_KEY"] = ""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from billmate.config import settings
from billmate.core.security import create_user_token, get_password_hash
from billmate.database import Database
from billmate.main import create_app
from billmate.models import Bill, BillStatus, Payment, PaymentStatus, Room, User, UserRole
from billmate.utils.time import local_due_date

TEST_PASSWORD = "Password123!"


@pytest.fixture
async def database():
    db = Database(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    db.init()
    await db.create_all()
    yield db
    await db.shutdown()


@pytest.fixture
async def db_session(database: Database):
    async with database.session() as session:
        yield session


@pytest.fixture
def app(database: Database):
    return create_app(database)


@pytest.fixture
def api_base() -> str:
    return f"http://test{settings.API_V1_PREFIX}"


@pytest.fixture
async def async_client(app):
    transport = ASGITransport(app=app)
    client = AsyncClient(transport=transport, base_url="http://test", timeout=30.0)
    yield client
    await client.aclose()


@pytest.fixture
def unique_suffix() -> str:
    return str(uuid.uuid4())[:8]


def auth_headers(user: User) -> dict:
    token = create_user_token(user.id, user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_user(db_session):
    async def _make(role: UserRole = UserRole.TENANT, email: Optional[str] = None, **fields) -> User:
        user = User(
            email=email or f"{role.value}_{uuid.uuid4().hex[:8]}@test.com",
            hashed_password=get_password_hash(TEST_PASSWORD),
            name=fields.pop("name", f"{role.value.title()} User"),
            role=role,
            is_active=True,
            **fields,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make


@pytest.fixture
async def admin_user(make_user) -> User:
    return await make_user(UserRole.ADMIN, name="Admin")


@pytest.fixture
async def tenant_user(make_user) -> User:
    return await make_user(UserRole.TENANT, name="สมชาย ใจดี")


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return auth_headers(admin_user)


@pytest.fixture
def tenant_headers(tenant_user: User) -> dict:
    return auth_headers(tenant_user)


@pytest.fixture
def make_room(db_session):
    async def _make(tenant: Optional[User] = None, **fields) -> Room:
        room = Room(
            room_number=fields.pop("room_number", uuid.uuid4().hex[:6].upper()),
            floor=fields.pop("floor", 1),
            rent_price=fields.pop("rent_price", Decimal("3500.00")),
            water_price=fields.pop("water_price", Decimal("100.00")),
            electricity_price=fields.pop("electricity_price", Decimal("8.00")),
            is_occupied=tenant is not None,
            tenant_id=tenant.id if tenant else None,
            **fields,
        )
        db_session.add(room)
        await db_session.flush()
        if tenant is not None:
            tenant.room_id = room.id
        await db_session.commit()
        await db_session.refresh(room)
        return room

    return _make


@pytest.fixture
def make_bill(db_session):
    async def _make(
        room: Room,
        tenant: User,
        due_date: Optional[datetime] = None,
        status: BillStatus = BillStatus.PENDING,
        total: Decimal = Decimal("1000.00"),
        month: int = 3,
        year: int = 2026,
    ) -> Bill:
        bill = Bill(
            room_id=room.id,
            tenant_id=tenant.id,
            month=month,
            year=year,
            rent_amount=total,
            water_units=Decimal("0"),
            water_amount=Decimal("0"),
            electricity_units=Decimal("0"),
            electricity_amount=Decimal("0"),
            total_amount=total,
            due_date=due_date or local_due_date(year, month, 5),
            status=status,
        )
        db_session.add(bill)
        await db_session.commit()
        await db_session.refresh(bill)
        return bill

    return _make


@pytest.fixture
def make_payment(db_session):
    async def _make(
        bill: Bill,
        ocr_data: Optional[dict] = None,
        qr_data: Optional[dict] = None,
        status: PaymentStatus = PaymentStatus.PENDING,
    ) -> Payment:
        payment = Payment(
            bill_id=bill.id,
            user_id=bill.tenant_id,
            slip_image_url="https://storage.test/slips/slip.jpg",
            ocr_data=ocr_data or {},
            qr_data=qr_data or {},
            status=status,
        )
        db_session.add(payment)
        await db_session.commit()
        await db_session.refresh(payment)
        return payment

    return _make

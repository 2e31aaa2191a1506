import json
import os
from collections.abc import AsyncGenerator, Callable, Generator
from datetime import UTC, datetime, time, timedelta
from decimal import Decimal

import httpx
import pytest
import pytest_asyncio
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

# Load environment variables from .env file
load_dotenv()

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret")
os.environ.setdefault("LOG_FORMAT", "console")

from app.config import settings  # noqa: E402
from app.core.paystack import PaystackClient, get_paystack_client  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.core.utils import new_id  # noqa: E402
from app.database import get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models import metadata  # noqa: E402
from app.models.clinics import clinics  # noqa: E402
from app.models.doctors import doctor_availability, doctors  # noqa: E402
from app.models.patients import patients  # noqa: E402
from app.models.users import users  # noqa: E402

# Test database URL - MUST be different from production
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
if TEST_DATABASE_URL.startswith("postgresql://"):
    TEST_DATABASE_URL = TEST_DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)

if TEST_DATABASE_URL.startswith("sqlite"):
    # One shared connection keeps the in-memory database alive across sessions
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    test_engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

PAYSTACK_TEST_SECRET = "sk_test_precta"


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session on a fresh schema."""
    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)
        await conn.run_sync(metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(metadata.drop_all)


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def paystack_secret(monkeypatch) -> str:
    """Pin the webhook signing secret."""
    monkeypatch.setattr(settings, "paystack_secret_key", PAYSTACK_TEST_SECRET)
    return PAYSTACK_TEST_SECRET


# ============================================================================
# Users
# ============================================================================


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable:
    """Factory inserting a user row."""

    async def _make(role: str, status: str = "active", email: str | None = None) -> dict:
        user_id = new_id()
        values = {
            "id": user_id,
            "email": email or f"{role}-{user_id[:8]}@precta.test",
            "email_verified": True,
            "role": role,
            "status": status,
        }
        await db_session.execute(insert(users).values(**values))
        await db_session.commit()
        return values

    return _make


@pytest.fixture
def make_patient(db_session: AsyncSession, make_user: Callable) -> Callable:
    """Factory inserting a patient with a profile."""

    async def _make(first_name: str = "Amina") -> dict:
        user = await make_user("patient")
        await db_session.execute(
            insert(patients).values(id=user["id"], first_name=first_name, last_name="Otieno")
        )
        await db_session.commit()
        return user

    return _make


@pytest.fixture
def make_doctor(db_session: AsyncSession, make_user: Callable) -> Callable:
    """Factory inserting a doctor with weekday availability."""

    async def _make(
        verification_status: str = "verified",
        specialties: list[str] | None = None,
        fee: str = "1500.00",
        modes: list[str] | None = None,
        clinic_id: str | None = None,
        last_name: str = "Kamau",
    ) -> dict:
        user = await make_user("doctor")
        await db_session.execute(
            insert(doctors).values(
                id=user["id"],
                first_name="Grace",
                last_name=last_name,
                license_number=f"KMPDC-{user['id'][:8]}",
                specialties=specialties or ["general practice"],
                languages=["en", "sw"],
                consultation_fee=Decimal(fee),
                consultation_duration_minutes=30,
                consultation_modes=modes or ["in_person", "video"],
                clinic_id=clinic_id,
                verification_status=verification_status,
            )
        )
        await db_session.execute(
            insert(doctor_availability),
            [
                {
                    "id": new_id(),
                    "doctor_id": user["id"],
                    "day_of_week": day,
                    "start_time": time(9, 0),
                    "end_time": time(12, 0),
                    "consultation_mode": "in_person",
                }
                for day in range(7)
            ],
        )
        await db_session.commit()
        return user

    return _make


@pytest_asyncio.fixture
async def patient(make_patient: Callable) -> dict:
    return await make_patient()


@pytest_asyncio.fixture
async def doctor(make_doctor: Callable) -> dict:
    return await make_doctor()


@pytest_asyncio.fixture
async def pending_doctor(make_doctor: Callable) -> dict:
    return await make_doctor(verification_status="pending", last_name="Wanjiru")


@pytest_asyncio.fixture
async def admin(make_user: Callable) -> dict:
    return await make_user("admin")


@pytest_asyncio.fixture
async def clinic(db_session: AsyncSession) -> dict:
    """Clinic with a 10 minute buffer."""
    values = {
        "id": new_id(),
        "name": "Westlands Medical Centre",
        "slug": "westlands",
        "timezone": "Africa/Nairobi",
        "settings": {
            "allow_online_booking": True,
            "appointment_buffer": 10,
            "max_advance_booking_days": 30,
        },
    }
    await db_session.execute(insert(clinics).values(**values))
    await db_session.commit()
    return values


@pytest.fixture
def headers_for() -> Callable[[dict], dict]:
    """Bearer headers for a user dict."""

    def _headers(user: dict) -> dict:
        token = create_access_token(
            data={"sub": user["id"], "email": user["email"]},
            expires_delta=timedelta(minutes=30),
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def future_start() -> datetime:
    """A start time three days ahead, outside any cancellation cutoff."""
    start = datetime.now(UTC) + timedelta(days=3)
    return start.replace(hour=7, minute=0, second=0, microsecond=0)


# ============================================================================
# Paystack
# ============================================================================


class FakePaystack:
    """Records gateway calls and answers them like Paystack does."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.verify_status = "success"
        self.amounts: dict[str, int] = {}
        self.fail_initialize = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/transaction/initialize":
            if self.fail_initialize:
                return httpx.Response(400, json={"status": False, "message": "Invalid key"})

            payload = json.loads(request.content)
            self.amounts[payload["reference"]] = payload["amount"]
            return httpx.Response(
                200,
                json={
                    "status": True,
                    "message": "Authorization URL created",
                    "data": {
                        "authorization_url": f"https://checkout.paystack.com/{payload['reference']}",
                        "access_code": "ac_test",
                        "reference": payload["reference"],
                    },
                },
            )

        if path.startswith("/transaction/verify/"):
            reference = path.rsplit("/", 1)[1]
            return httpx.Response(
                200,
                json={
                    "status": True,
                    "data": {
                        "reference": reference,
                        "status": self.verify_status,
                        "amount": self.amounts.get(reference, 0),
                    },
                },
            )

        if path == "/refund":
            return httpx.Response(
                200, json={"status": True, "data": {"id": 1, "status": "pending"}}
            )

        return httpx.Response(404, json={"status": False, "message": "Not found"})


@pytest.fixture
def paystack() -> Generator[FakePaystack, None, None]:
    """Route the gateway client to an in-process fake."""
    fake = FakePaystack()

    async def override() -> AsyncGenerator[PaystackClient, None]:
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(fake.handler),
            base_url="https://api.paystack.test",
        ) as http_client:
            yield PaystackClient(http_client)

    app.dependency_overrides[get_paystack_client] = override
    yield fake
    app.dependency_overrides.pop(get_paystack_client, None)

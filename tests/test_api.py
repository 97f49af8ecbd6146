"""API endpoint tests.

Tests the FastAPI payroll endpoints against the SQLite test schema.
"""

from collections.abc import AsyncGenerator
from decimal import Decimal
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from sweldox_payroll.api.app import create_app
from sweldox_payroll.api.dependencies import get_db_session

pytestmark = pytest.mark.asyncio

PERIOD = {
    "period_start_date": "2026-01-01",
    "period_end_date": "2026-01-15",
    "pay_date": "2026-01-20",
}


def build_app(session_factory):
    app = create_app()

    async def override_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    return app


@pytest_asyncio.fixture
async def client(session_factory, seeded_db) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to an app using the seeded test database."""
    transport = ASGITransport(app=build_app(session_factory))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def empty_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client over an empty schema."""
    transport = ASGITransport(app=build_app(session_factory))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health_check(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert "timestamp" in data

    async def test_readiness_check(self, client: AsyncClient):
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ready", "missing_deduction_codes": []}

    async def test_not_ready_without_deduction_catalog(self, empty_client: AsyncClient):
        """An unseeded catalog would fail every payroll."""
        response = await empty_client.get("/ready")
        assert response.status_code == 503
        assert response.json() == {
            "status": "not_ready",
            "missing_deduction_codes": ["SSS", "PHIC", "HDMF", "TAX"],
        }

    async def test_liveness_check(self, client: AsyncClient):
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestCreatePayroll:
    """Test POST /api/v1/payrolls."""

    async def test_create_payroll(self, client: AsyncClient):
        response = await client.post("/api/v1/payrolls", json={"employee_id": 1, **PERIOD})

        assert response.status_code == 201, response.text
        data = response.json()
        UUID(data["payroll_id"])
        assert data["employee_id"] == 1
        assert data["days_worked"] == 10
        assert Decimal(data["gross_pay"]) == Decimal("14285.60")
        assert Decimal(data["net_pay"]) == Decimal("15459.35")
        assert [d["deduction_code"] for d in data["deductions"]] == ["SSS", "PHIC", "HDMF", "TAX"]
        assert len(data["benefits"]) == 2

    async def test_duplicate_returns_conflict(self, client: AsyncClient):
        first = await client.post("/api/v1/payrolls", json={"employee_id": 1, **PERIOD})
        assert first.status_code == 201

        second = await client.post("/api/v1/payrolls", json={"employee_id": 1, **PERIOD})
        assert second.status_code == 409
        assert second.json()["code"] == "PAYROLL_EXISTS"
        assert "already exists" in second.json()["detail"]

    async def test_inverted_period_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/payrolls",
            json={
                "employee_id": 1,
                "period_start_date": "2026-01-15",
                "period_end_date": "2026-01-01",
                "pay_date": "2026-01-20",
            },
        )
        assert response.status_code == 422

    async def test_unknown_employee(self, client: AsyncClient):
        response = await client.post("/api/v1/payrolls", json={"employee_id": 999, **PERIOD})
        assert response.status_code == 404
        assert response.json()["code"] == "COMPENSATION_NOT_FOUND"


class TestBatchPayroll:
    """Test POST /api/v1/payrolls/batch."""

    async def test_batch_creates_for_active_employees(self, client: AsyncClient):
        await client.post("/api/v1/payrolls", json={"employee_id": 3, **PERIOD})

        response = await client.post("/api/v1/payrolls/batch", json=PERIOD)

        assert response.status_code == 201, response.text
        data = response.json()
        assert data["created_count"] == 4
        assert data["existing_count"] == 1
        assert data["failed_count"] == 0
        assert data["skips"] == [
            {
                "employee_id": 3,
                "status": "skipped_existing",
                "reason": "Payroll already exists for employee 3 for period "
                "2026-01-01 to 2026-01-15.",
            }
        ]


class TestReadPayrolls:
    """Test GET endpoints."""

    async def test_get_payroll(self, client: AsyncClient):
        created = await client.post("/api/v1/payrolls", json={"employee_id": 1, **PERIOD})
        payroll_id = created.json()["payroll_id"]

        response = await client.get(f"/api/v1/payrolls/{payroll_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["payroll_id"] == payroll_id
        assert Decimal(data["total_deductions"]) == Decimal("826.25")

    async def test_get_unknown_payroll(self, client: AsyncClient):
        response = await client.get(f"/api/v1/payrolls/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["code"] == "PAYROLL_NOT_FOUND"

    async def test_list_payrolls(self, client: AsyncClient):
        await client.post("/api/v1/payrolls/batch", json=PERIOD)

        response = await client.get(
            "/api/v1/payrolls",
            params={"period_start_date": "2026-01-01", "period_end_date": "2026-01-15"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 5
        assert [p["employee_id"] for p in data["items"]] == [1, 2, 3, 4, 5]

    async def test_list_filtered_by_employee(self, client: AsyncClient):
        await client.post("/api/v1/payrolls/batch", json=PERIOD)

        response = await client.get(
            "/api/v1/payrolls",
            params={
                "period_start_date": "2026-01-01",
                "period_end_date": "2026-01-15",
                "employee_id": 2,
            },
        )
        assert response.json()["total"] == 1

"""Integration tests for Debt API endpoints"""

import pytest
from decimal import Decimal
from httpx import AsyncClient
from sqlmodel import select

from src.domain.setting import Setting

HEADERS = {"X-User-Id": "user_42"}


async def post_charge(client, customer_id="cust_aurora", containers="5", date="2025-11-11T09:00:00Z"):
    return await client.post(
        "/api/debts/charge",
        json={"customer_id": customer_id, "containers": containers, "transaction_date": date},
        headers=HEADERS,
    )


class TestDebtsAPIMutations:

    @pytest.mark.asyncio
    async def test_charge_creates_tab(self, client: AsyncClient, seed):
        response = await post_charge(client)

        assert response.status_code == 201
        data = response.json()
        assert data["tab"]["status"] == "OPEN"
        assert Decimal(data["tab"]["total_balance"]) == Decimal("115.00")
        assert data["transaction"]["transaction_type"] == "CHARGE"
        assert Decimal(data["transaction"]["unit_price"]) == Decimal("23.00")
        assert data["transaction"]["entered_by_id"] == "user_42"

    @pytest.mark.asyncio
    async def test_missing_user_header_returns_401(self, client: AsyncClient, seed):
        response = await client.post(
            "/api/debts/charge",
            json={"customer_id": "cust_aurora", "containers": "5", "transaction_date": "2025-11-11T09:00:00Z"},
        )

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHENTICATED"

    @pytest.mark.asyncio
    async def test_invalid_containers_returns_422(self, client: AsyncClient, seed):
        response = await post_charge(client, containers="0")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_customer_returns_404(self, client: AsyncClient, seed):
        response = await post_charge(client, customer_id="nobody")

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "Customer not found"

    @pytest.mark.asyncio
    async def test_missing_unit_price_returns_500(self, client: AsyncClient, db_session):
        from src.domain.customer import Customer

        db_session.add(Customer(id="cust_lonely", name="No Price Cafe"))
        await db_session.commit()

        response = await post_charge(client, customer_id="cust_lonely")

        assert response.status_code == 500
        assert response.json()["error"]["code"] == "CONFIGURATION_ERROR"

    @pytest.mark.asyncio
    async def test_overpayment_returns_400(self, client: AsyncClient, seed):
        await post_charge(client)

        response = await client.post(
            "/api/debts/payment",
            json={"customer_id": "cust_aurora", "amount": "150", "transaction_date": "2025-11-12T09:00:00Z"},
            headers=HEADERS,
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Overpayment not allowed"
        assert error["details"] == {"balance": "115.00", "requested": "150.00"}

    @pytest.mark.asyncio
    async def test_oversized_payment_returns_400(self, client: AsyncClient, seed):
        await post_charge(client)

        response = await client.post(
            "/api/debts/payment",
            json={"customer_id": "cust_aurora", "amount": "1E+27", "transaction_date": "2025-11-12T09:00:00Z"},
            headers=HEADERS,
        )

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Overpayment not allowed"

    @pytest.mark.asyncio
    async def test_payment_closes_tab(self, client: AsyncClient, seed):
        await post_charge(client)

        response = await client.post(
            "/api/debts/payment",
            json={"customer_id": "cust_aurora", "amount": "115", "transaction_date": "2025-11-12T17:00:00Z"},
            headers=HEADERS,
        )

        assert response.status_code == 201
        tab = response.json()["tab"]
        assert tab["status"] == "CLOSED"
        assert tab["closed_at"].startswith("2025-11-12T17:00:00")

    @pytest.mark.asyncio
    async def test_payment_without_tab_returns_404(self, client: AsyncClient, seed):
        response = await client.post(
            "/api/debts/payment",
            json={"customer_id": "cust_aurora", "amount": "10", "transaction_date": "2025-11-12T09:00:00Z"},
            headers=HEADERS,
        )

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "No open debt tab for customer"

    @pytest.mark.asyncio
    async def test_adjustment_requires_non_zero_amount(self, client: AsyncClient, seed):
        await post_charge(client)

        response = await client.post(
            "/api/debts/adjustment",
            json={
                "customer_id": "cust_aurora",
                "amount": "0",
                "reason": "nothing",
                "transaction_date": "2025-11-12T09:00:00Z",
            },
            headers=HEADERS,
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_adjustment_and_mark_paid(self, client: AsyncClient, seed):
        await post_charge(client)

        adjusted = await client.post(
            "/api/debts/adjustment",
            json={
                "customer_id": "cust_aurora",
                "amount": "-35",
                "reason": "damaged containers",
                "transaction_date": "2025-11-12T09:00:00Z",
            },
            headers=HEADERS,
        )
        assert adjusted.status_code == 201
        assert Decimal(adjusted.json()["tab"]["total_balance"]) == Decimal("80.00")

        closed = await client.post(
            "/api/debts/mark-paid",
            json={
                "customer_id": "cust_aurora",
                "final_payment": "80",
                "transaction_date": "2025-11-13T09:00:00Z",
            },
            headers=HEADERS,
        )
        assert closed.status_code == 200
        data = closed.json()
        assert data["tab"]["status"] == "CLOSED"
        assert data["transaction"]["transaction_type"] == "PAYMENT"

    @pytest.mark.asyncio
    async def test_mark_paid_with_remaining_balance_returns_400(self, client: AsyncClient, seed):
        await post_charge(client)

        response = await client.post(
            "/api/debts/mark-paid",
            json={"customer_id": "cust_aurora", "transaction_date": "2025-11-13T09:00:00Z"},
            headers=HEADERS,
        )

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Cannot close tab with non-zero balance"


class TestDebtsAPIQueries:

    @pytest.mark.asyncio
    async def test_customer_debt_snapshot(self, client: AsyncClient, seed):
        await post_charge(client, containers="2")

        response = await client.get("/api/debts/customer/cust_aurora")

        assert response.status_code == 200
        data = response.json()
        assert data["customer"]["name"] == "Cafe Aurora"
        assert Decimal(data["tab"]["total_balance"]) == Decimal("46.00")
        assert len(data["transactions"]) == 1

    @pytest.mark.asyncio
    async def test_customer_without_tab_has_null_tab(self, client: AsyncClient, seed):
        response = await client.get("/api/debts/customer/cust_nine")

        assert response.status_code == 200
        assert response.json()["tab"] is None
        assert response.json()["transactions"] == []

    @pytest.mark.asyncio
    async def test_customer_history_and_unknown_customer(self, client: AsyncClient, seed):
        await post_charge(client)

        history = await client.get("/api/debts/customer/cust_aurora/history")
        missing = await client.get("/api/debts/customer/nobody/history")

        assert history.status_code == 200
        assert len(history.json()["tabs"]) == 1
        assert missing.status_code == 404

    @pytest.mark.asyncio
    async def test_open_tab_summary(self, client: AsyncClient, seed):
        await post_charge(client, customer_id="cust_aurora")
        await post_charge(client, customer_id="cust_nine", containers="1")

        response = await client.get("/api/debts/summary")

        assert response.status_code == 200
        names = {row["customer_name"] for row in response.json()}
        assert names == {"Cafe Aurora", "Bistro Nine"}

    @pytest.mark.asyncio
    async def test_transaction_listing_filters_and_validation(self, client: AsyncClient, seed):
        await post_charge(client, customer_id="cust_aurora")
        await post_charge(client, customer_id="cust_nine", containers="1", date="2025-11-12T09:00:00Z")

        listing = await client.get("/api/debts/transactions", params={"customer_id": "cust_nine"})
        too_big = await client.get("/api/debts/transactions", params={"limit": 500})
        bad_status = await client.get("/api/debts/transactions", params={"status": "PENDING"})

        assert listing.status_code == 200
        body = listing.json()
        assert body["total"] == 1
        assert body["transactions"][0]["customer_name"] == "Bistro Nine"
        assert too_big.status_code == 400
        assert bad_status.status_code == 400

    @pytest.mark.asyncio
    async def test_global_price_change_applies_to_new_charges(self, client: AsyncClient, db_session, seed):
        await post_charge(client, containers="1")

        row = (await db_session.execute(select(Setting).where(Setting.key == "unitPrice"))).scalar_one()
        row.value = "25"
        db_session.add(row)
        await db_session.commit()

        response = await post_charge(client, containers="1", date="2025-11-12T09:00:00Z")

        assert Decimal(response.json()["transaction"]["unit_price"]) == Decimal("25.00")
        assert Decimal(response.json()["tab"]["total_balance"]) == Decimal("48.00")

"""Unit tests for the pool service API."""

import pytest
from fastapi.testclient import TestClient

from liquidity_book.api.endpoints import get_registry
from liquidity_book.api.main import app
from liquidity_book.constants import INITIAL_BIN_ID
from liquidity_book.pool import PoolRegistry

ONE = "1000000000000000000"


@pytest.fixture
def api_registry(clock) -> PoolRegistry:
    return PoolRegistry(clock=clock)


@pytest.fixture
def client(api_registry):
    """Create a test client backed by a fresh registry."""
    app.dependency_overrides[get_registry] = lambda: api_registry
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_pool(client: TestClient, pool_id: str = "p", fee_bps: int = 100) -> dict:
    response = client.post(
        "/pools",
        json={"poolId": pool_id, "initialPrice": ONE, "binStepBps": 100, "feeBps": fee_bps},
    )
    assert response.status_code == 201
    return response.json()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestPools:
    def test_create_pool(self, client):
        data = create_pool(client)

        assert data["poolId"] == "p"
        assert data["activeBinId"] == INITIAL_BIN_ID
        assert data["activePrice"] == ONE
        assert data["feeBps"] == 100
        assert data["bins"][0]["binId"] == INITIAL_BIN_ID

    def test_create_uses_defaults(self, client):
        response = client.post("/pools", json={"poolId": "d", "initialPrice": 5})
        assert response.status_code == 201
        assert response.json()["binStepBps"] == 25
        assert response.json()["feeBps"] == 30

    def test_duplicate_pool_conflict(self, client):
        create_pool(client)
        response = client.post("/pools", json={"poolId": "p", "initialPrice": ONE})
        assert response.status_code == 409
        assert response.json()["error"] == "pool_exists"

    def test_invalid_bin_step(self, client):
        response = client.post("/pools", json={"poolId": "p", "initialPrice": ONE, "binStepBps": 0})
        assert response.status_code == 422
        assert response.json()["error"] == "invalid_bin_step"

    def test_invalid_price_schema(self, client):
        response = client.post("/pools", json={"poolId": "p", "initialPrice": "-1"})
        assert response.status_code == 422

    def test_list_and_get(self, client):
        create_pool(client, "a")
        create_pool(client, "b")

        listed = client.get("/pools").json()
        assert [p["poolId"] for p in listed] == ["a", "b"]
        assert listed[0]["bins"] == []

        assert client.get("/pools/b").json()["poolId"] == "b"

    def test_unknown_pool(self, client):
        response = client.get("/pools/missing")
        assert response.status_code == 404
        assert response.json()["error"] == "pool_not_found"


class TestLiquidityAndSwaps:
    def test_full_cycle(self, client, clock):
        create_pool(client)
        deposit = client.post(
            "/pools/p/liquidity",
            json={"depositor": "alice", "uniform": {"amountRight": "1000"}},
        )
        assert deposit.status_code == 201
        receipt = deposit.json()
        assert receipt["contributions"] == [
            {"binId": INITIAL_BIN_ID, "left": "0", "right": "1000", "value": "1000"}
        ]

        clock.advance(1000)
        swap = client.post("/pools/p/swap", json={"sideIn": "left", "amountIn": "500"})
        assert swap.status_code == 200
        assert swap.json()["amountOut"] == "495"
        assert swap.json()["fee"] == "5"

        withdraw = client.post("/pools/p/withdraw", json={"receiptId": receipt["receiptId"]})
        assert withdraw.status_code == 200
        body = withdraw.json()
        assert body["totalLeft"] == "500"
        assert body["totalRight"] == "505"
        assert body["feeLeft"] == "5"

        again = client.post("/pools/p/withdraw", json={"receiptId": receipt["receiptId"]})
        assert again.status_code == 409
        assert again.json()["error"] == "receipt_already_redeemed"

    def test_explicit_deposits_are_merged_per_bin(self, client):
        create_pool(client)
        response = client.post(
            "/pools/p/liquidity",
            json={
                "depositor": "alice",
                "deposits": [
                    {"binId": INITIAL_BIN_ID, "right": 10},
                    {"binId": INITIAL_BIN_ID, "left": "5"},
                    {"binId": INITIAL_BIN_ID - 1, "right": "7"},
                ],
            },
        )
        assert response.status_code == 201
        contributions = {c["binId"]: c for c in response.json()["contributions"]}
        assert contributions[INITIAL_BIN_ID]["left"] == "5"
        assert contributions[INITIAL_BIN_ID]["right"] == "10"
        assert contributions[INITIAL_BIN_ID - 1]["right"] == "7"

        receipts = client.get("/pools/p/receipts/alice").json()
        assert len(receipts) == 1

    def test_deposit_needs_exactly_one_shape(self, client):
        create_pool(client)
        response = client.post("/pools/p/liquidity", json={"depositor": "alice"})
        assert response.status_code == 422

    def test_wrong_side_deposit(self, client):
        create_pool(client)
        response = client.post(
            "/pools/p/liquidity",
            json={"depositor": "alice", "deposits": [{"binId": INITIAL_BIN_ID + 1, "right": "7"}]},
        )
        assert response.status_code == 422
        assert response.json()["error"] == "invalid_deposit"

    def test_far_bin_id_rejected_by_schema(self, client):
        create_pool(client)
        response = client.post(
            "/pools/p/liquidity",
            json={"depositor": "alice", "deposits": [{"binId": 1_000_000_000, "left": "100"}]},
        )
        assert response.status_code == 422
        assert client.get("/pools/p").json()["reserveLeft"] == "0"

    def test_gapped_bin_rejected_before_pricing(self, client):
        create_pool(client)
        response = client.post(
            "/pools/p/liquidity",
            json={"depositor": "alice", "deposits": [{"binId": INITIAL_BIN_ID + 2_000_000, "left": "100"}]},
        )
        assert response.status_code == 422
        assert response.json()["error"] == "non_contiguous_bins"

    def test_quote_does_not_execute(self, client):
        create_pool(client)
        client.post("/pools/p/liquidity", json={"depositor": "alice", "uniform": {"amountRight": "1000"}})

        quote = client.post("/pools/p/quote", json={"sideIn": "left", "amountIn": "500"})
        assert quote.status_code == 200
        assert quote.json()["amountOut"] == "495"

        pool = client.get("/pools/p").json()
        assert pool["reserveRight"] == "1000"

    def test_insufficient_liquidity(self, client):
        create_pool(client)
        response = client.post("/pools/p/swap", json={"sideIn": "right", "amountIn": "10"})
        assert response.status_code == 400
        assert response.json()["error"] == "insufficient_liquidity"

    def test_slippage(self, client):
        create_pool(client)
        client.post("/pools/p/liquidity", json={"depositor": "alice", "uniform": {"amountRight": "1000"}})
        response = client.post(
            "/pools/p/swap",
            json={"sideIn": "left", "amountIn": "500", "minAmountOut": "496"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "slippage_exceeded"

    def test_amount_out_of_range(self, client):
        create_pool(client)
        response = client.post(
            "/pools/p/swap",
            json={"sideIn": "left", "amountIn": str(2**64)},
        )
        assert response.status_code == 422

    def test_unknown_receipt(self, client):
        create_pool(client)
        response = client.post("/pools/p/withdraw", json={"receiptId": "nope"})
        assert response.status_code == 404
        assert response.json()["error"] == "unknown_receipt"


class TestRequestLimits:
    def test_large_request_rejected(self, client):
        response = client.post(
            "/pools",
            content=b"x" * (1024 * 1024 + 1),
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 413
        assert response.json() == {"error": "request_too_large", "detail": "Request too large"}

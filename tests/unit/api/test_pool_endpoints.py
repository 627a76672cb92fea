"""Tests for the pool HTTP API."""

from swappool.api.endpoints import create_deployment
from tests.helpers import ALICE, BOB, OTHER_TOKEN, POOL, TOKEN0, TOKEN1


def _approve(client, token: str, owner: str, amount: int) -> None:
    response = client.post(
        f"/tokens/{token}/approve",
        json={"owner": owner, "spender": POOL, "amount": str(amount)},
    )
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def _add(client, caller: str, amount0: int, amount1: int):
    _approve(client, TOKEN0, caller, amount0)
    _approve(client, TOKEN1, caller, amount1)
    return client.post(
        "/pool/add",
        json={"caller": caller, "amount0": str(amount0), "amount1": str(amount1)},
    )


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestPoolEndpoints:
    def test_empty_state(self, client):
        response = client.get("/pool")
        assert response.status_code == 200
        assert response.json() == {
            "address": POOL,
            "token0": TOKEN0,
            "token1": TOKEN1,
            "reserve0": "0",
            "reserve1": "0",
            "totalSupply": "0",
        }

    def test_add_liquidity(self, client):
        response = _add(client, ALICE, 5, 250_000)

        assert response.status_code == 200
        body = response.json()
        assert body["sharesMinted"] == "100000"
        assert body["pool"]["reserve1"] == "250000"

        shares = client.get(f"/pool/shares/{ALICE}").json()
        assert shares == {"holder": ALICE, "balance": "100000"}

    def test_amount_out(self, client):
        _add(client, ALICE, 5, 250_000)
        response = client.get("/pool/amount-out", params={"amountIn": "1", "tokenIn": TOKEN0})

        assert response.status_code == 200
        assert response.json() == {"amountOut": "41667", "reserve0": "6", "reserve1": "208333"}

    def test_swap(self, client):
        _add(client, ALICE, 20, 1_000_000)
        _approve(client, TOKEN0, BOB, 1)

        response = client.post(
            "/pool/swap",
            json={
                "caller": BOB,
                "amountIn": "1",
                "amountOutMin": "47620",
                "tokenIn": TOKEN0,
                "tokenOut": TOKEN1,
            },
        )

        assert response.status_code == 200
        assert response.json()["amountOut"] == "47620"
        assert response.json()["pool"]["reserve0"] == "21"

    def test_remove_liquidity(self, client):
        _add(client, ALICE, 4, 200_000)
        response = client.post("/pool/remove", json={"caller": ALICE, "shareAmount": "50000"})

        assert response.status_code == 200
        body = response.json()
        assert (body["amount0"], body["amount1"]) == ("2", "100000")
        assert body["pool"]["totalSupply"] == "50000"


class TestErrorMapping:
    def test_empty_pool_is_bad_request(self, client):
        response = client.get("/pool/amount-out", params={"amountIn": "1", "tokenIn": TOKEN0})
        assert response.status_code == 400
        assert response.json()["error"] == "EmptyPool"

    def test_zero_amount_is_bad_request(self, client):
        response = client.post("/pool/add", json={"caller": ALICE, "amount0": "0", "amount1": "1"})
        assert response.status_code == 400
        assert response.json()["error"] == "ZeroAmount"

    def test_foreign_token_is_bad_request(self, client):
        _add(client, ALICE, 5, 250_000)
        response = client.get(
            "/pool/amount-out", params={"amountIn": "1", "tokenIn": OTHER_TOKEN}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidTokenPair"

    def test_slippage_is_conflict(self, client):
        _add(client, ALICE, 20, 1_000_000)
        _approve(client, TOKEN0, BOB, 1)
        response = client.post(
            "/pool/swap",
            json={
                "caller": BOB,
                "amountIn": "1",
                "amountOutMin": "47621",
                "tokenIn": TOKEN0,
                "tokenOut": TOKEN1,
            },
        )
        assert response.status_code == 409
        assert response.json()["error"] == "SlippageExceeded"

    def test_pool_as_recipient_is_bad_request(self, client):
        _add(client, ALICE, 20, 1_000_000)
        _approve(client, TOKEN0, BOB, 1)
        response = client.post(
            "/pool/swap",
            json={
                "caller": BOB,
                "amountIn": "1",
                "tokenIn": TOKEN0,
                "tokenOut": TOKEN1,
                "to": POOL,
            },
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidCounterparty"
        assert client.get("/pool").json()["reserve0"] == "20"

    def test_insufficient_shares_is_conflict(self, client):
        _add(client, ALICE, 5, 250_000)
        response = client.post("/pool/remove", json={"caller": BOB, "shareAmount": "1"})
        assert response.status_code == 409
        assert response.json()["error"] == "InsufficientShares"

    def test_missing_allowance_is_bad_request(self, client):
        response = client.post(
            "/pool/add", json={"caller": ALICE, "amount0": "1", "amount1": "1"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "TransferFailed"

    def test_invalid_payload_is_unprocessable(self, client):
        response = client.post("/pool/add", json={"caller": "alice", "amount0": "1"})
        assert response.status_code == 422

    def test_invalid_query_amount(self, client):
        response = client.get("/pool/amount-out", params={"amountIn": "-1", "tokenIn": TOKEN0})
        assert response.status_code == 422

    def test_unknown_token_is_not_found(self, client):
        response = client.get(f"/tokens/{OTHER_TOKEN}/balances/{ALICE}")
        assert response.status_code == 404


class TestTokenEndpoints:
    def test_balance(self, client):
        response = client.get(f"/tokens/{TOKEN0}/balances/{ALICE}")
        assert response.status_code == 200
        assert response.json() == {"token": TOKEN0, "holder": ALICE, "balance": "200"}

    def test_transfer(self, client):
        response = client.post(
            f"/tokens/{TOKEN1}/transfer", json={"sender": ALICE, "to": BOB, "amount": "10"}
        )
        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert client.get(f"/tokens/{TOKEN1}/balances/{BOB}").json()["balance"] == "10000010"

    def test_refused_transfer(self, client):
        response = client.post(
            f"/tokens/{TOKEN0}/transfer", json={"sender": ALICE, "to": BOB, "amount": "201"}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "TransferFailed"


class TestCreateDeployment:
    def test_from_environment(self):
        deployment = create_deployment(
            {
                "SWAPPOOL_TOKEN0": TOKEN0,
                "SWAPPOOL_TOKEN1": TOKEN1,
                "SWAPPOOL_TREASURY": ALICE,
                "SWAPPOOL_TREASURY_SUPPLY0": "7",
                "SWAPPOOL_INITIAL_SHARE_SUPPLY": "10",
            }
        )
        assert deployment.pool.token0 == TOKEN0
        assert deployment.token(TOKEN0).balance_of(ALICE) == 7
        assert deployment.pool.config.initial_share_supply == 10

"""Unit tests for the quote service endpoints."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from amm.api.endpoints import get_deployment
from amm.api.main import app
from tests.helpers import NOW, UNUSED


@pytest.fixture
def client(small_deployment, exchange, exchange_b) -> Iterator[TestClient]:
    """Client quoting the two reference pools."""
    app.dependency_overrides[get_deployment] = lambda: small_deployment
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestExchanges:
    """Tests for registry and pool-state endpoints."""

    def test_list(self, client, token, token_b, exchange, exchange_b):
        response = client.get("/exchanges")
        assert response.status_code == 200
        assert response.json() == [
            {"tokenId": 1, "token": token.address, "exchange": exchange.address},
            {"tokenId": 2, "token": token_b.address, "exchange": exchange_b.address},
        ]

    def test_pool_state(self, client, token, exchange):
        response = client.get(f"/exchanges/{token.address}")
        assert response.status_code == 200
        assert response.json() == {
            "exchange": exchange.address,
            "token": token.address,
            "ethReserve": 1000,
            "tokenReserve": 2000,
            "totalSupply": 1000,
            "feeBps": 30,
        }

    def test_pool_state_reflects_trades(self, client, token, exchange, alice):
        exchange.eth_to_token_swap_input(1, NOW, sender=alice, value=100)
        response = client.get(f"/exchanges/{token.address}")
        body = response.json()
        assert (body["ethReserve"], body["tokenReserve"]) == (1100, 1819)

    def test_pool_state_mixed_case(self, client, token, exchange):
        response = client.get(f"/exchanges/0x{token.address[2:].upper()}")
        assert response.status_code == 200
        assert response.json()["exchange"] == exchange.address

    def test_unknown_token(self, client):
        response = client.get(f"/exchanges/{UNUSED}")
        assert response.status_code == 404

    def test_malformed_token(self, client):
        response = client.get("/exchanges/0x1234")
        assert response.status_code == 422


class TestQuote:
    """Tests for GET /exchanges/{token}/quote."""

    @pytest.mark.parametrize(
        ("kind", "amount", "price"),
        [
            ("eth_to_token_input", "100", 181),
            ("eth_to_token_output", "181", 100),
            ("token_to_eth_input", "200", 90),
            ("token_to_eth_output", "90", 199),
        ],
    )
    def test_quotes(self, client, token, exchange, kind, amount, price):
        response = client.get(
            f"/exchanges/{token.address}/quote", params={"kind": kind, "amount": amount}
        )
        assert response.status_code == 200
        assert response.json() == {
            "exchange": exchange.address,
            "kind": kind,
            "amount": int(amount),
            "price": price,
        }

    def test_quote_does_not_trade(self, client, token, exchange):
        client.get(
            f"/exchanges/{token.address}/quote",
            params={"kind": "eth_to_token_input", "amount": "100"},
        )
        assert exchange.eth_reserve() == 1000
        assert exchange.token_reserve() == 2000

    def test_unknown_kind(self, client, token):
        response = client.get(
            f"/exchanges/{token.address}/quote", params={"kind": "sideways", "amount": "1"}
        )
        assert response.status_code == 422

    @pytest.mark.parametrize("amount", ["abc", "-1", "1.5", str(2**256), "1_000", " 7 "])
    def test_malformed_amount(self, client, token, amount):
        response = client.get(
            f"/exchanges/{token.address}/quote",
            params={"kind": "eth_to_token_input", "amount": amount},
        )
        assert response.status_code == 422

    def test_zero_amount(self, client, token):
        response = client.get(
            f"/exchanges/{token.address}/quote",
            params={"kind": "eth_to_token_input", "amount": "0"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidAmount"

    def test_whole_reserve(self, client, token):
        """Buying the entire reserve has no price."""
        response = client.get(
            f"/exchanges/{token.address}/quote",
            params={"kind": "token_to_eth_output", "amount": "1000"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "DivisionByZero"

    def test_above_reserve(self, client, token):
        response = client.get(
            f"/exchanges/{token.address}/quote",
            params={"kind": "eth_to_token_output", "amount": "2001"},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Underflow"


class TestRoute:
    """Tests for GET /route."""

    def test_route(self, client, token, token_b):
        response = client.get(
            "/route",
            params={"token_in": token.address, "token_out": token_b.address, "amount_in": "100"},
        )
        assert response.status_code == 200
        assert response.json() == {
            "tokenIn": token.address,
            "tokenOut": token_b.address,
            "amountIn": 100,
            "ethIntermediate": 47,
            "amountOut": 134,
        }

    def test_same_token(self, client, token):
        response = client.get(
            "/route",
            params={"token_in": token.address, "token_out": token.address, "amount_in": "100"},
        )
        assert response.status_code == 400
        assert response.json() == {
            "error": "InvalidExchange",
            "detail": "Cannot route a trade back into the same exchange",
        }

    def test_unknown_token(self, client, token):
        response = client.get(
            "/route", params={"token_in": token.address, "token_out": UNUSED, "amount_in": "100"}
        )
        assert response.status_code == 404

    def test_missing_parameter(self, client, token, token_b):
        response = client.get(
            "/route", params={"token_in": token.address, "token_out": token_b.address}
        )
        assert response.status_code == 422

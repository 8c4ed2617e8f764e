"""Integration tests for the router API."""

import json
import threading
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from swaprouter.api.endpoints import get_router
from swaprouter.api.main import ERROR_STATUS, app, status_for
from swaprouter.chain import FixedRateVenue
from swaprouter.errors import (
    MalformedPath,
    NoPathExists,
    RouterError,
    SlippageExceeded,
    UnknownAsset,
    VenueSwapFailed,
)
from swaprouter.routing import get_default_router
from tests.helpers import (
    ALICE,
    BOB,
    TOKEN_A,
    TOKEN_B,
    TOKEN_C,
    TOKEN_D,
    VENUE_X,
    VENUE_Y,
    VENUE_Z,
    Scenario,
    make_scenario,
    make_token,
    scenario_market_json,
)


@pytest.fixture
def market() -> Scenario:
    s = make_scenario()
    s.registry.add_asset(make_token(TOKEN_D, "DDD"))
    s.fund(ALICE, s.a, 1_000)
    return s


@pytest.fixture
def client(market) -> Iterator[TestClient]:
    """Create a test client serving the scenario market."""
    app.dependency_overrides[get_router] = lambda: market.router
    yield TestClient(app)
    app.dependency_overrides.clear()


def swap_body(min_amount_out: str = "60", amount_in: str = "10") -> dict:
    return {
        "assetIn": TOKEN_A,
        "assetOut": TOKEN_C,
        "amountIn": amount_in,
        "minAmountOut": min_amount_out,
        "recipient": BOB,
        "sender": ALICE,
    }


class TestHealth:
    """Tests for GET /health."""

    def test_health_check(self, client):
        """Health endpoint returns ok."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestQuoteEndpoints:
    """Tests for POST /quote/best and POST /quote."""

    def test_best_exchange(self, client):
        """A direct pair returns the best venue and its output."""
        response = client.post(
            "/quote/best", json={"assetIn": TOKEN_A, "assetOut": TOKEN_B, "amountIn": "10"}
        )
        assert response.status_code == 200
        assert response.json() == {"rate": "20", "venue": VENUE_X}

    def test_best_exchange_unpriced(self, client):
        """An unpriced pair returns rate 0 and no venue."""
        response = client.post(
            "/quote/best", json={"assetIn": TOKEN_A, "assetOut": TOKEN_C, "amountIn": "10"}
        )
        assert response.status_code == 200
        assert response.json() == {"rate": "0", "venue": None}

    def test_expected_out(self, client):
        """The best path is returned with camelCase keys."""
        response = client.post(
            "/quote", json={"assetIn": TOKEN_A, "assetOut": TOKEN_C, "amountIn": "10"}
        )
        assert response.status_code == 200

        data = response.json()
        assert data["amountOut"] == "60"
        assert data["tokenPath"] == [TOKEN_A, TOKEN_B, TOKEN_C]
        assert data["exchangePath"] == [VENUE_X, VENUE_Y]
        assert data["arbitrageDetected"] is False
        assert isinstance(data["registryVersion"], int)

    def test_unknown_asset_is_404(self, client):
        """Unregistered assets map to 404."""
        response = client.post(
            "/quote", json={"assetIn": TOKEN_A, "assetOut": "0x" + "9" * 40, "amountIn": "10"}
        )
        assert response.status_code == 404
        assert response.json()["error"] == "UnknownAsset"

    def test_no_path_is_404(self, client):
        """Unreachable assets map to 404."""
        response = client.post(
            "/quote", json={"assetIn": TOKEN_A, "assetOut": TOKEN_D, "amountIn": "10"}
        )
        assert response.status_code == 404
        assert response.json()["error"] == "NoPathExists"

    def test_same_asset_is_422(self, client):
        """Quoting an asset against itself maps to 422."""
        response = client.post(
            "/quote", json={"assetIn": TOKEN_A, "assetOut": TOKEN_A, "amountIn": "10"}
        )
        assert response.status_code == 422
        assert response.json()["error"] == "MalformedPath"

    def test_zero_amount_is_422(self, client):
        """A zero amount is an invalid argument."""
        response = client.post(
            "/quote", json={"assetIn": TOKEN_A, "assetOut": TOKEN_C, "amountIn": "0"}
        )
        assert response.status_code == 422

    def test_invalid_address_is_422(self, client):
        """Malformed addresses fail request validation."""
        response = client.post(
            "/quote", json={"assetIn": "0x1234", "assetOut": TOKEN_C, "amountIn": "10"}
        )
        assert response.status_code == 422


class TestSwapEndpoints:
    """Tests for POST /swap and POST /swap/path."""

    def test_swap(self, client, market):
        """A funded swap pays the recipient."""
        response = client.post("/swap", json=swap_body())
        assert response.status_code == 200
        assert response.json() == {"amountOut": "60"}
        assert market.c.balance_of(BOB) == 60

    def test_slippage_is_409(self, client, market):
        """Slippage failures map to 409 and leave balances unchanged."""
        before = market.balances()
        response = client.post("/swap", json=swap_body(min_amount_out="61"))
        assert response.status_code == 409
        assert response.json()["error"] == "SlippageExceeded"
        assert market.balances() == before

    def test_unfunded_swap_is_400(self, client):
        """A sender without enough approved balance maps to 400."""
        response = client.post("/swap", json=swap_body(min_amount_out="0", amount_in="5000"))
        assert response.status_code == 400
        assert response.json()["error"] == "TransferFailed"

    def test_path_swap(self, client, market):
        """A pinned route executes as given."""
        response = client.post(
            "/swap/path",
            json={
                "tokenPath": [TOKEN_A, TOKEN_B],
                "exchangePath": [VENUE_X],
                "amountIn": "10",
                "minAmountOut": "20",
                "recipient": BOB,
                "sender": ALICE,
            },
        )
        assert response.status_code == 200
        assert response.json() == {"amountOut": "20"}
        assert market.b.balance_of(BOB) == 20

    def test_path_length_mismatch_is_422(self, client):
        """A mismatched exchange path maps to 422."""
        response = client.post(
            "/swap/path",
            json={
                "tokenPath": [TOKEN_A, TOKEN_B, TOKEN_C],
                "exchangePath": [VENUE_X],
                "amountIn": "10",
                "minAmountOut": "0",
                "recipient": BOB,
                "sender": ALICE,
            },
        )
        assert response.status_code == 422
        assert response.json()["error"] == "MalformedPath"

    def test_venue_failure_is_502(self, client, market):
        """A venue that cannot fill mid-route maps to 502."""
        market.c.transfer(market.y.address, BOB, market.c.balance_of(market.y.address))
        response = client.post(
            "/swap/path",
            json={
                "tokenPath": [TOKEN_A, TOKEN_B, TOKEN_C],
                "exchangePath": [VENUE_X, VENUE_Y],
                "amountIn": "10",
                "minAmountOut": "0",
                "recipient": BOB,
                "sender": ALICE,
            },
        )
        assert response.status_code == 502
        assert response.json()["error"] == "VenueSwapFailed"
        assert market.a.balance_of(ALICE) == 1_000


class StallingVenue(FixedRateVenue):
    """Venue whose swap blocks until released, then fails."""

    def __init__(self, address: str) -> None:
        super().__init__(address)
        self.entered = threading.Event()
        self.released = threading.Event()

    def swap(self, asset_in, asset_out, amount_in, min_amount_out, caller):
        self.entered.set()
        self.released.wait(timeout=5)
        raise VenueSwapFailed(f"{self!r} gave up")


class TestConcurrentRequests:
    """Tests for quotes issued while a swap is in flight."""

    def test_quote_waits_for_in_flight_swap(self, client, market):
        """A quote never sees the balances of a route that later rolls back."""
        stalling = StallingVenue(VENUE_Z)
        stalling.set_rate(market.b, market.c, 3, 1)
        market.registry.add_venue(stalling)

        inventory = market.b.balance_of(market.x.address)
        quote_body = {"assetIn": TOKEN_A, "assetOut": TOKEN_B, "amountIn": str(inventory // 2)}
        committed = client.post("/quote/best", json=quote_body).json()
        responses = {}

        def swap():
            responses["swap"] = client.post(
                "/swap/path",
                json={
                    "tokenPath": [TOKEN_A, TOKEN_B, TOKEN_C],
                    "exchangePath": [VENUE_X, VENUE_Z],
                    "amountIn": "10",
                    "minAmountOut": "0",
                    "recipient": BOB,
                    "sender": ALICE,
                },
            )

        def quote():
            responses["quote"] = client.post("/quote/best", json=quote_body)

        swap_thread = threading.Thread(target=swap)
        swap_thread.start()
        assert stalling.entered.wait(timeout=5)

        quote_thread = threading.Thread(target=quote)
        quote_thread.start()
        quote_thread.join(timeout=0.2)
        assert quote_thread.is_alive()

        stalling.released.set()
        swap_thread.join(timeout=5)
        quote_thread.join(timeout=5)

        assert responses["swap"].status_code == 502
        assert responses["quote"].status_code == 200
        assert responses["quote"].json() == committed
        assert committed["rate"] != "0"
        assert market.a.balance_of(ALICE) == 1_000


class TestErrorMapping:
    """Tests for the error -> status table."""

    @pytest.mark.parametrize(
        "error,status",
        [
            (UnknownAsset(TOKEN_A), 404),
            (NoPathExists(TOKEN_A, TOKEN_B), 404),
            (MalformedPath("bad"), 422),
            (SlippageExceeded(1, 2), 409),
        ],
    )
    def test_status_for(self, error, status):
        """Each router error has its documented status."""
        assert status_for(error) == status

    def test_subclass_inherits_status(self):
        """Subclasses of mapped errors use their parent's status."""

        class VeryMalformed(MalformedPath):
            pass

        assert status_for(VeryMalformed("x")) == 422

    def test_unmapped_error_is_500(self):
        """Router errors without a mapping are server errors."""
        assert status_for(RouterError("?")) == 500

    def test_every_mapped_status_is_client_error(self):
        """Mapped statuses are all 4xx."""
        assert all(400 <= status < 500 for status in ERROR_STATUS.values())


class TestDefaultRouterFromMarketFile:
    """The default router serves the market named by SWAPROUTER_MARKET_FILE."""

    @pytest.fixture
    def file_client(self, monkeypatch, tmp_path) -> Iterator[TestClient]:
        path = tmp_path / "market.json"
        path.write_text(json.dumps(scenario_market_json()))
        monkeypatch.setenv("SWAPROUTER_MARKET_FILE", str(path))
        get_default_router.cache_clear()
        yield TestClient(app)
        get_default_router.cache_clear()

    def test_quote_and_swap(self, file_client):
        """Quotes and swaps run against the loaded market."""
        quote = file_client.post(
            "/quote", json={"assetIn": TOKEN_A, "assetOut": TOKEN_C, "amountIn": "10"}
        )
        assert quote.status_code == 200
        assert quote.json()["amountOut"] == "60"

        swap = file_client.post("/swap", json=swap_body())
        assert swap.status_code == 200
        assert swap.json() == {"amountOut": "60"}

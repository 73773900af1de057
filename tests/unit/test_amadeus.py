"""Tests for the Amadeus client using a mocked HTTP transport."""

import asyncio

import httpx
import pytest

from backend.app.adapters.amadeus import (
    AmadeusAuthError,
    AmadeusClient,
    AmadeusConfigError,
    AmadeusRequestError,
    summarize_flights,
    summarize_hotels,
)
from backend.app.config import AMADEUS_SANDBOX_URL, Settings

BASE = "https://test.api.amadeus.com"


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def make_client(handler, clock=None) -> AmadeusClient:
    return AmadeusClient(
        api_key="key",
        api_secret="secret",
        base_url=BASE,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        clock=clock or FakeClock(),
    )


def token_response(expires_in=1799) -> httpx.Response:
    return httpx.Response(200, json={"access_token": "tok", "expires_in": expires_in})


class TestToken:
    @pytest.mark.asyncio
    async def test_token_is_cached_until_near_expiry(self):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return token_response(expires_in=60)

        clock = FakeClock()
        client = make_client(handler, clock)

        assert await client.get_access_token() == "tok"
        clock.now += 45
        await client.get_access_token()
        assert len(requests) == 1

        # Within the refresh margin
        clock.now += 6
        await client.get_access_token()
        assert len(requests) == 2

        body = requests[0].content.decode()
        assert "grant_type=client_credentials" in body
        assert "client_id=key" in body

    @pytest.mark.asyncio
    async def test_short_lifetimes_are_raised_to_minimum(self):
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return token_response(expires_in=1)

        clock = FakeClock()
        client = make_client(handler, clock)
        await client.get_access_token()
        clock.now += 15
        await client.get_access_token()
        assert calls == 1

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_refresh(self):
        calls = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return token_response()

        client = make_client(handler)
        tokens = await asyncio.gather(*(client.get_access_token() for _ in range(5)))

        assert tokens == ["tok"] * 5
        assert calls == 1

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        client = AmadeusClient(api_key="", api_secret="", base_url=BASE)
        with pytest.raises(AmadeusConfigError):
            await client.get_access_token()

    @pytest.mark.asyncio
    async def test_rejected_credentials(self):
        client = make_client(lambda request: httpx.Response(401, text="invalid_client"))
        with pytest.raises(AmadeusAuthError, match="401"):
            await client.get_access_token()


class TestLookups:
    @pytest.mark.asyncio
    async def test_get_sends_bearer_token_and_drops_none_params(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/token"):
                return token_response()
            seen.append(request)
            return httpx.Response(200, json={"data": []})

        client = make_client(handler)
        await client.search_flights("JFK", "CDG", "2025-03-10")

        request = seen[0]
        assert request.headers["Authorization"] == "Bearer tok"
        assert request.url.params["currencyCode"] == "USD"
        assert request.url.params["max"] == "5"
        assert "returnDate" not in request.url.params

    @pytest.mark.asyncio
    async def test_request_errors_carry_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/token"):
                return token_response()
            return httpx.Response(400, text="bad date")

        client = make_client(handler)
        with pytest.raises(AmadeusRequestError) as exc_info:
            await client.search_flights("JFK", "CDG", "yesterday")
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_iata_codes_pass_through_without_requests(self):
        client = make_client(lambda request: pytest.fail("no request expected"))

        city = await client.find_city("par")
        assert city.city_code == "PAR"
        assert await client.find_airport_for_city("jfk") == "JFK"

    @pytest.mark.asyncio
    async def test_find_city_falls_back_to_cities_endpoint(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/token"):
                return token_response()
            if request.url.path.endswith("/locations"):
                return httpx.Response(500, text="boom")
            return httpx.Response(200, json={"data": [{"iataCode": "LIS", "name": "LISBON"}]})

        client = make_client(handler)
        city = await client.find_city("Lisbon")
        assert city.city_code == "LIS"
        assert city.name == "LISBON"

    @pytest.mark.asyncio
    async def test_find_airport_prefers_airport_then_city(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/token"):
                return token_response()
            sub_type = request.url.params.get("subType")
            if sub_type == "AIRPORT":
                return httpx.Response(200, json={"data": []})
            if sub_type == "AIRPORT,CITY":
                return httpx.Response(
                    200,
                    json={
                        "data": [
                            {"subType": "CITY", "iataCode": "TYO"},
                            {"subType": "AIRPORT", "iataCode": "HND"},
                        ]
                    },
                )
            return httpx.Response(200, json={"data": []})

        client = make_client(handler)
        assert await client.find_airport_for_city("Tokyo") == "HND"

    @pytest.mark.asyncio
    async def test_hotel_offers_use_first_ten_hotels(self):
        seen: dict[str, str] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/token"):
                return token_response()
            if request.url.path.endswith("/by-city"):
                hotels = [{"hotelId": f"H{i}"} for i in range(12)]
                return httpx.Response(200, json={"data": hotels})
            seen["hotelIds"] = request.url.params["hotelIds"]
            return httpx.Response(200, json={"data": [{"hotel": {"name": "Ritz"}}]})

        client = make_client(handler)
        offers = await client.search_hotel_offers("PAR", check_in="2025-03-10")

        assert offers == [{"hotel": {"name": "Ritz"}}]
        assert seen["hotelIds"] == ",".join(f"H{i}" for i in range(10))


def test_from_settings_resolves_sandbox_host():
    client = AmadeusClient.from_settings(
        Settings(amadeus_api_key="k", amadeus_secret_key="s", amadeus_env="sandbox")
    )
    assert client.base_url == AMADEUS_SANDBOX_URL
    assert client.configured


def test_summarize_flights():
    offers = [
        {
            "price": {"total": "512.30"},
            "itineraries": [
                {
                    "segments": [
                        {
                            "carrierCode": "AF",
                            "departure": {"iataCode": "JFK", "at": "2025-03-10T18:30:00"},
                            "arrival": {"iataCode": "CDG"},
                        }
                    ]
                }
            ],
        }
    ] * 3

    summary = summarize_flights(offers)
    assert summary == "; ".join(["AF JFK→CDG 2025-03-10 18:30, $512.30"] * 2)
    assert summarize_flights([]) == "No flights found."


def test_summarize_hotels():
    offers = [
        {"hotel": {"name": "Ritz"}, "offers": [{"price": {"total": "900"}}]},
        {"name": "Plain"},
    ]
    assert summarize_hotels(offers) == "Ritz ($900); Plain ($?)"
    assert summarize_hotels([]) == "No hotels found."

"""Amadeus self-service API client for live flight and hotel search."""

from __future__ import annotations

import asyncio
import logging
import re
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx

from backend.app.config import Settings, get_settings

logger = logging.getLogger(__name__)

TOKEN_PATH = "/v1/security/oauth2/token"
LOCATIONS_PATH = "/v1/reference-data/locations"
CITIES_PATH = "/v1/reference-data/locations/cities"
HOTELS_BY_CITY_PATH = "/v1/reference-data/locations/hotels/by-city"
FLIGHT_OFFERS_PATH = "/v2/shopping/flight-offers"
HOTEL_OFFERS_PATH = "/v3/shopping/hotel-offers"

# Refresh this many seconds before the token actually expires
TOKEN_REFRESH_MARGIN_S = 10.0
MIN_TOKEN_LIFETIME_S = 30.0

_IATA_CODE = re.compile(r"^[A-Z]{3}$")


class AmadeusError(Exception):
    """Base exception for Amadeus client errors."""


class AmadeusConfigError(AmadeusError):
    """Raised when Amadeus credentials are not configured."""


class AmadeusAuthError(AmadeusError):
    """Raised when the token request is rejected."""


class AmadeusRequestError(AmadeusError):
    """Raised when an API request fails."""

    def __init__(self, path: str, status_code: int, body: str):
        super().__init__(f"Amadeus GET {path} failed: {status_code} {body}")
        self.path = path
        self.status_code = status_code


@dataclass
class AccessToken:
    token: str
    expires_at: float

    def is_fresh(self, now: float) -> bool:
        return self.expires_at - TOKEN_REFRESH_MARGIN_S > now


@dataclass
class CityMatch:
    city_code: str
    name: str


class AmadeusClient:
    """Async client with an instance-owned OAuth2 token cache.

    Token refreshes are serialized with a lock so concurrent callers near
    expiry share one token request.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_url: str,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.api_key = api_key
        self.api_secret = api_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client
        self._clock = clock
        self._token: AccessToken | None = None
        self._token_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> AmadeusClient:
        settings = settings or get_settings()
        return cls(
            api_key=settings.amadeus_api_key,
            api_secret=settings.amadeus_secret_key,
            base_url=settings.amadeus_base,
            timeout=settings.amadeus_timeout_s,
        )

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.api_secret)

    async def __aenter__(self) -> AmadeusClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_access_token(self) -> str:
        """Return a cached token, fetching a new one when close to expiry.

        Raises:
            AmadeusConfigError: If credentials are missing
            AmadeusAuthError: If the token endpoint rejects the request
        """
        if not self.configured:
            raise AmadeusConfigError("Amadeus credentials are not configured")

        if self._token is not None and self._token.is_fresh(self._clock()):
            return self._token.token

        async with self._token_lock:
            # Another caller may have refreshed while we waited
            if self._token is not None and self._token.is_fresh(self._clock()):
                return self._token.token

            response = await self._get_client().post(
                f"{self.base_url}{TOKEN_PATH}",
                data={
                    "grant_type": "client_credentials",
                    "client_id": self.api_key,
                    "client_secret": self.api_secret,
                },
            )
            if response.status_code >= 400:
                raise AmadeusAuthError(
                    f"Amadeus auth failed: {response.status_code} {response.text}"
                )

            payload = response.json()
            lifetime = max(MIN_TOKEN_LIFETIME_S, float(payload.get("expires_in") or 0))
            self._token = AccessToken(
                token=payload["access_token"], expires_at=self._clock() + lifetime
            )
            logger.info("Fetched Amadeus access token valid for %.0fs", lifetime)
            return self._token.token

    async def get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        """Authenticated GET; ``None`` params are omitted."""
        token = await self.get_access_token()
        query = {key: str(value) for key, value in params.items() if value is not None}
        response = await self._get_client().get(
            f"{self.base_url}{path}",
            params=query,
            headers={"Authorization": f"Bearer {token}"},
        )
        if response.status_code >= 400:
            raise AmadeusRequestError(path, response.status_code, response.text)
        return response.json()

    async def _locations(self, path: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        try:
            payload = await self.get(path, params)
        except (AmadeusRequestError, httpx.HTTPError) as e:
            logger.debug("Amadeus lookup %s failed: %s", path, e)
            return []
        data = payload.get("data")
        return data if isinstance(data, list) else []

    async def find_city(self, keyword: str) -> CityMatch | None:
        """Resolve free text to an IATA city code.

        Three-letter codes are returned as-is. Otherwise the generic locations
        search is tried first, then the cities endpoint.
        """
        term = (keyword or "").strip()
        if _IATA_CODE.match(term.upper()):
            return CityMatch(city_code=term.upper(), name=term)

        for path, params in (
            (LOCATIONS_PATH, {"keyword": term, "subType": "CITY", "page[limit]": 10}),
            (CITIES_PATH, {"keyword": term, "page[limit]": 10}),
        ):
            for item in await self._locations(path, params):
                if item.get("iataCode"):
                    return CityMatch(city_code=item["iataCode"], name=item.get("name") or term)
        return None

    async def find_airport_for_city(self, keyword: str) -> str | None:
        """Resolve free text to an airport code, falling back to the city code."""
        term = (keyword or "").strip()
        if _IATA_CODE.match(term.upper()):
            return term.upper()

        airports = await self._locations(
            LOCATIONS_PATH, {"keyword": term, "subType": "AIRPORT", "page[limit]": 10}
        )
        for item in airports:
            if item.get("iataCode"):
                return item["iataCode"]

        mixed = await self._locations(
            LOCATIONS_PATH, {"keyword": term, "subType": "AIRPORT,CITY", "page[limit]": 10}
        )
        for sub_type in ("AIRPORT", "CITY"):
            for item in mixed:
                if item.get("subType") == sub_type and item.get("iataCode"):
                    return item["iataCode"]

        city = await self.find_city(term)
        return city.city_code if city else None

    async def search_flights(
        self,
        origin: str,
        destination: str,
        departure_date: str,
        return_date: str | None = None,
        adults: int = 1,
    ) -> list[dict[str, Any]]:
        """Search flight offers priced in USD (at most five)."""
        payload = await self.get(
            FLIGHT_OFFERS_PATH,
            {
                "originLocationCode": origin,
                "destinationLocationCode": destination,
                "departureDate": departure_date,
                "returnDate": return_date,
                "adults": adults,
                "currencyCode": "USD",
                "max": 5,
            },
        )
        data = payload.get("data")
        return data if isinstance(data, list) else []

    async def list_hotels_by_city(self, city_code: str) -> list[dict[str, Any]]:
        payload = await self.get(HOTELS_BY_CITY_PATH, {"cityCode": city_code})
        data = payload.get("data")
        return data if isinstance(data, list) else []

    async def search_hotel_offers(
        self,
        city_code: str,
        check_in: str | None = None,
        check_out: str | None = None,
        adults: int = 1,
    ) -> list[dict[str, Any]]:
        """Hotel offers for up to ten hotels in a city."""
        hotels = await self.list_hotels_by_city(city_code)
        hotel_ids: list[str] = []
        for hotel in hotels:
            hotel_id = hotel.get("hotelId") or hotel.get("id")
            if isinstance(hotel_id, str):
                hotel_ids.append(hotel_id)
        hotel_ids = hotel_ids[:10]
        if not hotel_ids:
            return []

        payload = await self.get(
            HOTEL_OFFERS_PATH,
            {
                "hotelIds": ",".join(hotel_ids),
                "checkInDate": check_in,
                "checkOutDate": check_out,
                "adults": adults,
                "currency": "USD",
            },
        )
        data = payload.get("data")
        return data if isinstance(data, list) else []


def summarize_flights(offers: list[dict[str, Any]]) -> str:
    """One line per offer for the first two offers."""
    if not offers:
        return "No flights found."

    lines = []
    for offer in offers[:2]:
        price = (offer.get("price") or {}).get("total", "?")
        itineraries = offer.get("itineraries") or [{}]
        segments = itineraries[0].get("segments") or [{}]
        segment = segments[0]
        departure = segment.get("departure") or {}
        arrival = segment.get("arrival") or {}
        depart_time = (departure.get("at") or "")[:16].replace("T", " ")
        lines.append(
            f"{segment.get('carrierCode', '')} "
            f"{departure.get('iataCode', '')}→{arrival.get('iataCode', '')} "
            f"{depart_time}, ${price}"
        )
    return "; ".join(lines)


def summarize_hotels(offers: list[dict[str, Any]]) -> str:
    """Name and price of the first three hotel offers."""
    if not offers:
        return "No hotels found."

    lines = []
    for offer in offers[:3]:
        name = (offer.get("hotel") or {}).get("name") or offer.get("name") or "Hotel"
        first_offer = (offer.get("offers") or [{}])[0]
        price = (first_offer.get("price") or {}).get("total") or offer.get("price") or "?"
        lines.append(f"{name} (${price})")
    return "; ".join(lines)


_amadeus: AmadeusClient | None = None


def get_amadeus() -> AmadeusClient:
    """FastAPI dependency returning the shared Amadeus client."""
    global _amadeus
    if _amadeus is None:
        _amadeus = AmadeusClient.from_settings()
    return _amadeus

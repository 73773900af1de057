"""Static lookup tables for synthesized flight offers."""

from __future__ import annotations

import re
from typing import NamedTuple


class Airline(NamedTuple):
    carrier: str
    logo: str


class Airport(NamedTuple):
    code: str
    city: str
    name: str


AIRLINE_SETS: dict[str, tuple[Airline, ...]] = {
    "france": (
        Airline("Air France", "https://commons.wikimedia.org/wiki/Special:FilePath/Air%20France%20Logo.svg"),
        Airline("Transavia", "https://upload.wikimedia.org/wikipedia/commons/thumb/2/2f/Transavia_logo.svg/1280px-Transavia_logo.svg.png"),
        Airline("easyJet", "https://commons.wikimedia.org/wiki/Special:FilePath/EasyJet_logo.svg"),
    ),
    "japan": (
        Airline("All Nippon Airways", "https://commons.wikimedia.org/wiki/Special:FilePath/All_Nippon_Airways_Logo.svg"),
        Airline("Japan Airlines", "https://en.wikipedia.org/wiki/Special:FilePath/Japan_Airlines_logo_2011.svg"),
        Airline("Peach Aviation", "https://commons.wikimedia.org/wiki/Special:FilePath/Peach_Aviation_Logo.svg"),
    ),
    "uk": (
        Airline("British Airways", "https://en.wikipedia.org/wiki/Special:FilePath/British_Airways_Logo.svg"),
        Airline("Virgin Atlantic", "https://commons.wikimedia.org/wiki/Special:FilePath/Virgin_Atlantic_logo_2018.svg"),
        Airline("easyJet", "https://commons.wikimedia.org/wiki/Special:FilePath/EasyJet_logo.svg"),
    ),
    "us": (
        Airline("Delta Air Lines", "https://commons.wikimedia.org/wiki/Special:FilePath/Delta_logo.svg"),
        Airline("United Airlines", "https://en.wikipedia.org/wiki/Special:FilePath/United_Airlines_Logo.svg"),
        Airline("American Airlines", "https://en.wikipedia.org/wiki/Special:FilePath/American_Airlines_wordmark_(2013).svg"),
    ),
    "germany": (
        Airline("Lufthansa", "https://commons.wikimedia.org/wiki/Special:FilePath/Lufthansa_Logo_2018.svg"),
        Airline("Eurowings", "https://commons.wikimedia.org/wiki/Special:FilePath/Eurowings_Logo.svg"),
        Airline("Condor", "https://commons.wikimedia.org/wiki/Special:FilePath/Condor_logo_2022.svg"),
    ),
    "netherlands": (
        Airline("KLM", "https://commons.wikimedia.org/wiki/Special:FilePath/KLM_logo.svg"),
        Airline("Transavia", "https://commons.wikimedia.org/wiki/Special:FilePath/Transavia_logo.svg"),
        Airline("easyJet", "https://commons.wikimedia.org/wiki/Special:FilePath/EasyJet_logo.svg"),
    ),
    "uae": (
        Airline("Emirates", "https://commons.wikimedia.org/wiki/Special:FilePath/Emirates_logo.svg"),
        Airline("Etihad Airways", "https://commons.wikimedia.org/wiki/Special:FilePath/Etihad-airways-logo.svg"),
        Airline("flydubai", "https://commons.wikimedia.org/wiki/Special:FilePath/Fly_Dubai_logo_2010_03.svg"),
    ),
    "qatar": (
        Airline("Qatar Airways", "https://commons.wikimedia.org/wiki/Special:FilePath/Qatar_Airways_logo.svg"),
    ),
    "singapore": (
        Airline("Singapore Airlines", "https://commons.wikimedia.org/wiki/Special:FilePath/Singapore_Airlines_Logo.svg"),
        Airline("Scoot", "https://commons.wikimedia.org/wiki/Special:FilePath/Scoot_logo.svg"),
        Airline("Jetstar Asia", "https://commons.wikimedia.org/wiki/Special:FilePath/Jetstar_logo.svg"),
    ),
}

# Checked in order; the first region with a matching keyword wins.
# Short country abbreviations only match as whole words.
REGION_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("france", ("france", "paris")),
    ("japan", ("japan", "tokyo", "osaka", "kyoto")),
    ("uk", ("uk", "london", "britain", "england")),
    ("us", ("usa", "united states", "us", "new york", "san francisco", "los angeles",
            "miami", "chicago", "boston", "seattle")),
    ("germany", ("germany", "berlin", "munich", "frankfurt", "hamburg")),
    ("netherlands", ("netherlands", "amsterdam")),
    ("uae", ("uae", "dubai", "abu dhabi")),
    ("qatar", ("qatar", "doha")),
    ("singapore", ("singapore",)),
)

_WHOLE_WORD_KEYWORDS = frozenset({"uk", "us", "usa", "uae"})

CARRIER_CODES: dict[str, str] = {
    "Air France": "AF",
    "Transavia": "HV",
    "easyJet": "U2",
    "All Nippon Airways": "NH",
    "Japan Airlines": "JL",
    "Peach Aviation": "MM",
    "British Airways": "BA",
    "Virgin Atlantic": "VS",
    "Delta Air Lines": "DL",
    "United Airlines": "UA",
    "American Airlines": "AA",
    "Lufthansa": "LH",
    "Eurowings": "EW",
    "Condor": "DE",
    "KLM": "KL",
    "Emirates": "EK",
    "Etihad Airways": "EY",
    "flydubai": "FZ",
    "Qatar Airways": "QR",
    "Scoot": "TR",
    "Jetstar Asia": "3K",
}

# City keyword -> primary airport, checked in order
AIRPORTS: tuple[tuple[str, Airport], ...] = (
    ("paris", Airport("CDG", "Paris", "Charles de Gaulle")),
    ("london", Airport("LHR", "London", "Heathrow")),
    ("tokyo", Airport("HND", "Tokyo", "Haneda")),
    ("osaka", Airport("KIX", "Osaka", "Kansai")),
    ("kyoto", Airport("KIX", "Kyoto", "Kansai (via Osaka)")),
    ("amsterdam", Airport("AMS", "Amsterdam", "Schiphol")),
    ("frankfurt", Airport("FRA", "Frankfurt", "Frankfurt")),
    ("berlin", Airport("BER", "Berlin", "Brandenburg")),
    ("munich", Airport("MUC", "Munich", "Franz Josef Strauß")),
    ("dubai", Airport("DXB", "Dubai", "Dubai Intl")),
    ("abu", Airport("AUH", "Abu Dhabi", "Zayed Intl")),
    ("doha", Airport("DOH", "Doha", "Hamad Intl")),
    ("singapore", Airport("SIN", "Singapore", "Changi")),
    ("new york", Airport("JFK", "New York", "JFK")),
    ("los angeles", Airport("LAX", "Los Angeles", "LAX")),
    ("san francisco", Airport("SFO", "San Francisco", "SFO")),
    ("miami", Airport("MIA", "Miami", "MIA")),
    ("chicago", Airport("ORD", "Chicago", "O'Hare")),
    ("boston", Airport("BOS", "Boston", "Logan")),
    ("seattle", Airport("SEA", "Seattle", "Sea-Tac")),
)


def _mentions(text: str, keyword: str) -> bool:
    if keyword in _WHOLE_WORD_KEYWORDS:
        return re.search(rf"\b{re.escape(keyword)}\b", text) is not None
    return keyword in text


def resolve_region(text: str | None) -> str | None:
    """Map free text (city or country) to a region key, or None."""
    lowered = (text or "").strip().lower()
    if not lowered:
        return None
    for region, keywords in REGION_KEYWORDS:
        if any(_mentions(lowered, keyword) for keyword in keywords):
            return region
    return None


def resolve_airport(text: str | None) -> Airport | None:
    """Map free text to a known primary airport, or None."""
    lowered = (text or "").strip().lower()
    if not lowered:
        return None
    for keyword, airport in AIRPORTS:
        if keyword in lowered:
            return airport
    return None


def carrier_code(carrier: str) -> str:
    """IATA code for a carrier, or two uppercase letters taken from its name."""
    known = CARRIER_CODES.get(carrier)
    if known:
        return known
    return re.sub(r"[^A-Za-z]", "", carrier)[:2].upper()

"""Adapters for external data sources.

Adapters hold no database access and raise on failure; callers wrap them
with ``attempt`` where a failure should be tolerated.
"""

from .amadeus import AmadeusClient, get_amadeus, summarize_flights, summarize_hotels
from .photos import find_destination_image_url

__all__ = [
    "AmadeusClient",
    "find_destination_image_url",
    "get_amadeus",
    "summarize_flights",
    "summarize_hotels",
]

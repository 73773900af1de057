"""Destination photos from the Unsplash search API."""

from __future__ import annotations

import logging

import httpx

from backend.app.config import Settings, get_settings

logger = logging.getLogger(__name__)

UNSPLASH_SEARCH_URL = "https://api.unsplash.com/search/photos"


async def find_destination_image_url(
    city: str | None,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
) -> str | None:
    """Return a landscape photo URL for a city, or None.

    Returns None without a request when no access key is configured or the
    city is blank. When an application id is configured the URL carries
    Unsplash referral parameters.

    Raises:
        httpx.HTTPError: On transport failures or an error status
    """
    settings = settings or get_settings()
    if not settings.unsplash_access_key or not (city or "").strip():
        return None

    params = {
        "query": f"{city.strip()} city skyline travel",
        "orientation": "landscape",
        "per_page": 1,
        "content_filter": "high",
    }
    headers = {
        "Authorization": f"Client-ID {settings.unsplash_access_key}",
        "Accept-Version": "v1",
    }

    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=settings.photo_timeout_s)
    try:
        response = await client.get(UNSPLASH_SEARCH_URL, params=params, headers=headers)
        response.raise_for_status()
        payload = response.json()
    finally:
        if owns_client:
            await client.aclose()

    results = payload.get("results") or []
    if not results:
        logger.info("No Unsplash photo for %s", city)
        return None
    urls = results[0].get("urls") or {}
    resolved = urls.get("regular") or urls.get("full")
    if not resolved:
        return None

    if settings.unsplash_app_id:
        resolved = str(
            httpx.URL(resolved).copy_merge_params(
                {"utm_source": settings.unsplash_app_id, "utm_medium": "referral"}
            )
        )
    return resolved

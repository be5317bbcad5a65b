"""
Outbound HTTP client helpers.

Only JSON `GET` is needed today (the seed routine reads the PokeAPI listing).
"""

from __future__ import annotations

from typing import Any

import httpx


# Upstream failures are explicit and separable from other runtime errors.
class HttpAdapterError(RuntimeError):
    pass


async def get_json(url: str, *, timeout_s: float = 30.0) -> Any:
    """
    GET `url` and return the decoded JSON body.
    """
    url = (url or "").strip()
    if not url:
        raise HttpAdapterError("Request URL is empty.")

    try:
        async with httpx.AsyncClient(timeout=timeout_s, follow_redirects=True) as client:
            resp = await client.get(url)
    except httpx.HTTPError as e:
        raise HttpAdapterError(f"GET {url} failed: {e}") from e

    if resp.status_code != 200:
        # Avoid dumping huge bodies; include a small snippet.
        body = resp.text[:500]
        raise HttpAdapterError(f"GET {url} failed: {resp.status_code} {body}")

    try:
        return resp.json()
    except ValueError as e:
        raise HttpAdapterError(f"GET {url} returned a non-JSON body.") from e

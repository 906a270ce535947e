"""HTTP transport for the Bubble API."""

from typing import Dict, Optional

import httpx

from .config import Settings


def build_headers(api_token: Optional[str]) -> Dict[str, str]:
    """Return default headers, with bearer auth when a token is configured."""
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    if api_token:
        headers["Authorization"] = f"Bearer {api_token}"
    return headers


def create_api_client(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create the shared AsyncClient used by BubbleService.

    Args:
        settings: Loaded server settings (base URL, token, timeout)
        transport: Optional transport override, used by tests

    Returns:
        Configured httpx.AsyncClient; the caller owns closing it
    """
    return httpx.AsyncClient(
        base_url=settings.base_url.rstrip("/"),
        headers=build_headers(settings.api_token),
        timeout=settings.timeout,
        transport=transport,
    )

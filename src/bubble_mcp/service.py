"""
Upstream proxy for the Bubble Data and Workflow APIs.

Provides 7 calls, one per MCP tool:
- get_schema: GET /api/1.1/meta (memoized after the first success)
- list: GET /api/1.1/obj/{data_type}
- get: GET /obj/{data_type}/{id}
- create: POST /obj/{data_type}
- update: PATCH /obj/{data_type}/{id}
- delete: DELETE /obj/{data_type}/{id}
- execute_workflow: POST /wf/{workflow_name}

Schema and list use the versioned /api/1.1 prefix while the other calls are
relative to the configured base URL. Deployments point BUBBLE_BASE_URL at a
root that works for both, so the two forms are kept as they are.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from .errors import UpstreamError


logger = logging.getLogger(__name__)

META_PATH = "/api/1.1/meta"
LIST_PATH = "/api/1.1/obj/{data_type}"
COLLECTION_PATH = "/obj/{data_type}"
ITEM_PATH = "/obj/{data_type}/{id}"
WORKFLOW_PATH = "/wf/{workflow_name}"


# ============================================================================
# Helpers
# ============================================================================

def _upstream_message(response: httpx.Response) -> Optional[str]:
    """Pull the human-readable message out of a Bubble error body, if any.

    Bubble reports errors either as {"message": ...} or wrapped as
    {"body": {"status": ..., "message": ...}}.
    """
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    if payload.get("message"):
        return str(payload["message"])
    body = payload.get("body")
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None


def _error_detail(exc: httpx.HTTPError) -> str:
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        message = _upstream_message(response)
        if message:
            return message
        return f"HTTP {response.status_code} {response.reason_phrase}".strip()
    return str(exc) or type(exc).__name__


def _parse_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


# ============================================================================
# Service
# ============================================================================

class BubbleService:
    """Thin wrapper issuing exactly one HTTP request per call."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client
        self._schema: Optional[Any] = None

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        target: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        try:
            response = await self.client.request(method, path, params=params or None, json=json)
            response.raise_for_status()
        except httpx.HTTPError as e:
            status_code = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
            error = UpstreamError(operation, target, _error_detail(e), status_code=status_code)
            logger.error("Bubble API %s %s failed: %s", method, path, error.detail)
            raise error from e
        return _parse_body(response)

    async def get_schema(self) -> Any:
        # Only a successful fetch fills the cache, so failures are retried
        if self._schema is None:
            self._schema = await self._request("GET", META_PATH, "fetch", "schema")
        return self._schema

    async def list(
        self,
        data_type: str,
        limit: Optional[int] = None,
        cursor: Optional[int] = None,
    ) -> Any:
        params: Dict[str, Any] = {}
        if limit is not None:
            params["limit"] = limit
        if cursor is not None:
            params["cursor"] = cursor
        return await self._request(
            "GET", LIST_PATH.format(data_type=data_type), "list", data_type, params=params
        )

    async def get(self, data_type: str, id: str) -> Any:
        return await self._request(
            "GET", ITEM_PATH.format(data_type=data_type, id=id), "get", f"{data_type} {id}"
        )

    async def create(self, data_type: str, data: Dict[str, Any]) -> Any:
        return await self._request(
            "POST", COLLECTION_PATH.format(data_type=data_type), "create", data_type, json=data
        )

    async def update(self, data_type: str, id: str, data: Dict[str, Any]) -> Any:
        return await self._request(
            "PATCH", ITEM_PATH.format(data_type=data_type, id=id), "update", f"{data_type} {id}", json=data
        )

    async def delete(self, data_type: str, id: str) -> Any:
        return await self._request(
            "DELETE", ITEM_PATH.format(data_type=data_type, id=id), "delete", f"{data_type} {id}"
        )

    async def execute_workflow(self, workflow_name: str, data: Dict[str, Any]) -> Any:
        return await self._request(
            "POST", WORKFLOW_PATH.format(workflow_name=workflow_name),
            "execute workflow", workflow_name, json=data,
        )

#!/usr/bin/env python3
"""
Todo Service Client for tasktrack

Thin async HTTP client over the four todo routes. There is deliberately no
timeout, retry or circuit breaker: a failed call raises an ``httpx.HTTPError``
to the caller and a slow call simply stays pending.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..models.todo_api import TodoRead
from .draft import TodoDraft

logger = logging.getLogger(__name__)


class TodoServiceClient:
    """HTTP client for the todo service."""

    def __init__(self,
                 base_url: str,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.service_name = "TodoService"
        self.base_url = base_url.rstrip('/')
        self.http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=None,
            transport=transport,
        )

    async def _request(self, method: str, endpoint: str, json: Any = None) -> Any:
        try:
            response = await self.http.request(method, endpoint, json=json)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            logger.warning(f"{self.service_name} {method} {endpoint} failed: {e.__class__.__name__}: {e}")
            raise

    # ----------------------------------------------------------------------
    # Read
    # ----------------------------------------------------------------------

    async def list_todos(self) -> List[TodoRead]:
        logger.info(f"Fetching from: {self.base_url}/todos")
        data = await self._request("GET", "/todos")
        return [TodoRead.model_validate(item) for item in data]

    # ----------------------------------------------------------------------
    # Mutations
    # ----------------------------------------------------------------------

    async def create_todo(self, draft: TodoDraft) -> TodoRead:
        data = await self._request("POST", "/todos", json=draft.to_payload())
        return TodoRead.model_validate(data)

    async def replace_todo(self, todo_id: int, draft: TodoDraft) -> str:
        """Full replace of the five editable fields; completion is untouched."""
        return await self._request("PUT", f"/todos/{todo_id}", json=draft.to_payload())

    async def set_completion(self, todo_id: int, is_completed: bool) -> str:
        """Completion-only toggle; no other field is sent."""
        return await self._request("PUT", f"/todos/{todo_id}", json={"is_completed": is_completed})

    async def delete_todo(self, todo_id: int) -> str:
        return await self._request("DELETE", f"/todos/{todo_id}")

    # ----------------------------------------------------------------------
    # Lifecycle
    # ----------------------------------------------------------------------

    async def health_check(self) -> Dict[str, Any]:
        """Check service health."""
        try:
            return await self._request("GET", "/health")
        except httpx.HTTPError as e:
            return {"status": "unhealthy", "error": str(e)}

    async def close(self):
        """Close the HTTP client."""
        await self.http.aclose()

    async def __aenter__(self) -> "TodoServiceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

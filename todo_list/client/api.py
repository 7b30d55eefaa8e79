"""Async HTTP client for the task API."""

import logging
from typing import Any

import httpx

from ..models import Envelope, SortKey, TaskPatch

logger = logging.getLogger(__name__)


class TaskApiClient:
    """
    Thin wrapper over httpx.AsyncClient, one request per call.

    Every call returns the parsed envelope. Transport failures
    (httpx.HTTPError) are left to the caller.
    """

    def __init__(self, base_url: str, *, http: httpx.AsyncClient | None = None) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http or httpx.AsyncClient()
        self._owns_http = http is None

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> "TaskApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(
        self,
        method: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Envelope:
        response = await self._http.request(method, self._base_url, params=params, json=json)
        response.raise_for_status()
        envelope = Envelope.model_validate(response.json())
        if not envelope.success:
            logger.debug("%s %s params=%s -> %s", method, self._base_url, params, envelope.message)
        return envelope

    async def list_tasks(self, sort: SortKey = SortKey.DATE_ASC) -> Envelope:
        return await self._request("GET", params={"sort": sort.value})

    async def get_task(self, task_id: int) -> Envelope:
        return await self._request("GET", params={"id": task_id})

    async def create_task(self, task_text: str, task_date: str, task_time: str) -> Envelope:
        return await self._request(
            "POST",
            json={"task_text": task_text, "task_date": task_date, "task_time": task_time},
        )

    async def update_task(self, task_id: int, patch: TaskPatch) -> Envelope:
        body = patch.model_dump(mode="json", include=patch.fields_set())
        return await self._request("PUT", params={"id": task_id}, json=body)

    async def delete_task(self, task_id: int) -> Envelope:
        return await self._request("DELETE", params={"id": task_id})

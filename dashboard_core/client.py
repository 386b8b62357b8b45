from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, List, Optional

import httpx

from dashboard_core.answers import ASSISTANT_FAILURE_REPLY, canned_reply, extract_answer
from dashboard_core.config import DashboardSettings, load_settings, read_params
from dashboard_core.models import DashboardView, FlaggedItem, SprintOverview, StatsCounter
from dashboard_core.pipeline import normalize_blocked, normalize_overdue, normalize_sprint, normalize_stats

logger = logging.getLogger(__name__)


class DashboardClient:
    """Fetches each dashboard family from the analytics API and normalizes it.

    Transport failures never escape: the family's payload becomes ``None`` and
    the pipeline substitutes its default. Retries and staleness are the
    caller's concern.
    """

    def __init__(
        self,
        settings: Optional[DashboardSettings] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self._transport = transport
        self._rng = rng

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.settings.timeout, transport=self._transport)

    def _project(self, project: Optional[str]) -> Optional[str]:
        return project if project is not None else self.settings.project

    async def _get_json(self, client: httpx.AsyncClient, url: str, project: Optional[str]) -> Any:
        try:
            response = await client.get(url, params=read_params(project))
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("GET %s failed: %s", url, exc)
            return None

    async def _stats(self, client: httpx.AsyncClient, project: Optional[str]) -> List[StatsCounter]:
        payload = await self._get_json(client, self.settings.endpoints.task_summary, project)
        return normalize_stats(payload)

    async def _sprint(self, client: httpx.AsyncClient, project: Optional[str]) -> SprintOverview:
        payload = await self._get_json(client, self.settings.endpoints.sprint_tasks, project)
        return normalize_sprint(payload, balance=self.settings.balance_percentages)

    async def _blocked(self, client: httpx.AsyncClient, project: Optional[str]) -> List[FlaggedItem]:
        payload = await self._get_json(client, self.settings.endpoints.blocked_items, project)
        return normalize_blocked(payload)

    async def _overdue(self, client: httpx.AsyncClient, project: Optional[str]) -> List[FlaggedItem]:
        payload = await self._get_json(client, self.settings.endpoints.overdue_items, project)
        return normalize_overdue(payload)

    async def load_stats(self, project: Optional[str] = None) -> List[StatsCounter]:
        async with self._client() as client:
            return await self._stats(client, self._project(project))

    async def load_sprint(self, project: Optional[str] = None) -> SprintOverview:
        async with self._client() as client:
            return await self._sprint(client, self._project(project))

    async def load_blocked(self, project: Optional[str] = None) -> List[FlaggedItem]:
        async with self._client() as client:
            return await self._blocked(client, self._project(project))

    async def load_overdue(self, project: Optional[str] = None) -> List[FlaggedItem]:
        async with self._client() as client:
            return await self._overdue(client, self._project(project))

    async def load_dashboard(self, project: Optional[str] = None) -> DashboardView:
        project = self._project(project)
        async with self._client() as client:
            stats, sprint, blocked, overdue = await asyncio.gather(
                self._stats(client, project),
                self._sprint(client, project),
                self._blocked(client, project),
                self._overdue(client, project),
            )
        return DashboardView(
            project=project,
            stats=stats,
            sprint=sprint,
            blocked_items=blocked,
            overdue_items=overdue,
        )

    async def trigger_rebuild(self) -> bool:
        url = self.settings.endpoints.build
        try:
            async with self._client() as client:
                response = await client.post(url)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("rebuild trigger %s failed: %s", url, exc)
            return False
        return True

    async def refresh(self, project: Optional[str] = None) -> DashboardView:
        """Rebuild upstream, then reload everything whether or not the rebuild succeeded."""
        await self.trigger_rebuild()
        return await self.load_dashboard(project)

    async def ask(self, question: str) -> Optional[str]:
        question = (question or "").strip()
        if not question:
            return None
        url = self.settings.endpoints.ask
        try:
            async with self._client() as client:
                response = await client.post(url, json={"question": question})
                response.raise_for_status()
                payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("POST %s failed: %s", url, exc)
            return ASSISTANT_FAILURE_REPLY
        answer = extract_answer(payload)
        if answer is None:
            return canned_reply(self._rng)
        return answer

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

DEFAULT_API_SERVER = "http://localhost:8000"
DEFAULT_TIMEOUT = 10.0

PROJECTS = ("E-Commerce Platform", "Mobile Banking", "AI Assistant")

ENV_PREFIX = "DASHBOARD_"
_TRUTHY = {"1", "true", "yes", "on"}


def normalize_base_url(value: str) -> str:
    return value.rstrip("/")


@dataclass(frozen=True)
class Endpoints:
    build: str
    task_summary: str
    sprint_tasks: str
    ask: str
    blocked_items: str
    overdue_items: str

    @classmethod
    def resolve(cls, api_server: str) -> "Endpoints":
        base = normalize_base_url(api_server)
        return cls(
            build=f"{base}/build",
            task_summary=f"{base}/project-dashboard/task-summary",
            sprint_tasks=f"{base}/project-dashboard/tasks-of-sprint",
            ask=f"{base}/ask",
            blocked_items=f"{base}/project-dashboard/blocked-item",
            overdue_items=f"{base}/project-dashboard/overdue-item",
        )


@dataclass(frozen=True)
class DashboardSettings:
    api_server: str = DEFAULT_API_SERVER
    timeout: float = DEFAULT_TIMEOUT
    project: Optional[str] = None
    balance_percentages: bool = False

    @property
    def endpoints(self) -> Endpoints:
        return Endpoints.resolve(self.api_server)


def read_params(project: Optional[str]) -> Dict[str, str]:
    """Query parameters for every read endpoint."""
    project = (project or "").strip()
    return {"project": project} if project else {}


def _as_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in _TRUTHY


def normalize_settings(raw: Mapping[str, object]) -> DashboardSettings:
    api_server = str(raw.get("api_server") or "").strip()
    api_server = normalize_base_url(api_server) if api_server else DEFAULT_API_SERVER

    timeout = raw.get("timeout", DEFAULT_TIMEOUT)
    try:
        timeout = float(timeout)
    except (TypeError, ValueError):
        timeout = DEFAULT_TIMEOUT
    timeout = max(1.0, min(120.0, timeout))

    project = str(raw.get("project") or "").strip() or None
    return DashboardSettings(
        api_server=api_server,
        timeout=timeout,
        project=project,
        balance_percentages=_as_bool(raw.get("balance_percentages")),
    )


def load_settings(env: Optional[Mapping[str, str]] = None) -> DashboardSettings:
    env = os.environ if env is None else env
    raw = {
        "api_server": env.get(f"{ENV_PREFIX}API_SERVER"),
        "timeout": env.get(f"{ENV_PREFIX}TIMEOUT", DEFAULT_TIMEOUT),
        "project": env.get(f"{ENV_PREFIX}PROJECT"),
        "balance_percentages": env.get(f"{ENV_PREFIX}BALANCE_PERCENTAGES"),
    }
    return normalize_settings(raw)

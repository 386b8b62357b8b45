from __future__ import annotations

from dataclasses import asdict
import logging
import math
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
from fastapi import Body, Depends, FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dashboard_api.schemas import AskRequest, AskResponse, MetaProjectsResponse, SettingsModel
from dashboard_core.charts import sprint_charts
from dashboard_core.client import DashboardClient
from dashboard_core.config import PROJECTS, load_settings
from dashboard_core.metrics_issues import format_severity, severity_counts
from dashboard_core.models import DashboardView, FlaggedItem, SprintOverview, StatsCounter, TeamCapacity
from dashboard_core.pipeline import normalize_blocked, normalize_overdue, normalize_sprint, normalize_stats


app = FastAPI(title="Project Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_client() -> DashboardClient:
    return DashboardClient(load_settings())


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _stats_payload(stats: List[StatsCounter]) -> List[Dict[str, Any]]:
    return [asdict(s) for s in stats]


def _teams_payload(teams: List[TeamCapacity]) -> List[Dict[str, Any]]:
    return [{**asdict(t), "completion": t.completion} for t in teams]


def _items_payload(items: List[FlaggedItem]) -> Dict[str, Any]:
    return {
        "items": [{**asdict(i), "severity_label": format_severity(i.severity)} for i in items],
        "counts": dict(severity_counts(items)),
    }


def _sprint_payload(sprint: SprintOverview, *, charts: bool = True) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "segments": [asdict(s) for s in sprint.segments],
        "priorities": [asdict(p) for p in sprint.priorities],
        "teams": _teams_payload(sprint.teams),
    }
    if charts:
        payload["charts"] = sprint_charts(sprint.segments, sprint.priorities, sprint.teams)
    return payload


def _dashboard_payload(view: DashboardView) -> Dict[str, Any]:
    return {
        "project": view.project,
        "stats": _stats_payload(view.stats),
        "sprint": _sprint_payload(view.sprint),
        "blocked_items": _items_payload(view.blocked_items),
        "overdue_items": _items_payload(view.overdue_items),
    }


@app.get("/meta/projects", response_model=MetaProjectsResponse)
def meta_projects(client: DashboardClient = Depends(get_client)):
    return MetaProjectsResponse(projects=list(PROJECTS), selected=client.settings.project)


@app.get("/meta/settings", response_model=SettingsModel)
def meta_settings(client: DashboardClient = Depends(get_client)):
    return SettingsModel(**asdict(client.settings))


@app.get("/dashboard")
async def dashboard(project: Optional[str] = Query(default=None), client: DashboardClient = Depends(get_client)):
    try:
        view = await client.load_dashboard(project)
        return _json(_dashboard_payload(view))
    except Exception as exc:
        logger.exception("dashboard failed")
        return _error(exc)


@app.get("/stats")
async def stats(project: Optional[str] = Query(default=None), client: DashboardClient = Depends(get_client)):
    try:
        return _json({"stats": _stats_payload(await client.load_stats(project))})
    except Exception as exc:
        logger.exception("stats failed")
        return _error(exc)


@app.get("/sprint")
async def sprint(project: Optional[str] = Query(default=None), client: DashboardClient = Depends(get_client)):
    try:
        return _json(_sprint_payload(await client.load_sprint(project)))
    except Exception as exc:
        logger.exception("sprint failed")
        return _error(exc)


@app.get("/blocked-items")
async def blocked_items(project: Optional[str] = Query(default=None), client: DashboardClient = Depends(get_client)):
    try:
        return _json(_items_payload(await client.load_blocked(project)))
    except Exception as exc:
        logger.exception("blocked_items failed")
        return _error(exc)


@app.get("/overdue-items")
async def overdue_items(project: Optional[str] = Query(default=None), client: DashboardClient = Depends(get_client)):
    try:
        return _json(_items_payload(await client.load_overdue(project)))
    except Exception as exc:
        logger.exception("overdue_items failed")
        return _error(exc)


@app.post("/refresh")
async def refresh(project: Optional[str] = Query(default=None), client: DashboardClient = Depends(get_client)):
    try:
        view = await client.refresh(project)
        return _json(_dashboard_payload(view))
    except Exception as exc:
        logger.exception("refresh failed")
        return _error(exc)


@app.post("/ask", response_model=AskResponse)
async def ask(request: AskRequest, client: DashboardClient = Depends(get_client)):
    answer = await client.ask(request.question)
    if answer is None:
        return JSONResponse(status_code=422, content={"error": "question is blank", "type": "ValidationError"})
    return AskResponse(answer=answer)


@app.post("/normalize/{family}")
def normalize(
    family: str,
    payload: Any = Body(default=None),
    balance: bool = Query(default=False),
):
    """Normalize a posted raw payload without fetching upstream."""
    try:
        if family == "stats":
            return _json({"stats": _stats_payload(normalize_stats(payload))})
        if family == "sprint":
            return _json(_sprint_payload(normalize_sprint(payload, balance=balance)))
        if family == "blocked-items":
            return _json(_items_payload(normalize_blocked(payload)))
        if family == "overdue-items":
            return _json(_items_payload(normalize_overdue(payload)))
    except Exception as exc:
        logger.exception("normalize %s failed", family)
        return _error(exc)
    return JSONResponse(status_code=404, content={"error": f"unknown family: {family}", "type": "NotFound"})

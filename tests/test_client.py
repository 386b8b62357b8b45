import asyncio
import json
import random

import httpx

from dashboard_core.answers import ASSISTANT_FAILURE_REPLY, ASSISTANT_REPLIES
from dashboard_core.client import DashboardClient
from dashboard_core.config import DashboardSettings
from dashboard_core.defaults import default_priorities, default_segments, default_stats, default_teams

SPRINT_TASKS = {
    "data": {
        "tasks": [
            {"status": "Done", "priority": "High", "team": "Backend", "storyPoints": 5},
            {"status": "In Progress", "priority": "Low", "team": "Backend", "storyPoints": 3},
        ]
    }
}


def _client(handler, **settings):
    transport = httpx.MockTransport(handler)
    return DashboardClient(DashboardSettings(api_server="http://upstream", **settings), transport=transport)


def test_load_dashboard_fans_out_and_normalizes_each_family():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.url.path, dict(request.url.params)))
        path = request.url.path
        if path.endswith("task-summary"):
            return httpx.Response(200, json={"completedToday": 7})
        if path.endswith("tasks-of-sprint"):
            return httpx.Response(200, json=SPRINT_TASKS)
        if path.endswith("blocked-item"):
            return httpx.Response(200, json={"items": [{"id": "B-1", "title": "Waiting on infra"}]})
        return httpx.Response(200, json=[])

    view = asyncio.run(_client(handler).load_dashboard("Mobile Banking"))

    assert sorted(p for p, _ in seen) == [
        "/project-dashboard/blocked-item",
        "/project-dashboard/overdue-item",
        "/project-dashboard/task-summary",
        "/project-dashboard/tasks-of-sprint",
    ]
    assert all(params == {"project": "Mobile Banking"} for _, params in seen)
    assert view.project == "Mobile Banking"
    assert [(s.title, s.value) for s in view.stats] == [("Completed Today", 7)]
    assert [(s.label, s.percentage) for s in view.sprint.segments] == [("Done", 50), ("In Progress", 50)]
    assert [p.label for p in view.sprint.priorities] == ["High", "Low"]
    assert view.sprint.teams[0].completed_units == 5
    assert view.sprint.teams[0].total_units == 8
    assert [i.id for i in view.blocked_items] == ["B-1"]
    assert view.overdue_items == []


def test_failing_family_falls_back_to_its_own_default():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("task-summary"):
            return httpx.Response(503)
        if request.url.path.endswith("tasks-of-sprint"):
            return httpx.Response(200, content=b"<html>not json</html>")
        if request.url.path.endswith("blocked-item"):
            raise httpx.ConnectError("refused", request=request)
        return httpx.Response(200, json={"overdue": [{"title": "Late report", "daysOverdue": 2}]})

    view = asyncio.run(_client(handler).load_dashboard())

    assert view.stats == default_stats()
    assert view.sprint.segments == default_segments()
    assert view.sprint.priorities == default_priorities()
    assert view.sprint.teams == default_teams()
    assert view.blocked_items == []
    assert view.overdue_items[0].meta == "Overdue by 2 days"


def test_project_defaults_to_settings_and_is_omitted_when_blank():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(dict(request.url.params))
        return httpx.Response(200, json={})

    asyncio.run(_client(handler, project="AI Assistant").load_stats())
    asyncio.run(_client(handler).load_stats())
    assert seen == [{"project": "AI Assistant"}, {}]


def test_refresh_rebuilds_then_reloads_even_when_rebuild_fails():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path))
        if request.url.path == "/build":
            return httpx.Response(500)
        return httpx.Response(200, json=SPRINT_TASKS)

    view = asyncio.run(_client(handler).refresh())

    assert calls[0] == ("POST", "/build")
    assert len(calls) == 5
    assert view.sprint.segments[0].label == "Done"


def test_trigger_rebuild_reports_success():
    client = _client(lambda request: httpx.Response(204))
    assert asyncio.run(client.trigger_rebuild()) is True


def test_ask_returns_extracted_answer():
    def handler(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content) == {"question": "status?"}
        return httpx.Response(200, json={"result": "63% done"})

    assert asyncio.run(_client(handler).ask("  status? ")) == "63% done"


def test_ask_substitutes_canned_reply_for_unknown_shape():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"data": 1}))
    client = DashboardClient(DashboardSettings(), transport=transport, rng=random.Random(1))
    assert asyncio.run(client.ask("hello")) in ASSISTANT_REPLIES


def test_ask_apologises_on_transport_failure_and_skips_blank_questions():
    client = _client(lambda request: httpx.Response(502))
    assert asyncio.run(client.ask("hello")) == ASSISTANT_FAILURE_REPLY
    assert asyncio.run(client.ask("   ")) is None

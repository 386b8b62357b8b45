from dashboard_core import pipeline
from dashboard_core.defaults import default_segments, default_stats, default_teams
from dashboard_core.pipeline import normalize_blocked, normalize_overdue, normalize_sprint, normalize_stats


def test_defaults_substituted_on_shape_mismatch():
    assert normalize_stats({"unexpected": True}) == default_stats()
    sprint = normalize_sprint("not a sprint")
    assert sprint.segments == default_segments()
    assert sprint.teams == default_teams()
    assert normalize_blocked({"unexpected": True}) == []
    assert normalize_overdue(None) == []


def test_defaults_are_fresh_copies():
    first = normalize_blocked(None)
    first.append("mutated")
    assert normalize_blocked(None) == []


def test_builder_exceptions_degrade_to_default(monkeypatch):
    def explode(payload):
        raise RuntimeError("boom")

    monkeypatch.setattr(pipeline, "build_stats", explode)
    assert normalize_stats({"completed": 1}) == default_stats()


def test_sprint_views_are_derived_independently():
    payload = {"teams": [{"team": "Backend", "completed": 40, "capacity": 50}]}
    sprint = normalize_sprint(payload)
    assert sprint.segments == default_segments()
    assert [(t.name, t.completed_units, t.total_units) for t in sprint.teams] == [("Backend", 40, 50)]

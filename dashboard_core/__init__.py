"""Core (UI-agnostic) dashboard normalization.

This package contains:
- scalar coercion, label normalization and alias lookup
- status / priority / severity classifiers
- the task-list aggregator and the view-model builders
- the async assembler that fetches and normalizes each dashboard family
- chart helpers (Altair -> Vega-Lite spec dict)
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class SettingsModel(BaseModel):
    api_server: str = "http://localhost:8000"
    timeout: float = 10.0
    project: Optional[str] = None
    balance_percentages: bool = False


class AskRequest(BaseModel):
    question: str = Field(min_length=1)


class AskResponse(BaseModel):
    answer: str


class MetaProjectsResponse(BaseModel):
    projects: List[str]
    selected: Optional[str] = None

"""Expected shapes of LLM replies.

These models only validate; callers keep the raw parsed dict so that extra
keys the model returns reach the client untouched.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _LenientModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class AuditReport(_LenientModel):
    """Single-pass and scanner-summary reply."""

    score: float = Field(ge=0, le=100)
    summary: str
    critical_issues: list[dict[str, Any]] = Field(default_factory=list)


class ContextFindings(_LenientModel):
    project_type: str
    summary: str = ""


class SpecialistFindings(_LenientModel):
    """Reply of the security, performance, quality and frontend agents."""

    score: float = Field(ge=0, le=100)
    summary: str = ""
    issues: list[dict[str, Any]] = Field(default_factory=list)


class AggregateReport(_LenientModel):
    overall_score: float = Field(ge=0, le=100)
    summary: str
    critical_issues: list[dict[str, Any]] = Field(default_factory=list)
    next_steps: list[Any] = Field(default_factory=list)

"""Learner submissions for one exam attempt."""

from __future__ import annotations

import typing as t

import pydantic as p

from .base import BaseModel
from .enum import ExamModule

SubmittedAnswer = str | list[str]


def _coerce_value(value: t.Any) -> t.Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, list):
        return [_coerce_value(v) for v in t.cast(list[t.Any], value)]
    return value


class AnswerMap(BaseModel):
    """Answers keyed by module, then by question id (objective modules) or by
    task/prompt key (subjective modules).

    Question ids are stored as strings; integer keys are accepted and converted.
    Entries whose value is `None` are dropped, so a missing key and a `None`
    value are the same thing to the evaluator.
    """

    reading: dict[str, SubmittedAnswer] | None = None
    listening: dict[str, SubmittedAnswer] | None = None
    writing: dict[str, str] | None = None
    speaking: dict[str, str] | None = None

    @p.field_validator("reading", "listening", "writing", "speaking", mode="before")
    @classmethod
    def coerce_keys(cls, v: t.Any) -> t.Any:
        if not isinstance(v, dict):
            return v
        entries = t.cast(dict[t.Any, t.Any], v)
        return {str(k): _coerce_value(val) for k, val in entries.items() if val is not None}

    def for_module(self, module: ExamModule) -> t.Mapping[str, SubmittedAnswer] | None:
        return getattr(self, module.value)

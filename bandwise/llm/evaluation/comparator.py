"""Deterministic answer comparison for objective modules."""

from __future__ import annotations

import typing as t

Answer = str | t.Sequence[str]


def normalize(value: str) -> str:
    return value.strip().lower()


def _as_sequence(value: Answer) -> list[str]:
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


def answers_match(submitted: Answer | None, canonical: Answer) -> bool:
    """Whether a submitted answer equals the canonical one.

    Comparison ignores case and surrounding whitespace. A scalar is treated as
    a one-element sequence; sequences must agree in length and position by
    position. No submission, or an empty one, never matches.
    """
    if submitted is None:
        return False

    given = [normalize(v) for v in _as_sequence(submitted)]
    if not given or all(not v for v in given):
        return False

    expected = [normalize(v) for v in _as_sequence(canonical)]
    return len(given) == len(expected) and all(g == e for g, e in zip(given, expected))

"""Ordered recovery cascade over generated text."""

from __future__ import annotations

import functools
import logging
import typing as t

from bandwise.llm.config import RecoverySettings
from bandwise.llm.errors import RecoveryError

from .canonical import canonicalize
from .strategies import parse_blocks, parse_direct, repair_at_error, salvage_sections, strip_fences

logger = logging.getLogger(__name__)

Strategy = t.Callable[[str], dict[str, t.Any] | None]


def build_cascade(settings: RecoverySettings) -> tuple[tuple[str, Strategy], ...]:
    """The parse strategies tried against the canonicalized text, in order."""
    return (
        ("direct", parse_direct),
        ("positional", functools.partial(repair_at_error, max_repairs=settings.max_repairs)),
        ("blocks", functools.partial(parse_blocks, max_repairs=settings.max_repairs)),
        (
            "salvage",
            functools.partial(salvage_sections, max_repairs=settings.max_repairs, window=settings.salvage_window),
        ),
    )


def recover(text: str, settings: RecoverySettings | None = None) -> dict[str, t.Any]:
    """Recover the top-level mapping from generated `text`.

    Raises:
        RecoveryError: If every strategy fails; carries the raw text
    """
    settings = settings or RecoverySettings()

    working = strip_fences(text)
    try:
        working = canonicalize(working)
    except Exception:
        logger.debug("canonicalization failed, continuing with stripped text", exc_info=True)

    for name, strategy in build_cascade(settings):
        try:
            result = strategy(working)
        except Exception:
            logger.debug(f"{name} strategy raised", exc_info=True)
            continue
        if result is not None:
            logger.info(f"recovered generated content with {name} strategy", extra={"keys": sorted(result)})
            return result
        logger.debug(f"{name} strategy found nothing")

    raise RecoveryError("no strategy could recover structured content", raw_text=text)

"""Canonicalization of near-JSON text with `json_repair`.

Generated content often breaks JSON in predictable ways: unquoted keys, bare
string values, single or typographic quotes, trailing commas, comments, raw
newlines inside strings and prose after the closing brace. `json_repair`
rewrites all of these; only a repair that yields a top-level object is kept, so
text it cannot make sense of reaches the later strategies as it was.
"""

from __future__ import annotations

import json
import logging

import json_repair

logger = logging.getLogger(__name__)


def canonicalize(text: str) -> str:
    """Rewrite near-JSON `text` into strict JSON.

    Text that already parses is returned untouched, as is text whose repair is
    not a single, non-empty object (prose, or several concatenated objects).
    """
    try:
        json.loads(text)
    except (ValueError, RecursionError):
        pass
    else:
        return text

    repaired = json_repair.repair_json(text, skip_json_loads=True)
    if not isinstance(repaired, str) or not repaired.startswith("{") or repaired == "{}":
        logger.debug("repair produced no single object, keeping text", extra={"repaired": repaired})
        return text
    return repaired

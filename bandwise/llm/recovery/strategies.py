"""Individual recovery strategies.

Each strategy takes a working string and returns the recovered top-level
mapping, or None when it cannot; none of them raise on malformed input.
"""

from __future__ import annotations

import json
import logging
import re as regex
import typing as t

from bandwise.model import ModuleBodyKeys

logger = logging.getLogger(__name__)

FencePattern = regex.compile(r"```[ \t]*[\w+-]*[ \t]*\r?\n?(.*?)```", regex.DOTALL)

_ValueEnd = regex.compile(r"(?:[\"}\]\d]|true|false|null)\s*$")
_PropertyName = regex.compile(r"\s*([A-Za-z_$][\w$-]*)\s*:")


def _brace_span(text: str) -> str | None:
    start = text.find("{")
    if start == -1:
        return None
    end = text.rfind("}")
    if end > start:
        return text[start : end + 1]
    # no closing brace at all: keep the tail for repair and salvage
    return text[start:]


def strip_fences(text: str) -> str:
    """Narrow `text` to the part most likely to hold the JSON object."""
    stripped = text.strip()
    if stripped.startswith("{") and parse_direct(stripped) is not None:
        return stripped

    match = FencePattern.search(text)
    if match is not None:
        fenced = _brace_span(match.group(1))
        if fenced is not None:
            return fenced.strip()

    return (_brace_span(text) or stripped).strip()


def parse_direct(text: str) -> dict[str, t.Any] | None:
    try:
        value = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return t.cast(dict[str, t.Any], value) if isinstance(value, dict) else None


def _repair_variants(text: str, pos: int) -> list[tuple[str, int]]:
    """Candidate single edits at the decoder's error offset, most plausible first.

    Each variant is paired with the number of characters it shifts the offset by.
    """
    before, after = text[:pos], text[pos:]
    nxt = after.lstrip()[:1]
    variants: list[tuple[str, int]] = []

    # two values with nothing between them
    if _ValueEnd.search(before) and nxt and (nxt in '"{[-' or nxt.isalnum()):
        variants.append((before + "," + after, 1))

    prop = _PropertyName.match(after)
    if prop is not None and before.rstrip()[-1:] in ("{", ","):
        name = prop.group(1)
        variants.append((before + after[: prop.start(1)] + f'"{name}"' + after[prop.end(1) :], 2))

    variants.append((before + '"' + after, 1))
    variants.append((before + "," + after, 1))
    if after:
        variants.append((before + after[1:], -1))

    unique: list[tuple[str, int]] = []
    seen: set[str] = set()
    for variant, shift in variants:
        if variant not in seen:
            seen.add(variant)
            unique.append((variant, shift))
    return unique


def repair_at_error(text: str, max_repairs: int = 8) -> dict[str, t.Any] | None:
    """Repeatedly apply the single edit that moves the decoder's error furthest on.

    Gives up when no edit makes progress or after `max_repairs` edits.
    """
    candidate = text
    for attempt in range(max_repairs + 1):
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError as e:
            error = e
        except RecursionError:
            return None
        else:
            return t.cast(dict[str, t.Any], value) if isinstance(value, dict) else None

        if attempt == max_repairs:
            break

        best: tuple[str, int] | None = None
        for variant, shift in _repair_variants(candidate, error.pos):
            try:
                value = json.loads(variant)
            except json.JSONDecodeError as e:
                # progress means the decoder now fails strictly later
                progress = e.pos - (error.pos + max(shift, 0))
                if progress > 0 and (best is None or progress > best[1]):
                    best = (variant, progress)
                continue
            except RecursionError:
                continue
            if isinstance(value, dict):
                logger.debug(f"repaired generated JSON after {attempt + 1} edit(s)")
                return t.cast(dict[str, t.Any], value)
            return None

        if best is None:
            return None
        candidate = best[0]
    return None


def split_blocks(text: str) -> list[str]:
    """Return every top-level balanced `{...}` span in `text`, in order."""
    blocks: list[str] = []
    depth = 0
    start = 0
    in_string = False
    escaped = False

    for i, ch in enumerate(text):
        if depth == 0:
            if ch == "{":
                depth = 1
                start = i
            continue
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                blocks.append(text[start : i + 1])
    return blocks


def parse_blocks(text: str, max_repairs: int = 8) -> dict[str, t.Any] | None:
    """Parse the first block that parses directly, else the first one repair fixes."""
    blocks = split_blocks(text)
    for block in blocks:
        value = parse_direct(block)
        if value is not None:
            return value
    for block in blocks:
        value = repair_at_error(block, max_repairs)
        if value is not None:
            return value
    return None


def _balanced_object(text: str, start: int, limit: int) -> str | None:
    """The balanced object opening at `text[start]`, if it closes before `limit`."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, min(limit, len(text))):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def _nearest_object(text: str, start: int, limit: int, body_key: str) -> str | None:
    """The module object up to the first brace after its body array."""
    pattern = regex.compile(r'\{[^}]*?"' + body_key + r'"\s*:\s*\[[\s\S]*?\][^}]*\}')
    match = pattern.match(text[start:limit])
    return match.group(0) if match else None


def salvage_sections(text: str, max_repairs: int = 8, window: int = 200_000) -> dict[str, t.Any] | None:
    """Assemble a partial document from whichever module sections parse on their own."""
    document: dict[str, t.Any] = {}
    for module, body_key in ModuleBodyKeys.items():
        match = regex.search(r'"' + module.value + r'"\s*:\s*\{', text)
        if match is None:
            continue

        start = match.end() - 1
        limit = start + window
        fragments = [
            fragment
            for fragment in (
                _balanced_object(text, start, limit),
                _nearest_object(text, start, limit, body_key),
            )
            if fragment is not None
        ]

        for fragment in fragments:
            value = parse_direct(fragment) or repair_at_error(fragment, max_repairs)
            if value is not None:
                document[module.value] = value
                break
        else:
            logger.debug(f"could not salvage {module.value} section")

    return document or None

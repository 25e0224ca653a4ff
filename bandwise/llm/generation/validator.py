"""Structural validation of recovered exam content."""

from __future__ import annotations

import logging
import typing as t

import pydantic as p

from bandwise.llm.errors import MalformedModuleError, MissingModuleError
from bandwise.model import ContentModels, ExamDocument, ExamModule, ListeningContent, ModuleBodyKeys, \
    ModuleItemFields, ReadingContent

logger = logging.getLogger(__name__)


def _describe(error: p.ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}" if location else first["msg"]


def validate_module(module: ExamModule, body: t.Any) -> t.Any:
    """Check one module body and convert it into its typed content model.

    Raises:
        MalformedModuleError: Naming the first violated expectation
    """
    if not isinstance(body, dict):
        raise MalformedModuleError(module, "module body must be an object")
    body = t.cast(dict[str, t.Any], body)

    key = ModuleBodyKeys[module]
    items = body.get(key)
    if not isinstance(items, list) or not items:
        raise MalformedModuleError(module, f"{key!r} must be a non-empty array")

    required = ModuleItemFields[module]
    for i, item in enumerate(t.cast(list[t.Any], items)):
        if not isinstance(item, dict):
            raise MalformedModuleError(module, f"{key}[{i}] must be an object")
        if required not in item:
            raise MalformedModuleError(module, f"{key}[{i}] is missing {required!r}")

    try:
        content = ContentModels[module].model_validate(body)
    except p.ValidationError as e:
        raise MalformedModuleError(module, _describe(e)) from e

    if isinstance(content, (ReadingContent, ListeningContent)):
        ids = [q.id for q in content.iter_questions()]
        if ids != list(range(ids[0], ids[0] + len(ids))):
            logger.warning(f"{module.value} question ids are not contiguous", extra={"ids": ids})
    return content


def validate_document(candidate: t.Mapping[str, t.Any], requested: t.Iterable[ExamModule]) -> ExamDocument:
    """Check that every requested module is present and well formed.

    Modules that were not requested are dropped. Nothing is repaired.

    Raises:
        MissingModuleError: If a requested module key is absent
        MalformedModuleError: If a module body does not have its required shape
    """
    wanted = set(requested)
    unrequested = [m.value for m in ExamModule if m not in wanted and m.value in candidate]
    if unrequested:
        logger.info(f"dropping unrequested modules: {', '.join(unrequested)}")

    modules: dict[str, t.Any] = {}
    for module in ExamModule:
        if module not in wanted:
            continue
        body = candidate.get(module.value)
        if body is None:
            raise MissingModuleError(module, "module is missing")
        modules[module.value] = validate_module(module, body)

    return ExamDocument(**modules)

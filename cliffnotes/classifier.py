"""Heuristic file categorisation from path and content markers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Tuple

from .models import Category

_HOOK_NAME = re.compile(r"^use[A-Z]")
_RETURNS_ELEMENT = re.compile(r"return\s*(\(|<[A-Za-z>])")
_EXPORTED_TYPE = re.compile(r"export\s+(interface|type)\s")


@dataclass(frozen=True)
class _Subject:
    """Pre-normalised views of a file shared by every rule."""

    lower_path: str
    filename: str
    lower_content: str


def _path_has(subject: _Subject, *markers: str) -> bool:
    return any(marker in subject.lower_path for marker in markers)


def _content_has(subject: _Subject, *markers: str) -> bool:
    return any(marker in subject.lower_content for marker in markers)


def _is_schema(subject: _Subject) -> bool:
    return _path_has(
        subject, "schema.prisma", "schema.ts", "/schema/", "/models/"
    ) or _content_has(
        subject, "datasource ", "createtable", "pgtable(", "sqlitetable(", "mysqltable("
    )


def _is_router(subject: _Subject) -> bool:
    return _path_has(subject, "/api/", "/routes/", "/router", ".router.") or _content_has(
        subject,
        "createtrpcrouter",
        "router.get(",
        "router.post(",
        "app.get(",
        "app.post(",
        "export async function get(",
        "export async function post(",
        "hono",
    )


def _is_hook(subject: _Subject) -> bool:
    return _path_has(subject, "/hooks/", ".hook.") or bool(_HOOK_NAME.match(subject.filename))


def _is_component(subject: _Subject) -> bool:
    if subject.lower_path.endswith((".tsx", ".jsx")):
        return True
    if _path_has(subject, "/components/", "/pages/", "/app/"):
        return True
    if _content_has(subject, "export default function"):
        return True
    return "export function" in subject.lower_content and bool(
        _RETURNS_ELEMENT.search(subject.lower_content)
    )


def _is_type(subject: _Subject) -> bool:
    if _path_has(subject, "/types/", ".types.", "/interfaces/"):
        return True
    return bool(_EXPORTED_TYPE.search(subject.lower_content)) and "function" not in subject.lower_content


def _is_config(subject: _Subject) -> bool:
    return _path_has(subject, "config", "/env")


def _is_service(subject: _Subject) -> bool:
    return _path_has(subject, "/services/", "/lib/", ".service.") or _content_has(
        subject, "class ", "async function"
    )


def _is_util(subject: _Subject) -> bool:
    return _path_has(subject, "/utils/", "/helpers/", ".util.", ".helper.")


def _is_test(subject: _Subject) -> bool:
    return _path_has(subject, ".test.", ".spec.", "__tests__", "/tests/")


# Evaluation order matters: the first matching rule decides the category.
CATEGORY_RULES: Tuple[Tuple[Category, Callable[[_Subject], bool]], ...] = (
    (Category.SCHEMA, _is_schema),
    (Category.ROUTER, _is_router),
    (Category.HOOK, _is_hook),
    (Category.COMPONENT, _is_component),
    (Category.TYPE, _is_type),
    (Category.CONFIG, _is_config),
    (Category.SERVICE, _is_service),
    (Category.UTIL, _is_util),
    (Category.TEST, _is_test),
)


def classify(path: str, content: str) -> Category:
    """Return the category for a file; falls back to ``Category.OTHER``."""
    normalised = path.replace("\\", "/")
    subject = _Subject(
        # Leading slash lets directory markers match top-level folders too.
        lower_path="/" + normalised.lower().lstrip("/"),
        filename=normalised.rsplit("/", 1)[-1],
        lower_content=content.lower(),
    )
    for category, matches in CATEGORY_RULES:
        if matches(subject):
            return category
    return Category.OTHER


__all__ = ["CATEGORY_RULES", "classify"]

"""Injection helpers shared by the CLI commands and the container."""

from __future__ import annotations

__all__ = [
    "NotReady",
    "Provide",
    "inject",
    "wire_loaded",
]

import sys
import typing as t

import dependency_injector.wiring as wiring
from dependency_injector.containers import Container
from dependency_injector.wiring import Provide

P = t.ParamSpec("P")
TReturn = t.TypeVar("TReturn")


def inject(fn: t.Callable[P, TReturn]) -> t.Callable[P, TReturn]:
    """`wiring.inject` with the decorated signature preserved for type checkers."""
    return wiring.inject(fn)


class NotReady(object):
    """Placeholder for container values only known once `boot()` has run."""

    _instance: t.ClassVar[NotReady | None] = None

    def __new__(cls) -> NotReady:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "<NotReady>"


def wire_loaded(ct: Container, package: str) -> None:
    """Wire every already imported module of `package` into `ct`."""
    if imported := [mod for name, mod in list(sys.modules.items()) if name.startswith(f"{package}.")]:
        ct.wire(modules=imported)

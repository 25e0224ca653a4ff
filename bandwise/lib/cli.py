from __future__ import annotations

import enum
import pathlib
import typing as t

import click
import pydantic as p
from click import *  # noqa: F401, F403 # pyright: ignore [reportWildcardImportFromLibrary]

# `click.*` is re-exported from here so commands import one module for both
# Click and the parameter types below.

TEnum = t.TypeVar("TEnum", bound=enum.Enum)


class EnumType(click.ParamType, t.Generic[TEnum]):
    """A parameter whose value is a member of `enum`, given by its value.

    Matching ignores case, so `-m Reading` and `-m reading` are the same.
    """

    def __init__(self, enum: type[TEnum]):
        self.enum = enum
        self.name = enum.__name__

    @property
    def values(self) -> list[str]:
        return [str(e.value) for e in self.enum]

    def get_metavar(self, param: click.Parameter, *args: t.Any, **kwargs: t.Any) -> str:
        return f"[{'|'.join(self.values)}]"

    def convert(self, value: t.Any, param: click.Parameter | None, ctx: click.Context | None) -> TEnum:
        if isinstance(value, self.enum):
            return value
        for member in self.enum:
            if str(member.value).lower() == str(value).strip().lower():
                return member
        self.fail(f"{value!r} is not one of {', '.join(self.values)}", param, ctx)

    def __repr__(self) -> str:
        return f"EnumType({self.name})"


class URIParamType(click.ParamType):
    """A URI, or a filesystem path promoted to a `file://` URI.

    Arguments:

        - `file_ok`: (default `True`) accept `file://` URIs and bare paths
        - `dir_ok`: (default `False`) accept paths naming a directory
        - `file_exists`: (default `True`) require `file://` paths to exist
    """

    def __init__(self, file_ok: bool = True, dir_ok: bool = False, file_exists: bool = True):
        self.file_ok = file_ok
        self.dir_ok = dir_ok
        self.file_exists = file_exists
        self.name = "URI OR PATH" if file_ok else "URI"

    def convert(
        self, value: str | pathlib.Path | p.AnyUrl | None, param: click.Parameter | None, ctx: click.Context | None
    ) -> p.AnyUrl | None:
        if value is None or isinstance(value, p.AnyUrl):
            return value

        if isinstance(value, str) and "://" in value:
            url = p.AnyUrl(value)
            if url.scheme != "file":
                return url
            path = pathlib.Path(url.path or "")
        else:
            path = pathlib.Path(value)

        if not self.file_ok:
            self.fail("file paths are not accepted", param, ctx)
        path = path.absolute()
        if self.file_exists and not path.exists():
            self.fail(f"{value}: no such file or directory", param, ctx)
        if path.is_dir() and not self.dir_ok:
            self.fail(f"{value}: is a directory", param, ctx)
        return p.FileUrl(f"file://{path}")

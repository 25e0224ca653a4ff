"""JSON encoding for prompt payloads and log fields.

Values the stdlib encoder rejects are converted by type: pydantic models dump
in JSON mode by alias, enums give their value, decimals become numbers, paths
become strings, sets become lists and secrets are masked.
"""

from __future__ import annotations

import decimal
import enum
import functools
import json as pyjson
import pathlib
import typing as t

import pydantic as p

JSONPrimitive = str | int | float | bool | None
JSONValue = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]

Encoder = t.Callable[[t.Any], JSONValue]

SecretMask = "**********"


def encode_model(obj: p.BaseModel) -> JSONValue:
    return obj.model_dump(mode="json", by_alias=True)


def encode_secret(obj: t.Any) -> str:
    return SecretMask


def encode_enum(obj: enum.Enum) -> JSONValue:
    return obj.value


def encode_decimal(obj: decimal.Decimal) -> int | float:
    # band table thresholds are usually whole percentages
    if obj == obj.to_integral_value():
        return int(obj)
    return float(obj)


def encode_path(obj: pathlib.PurePath) -> str:
    return str(obj)


def encode_set(obj: set[t.Any] | frozenset[t.Any]) -> list[t.Any]:
    return list(obj)


@functools.cache
def _encoders() -> tuple[tuple[type | tuple[type, ...], Encoder], ...]:
    # checked in order
    return (
        (p.BaseModel, encode_model),
        ((p.SecretStr, p.SecretBytes, p.Secret), encode_secret),
        (enum.Enum, encode_enum),
        (decimal.Decimal, encode_decimal),
        (pathlib.PurePath, encode_path),
        ((set, frozenset), encode_set),
    )


class JSONEncoder(pyjson.JSONEncoder):
    """Stdlib-compatible encoder for the project's value types."""

    def get_encoders(self) -> t.Sequence[tuple[type | tuple[type, ...], Encoder]]:
        return _encoders()

    def default(self, o: t.Any) -> JSONValue:
        for types, encoder in self.get_encoders():
            if isinstance(o, types):
                return encoder(o)
        return super().default(o)


def dumps(obj: t.Any, *, cls: type[pyjson.JSONEncoder] = JSONEncoder, **kwargs: t.Any) -> str:
    """`json.dumps` with `JSONEncoder` as the default encoder class."""
    return pyjson.dumps(obj, cls=cls, **kwargs)

import typing as t

from bandwise.lib.json import JSONEncoder as BaseJSONEncoder
from bandwise.lib.json import JSONValue

# generated text attached to a record can run to many kilobytes
MaxStringLength = 400


def shorten(value: t.Any, limit: int = MaxStringLength) -> t.Any:
    """Truncate long strings anywhere inside a log payload."""
    if isinstance(value, str) and len(value) > limit:
        return f"{value[:limit]}... [{len(value)} chars]"
    if isinstance(value, dict):
        return {k: shorten(v, limit) for k, v in t.cast(dict[t.Any, t.Any], value).items()}
    if isinstance(value, (list, tuple)):
        return [shorten(v, limit) for v in t.cast(t.Sequence[t.Any], value)]
    return value


class JSONEncoder(BaseJSONEncoder):
    """Encoder for log payloads: anything it cannot convert is shown by its repr."""

    def default(self, o: t.Any) -> JSONValue:
        try:
            return super().default(o)
        except TypeError:
            return repr(o)

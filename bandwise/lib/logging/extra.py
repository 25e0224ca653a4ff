import json
import logging
import string
import sys
import textwrap
import typing as t

import pygments
from pygments.formatters import Terminal256Formatter
from pygments.lexers.data import JsonLexer  # pyright: ignore [reportMissingTypeStubs]
from pygments.style import Style

from .json import JSONEncoder, shorten
from .style import LogStyle

# attributes of every record, plus those set by formatters
RecordAttributes = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "asctime",
    "exception",
    "log_color",
    "message",
}


class ExtraFormatter(logging.Formatter):
    """Formats with `base`, then appends the record's `extra=` fields as JSON.

    Continuation lines of a multi-line message are indented to the column the
    message starts at. The JSON is highlighted only when `stream` is a terminal
    and the base formatter has color enabled.
    """

    def __init__(
        self,
        base: type[logging.Formatter],
        format: str | None,
        datefmt: str | None = None,
        indent: bool = True,
        pyg_style: type[Style] = LogStyle,
        style: t.Literal["%", "{", "$"] = "%",
        validate: bool = True,
        stream: t.IO[str] | None = None,
        *,
        defaults: t.Any = None,
        **kwargs: t.Any,
    ):
        super().__init__(format, datefmt=datefmt, style=style, validate=validate, defaults=defaults)
        # remaining kwargs (log_colors, no_color, ...) belong to the base formatter
        self.base = base(format, datefmt=datefmt, style=style, validate=validate, defaults=defaults, **kwargs)
        self.pyg_style = pyg_style
        self.stream = stream if stream is not None else sys.stderr
        self.indent = indent

    def format(self, record: logging.LogRecord) -> str:
        if "\n" in record.getMessage():
            self.align_continuation(record)
        message = self.base.format(record)

        extra = self.extra_fields(record)
        if not extra:
            return message
        return f"{message} {self.render(extra)}"

    @staticmethod
    def extra_fields(record: logging.LogRecord) -> dict[str, t.Any]:
        return {k: v for k, v in vars(record).items() if k not in RecordAttributes}

    def align_continuation(self, record: logging.LogRecord) -> None:
        msg = record.getMessage()
        formatted = self.base.format(record)
        column = len([c for c in formatted[: formatted.find(msg)] if c in string.printable])

        first, *rest = msg.splitlines()
        record.msg = f"{first}\n" + textwrap.indent("\n".join(rest), " " * column)
        record.args = None

    def render(self, extra: dict[str, t.Any]) -> str:
        js = json.dumps(shorten(extra), sort_keys=True, indent=(4 if self.indent else None), cls=JSONEncoder)
        if getattr(self.base, "no_color", False) or not self.isatty():
            return js
        formatter = Terminal256Formatter(style=self.pyg_style)
        return pygments.highlight(js, JsonLexer(), formatter).strip()  # pyright: ignore [reportUnknownMemberType]

    def isatty(self) -> bool:
        isatty = getattr(self.stream, "isatty", None)
        return bool(isatty and isatty())

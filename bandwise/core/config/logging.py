"""Schema of the `logging` settings, dumped by alias into `logging.config.dictConfig`."""

import typing as t

import pydantic as p

from .base import BaseSettings

LogLevel = t.Literal["NOTSET", "TRACE", "DEBUG", "INFO", "WARNING", "WARN", "ERROR", "FATAL", "CRITICAL"]


class ExtraFormatterSettings(BaseSettings):
    """Console formatter: `base` (an `ext://` formatter class) plus `extra=` fields as JSON."""

    factory: t.Literal["bandwise.lib.logging.ExtraFormatter"] = p.Field(alias="()")
    base: str
    format: str | None = None
    datefmt: str | None = None
    indent: bool = True
    # passed through to a colorlog base formatter
    log_colors: dict[str, str] = {}
    no_color: bool = False
    # the handler's stream, which decides whether the JSON is highlighted
    stream: str | None = None


class StreamHandlerSettings(BaseSettings):
    handler: t.Literal["colorlog.StreamHandler", "logging.StreamHandler"] = p.Field(alias="class")
    formatter: str
    level: LogLevel = "NOTSET"
    stream: p.AnyUrl

    @p.field_serializer("stream")
    def serialize_stream(self, v: p.AnyUrl) -> str:
        return str(v)


class LoggerSettings(BaseSettings):
    level: LogLevel = "NOTSET"
    propagate: bool = True
    handlers: list[str] = []


class RootLoggerSettings(BaseSettings):
    handlers: list[str]
    level: LogLevel = "WARNING"


class LoggingSettings(BaseSettings):
    version: t.Literal[1]
    disable_existing_loggers: bool = False
    formatters: dict[str, ExtraFormatterSettings]
    handlers: dict[str, StreamHandlerSettings]
    root: RootLoggerSettings
    loggers: dict[str, LoggerSettings] = {}

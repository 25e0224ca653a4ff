"""Logging setup: a TRACE level below DEBUG, and the resource that applies the
`logging` settings for the lifetime of the container."""

import inspect
import logging
import logging.config
import typing as t

TRACE = 5


class TraceLogLevelLogger(logging.Logger):
    def trace(self, message: str, *args: t.Any, **kwargs: t.Any):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, message, args, **kwargs)


def install_trace_level() -> None:
    """Register TRACE and have loggers created from now on support `.trace()`."""
    logging.setLoggerClass(TraceLogLevelLogger)
    logging.addLevelName(TRACE, "TRACE")


class LoggingProvider(object):
    Function: t.Final[t.Literal["fn"]] = "fn"
    Module: t.Final[t.Literal["mod"]] = "mod"

    def __init__(self, config: dict[str, t.Any], debug: bool):
        install_trace_level()
        logging.config.dictConfig(config)
        # route warnings.warn() through logging while debugging
        self.capture_warnings(debug)

    @classmethod
    def get_logger(
        cls, scope: t.Literal["mod", "fn"] = "mod", name: str | None = None, n_frames: int = 1
    ) -> TraceLogLevelLogger:
        """Logger named `name`, else after the calling module or function."""
        if not name:
            caller = inspect.stack()[n_frames]
            name = caller.frame.f_globals["__name__"]
            if scope == cls.Function:
                name = f"{name}.{caller.function}"
        return t.cast(TraceLogLevelLogger, logging.getLogger(name))

    @staticmethod
    def capture_warnings(capture: bool):
        logging.captureWarnings(capture)

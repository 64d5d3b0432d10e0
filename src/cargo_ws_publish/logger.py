"""
Scoped structlog logger used across the tool.

Log records go to stderr so they never interleave with the rich
console output on stdout.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor


class ScopedLogger:
    """
    A structlog-backed logger with its own context and processor chain.

    Renders human-readable console lines by default, or one JSON object per
    line when ``json_output`` is set.
    """

    def __init__(
        self,
        name: str,
        level: str = "INFO",
        context: dict[str, Any] | None = None,
        json_output: bool = False,
        stream=None,
    ):
        """
        Initialize a scoped logger.

        Args:
            name: Logger name/scope identifier
            level: Minimum level to emit (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            context: Initial context dictionary
            json_output: Render records as JSON instead of console lines
            stream: Output stream (default: sys.stderr)
        """
        self.name = name
        self.level = level.upper()
        self.json_output = json_output
        self.stream = stream or sys.stderr
        self._context = dict(context or {})
        self._context["logger"] = name

        self._logger = structlog.wrap_logger(
            structlog.PrintLogger(file=self.stream),
            processors=self._get_default_processors(),
            wrapper_class=structlog.make_filtering_bound_logger(
                getattr(logging, self.level, logging.INFO)
            ),
            cache_logger_on_first_use=True,
        ).bind(**self._context)

    def _get_default_processors(self) -> list[Processor]:
        processors: list[Processor] = [
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
        ]

        if self.json_output:
            processors.append(structlog.processors.format_exc_info)
            processors.append(structlog.processors.JSONRenderer())
        else:
            colors = hasattr(self.stream, "isatty") and self.stream.isatty()
            processors.append(structlog.dev.ConsoleRenderer(colors=colors))

        return processors

    def _spawn(self, context: dict[str, Any]) -> "ScopedLogger":
        return self.__class__(
            name=self.name,
            level=self.level,
            context=context,
            json_output=self.json_output,
            stream=self.stream,
        )

    def bind(self, **kwargs: Any) -> "ScopedLogger":
        """
        Bind additional context to the logger.

        Returns:
            New ScopedLogger instance with bound context
        """
        return self._spawn({**self._context, **kwargs})

    def debug(self, event: str, **kwargs: Any) -> None:
        self._logger.debug(event, **kwargs)

    def info(self, event: str, **kwargs: Any) -> None:
        self._logger.info(event, **kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self._logger.warning(event, **kwargs)

    def error(self, event: str, **kwargs: Any) -> None:
        self._logger.error(event, **kwargs)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, context={self._context!r})"

"""
Structured logging for sanction.

Loggers are structlog loggers wrapped around stdlib loggers under the
"sanction" namespace, so an embedding application controls verbosity with
ordinary logging configuration. Nothing is configured on import; the CLI
(or an application) calls configure_logging() once.
"""

import logging
import sys

import structlog

_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.format_exc_info,
    structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
]


def configure_logging(log_level: str = "info", json_output: bool = False) -> None:
    """Route sanction log events to stderr with a console or JSON renderer."""
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger("sanction")
    root.handlers = [handler]
    root.setLevel(getattr(logging, log_level.upper()))
    root.propagate = False


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )

"""Logging for arch-decisions runs.

Every module logs through structlog with snake_case event names
(``gathering_started``, ``declaration_skipped``, ``document_written``).
Events go to stderr, leaving stdout to the run summary, which may be JSON.

By default only errors are shown. Recoverable problems reach the user as
diagnostics in the summary instead. ``--verbose`` lowers the threshold to
DEBUG and shows every file and declaration as it is processed.
"""

import logging
import sys

import structlog

__all__ = ["configure_logging", "get_logger"]


def _processors(json_output: bool) -> list[structlog.types.Processor]:
    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def configure_logging(
    verbose: bool = False,
    json_output: bool = False,
    level: int | None = None,
) -> None:
    """Route structlog events to stderr at the level a run asks for.

    Args:
        verbose: Log every discovery step (DEBUG).
        json_output: Render events as JSON lines instead of console text.
        level: Explicit threshold, overriding ``verbose``. Defaults to DEBUG
            when verbose and ERROR otherwise.

    """
    if level is None:
        level = logging.DEBUG if verbose else logging.ERROR

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)

    structlog.configure(
        processors=_processors(json_output),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return the structlog logger for a module.

    Example:
        logger = get_logger(__name__)
        logger.warning("declaration_skipped", declaration="app.decisions.Needs")

    """
    return structlog.get_logger(name)

"""Logging for the ``decimatrix`` command.

The library modules log through :mod:`logging` and stay silent unless a handler
is installed. :func:`configure_logging` installs one on the ``decimatrix`` logger
that renders records with structlog, either for a terminal or as JSON lines.
Loggers of other packages are left alone.
"""

import logging
import sys

import structlog

LOGGER_NAME = "decimatrix"


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Send records of the ``decimatrix`` loggers to stderr.

    Calling it again replaces the handler installed by the previous call.

    Args:
        verbose: Show DEBUG records, such as matrix shapes and determinants.
        log_json: Write one JSON object per record instead of console lines.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_json:
        renderers: list[structlog.types.Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *renderers,
            ],
        )
    )

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers = [handler]
    logger.propagate = False
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

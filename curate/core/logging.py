"""Logs structurés (structlog).

`setup_logging` est appelé une fois par `create_app`. Le contexte lié via
`structlog.contextvars` (ex. `request_id` posé par le middleware) est ajouté à chaque ligne;
les loggers stdlib (uvicorn, SQLAlchemy, passerelle d'erreurs) écrivent sur la même sortie.
"""

import logging
import sys

import structlog


def setup_logging(debug: bool = True) -> None:
    level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(stream=sys.stdout, level=level, format="%(levelname)s %(name)s: %(message)s")

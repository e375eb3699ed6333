"""Logging setup for the ghstats CLI: structlog events rendered through stdlib."""

from __future__ import annotations

import logging
import logging.config
import os
import sys

import structlog


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def setup_logging(verbose: bool = False) -> None:
    """Route structlog and stdlib records to stderr.

    ``GHSTATS_LOG_LEVEL`` overrides the level of the ``ghstats`` loggers
    (WARNING, or DEBUG with *verbose*). ``GHSTATS_LOG_FORMAT`` picks
    ``console`` or ``json``. With *verbose* the httpx request lines are shown
    too; stdout stays reserved for the report either way.
    """
    level = os.environ.get("GHSTATS_LOG_LEVEL", "DEBUG" if verbose else "WARNING").upper()
    log_format = os.environ.get("GHSTATS_LOG_FORMAT", "console").lower()

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "ghstats": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": pre_chain,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(log_format),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "ghstats",
                },
            },
            "root": {"handlers": ["stderr"], "level": "WARNING"},
            "loggers": {
                "ghstats": {"level": level},
                # one INFO line per request
                "httpx": {"level": "INFO" if verbose else "WARNING"},
                # connection-pool chatter only
                "httpcore": {"level": "WARNING"},
            },
        }
    )

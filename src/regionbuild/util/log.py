# src/regionbuild/util/log.py: Structured JSON logger.
# This module provides a centralized logging setup that outputs structured
# JSON logs through python-json-logger. A context variable carries the head
# being decided, so every decision-audit line can be traced back to its branch
# or pull request.

import contextvars
import logging
import sys
from logging.config import dictConfig

from pythonjsonlogger.json import JsonFormatter

head_context = contextvars.ContextVar('head_context', default=None)


class HeadContextFilter(logging.Filter):
    """Stamps the current head name onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.head = head_context.get()
        return True


class HeadJsonFormatter(JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["head"] = getattr(record, "head", head_context.get())


def get_logger(name):
    logger = logging.getLogger(name)
    if not logger.filters:
        logger.addFilter(HeadContextFilter())
    return logger


def setup_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Configure the 'regionbuild' logger for CLI use."""
    level = level.upper()
    if json_format:
        formatter = {
            '()': HeadJsonFormatter,
            'format': '%(asctime)s %(name)s %(levelname)s %(message)s',
        }
    else:
        formatter = {
            'format': '%(asctime)s - %(name)s - %(levelname)s - [%(head)s] %(message)s',
        }
    dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'filters': {
            'head': {'()': HeadContextFilter},
        },
        'formatters': {'default': formatter},
        'handlers': {
            'stderr': {
                'class': 'logging.StreamHandler',
                'formatter': 'default',
                'filters': ['head'],
                'stream': sys.stderr,
            },
        },
        'loggers': {
            'regionbuild': {
                'handlers': ['stderr'],
                'level': level,
                'propagate': False,
            },
        },
    })

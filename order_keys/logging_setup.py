"""Central logging configuration for the order-keys service.

Applies a root stdout handler at ``logging.level`` from ``AppConfig`` (env
``LOG_LEVEL``) so the dotted allocator and planner events, such as
``rank_allocator.target.fallback`` and ``reorder.place.normalize``, reach
stdout without per-module setup. The ``order_keys`` logger is pinned to the
configured level even when a host (test runner, reloader) owns the root
handlers; uvicorn loggers stay visible when the ``serve`` extra is used.
"""
from __future__ import annotations
import copy
import logging
from logging.config import dictConfig

PACKAGE_LOGGER = "order_keys"

_DICT_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s %(levelname)s:%(name)s:%(message)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "level": "INFO",
            "formatter": "default",
            "stream": "ext://sys.stdout",
        }
    },
    "root": {"level": "INFO", "handlers": ["console"]},
    "loggers": {
        PACKAGE_LOGGER: {"level": "INFO", "propagate": True},
        "uvicorn": {"level": "INFO", "handlers": ["console"], "propagate": False},
        "uvicorn.error": {"level": "INFO", "handlers": ["console"], "propagate": False},
        "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
    },
}


def configure_logging(level: str = "INFO") -> None:
    """Configure service logging once at ``level``.

    If the root logger already has handlers, only the levels of the root and
    ``order_keys`` loggers are applied so reloaders and test runners do not
    get duplicate output.
    """
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
        logging.getLogger(PACKAGE_LOGGER).setLevel(level)
        return
    config = copy.deepcopy(_DICT_CONFIG)
    config["handlers"]["console"]["level"] = level
    config["root"]["level"] = level
    config["loggers"][PACKAGE_LOGGER]["level"] = level
    dictConfig(config)

"""
Logging configuration and helpers that keep tokens out of the logs.

Session and credential tokens are only ever logged as an 8-character prefix.
"""

import logging
import re
from typing import Any, Dict

VISIBLE_PREFIX = 8
_TOKEN_QUERY = re.compile(r"(token=)([^&\s]+)")


def mask_token(token: str) -> str:
    """Truncate a token to its first characters."""
    return f"{token[:VISIBLE_PREFIX]}..."


def mask_key(key: str) -> str:
    """Mask the token part of a namespaced store key (login:token:<t>, token:<t>)."""
    namespace, sep, ident = key.rpartition(":")
    if not sep or len(ident) <= VISIBLE_PREFIX:
        return key
    return f"{namespace}:{mask_token(ident)}"


def mask_path(path: str) -> str:
    """Mask long path segments and token query values of a request path."""
    path, sep, query = path.partition("?")
    path = "/".join(
        mask_token(segment) if len(segment) > VISIBLE_PREFIX else segment
        for segment in path.split("/")
    )
    query = _TOKEN_QUERY.sub(lambda m: m.group(1) + mask_token(m.group(2)), query)
    return f"{path}{sep}{query}"


class AccessLogFilter(logging.Filter):
    """Drop health check lines and mask tokens in uvicorn access logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access" or not isinstance(record.args, tuple):
            return True

        # uvicorn passes (client_addr, method, full_path, http_version, status_code)
        if len(record.args) >= 3 and isinstance(record.args[2], str):
            method, path = record.args[1], record.args[2]
            if method == "GET" and path.startswith("/health"):
                return False
            record.args = record.args[:2] + (mask_path(path),) + record.args[3:]
        return True


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration for credgate and uvicorn."""
    level = level.upper()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "access_filter": {"()": AccessLogFilter},
        },
        "formatters": {
            "default": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
            "access": {"format": "%(message)s"},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["access_filter"],
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn.access": {"handlers": ["access"], "level": level, "propagate": False},
            "credgate": {"handlers": ["default"], "level": level, "propagate": False},
        },
        "root": {"level": level, "handlers": ["default"]},
    }

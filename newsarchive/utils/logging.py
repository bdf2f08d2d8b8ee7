"""Logging configuration utilities.

One call to ``configure_logging`` at process start sets up the root logger;
every module then asks for a named child of ``newsarchive`` via
``get_logger``. Settings resolve from arguments first, then environment.
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Literal, Optional

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_OUTPUT = os.environ.get("LOG_OUTPUT", "stdout").lower()
LOG_FILE_PATH = os.environ.get("LOG_FILE_PATH", "logs/newsarchive.log")
LOG_FORMAT = os.environ.get("LOG_FORMAT", "text").lower()

ROOT_LOGGER_NAME = "newsarchive"

LogOutput = Literal["stdout", "file", "both"]
LogFormat = Literal["text", "json"]

_TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(filename)s:%(lineno)d | %(message)s"
_JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", '
    '"file": "%(filename)s:%(lineno)d", "message": "%(message)s"}'
)

# Chatty libraries that log every connection at DEBUG.
_NOISY_LOGGERS = ("urllib3", "charset_normalizer")


def is_kubernetes_env() -> bool:
    """Check if the application is running in a Kubernetes environment."""
    return bool(
        os.environ.get("K8S_CLUSTER")
        or os.environ.get("KUBERNETES_SERVICE_HOST")
        or os.path.exists("/var/run/secrets/kubernetes.io/serviceaccount")
    )


def configure_logging(
    level: str | int | None = None,
    output: LogOutput | None = None,
    file_path: str | None = None,
    log_format: LogFormat | None = None,
) -> None:
    """Configure application logging.

    Parameters
    ----------
    level:
        Logging level as a string (e.g., "INFO") or numeric value.
    output:
        Logging output destination: "stdout", "file", or "both". Inside
        Kubernetes the default is stdout unless ``LOG_OUTPUT`` is set.
    file_path:
        Path to the rotating log file if output is "file" or "both".
    log_format:
        Logging format: "text" or "json".
    """
    if level is None:
        level = os.environ.get("LOG_LEVEL", LOG_LEVEL).upper()
    if log_format is None:
        log_format = (os.environ.get("LOG_FORMAT") or LOG_FORMAT).lower()
    if output is None:
        if is_kubernetes_env() and "LOG_OUTPUT" not in os.environ:
            output = "stdout"
        else:
            output = (os.environ.get("LOG_OUTPUT") or LOG_OUTPUT).lower()
    if file_path is None:
        file_path = os.environ.get("LOG_FILE_PATH") or LOG_FILE_PATH

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(_TEXT_FORMAT if log_format == "text" else _JSON_FORMAT)

    if output in ("stdout", "both"):
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setFormatter(formatter)
        root_logger.addHandler(stdout_handler)

    if output in ("file", "both"):
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(file_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root_logger.level))


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger under the ``newsarchive`` namespace."""
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

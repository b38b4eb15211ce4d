"""Налаштування логування."""

from __future__ import annotations

import logging
import os
import sys

# Third-party loggers that are too chatty at INFO for a CLI session.
_NOISY_LOGGERS = ("urllib3", "watchdog", "streamlit")


def setup_logging(level: str | None = None) -> None:
    """Налаштовує стандартний логер з лаконічним форматом.

    Args:
        level: Рівень логування (DEBUG, INFO, WARNING, ERROR). Якщо не
            вказано — береться з ``SENSORSEL_LOG_LEVEL`` або INFO.
    """
    name = (level or os.environ.get("SENSORSEL_LOG_LEVEL") or "INFO").upper()
    numeric = getattr(logging, name, logging.INFO)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
    for noisy in _NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(max(numeric, logging.WARNING))

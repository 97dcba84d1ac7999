from __future__ import annotations
"""server/gitlab_notifier/core/logging.py
~~~~~~~~~~~~~~~~~~~~~~~~
Configuration logs.
"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: int | str = logging.INFO) -> None:
    if isinstance(level, str):
        level = logging.getLevelName(level.strip().upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)

"""Настройка логирования."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "INFO"):
    """Настроить корневой логгер приложения."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, force=True)

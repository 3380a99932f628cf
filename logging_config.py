# logging_config.py
"""
Process-wide logging for the catalog.

Application modules log through ``get_logger(__name__)``. SQL statement
echo from SQLAlchemy is off unless ``LOG_SQL`` is set, and urllib3's
per-request chatter from the Open Library client is kept at WARNING.
"""
import logging

from config import load_config

LOG_FORMAT = "%(asctime)s [%(threadName)s] %(name)s %(levelname)s: %(message)s"


def configure_logging(config) -> int:
    """
    Apply the root level, format and per-library levels from ``config``.

    Returns the root level that was set.
    """
    level = logging.DEBUG if config.get("DEBUG_MODE") else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)

    sql_level = logging.INFO if config.get("LOG_SQL") else logging.WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(sql_level)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return level


configure_logging(load_config())


def get_logger(name: str) -> logging.Logger:
    """
    Returns a logger with the given name.
    """
    return logging.getLogger(name)

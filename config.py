# config.py
import os
from dotenv import load_dotenv

# Load environment variables from .env file.
load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() == "true"


def load_config():
    """
    Loads configuration from environment variables and returns a dictionary.

    Keys map directly onto Flask's ``app.config``.
    """
    default_db = f"sqlite:///{os.path.join(basedir, 'data', 'library.sqlite')}"

    try:
        query_workers = int(os.getenv("CATALOG_QUERY_WORKERS", 8))
    except ValueError:
        query_workers = 8

    config = {
        # General Settings
        "DEBUG_MODE": _env_flag("DEBUG_MODE", "False"),
        "LOG_SQL": _env_flag("CATALOG_LOG_SQL", "False"),
        "SECRET_KEY": os.getenv("CATALOG_SECRET_KEY", "dev-secret-key"),

        # Database
        "SQLALCHEMY_DATABASE_URI": os.getenv("CATALOG_DATABASE_URI", default_db),
        "SQLALCHEMY_TRACK_MODIFICATIONS": False,

        # Concurrent reads per page
        "CATALOG_QUERY_WORKERS": max(1, query_workers),

        # Open Library summary lookup
        "OPENLIBRARY_LOOKUP": _env_flag("OPENLIBRARY_LOOKUP", "True"),
        "OPENLIBRARY_TIMEOUT": float(os.getenv("OPENLIBRARY_TIMEOUT", 8)),
    }
    return config


if __name__ == "__main__":
    # For testing purposes, print the configuration
    from pprint import pprint

    pprint(load_config())

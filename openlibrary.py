"""
Book summary lookup on Open Library, used to prefill the book form.
"""

import requests

from logging_config import get_logger

logger = get_logger(__name__)

OPENLIBRARY_URL = "https://openlibrary.org"

# Reuse one HTTP session for better performance and to set consistent headers.
SESSION = requests.Session()
SESSION.headers.update({
    "User-Agent": "LocalLibrary/1.0 (catalog)",
    "Accept": "application/json",
})


def normalize_isbn(isbn: str) -> str:
    """
    Normalize ISBN input by removing hyphens and spaces.
    """
    return (isbn or "").replace("-", "").replace(" ", "").strip()


def extract_summary(data: dict) -> str | None:
    """
    Extracts a book summary from an Open Library JSON object.

    The "description" field comes either as a plain string or as a dict with
    a "value" key. Both are handled; blank descriptions count as missing.
    """
    desc = data.get("description")

    if isinstance(desc, str):
        desc = desc.strip()
        return desc if desc else None

    if isinstance(desc, dict):
        val = (desc.get("value") or "").strip()
        return val if val else None

    return None


def _get_json(url: str, timeout: float) -> dict | None:
    try:
        r = SESSION.get(url, timeout=timeout)
        if r.status_code != 200:
            logger.debug("Open Library returned %s for %s", r.status_code, url)
            return None
        return r.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Open Library lookup failed for %s: %s", url, e)
        return None


def fetch_summary_by_isbn(isbn: str, timeout: float = 8) -> str | None:
    """
    Fetch a book summary from Open Library using ISBN.

    Strategy:
    1) Try edition endpoint: (/isbn/{isbn}.json)
    2) If missing, fallback to the linked Work: /works/{id}.json
    """
    isbn = normalize_isbn(isbn)
    if not isbn:
        return None

    # --- 1) Edition ---
    edition = _get_json(f"{OPENLIBRARY_URL}/isbn/{isbn}.json", timeout)
    if edition is None:
        return None

    summary = extract_summary(edition)
    if summary:
        return summary

    # --- 2) Work fallback ---
    works = edition.get("works") or []
    if works and isinstance(works, list) and isinstance(works[0], dict) and "key" in works[0]:
        work = _get_json(f"{OPENLIBRARY_URL}{works[0]['key']}.json", timeout)
        if work is None:
            return None
        return extract_summary(work)

    return None

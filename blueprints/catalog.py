"""
Catalog home page: record counts for every collection.
"""

from functools import partial

from flask import Blueprint, render_template
from sqlalchemy.exc import SQLAlchemyError

import store
from aggregate import gather
from data_models import Author, Book, BookInstance, Genre
from logging_config import get_logger

logger = get_logger(__name__)

catalog_bp = Blueprint("catalog", __name__, url_prefix="/catalog")


@catalog_bp.route("/")
def index():
    """
    Home page. A failed count is shown on the page instead of an error page.
    """
    data = None
    error = None
    try:
        data = gather({
            "book_count": partial(store.count, Book),
            "book_instance_count": partial(store.count, BookInstance),
            "book_instance_available_count": partial(
                store.count, BookInstance, BookInstance.status == "Available"
            ),
            "author_count": partial(store.count, Author),
            "genre_count": partial(store.count, Genre),
        })
    except SQLAlchemyError as e:
        logger.exception("Could not count catalog records")
        error = e

    return render_template("index.html", title="Local Library Home", data=data, error=error)

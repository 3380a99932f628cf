"""
Genre pages: list, detail, create, delete, update.

Genre names are kept unique by looking the name up before writing. Two
identical submissions racing each other can both miss the lookup and both
insert; nothing below the view prevents it.
"""

from functools import partial

from flask import Blueprint, abort, redirect, render_template, request, url_for

import store
from aggregate import gather
from data_models import Book, Genre
from forms import GenreForm, Violation, validate_form
from logging_config import get_logger

logger = get_logger(__name__)

genre_bp = Blueprint("genre", __name__, url_prefix="/catalog")


def _genre_with_books(genre_id):
    return gather({
        "genre": partial(store.find_by_id, Genre, genre_id),
        "genre_books": partial(
            store.find, Book, Book.genre.any(Genre.id == genre_id), order_by=(Book.title.asc(),)
        ),
    })


@genre_bp.route("/genres")
def genre_list():
    genres = store.find_all(Genre, Genre.name.asc())
    return render_template("genre_list.html", title="Genre List", genre_list=genres)


@genre_bp.route("/genre/<int:genre_id>")
def genre_detail(genre_id):
    results = _genre_with_books(genre_id)

    if results["genre"] is None:
        logger.debug("Genre %s not found", genre_id)
        abort(404, description="Genre not found")

    return render_template(
        "genre_detail.html",
        title="Genre Detail",
        genre=results["genre"],
        genre_books=results["genre_books"],
    )


@genre_bp.route("/genre/create", methods=["GET", "POST"])
def genre_create():
    """
    Create a genre, or redirect to the existing one with the same name.
    """
    if request.method == "GET":
        return render_template("genre_form.html", title="Create Genre", genre=None, errors=[])

    values, violations = validate_form(GenreForm, request.form)
    if violations:
        return render_template("genre_form.html", title="Create Genre", genre=values, errors=violations)

    existing = store.find_one(Genre, Genre.name == values["name"])
    if existing is not None:
        logger.info("Genre '%s' already exists (id=%s)", existing.name, existing.id)
        return redirect(existing.url)

    genre = store.insert(Genre(name=values["name"]))
    logger.info("Created genre '%s' (id=%s)", genre.name, genre.id)
    return redirect(genre.url)


@genre_bp.route("/genre/<int:genre_id>/delete", methods=["GET", "POST"])
def genre_delete(genre_id):
    results = _genre_with_books(genre_id)
    genre = results["genre"]
    genre_books = results["genre_books"]

    if genre is None:
        return redirect(url_for("genre.genre_list"))

    if request.method == "POST" and not genre_books:
        store.delete_by_id(Genre, genre_id)
        logger.info("Deleted genre '%s' (id=%s)", genre.name, genre_id)
        return redirect(url_for("genre.genre_list"))

    if request.method == "POST":
        logger.info("Refused to delete genre %s: %d book(s) reference it", genre_id, len(genre_books))

    return render_template(
        "genre_delete.html",
        title="Delete Genre",
        genre=genre,
        genre_books=genre_books,
    )


@genre_bp.route("/genre/<int:genre_id>/update", methods=["GET", "POST"])
def genre_update(genre_id):
    """
    Rename a genre. Renaming onto another genre's name is refused.
    """
    genre = store.find_by_id(Genre, genre_id)
    if genre is None:
        abort(404, description="Genre not found")

    if request.method == "GET":
        return render_template("genre_form.html", title="Update Genre", genre=genre, errors=[])

    values, violations = validate_form(GenreForm, request.form)
    if not violations:
        clash = store.find_one(Genre, Genre.name == values["name"], Genre.id != genre_id)
        if clash is not None:
            violations = [Violation("name", f"Genre '{clash.name}' already exists.")]

    if violations:
        return render_template("genre_form.html", title="Update Genre", genre=values, errors=violations)

    genre = store.update_by_id(Genre, genre_id, {"name": values["name"]})
    if genre is None:
        abort(404, description="Genre not found")

    logger.info("Updated genre '%s' (id=%s)", genre.name, genre_id)
    return redirect(genre.url)

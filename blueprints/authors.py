"""
Author pages: list, detail, create, delete, update.
"""

from functools import partial

from flask import Blueprint, abort, redirect, render_template, request, url_for

import store
from aggregate import gather
from data_models import Author, Book
from forms import AuthorForm, validate_form
from logging_config import get_logger

logger = get_logger(__name__)

author_bp = Blueprint("author", __name__, url_prefix="/catalog")


def _author_with_books(author_id):
    return gather({
        "author": partial(store.find_by_id, Author, author_id),
        "author_books": partial(
            store.find, Book, Book.author_id == author_id, order_by=(Book.title.asc(),)
        ),
    })


@author_bp.route("/authors")
def author_list():
    authors = store.find_all(Author, Author.family_name.asc())
    return render_template("author_list.html", title="Author List", author_list=authors)


@author_bp.route("/author/<int:author_id>")
def author_detail(author_id):
    results = _author_with_books(author_id)

    if results["author"] is None:
        logger.debug("Author %s not found", author_id)
        abort(404, description="Author not found")

    return render_template(
        "author_detail.html",
        title="Author Detail",
        author=results["author"],
        author_books=results["author_books"],
    )


@author_bp.route("/author/create", methods=["GET", "POST"])
def author_create():
    if request.method == "GET":
        return render_template("author_form.html", title="Create Author", author=None, errors=[])

    values, violations = validate_form(AuthorForm, request.form)
    if violations:
        return render_template("author_form.html", title="Create Author", author=values, errors=violations)

    author = store.insert(Author(**values))
    logger.info("Created author '%s' (id=%s)", author.name, author.id)
    return redirect(author.url)


@author_bp.route("/author/<int:author_id>/delete", methods=["GET", "POST"])
def author_delete(author_id):
    """
    GET shows the confirmation page; POST deletes unless books still
    reference the author. A missing author just goes back to the list.
    """
    results = _author_with_books(author_id)
    author = results["author"]
    author_books = results["author_books"]

    if author is None:
        return redirect(url_for("author.author_list"))

    if request.method == "POST" and not author_books:
        store.delete_by_id(Author, author_id)
        logger.info("Deleted author '%s' (id=%s)", author.name, author_id)
        return redirect(url_for("author.author_list"))

    if request.method == "POST":
        logger.info("Refused to delete author %s: %d book(s) reference it", author_id, len(author_books))

    return render_template(
        "author_delete.html",
        title="Delete Author",
        author=author,
        author_books=author_books,
    )


@author_bp.route("/author/<int:author_id>/update", methods=["GET", "POST"])
def author_update(author_id):
    author = store.find_by_id(Author, author_id)
    if author is None:
        abort(404, description="Author not found")

    if request.method == "GET":
        return render_template("author_form.html", title="Update Author", author=author, errors=[])

    values, violations = validate_form(AuthorForm, request.form)
    if violations:
        return render_template("author_form.html", title="Update Author", author=values, errors=violations)

    author = store.update_by_id(Author, author_id, values)
    if author is None:
        abort(404, description="Author not found")

    logger.info("Updated author '%s' (id=%s)", author.name, author_id)
    return redirect(author.url)

"""
BookInstance pages: list, detail, create, delete, update.
"""

from flask import Blueprint, abort, redirect, render_template, request, url_for
from sqlalchemy.orm import joinedload

import store
from data_models import INSTANCE_STATUSES, Book, BookInstance
from forms import BookInstanceForm, Violation, to_int, validate_form
from logging_config import get_logger

logger = get_logger(__name__)

bookinstance_bp = Blueprint("bookinstance", __name__, url_prefix="/catalog")

WITH_BOOK = (joinedload(BookInstance.book),)


def _render_form(title, bookinstance, selected_book, errors):
    return render_template(
        "bookinstance_form.html",
        title=title,
        book_list=store.find_all(Book, Book.title.asc()),
        bookinstance=bookinstance,
        selected_book=selected_book,
        statuses=INSTANCE_STATUSES,
        errors=errors,
    )


def _submit(title, instance_id=None):
    if instance_id is not None and store.find_by_id(BookInstance, instance_id) is None:
        abort(404, description="Book copy not found")

    values, violations = validate_form(BookInstanceForm, request.form)
    book_id = to_int(values["book"])

    if not violations and (book_id is None or store.find_by_id(Book, book_id) is None):
        violations = [Violation("book", "Book must reference an existing book.")]

    if violations:
        return _render_form(title, values, book_id, violations)

    fields = {
        "book_id": book_id,
        "imprint": values["imprint"],
        "status": values["status"] or "Maintenance",
    }
    if values["due_back"] is not None:
        fields["due_back"] = values["due_back"]

    if instance_id is None:
        bookinstance = store.insert(BookInstance(**fields))
        logger.info("Created copy %s of book %s", bookinstance.id, book_id)
    else:
        fields.setdefault("due_back", None)
        bookinstance = store.update_by_id(BookInstance, instance_id, fields)
        if bookinstance is None:
            abort(404, description="Book copy not found")
        logger.info("Updated copy %s of book %s", instance_id, book_id)

    return redirect(bookinstance.url)


@bookinstance_bp.route("/bookinstances")
def bookinstance_list():
    instances = store.find_all(BookInstance, BookInstance.id.asc(), options=WITH_BOOK)
    return render_template("bookinstance_list.html", title="Book Instance List", bookinstance_list=instances)


@bookinstance_bp.route("/bookinstance/<int:instance_id>")
def bookinstance_detail(instance_id):
    bookinstance = store.find_by_id(BookInstance, instance_id, options=WITH_BOOK)
    if bookinstance is None:
        abort(404, description="Book copy not found")

    return render_template(
        "bookinstance_detail.html",
        title=f"Copy: {bookinstance.book.title}",
        bookinstance=bookinstance,
    )


@bookinstance_bp.route("/bookinstance/create", methods=["GET", "POST"])
def bookinstance_create():
    if request.method == "POST":
        return _submit("Create BookInstance")

    # Allows linking here from a book page with the book preselected.
    return _render_form("Create BookInstance", None, request.args.get("book", type=int), [])


@bookinstance_bp.route("/bookinstance/<int:instance_id>/delete", methods=["GET", "POST"])
def bookinstance_delete(instance_id):
    bookinstance = store.find_by_id(BookInstance, instance_id, options=WITH_BOOK)
    if bookinstance is None:
        return redirect(url_for("bookinstance.bookinstance_list"))

    if request.method == "POST":
        store.delete_by_id(BookInstance, instance_id)
        logger.info("Deleted copy %s", instance_id)
        return redirect(url_for("bookinstance.bookinstance_list"))

    return render_template("bookinstance_delete.html", title="Delete Copy", bookinstance=bookinstance)


@bookinstance_bp.route("/bookinstance/<int:instance_id>/update", methods=["GET", "POST"])
def bookinstance_update(instance_id):
    if request.method == "POST":
        return _submit("Update BookInstance", instance_id=instance_id)

    bookinstance = store.find_by_id(BookInstance, instance_id)
    if bookinstance is None:
        abort(404, description="Book copy not found")

    return _render_form("Update BookInstance", bookinstance, bookinstance.book_id, [])

"""
Book pages: list, detail, create, delete, update.

The create and update forms share one submit path. A failed submission
re-fetches the author and genre pick lists and keeps the entered values,
with previously chosen genres still ticked.
"""

from functools import partial

from flask import Blueprint, abort, current_app, redirect, render_template, request, url_for
from sqlalchemy.orm import joinedload, selectinload

import store
from aggregate import gather
from data_models import Author, Book, BookInstance, Genre
from forms import BookForm, Violation, selected_ids, to_int, unparsed_ids, validate_form
from logging_config import get_logger
from openlibrary import fetch_summary_by_isbn

logger = get_logger(__name__)

book_bp = Blueprint("book", __name__, url_prefix="/catalog")

BOOK_WITH_REFS = (joinedload(Book.author), selectinload(Book.genre))


def _pick_lists():
    return {
        "authors": partial(store.find_all, Author, Author.family_name.asc()),
        "genres": partial(store.find_all, Genre, Genre.name.asc()),
    }


def _book_with_instances(book_id):
    return gather({
        "book": partial(store.find_by_id, Book, book_id, options=BOOK_WITH_REFS),
        "book_instances": partial(store.find, BookInstance, BookInstance.book_id == book_id),
    })


def _reference_violations(author_id, genre_ids, bad_tokens=()):
    violations = []
    if author_id is None or store.find_by_id(Author, author_id) is None:
        violations.append(Violation("author", "Author must reference an existing author."))
    if bad_tokens or store.missing_ids(Genre, genre_ids):
        violations.append(Violation("genre", "Genre selection includes an unknown genre."))
    return violations


def _render_form(title, book, selected_author, checked, errors, refs=None):
    refs = refs or gather(_pick_lists())
    return render_template(
        "book_form.html",
        title=title,
        authors=refs["authors"],
        genres=refs["genres"],
        book=book,
        selected_author=selected_author,
        checked=checked,
        errors=errors,
    )


def _submit(title, book_id=None):
    if book_id is not None and store.find_by_id(Book, book_id) is None:
        abort(404, description="Book not found")

    values, violations = validate_form(BookForm, request.form, multi=("genre",))
    genre_ids = selected_ids(values)
    author_id = to_int(values["author"])

    if not violations:
        violations = _reference_violations(author_id, genre_ids, unparsed_ids(values))

    if violations:
        return _render_form(title, values, author_id, genre_ids, violations)

    fields = {
        "title": values["title"],
        "summary": values["summary"],
        "isbn": values["isbn"],
        "author_id": author_id,
        "genre": store.find(Genre, Genre.id.in_(genre_ids)) if genre_ids else [],
    }

    if book_id is None:
        book = store.insert(Book(**fields))
        logger.info("Created book '%s' (id=%s)", book.title, book.id)
    else:
        book = store.update_by_id(Book, book_id, fields)
        if book is None:
            abort(404, description="Book not found")
        logger.info("Updated book '%s' (id=%s)", book.title, book_id)

    return redirect(book.url)


@book_bp.route("/books")
def book_list():
    books = store.find_all(Book, Book.title.asc(), options=(joinedload(Book.author),))
    return render_template("book_list.html", title="Book List", book_list=books)


@book_bp.route("/book/<int:book_id>")
def book_detail(book_id):
    results = _book_with_instances(book_id)

    if results["book"] is None:
        logger.debug("Book %s not found", book_id)
        abort(404, description="Book not found")

    return render_template(
        "book_detail.html",
        title=results["book"].title,
        book=results["book"],
        book_instances=results["book_instances"],
    )


@book_bp.route("/book/create", methods=["GET", "POST"])
def book_create():
    """
    GET renders an empty form. With ``?isbn=`` the ISBN is filled in and,
    when enabled, the summary is looked up on Open Library.
    """
    if request.method == "POST":
        return _submit("Create Book")

    book = None
    isbn = request.args.get("isbn", "").strip()
    if isbn:
        summary = None
        if current_app.config.get("OPENLIBRARY_LOOKUP", True):
            summary = fetch_summary_by_isbn(isbn, timeout=current_app.config.get("OPENLIBRARY_TIMEOUT", 8))
        book = {"isbn": isbn, "summary": summary or ""}

    return _render_form("Create Book", book, None, set(), [])


@book_bp.route("/book/<int:book_id>/delete", methods=["GET", "POST"])
def book_delete(book_id):
    """
    GET shows the confirmation page; POST deletes unless copies of the book
    still exist. A missing book just goes back to the list.
    """
    results = _book_with_instances(book_id)
    book = results["book"]
    book_instances = results["book_instances"]

    if book is None:
        return redirect(url_for("book.book_list"))

    if request.method == "POST" and not book_instances:
        store.delete_by_id(Book, book_id)
        logger.info("Deleted book '%s' (id=%s)", book.title, book_id)
        return redirect(url_for("book.book_list"))

    if request.method == "POST":
        logger.info("Refused to delete book %s: %d copies exist", book_id, len(book_instances))

    return render_template(
        "book_delete.html",
        title=f"Delete the book: {book.title}",
        book=book,
        book_instances=book_instances,
    )


@book_bp.route("/book/<int:book_id>/update", methods=["GET", "POST"])
def book_update(book_id):
    if request.method == "POST":
        return _submit("Update Book", book_id=book_id)

    tasks = _pick_lists()
    tasks["book"] = partial(store.find_by_id, Book, book_id, options=BOOK_WITH_REFS)
    results = gather(tasks)

    book = results["book"]
    if book is None:
        abort(404, description="Book not found")

    return _render_form(
        "Update Book",
        book,
        book.author_id,
        {genre.id for genre in book.genre},
        [],
        refs=results,
    )

"""Shared fixtures: an app over a throwaway SQLite file and record builders."""

from datetime import date

import pytest

from app import create_app
from data_models import Author, Book, BookInstance, Genre, db


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'catalog.sqlite'}",
        "OPENLIBRARY_LOOKUP": False,
        "CATALOG_QUERY_WORKERS": 4,
    })
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.engine.dispose()


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


class Seeder:
    """Inserts records in a short-lived app context and hands back ids."""

    def __init__(self, app):
        self.app = app

    def _add(self, entity):
        with self.app.app_context():
            db.session.add(entity)
            db.session.commit()
            return entity.id

    def author(self, first_name="Isaac", family_name="Asimov", date_of_birth=None, date_of_death=None):
        return self._add(Author(
            first_name=first_name,
            family_name=family_name,
            date_of_birth=date_of_birth,
            date_of_death=date_of_death,
        ))

    def genre(self, name="Science Fiction"):
        return self._add(Genre(name=name))

    def book(self, author_id, title="Foundation", genre_ids=(), summary="Psychohistory.", isbn="9780553293357"):
        with self.app.app_context():
            genres = Genre.query.filter(Genre.id.in_(genre_ids)).all() if genre_ids else []
            book = Book(title=title, summary=summary, isbn=isbn, author_id=author_id, genre=genres)
            db.session.add(book)
            db.session.commit()
            return book.id

    def instance(self, book_id, status="Available", imprint="Gnome Press, 1951", due_back=None):
        return self._add(BookInstance(
            book_id=book_id,
            imprint=imprint,
            status=status,
            due_back=due_back or date(2030, 1, 1),
        ))

    def count(self, model):
        with self.app.app_context():
            return model.query.count()

    def get(self, model, entity_id):
        with self.app.app_context():
            return db.session.get(model, entity_id)


@pytest.fixture
def seed(app):
    return Seeder(app)

from datetime import date

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

INSTANCE_STATUSES = ("Available", "Maintenance", "Loaned", "Reserved")


def format_date_med(value):
    """
    Format a date like 'Jan 2, 1990'. Returns None for a missing date.
    """
    if value is None:
        return None
    return f"{value:%b} {value.day}, {value.year}"


book_genre = db.Table(
    "book_genre",
    db.Column("book_id", db.Integer, db.ForeignKey("books.id"), primary_key=True),
    db.Column("genre_id", db.Integer, db.ForeignKey("genres.id"), primary_key=True),
)


class Author(db.Model):
    """
    Author model storing names and optional life dates.
    """
    __tablename__ = 'authors'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    first_name = db.Column(db.String(100), nullable=False)
    family_name = db.Column(db.String(100), nullable=False)
    date_of_birth = db.Column(db.Date, nullable=True)
    date_of_death = db.Column(db.Date, nullable=True)

    books = db.relationship("Book", back_populates="author")

    @property
    def name(self):
        return f"{self.family_name}, {self.first_name}"

    @property
    def lifespan(self):
        """
        'birth - death' with 'N/A' standing in for either missing date.
        """
        birth = format_date_med(self.date_of_birth) or "N/A"
        death = format_date_med(self.date_of_death) or "N/A"
        return f"{birth} - {death}"

    @property
    def url(self):
        return f"/catalog/author/{self.id}"

    def __repr__(self):
        return f"Author(id = {self.id}, name = {self.name})"

    def __str__(self):
        return self.name


class Genre(db.Model):
    """
    Genre model. Names are kept unique by the create view, not by the schema.
    """
    __tablename__ = 'genres'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(100), nullable=False)

    books = db.relationship("Book", secondary=book_genre, back_populates="genre")

    @property
    def url(self):
        return f"/catalog/genre/{self.id}"

    def __repr__(self):
        return f"<Genre id={self.id} name='{self.name}'>"

    def __str__(self):
        return self.name


class Book(db.Model):
    """
    Book model storing title, summary, ISBN, author link and genres.
    """
    __tablename__ = 'books'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    title = db.Column(db.String(200), nullable=False)
    summary = db.Column(db.Text, nullable=False)
    isbn = db.Column(db.String(20), nullable=False)

    author_id = db.Column(db.Integer, db.ForeignKey("authors.id"), nullable=False)

    author = db.relationship("Author", back_populates="books")
    genre = db.relationship("Genre", secondary=book_genre, back_populates="books")
    instances = db.relationship("BookInstance", back_populates="book")

    @property
    def url(self):
        return f"/catalog/book/{self.id}"

    def __repr__(self):
        return f"<Book id={self.id} title='{self.title}'>"

    def __str__(self):
        return self.title


class BookInstance(db.Model):
    """
    A physical copy of a book, with its lending status.
    """
    __tablename__ = 'book_instances'

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False)
    imprint = db.Column(db.String(200), nullable=False)
    status = db.Column(db.String(20), nullable=False, default="Maintenance")
    due_back = db.Column(db.Date, nullable=True, default=date.today)

    book = db.relationship("Book", back_populates="instances")

    @property
    def due_back_formatted(self):
        return format_date_med(self.due_back) or ""

    @property
    def url(self):
        return f"/catalog/bookinstance/{self.id}"

    def __repr__(self):
        return f"<BookInstance id={self.id} status='{self.status}'>"

    def __str__(self):
        return f"{self.imprint} ({self.status})"

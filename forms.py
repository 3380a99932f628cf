"""
Form definitions and validation for the catalog pages.

Fields are trimmed and HTML-escaped by WTForms filters before the validator
chain runs, so the values handed back by ``validate_form`` are the sanitized
ones that get stored or shown again on a failed submission.
"""

from collections import namedtuple
from datetime import date

from markupsafe import escape
from werkzeug.datastructures import MultiDict
from wtforms import Form, SelectMultipleField, StringField, TextAreaField
from wtforms.validators import AnyOf, DataRequired, Length, Optional, Regexp, ValidationError

from data_models import INSTANCE_STATUSES

Violation = namedtuple("Violation", ["field", "message"])

ALPHANUMERIC = r"^[A-Za-z0-9]+$"


def strip(value):
    return value.strip() if isinstance(value, str) else value


def html_escape(value):
    return str(escape(value)) if isinstance(value, str) else value


def escape_each(values):
    return [html_escape(v) for v in values or []]


def none_if_blank(value):
    return value or None


class IsoDate:
    """
    Parse an ISO 8601 date (YYYY-MM-DD) and store the ``date`` on the field.
    """

    def __init__(self, message=None):
        self.message = message or "Invalid date"

    def __call__(self, form, field):
        try:
            field.data = date.fromisoformat(field.data)
        except (TypeError, ValueError):
            raise ValidationError(self.message)


SANITIZE = [strip, html_escape]


class AuthorForm(Form):
    first_name = StringField(
        "First name",
        filters=SANITIZE,
        validators=[
            DataRequired("First name must be specified."),
            Regexp(ALPHANUMERIC, message="First name has non-alphanumeric characters."),
            Length(max=100, message="First name must be at most 100 characters."),
        ],
    )
    family_name = StringField(
        "Family name",
        filters=SANITIZE,
        validators=[
            DataRequired("Family name must be specified."),
            Regexp(ALPHANUMERIC, message="Family name has non-alphanumeric characters."),
            Length(max=100, message="Family name must be at most 100 characters."),
        ],
    )
    date_of_birth = StringField(
        "Date of birth",
        filters=[strip, none_if_blank],
        validators=[Optional(), IsoDate("Invalid date of birth")],
    )
    date_of_death = StringField(
        "Date of death",
        filters=[strip, none_if_blank],
        validators=[Optional(), IsoDate("Invalid date of death")],
    )


class BookForm(Form):
    title = StringField("Title", filters=SANITIZE, validators=[DataRequired("Title must not be empty.")])
    author = StringField("Author", filters=SANITIZE, validators=[DataRequired("Author must not be empty.")])
    summary = TextAreaField("Summary", filters=SANITIZE, validators=[DataRequired("Summary must not be empty.")])
    isbn = StringField("ISBN", filters=SANITIZE, validators=[DataRequired("ISBN must not be empty")])
    genre = SelectMultipleField("Genre", choices=[], coerce=str, validate_choice=False, filters=[escape_each])


class GenreForm(Form):
    name = StringField(
        "Genre",
        filters=SANITIZE,
        validators=[
            DataRequired("Genre name required"),
            Length(max=100, message="Genre name must be at most 100 characters."),
        ],
    )


class BookInstanceForm(Form):
    book = StringField("Book", filters=SANITIZE, validators=[DataRequired("Book must be specified")])
    imprint = StringField("Imprint", filters=SANITIZE, validators=[DataRequired("Imprint must be specified")])
    status = StringField(
        "Status",
        filters=SANITIZE,
        validators=[Optional(), AnyOf(INSTANCE_STATUSES, message="Invalid status")],
    )
    due_back = StringField(
        "Date when book available",
        filters=[strip, none_if_blank],
        validators=[Optional(), IsoDate("Invalid date")],
    )


def normalize_multi(value):
    """
    Map an absent, single or multiple submission onto a list.

    None -> [], scalar -> [scalar], list/tuple -> list of the same items.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def multi_value(data, key):
    """
    Read ``key`` from a plain mapping or a MultiDict as a list.
    """
    if hasattr(data, "getlist"):
        return normalize_multi(data.getlist(key) if key in data else None)
    return normalize_multi(data.get(key))


def validate_form(form_class, data, multi=()):
    """
    Validate submitted ``data`` against ``form_class``.

    Returns ``(values, violations)``: the sanitized value of every declared
    field, and the ordered ``Violation`` list (empty when valid). ``data`` is
    left untouched.
    """
    formdata = MultiDict()
    for key in data.keys():
        if key in multi:
            continue
        formdata[key] = data.get(key)
    for key in multi:
        formdata.setlist(key, multi_value(data, key))

    form = form_class(formdata)
    form.validate()

    violations = [
        Violation(field.name, message)
        for field in form
        for message in field.errors
    ]
    return form.data, violations


def selected_ids(values, key="genre"):
    """
    Return the submitted ids in ``values[key]`` as a set of ints, skipping junk.
    """
    ids = set()
    for raw in values.get(key) or []:
        try:
            ids.add(int(raw))
        except (TypeError, ValueError):
            continue
    return ids


def to_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def unparsed_ids(values, key="genre"):
    """
    Return the submitted tokens in ``values[key]`` that are not integer ids.
    """
    return [raw for raw in values.get(key) or [] if to_int(raw) is None]

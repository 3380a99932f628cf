from datetime import date

from werkzeug.datastructures import MultiDict

from forms import (
    AuthorForm,
    BookForm,
    BookInstanceForm,
    GenreForm,
    Violation,
    multi_value,
    normalize_multi,
    selected_ids,
    to_int,
    unparsed_ids,
    validate_form,
)


def test_normalize_multi_absent_single_many():
    assert normalize_multi(None) == []
    assert normalize_multi("3") == ["3"]
    assert normalize_multi(["3", "4"]) == ["3", "4"]
    assert normalize_multi(("3",)) == ["3"]


def test_multi_value_reads_plain_mappings_and_multidicts():
    assert multi_value({}, "genre") == []
    assert multi_value({"genre": "1"}, "genre") == ["1"]
    assert multi_value({"genre": ["1", "2"]}, "genre") == ["1", "2"]
    assert multi_value(MultiDict(), "genre") == []
    assert multi_value(MultiDict([("genre", "1"), ("genre", "2")]), "genre") == ["1", "2"]


def test_valid_author_returns_sanitized_values():
    values, violations = validate_form(AuthorForm, {
        "first_name": "  Isaac ",
        "family_name": "Asimov",
        "date_of_birth": "1920-01-02",
        "date_of_death": "",
    })

    assert violations == []
    assert values["first_name"] == "Isaac"
    assert values["family_name"] == "Asimov"
    assert values["date_of_birth"] == date(1920, 1, 2)
    assert values["date_of_death"] is None


def test_author_required_fields_report_one_message_each():
    _, violations = validate_form(AuthorForm, {"first_name": "   ", "family_name": ""})

    assert violations == [
        Violation("first_name", "First name must be specified."),
        Violation("family_name", "Family name must be specified."),
    ]


def test_author_non_alphanumeric_and_bad_dates():
    _, violations = validate_form(AuthorForm, {
        "first_name": "Jean-Luc",
        "family_name": "Picard",
        "date_of_birth": "yesterday",
        "date_of_death": "2305-13-40",
    })

    assert violations == [
        Violation("first_name", "First name has non-alphanumeric characters."),
        Violation("date_of_birth", "Invalid date of birth"),
        Violation("date_of_death", "Invalid date of death"),
    ]


def test_author_name_length_is_bounded():
    _, violations = validate_form(AuthorForm, {"first_name": "a" * 101, "family_name": "B"})
    assert violations == [Violation("first_name", "First name must be at most 100 characters.")]


def test_validation_leaves_input_untouched():
    data = MultiDict([("title", "  <b>Dune</b>  ")])
    values, _ = validate_form(BookForm, data, multi=("genre",))

    assert data["title"] == "  <b>Dune</b>  "
    assert values["title"] == "&lt;b&gt;Dune&lt;/b&gt;"


def test_book_messages_in_field_order():
    _, violations = validate_form(BookForm, {}, multi=("genre",))

    assert [v.message for v in violations] == [
        "Title must not be empty.",
        "Author must not be empty.",
        "Summary must not be empty.",
        "ISBN must not be empty",
    ]


def test_book_genre_normalized_regardless_of_shape():
    base = {"title": "Dune", "author": "1", "summary": "Spice.", "isbn": "1"}

    values, _ = validate_form(BookForm, base, multi=("genre",))
    assert values["genre"] == []

    values, _ = validate_form(BookForm, dict(base, genre="2"), multi=("genre",))
    assert values["genre"] == ["2"]

    values, _ = validate_form(BookForm, dict(base, genre=["2", "5"]), multi=("genre",))
    assert values["genre"] == ["2", "5"]
    assert selected_ids(values) == {2, 5}


def test_selected_ids_skips_junk():
    assert selected_ids({"genre": ["1", "x", None, "3"]}) == {1, 3}
    assert selected_ids({}) == set()


def test_unparsed_ids_reports_non_numeric_tokens():
    assert unparsed_ids({"genre": ["1", "x", "3", "2.5"]}) == ["x", "2.5"]
    assert unparsed_ids({"genre": []}) == []
    assert unparsed_ids({}) == []


def test_to_int():
    assert to_int("7") == 7
    assert to_int("seven") is None
    assert to_int(None) is None


def test_genre_name_required():
    _, violations = validate_form(GenreForm, {"name": "  "})
    assert violations == [Violation("name", "Genre name required")]


def test_bookinstance_status_must_be_known():
    values, violations = validate_form(BookInstanceForm, {
        "book": "1",
        "imprint": "Ace, 1965",
        "status": "Lost",
        "due_back": "not-a-date",
    })

    assert violations == [
        Violation("status", "Invalid status"),
        Violation("due_back", "Invalid date"),
    ]
    assert values["imprint"] == "Ace, 1965"


def test_bookinstance_status_may_be_blank():
    values, violations = validate_form(BookInstanceForm, {"book": "1", "imprint": "Ace"})
    assert violations == []
    assert values["status"] in ("", None)
    assert values["due_back"] is None

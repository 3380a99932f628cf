from unittest.mock import patch

from sqlalchemy.exc import OperationalError


def test_root_redirects_to_catalog(client):
    response = client.get("/")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/catalog/")


def test_index_counts_match_fixtures(client, seed):
    asimov = seed.author(first_name="Isaac", family_name="Asimov")
    herbert = seed.author(first_name="Frank", family_name="Herbert")
    for name in ("Science Fiction", "Fantasy", "Poetry"):
        seed.genre(name)
    foundation = seed.book(asimov, title="Foundation")
    dune = seed.book(herbert, title="Dune")
    seed.instance(foundation, status="Available")
    seed.instance(foundation, status="Loaned")
    seed.instance(dune, status="Available")

    response = client.get("/catalog/")

    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert '<span id="book_count">2</span>' in body
    assert '<span id="book_instance_count">3</span>' in body
    assert '<span id="book_instance_available_count">2</span>' in body
    assert '<span id="author_count">2</span>' in body
    assert '<span id="genre_count">3</span>' in body


def test_index_empty_catalog(client):
    body = client.get("/catalog/").get_data(as_text=True)
    assert '<span id="book_count">0</span>' in body


def test_index_shows_count_failure_in_page(client):
    with patch("store.count", side_effect=OperationalError("SELECT", {}, Exception("db down"))):
        response = client.get("/catalog/")

    assert response.status_code == 200
    assert "Error:" in response.get_data(as_text=True)


def test_store_failure_renders_error_page(client):
    with patch("store.find_all", side_effect=OperationalError("SELECT", {}, Exception("db down"))):
        response = client.get("/catalog/authors")

    assert response.status_code == 500
    assert "could not complete" in response.get_data(as_text=True)


def test_unknown_route_is_404(client):
    assert client.get("/catalog/nowhere").status_code == 404

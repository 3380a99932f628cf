"""
Catalog page blueprints, one per entity kind plus the home page.
"""

from blueprints.authors import author_bp
from blueprints.bookinstances import bookinstance_bp
from blueprints.books import book_bp
from blueprints.catalog import catalog_bp
from blueprints.genres import genre_bp

ALL_BLUEPRINTS = (catalog_bp, author_bp, book_bp, genre_bp, bookinstance_bp)


def register_blueprints(app):
    for blueprint in ALL_BLUEPRINTS:
        app.register_blueprint(blueprint)

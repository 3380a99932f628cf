"""
Entity store operations over the Flask-SQLAlchemy session.

Every function works against ``db.session`` of the active application
context, so the same calls serve request handlers and aggregated reads
running on worker threads.
"""

from data_models import db


def find_all(model, *order_by, options=()):
    """
    Return every row of ``model``, optionally sorted and eager-loaded.
    """
    return model.query.options(*options).order_by(*order_by).all()


def find_by_id(model, entity_id, options=()):
    """
    Return the entity with primary key ``entity_id`` or None.
    """
    return db.session.get(model, entity_id, options=list(options))


def find(model, *criteria, order_by=(), options=()):
    return model.query.options(*options).filter(*criteria).order_by(*order_by).all()


def find_one(model, *criteria):
    return model.query.filter(*criteria).first()


def count(model, *criteria):
    return model.query.filter(*criteria).count()


def missing_ids(model, ids):
    """
    Return the subset of ``ids`` with no matching row in ``model``.
    """
    wanted = set(ids)
    if not wanted:
        return set()
    found = {row.id for row in model.query.filter(model.id.in_(wanted)).all()}
    return wanted - found


def insert(entity):
    db.session.add(entity)
    db.session.commit()
    return entity


def update_by_id(model, entity_id, values):
    """
    Replace the given attributes on an existing entity.

    Returns the updated entity, or None when no row has that id.
    """
    entity = db.session.get(model, entity_id)
    if entity is None:
        return None

    for key, value in values.items():
        setattr(entity, key, value)

    db.session.commit()
    return entity


def delete_by_id(model, entity_id):
    """
    Delete one entity. Returns False when it was already gone.
    """
    entity = db.session.get(model, entity_id)
    if entity is None:
        return False

    db.session.delete(entity)
    db.session.commit()
    return True

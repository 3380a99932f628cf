"""
Concurrent read aggregation for page handlers.

A page that needs several independent lookups hands them to ``gather`` as a
mapping of name to zero-argument callable. All of them are submitted before
any is awaited. The call returns once every lookup has succeeded, or raises
the first failure to complete straight away; lookups still in flight at that
point keep running on the pool but their outcome is dropped.
"""

import atexit
from concurrent.futures import ThreadPoolExecutor, as_completed
from functools import partial

from flask import current_app

from logging_config import get_logger

logger = get_logger(__name__)

EXTENSION_KEY = "query_aggregator"


class QueryAggregator:
    """
    Flask extension owning the thread pool used by ``gather``.

    The pool is shut down (without waiting) at interpreter exit.
    """

    def __init__(self, app=None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        workers = app.config.get("CATALOG_QUERY_WORKERS", 8)
        executor = ThreadPoolExecutor(
            max_workers=workers,
            thread_name_prefix="catalog-query",
        )
        app.extensions[EXTENSION_KEY] = executor
        atexit.register(executor.shutdown, wait=False)
        logger.debug("Query pool ready with %d workers", workers)


def _run_in_app_context(app, task):
    # Each task gets its own app context, hence its own SQLAlchemy session.
    with app.app_context():
        return task()


def gather(tasks):
    """
    Run the named callables concurrently and return ``{name: result}``.

    Raises the exception of the first task to fail.
    """
    app = current_app._get_current_object()
    executor = app.extensions[EXTENSION_KEY]

    futures = {
        name: executor.submit(partial(_run_in_app_context, app, task))
        for name, task in tasks.items()
    }
    names = {future: name for name, future in futures.items()}

    for future in as_completed(futures.values()):
        error = future.exception()
        if error is not None:
            pending = sum(1 for f in futures.values() if not f.done())
            logger.debug("Lookup '%s' failed; abandoning %d pending", names[future], pending)
            raise error

    return {name: future.result() for name, future in futures.items()}

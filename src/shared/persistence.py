"""Repository write helpers shared by the command handlers.

Every mutation is a single repository write. Protean checks the aggregate's
``_version`` on save, so the write only lands if nobody else committed a
newer version in between. That conditional write is what enforces the
per-user uniqueness rules under concurrent requests.
"""

import structlog
from protean.exceptions import ExpectedVersionError
from sqlalchemy.exc import SQLAlchemyError

from shared.errors import ConflictError, PersistenceError

logger = structlog.get_logger(__name__)


def persist(repo, aggregate):
    """Add ``aggregate`` to ``repo``, translating store failures into error kinds."""
    try:
        repo.add(aggregate)
    except ExpectedVersionError as exc:
        logger.warning(
            "Concurrent write rejected",
            aggregate=type(aggregate).__name__,
            aggregate_id=str(aggregate.id),
        )
        raise ConflictError({"_version": ["The record was modified by a concurrent request"]}) from exc
    except (SQLAlchemyError, OSError) as exc:
        logger.error(
            "Store write failed",
            aggregate=type(aggregate).__name__,
            aggregate_id=str(aggregate.id),
            error=str(exc),
        )
        raise PersistenceError({"store": ["The store could not complete the write"]}) from exc
    return aggregate


def delete(repo, aggregate):
    """Remove ``aggregate`` from its store."""
    try:
        repo._dao.delete(aggregate)
    except (SQLAlchemyError, OSError) as exc:
        logger.error(
            "Store delete failed",
            aggregate=type(aggregate).__name__,
            aggregate_id=str(aggregate.id),
            error=str(exc),
        )
        raise PersistenceError({"store": ["The store could not complete the delete"]}) from exc

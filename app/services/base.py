"""Base service class with common functionality."""

import logging
from abc import ABC
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import InvalidOperationException, TransactionFailedException
from app.models.connection import Connection
from app.utils.partial_date import PartialDate

logger = logging.getLogger(__name__)


class BaseService(ABC):
    """Abstract base class for all services."""

    def __init__(self, db: Session):
        """Initialize service with database session.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    @contextmanager
    def atomic(self, operation: str) -> Iterator[None]:
        """Run a multi-step write inside a savepoint.

        Everything flushed inside the block is rolled back when it raises, while
        work done earlier in the same request session is left alone. Business
        rule failures propagate unchanged; store errors are reported as
        TransactionFailedException.

        Args:
            operation: Human readable description used in error messages
        """
        savepoint = self.db.begin_nested()
        try:
            yield
            self.db.flush()
        except SQLAlchemyError as e:
            savepoint.rollback()
            logger.warning("Rolled back %s: %s", operation, e)
            raise TransactionFailedException(operation, str(getattr(e, "orig", None) or e)) from e
        except Exception:
            savepoint.rollback()
            raise
        else:
            savepoint.commit()

    def close_connection(self, connection: Connection, when: PartialDate, note: str, operation: str) -> None:
        """Close an open connection, refusing a disconnect dated before its connect."""
        if connection.ends_before_start(when):
            raise InvalidOperationException(
                operation,
                f"connection {connection.id} of part {connection.part_id} started on "
                f"{connection.connected_at}, after {when.date_string}",
            )
        connection.close(when, note)

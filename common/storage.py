"""
Taco Cloud - Storage Primitives
=================================
Row-level insert helpers used by the repositories, with driver errors
translated into business exceptions.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict

from sqlalchemy import Table, insert
from sqlalchemy.exc import (
    DataError, IntegrityError, InterfaceError, OperationalError, DBAPIError,
)
from sqlalchemy.orm import Session

from common.exceptions import PersistenceRejected, StorageUnavailable

logger = logging.getLogger("tacocloud.storage")


def insert_returning_key(db: Session, table: Table, values: Dict[str, Any]) -> int:
    """Insert one row and return the primary key the database generated for it."""
    result = db.execute(insert(table).values(**values))
    return int(result.inserted_primary_key[0])


def insert_row(db: Session, table: Table, values: Dict[str, Any]) -> None:
    """Insert one row whose key (if any) the caller does not need."""
    db.execute(insert(table).values(**values))


@contextmanager
def translate_errors(action: str):
    """Re-raise SQLAlchemy driver errors as StorageUnavailable / PersistenceRejected."""
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        logger.error("%s failed, storage unavailable: %s", action, e.orig)
        raise StorageUnavailable() from e
    except (IntegrityError, DataError) as e:
        logger.warning("%s rejected by database: %s", action, e.orig)
        raise PersistenceRejected() from e
    except DBAPIError as e:
        logger.error("%s failed: %s", action, e.orig)
        raise PersistenceRejected() from e

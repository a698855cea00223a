"""Commit helper for writes guarded by the profile ``version`` column."""
from __future__ import annotations

import logging
from typing import Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..config import get_settings
from .errors import RelationshipError, StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def commit_with_retry(db: Session, apply: Callable[[], T], *, description: str) -> T:
    """Run ``apply`` and commit, re-running it when a concurrent writer wins.

    ``apply`` must re-read every profile it changes; after a version conflict
    the session is rolled back so the next attempt sees committed state.
    """

    attempts = get_settings().follow_write_retries
    for attempt in range(1, attempts + 1):
        try:
            result = apply()
            db.commit()
            return result
        except RelationshipError:
            db.rollback()
            raise
        except StaleDataError:
            db.rollback()
            logger.warning("Concurrent profile update during %s (attempt %d/%d)", description, attempt, attempts)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception("Failed to %s", description)
            raise StorageError(f"Failed to {description}") from exc
    raise StorageError(f"Failed to {description}: profiles kept changing concurrently")


__all__ = ["commit_with_retry"]

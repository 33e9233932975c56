# backend/core/background_tasks.py

"""
Best-effort side effects.

A best-effort task runs after the caller's own work is committed, uses its
own database session and never propagates failures. Every run produces a
``TaskOutcome`` which is logged; callers that need to inspect it (tests,
tooling) get it back as the return value.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Iterator, Optional
import logging

from sqlalchemy.orm import Session

from core.database import SessionLocal

logger = logging.getLogger(__name__)


@dataclass
class TaskOutcome:
    """Result of a best-effort task"""
    name: str
    succeeded: bool
    error: Optional[str] = None
    result: Any = None
    finished_at: datetime = field(default_factory=datetime.utcnow)


@contextmanager
def session_scope(session_factory: Callable[[], Session] = SessionLocal) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def run_best_effort(
    name: str,
    func: Callable[..., Any],
    *args,
    session_factory: Callable[[], Session] = SessionLocal,
    **kwargs,
) -> TaskOutcome:
    """
    Run ``func(db, *args, **kwargs)`` in its own session.

    Failures are logged and reported through the returned outcome instead of
    being raised.
    """
    try:
        with session_scope(session_factory) as db:
            result = func(db, *args, **kwargs)
    except Exception as e:
        logger.error(f"Best-effort task {name} failed: {e}", exc_info=True)
        return TaskOutcome(name=name, succeeded=False, error=str(e))

    logger.info(f"Best-effort task {name} completed")
    return TaskOutcome(name=name, succeeded=True, result=result)

import contextlib
import logging

from sqlalchemy.orm import sessionmaker

from database.repository import ScoringRepository

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def scoring_uow(session_factory: sessionmaker):
    """Per-run session scope.

    Yields a ScoringRepository bound to a fresh Session. Commits on success,
    rolls back on exception, always closes.

    Usage:
        with scoring_uow(session_factory) as repo:
            postings = repo.staged_jobs.get_queued(limit=8)
    """
    session = session_factory()
    try:
        repo = ScoringRepository(session)
        yield repo
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

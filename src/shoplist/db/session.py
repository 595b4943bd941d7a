"""Engine and session handling for the shoplist key-value database."""
from contextlib import contextmanager
from functools import lru_cache
from typing import Generator
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from shoplist.config.settings import get_settings
from shoplist.models import Base


@lru_cache()
def get_engine() -> Engine:
    """Engine for the configured database URL, created on first use."""
    settings = get_settings()
    # Streamlit reruns the script on worker threads
    return create_engine(
        settings.DB_URL,
        echo=settings.DB_ECHO,
        connect_args={"check_same_thread": False},
    )


@lru_cache()
def _session_factory() -> sessionmaker:
    return sessionmaker(bind=get_engine(), autoflush=False)


def init_db() -> None:
    """Create the key-value table if it does not exist yet."""
    Base.metadata.create_all(get_engine())


def get_session() -> Session:
    return _session_factory()()


class TransactionManager:
    """Wraps writes on one session in commit-or-rollback."""

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def transaction(self) -> Generator[Session, None, None]:
        """
        Yield the session and commit when the block succeeds.

        Raises:
            Exception: Whatever the block raised, after rolling back
        """
        try:
            yield self.session
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

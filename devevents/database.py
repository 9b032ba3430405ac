"""Database connection accessor.

A single ``ConnectionCache`` per process holds the SQLAlchemy engine (the
handle) and the in-flight connect attempt. Concurrent callers that arrive
before the first attempt resolves all wait on the same attempt, so the
database is contacted at most once at a time. A failed attempt is cleared so
the next call retries from scratch.
"""
import logging
import threading
from concurrent.futures import Future, TimeoutError as FutureTimeoutError
from typing import Callable, Iterator, Optional

from fastapi import Depends
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base

from devevents.config import settings
from devevents.errors import ConfigurationError, ConnectionFailure

logger = logging.getLogger(__name__)

Base = declarative_base()

Connector = Callable[[str], Engine]


def connect_engine(url: str, echo: bool = False, connect_timeout: float = 10.0) -> Engine:
    """Build an engine and ping it so connection problems surface immediately."""
    if url.startswith("sqlite"):
        engine = create_engine(url, echo=echo, connect_args={"check_same_thread": False})
    else:
        # Driver-level bound so the connect thread itself does not hang
        engine = create_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            connect_args={"connect_timeout": max(1, int(connect_timeout))},
        )
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        engine.dispose()
        raise
    if url.startswith("sqlite"):
        # Dev mode: no migrations, create tables directly
        from devevents.models.booking import Booking  # noqa: F401
        from devevents.models.event import Event  # noqa: F401

        Base.metadata.create_all(bind=engine)
    return engine


class ConnectionCache:
    """Process-scoped holder for the database handle."""

    def __init__(
        self,
        url: Optional[str],
        connect_timeout: float = 10.0,
        connector: Optional[Connector] = None,
    ) -> None:
        self.url = url
        self.connect_timeout = connect_timeout
        self._connector = connector or connect_engine
        self._lock = threading.Lock()
        self._handle: Optional[Engine] = None
        self._in_flight: Optional[Future] = None

    @property
    def handle(self) -> Optional[Engine]:
        return self._handle

    def get_connection(self) -> Engine:
        """Return the cached engine, connecting on first use.

        The connector runs on a background thread; every caller, including the
        one that started the attempt, waits at most ``connect_timeout`` seconds.
        """
        if not self.url:
            raise ConfigurationError(
                "DATABASE_URL is not set. Define it in the environment or .env file."
            )
        if self._handle is not None:
            return self._handle

        with self._lock:
            if self._handle is not None:
                return self._handle
            owner = self._in_flight is None
            if owner:
                self._in_flight = Future()
            attempt = self._in_flight

        if owner:
            threading.Thread(
                target=self._run_attempt, args=(attempt,), name="db-connect", daemon=True
            ).start()

        try:
            return attempt.result(timeout=self.connect_timeout)
        except FutureTimeoutError:
            raise ConnectionFailure(
                f"Timed out after {self.connect_timeout}s waiting for the database connection"
            )

    def _run_attempt(self, attempt: Future) -> None:
        try:
            engine = self._connector(self.url)
        except Exception as exc:
            logger.error("Database connection failed: %s", exc)
            with self._lock:
                self._in_flight = None
            failure = ConnectionFailure("Could not connect to the database")
            failure.__cause__ = exc
            attempt.set_exception(failure)
            return

        with self._lock:
            self._handle = engine
            self._in_flight = None
        logger.info("Database connection established (%s)", engine.url.render_as_string(hide_password=True))
        attempt.set_result(engine)

    def session(self) -> Session:
        """Open a new ORM session on the cached engine."""
        engine = self.get_connection()
        return Session(bind=engine, autoflush=False)

    def reset(self) -> None:
        """Drop the cached engine. The next call reconnects."""
        with self._lock:
            engine, self._handle = self._handle, None
            self._in_flight = None
        if engine is not None:
            engine.dispose()


connection_cache = ConnectionCache(
    settings.DATABASE_URL,
    connect_timeout=settings.DATABASE_CONNECT_TIMEOUT,
    connector=lambda url: connect_engine(
        url, echo=settings.DATABASE_ECHO, connect_timeout=settings.DATABASE_CONNECT_TIMEOUT
    ),
)


def get_connection_cache() -> ConnectionCache:
    """FastAPI dependency for the process-wide cache; tests override it."""
    return connection_cache


def get_db(cache: ConnectionCache = Depends(get_connection_cache)) -> Iterator[Session]:
    """Yield a session; roll back if the request fails, always close."""
    db = cache.session()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

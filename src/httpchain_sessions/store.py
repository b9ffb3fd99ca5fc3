import logging
import threading
from collections.abc import Iterator

from .constants import SessionStatus
from .models import LogEntry, Session, to_ms, utcnow

logger = logging.getLogger(__name__)


class SessionStore:
    """Registry of sessions keyed by session id.

    Sessions are created on first use and kept for the lifetime of the store.
    Mutations are serialized by a lock so log entries keep their append order
    when tools are dispatched from several threads.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}
        self._lock = threading.RLock()

    def get_or_create(self, session_id: str) -> Session:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = Session(session_id=session_id)
                self._sessions[session_id] = session
                logger.info(f"Created session {session_id}")
            return session

    def get(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def append(self, session_id: str, entry: LogEntry) -> None:
        with self._lock:
            self.get_or_create(session_id).logs.append(entry)

    def set_status(self, session_id: str, status: SessionStatus) -> None:
        with self._lock:
            self.get_or_create(session_id).status = status

    def finish(self, session_id: str, status: SessionStatus) -> Session:
        """Set the final status and record when the session ended."""
        with self._lock:
            session = self.get_or_create(session_id)
            session.status = status
            session.end_time = utcnow()
            session.execution_time_ms = to_ms(session.end_time - session.start_time)
            return session

    def session_ids(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[Session]:
        with self._lock:
            return iter(list(self._sessions.values()))

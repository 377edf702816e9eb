import logging
from collections import OrderedDict
from typing import Optional, Union

from pydantic import ValidationError

from .definitions import DEFAULT_ASSUMED_TOTAL_DATA_POINTS
from .models import PoliticalLens, SessionNotFoundError, StorageError
from .session import JourneySession

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "journey-v2"
DEFAULT_MAX_LIVE_SESSIONS = 1000


class SessionStore:
    """
    Owns the live journey sessions for this process and persists them best-effort.

    Sessions are addressed by id. The in-memory copy is authoritative: a storage
    failure is logged and only costs durability. When two writers share a session
    id the last save wins.

    At most max_live_sessions stay in memory; the least recently used one is
    dropped first and is reloaded from storage on its next access.

    The storage backend needs get(key), set(key, value) and delete(key); see
    src.services.storage for the Redis and in-memory implementations.
    """

    def __init__(
        self,
        storage=None,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        assumed_total_data_points: int = DEFAULT_ASSUMED_TOTAL_DATA_POINTS,
        max_live_sessions: int = DEFAULT_MAX_LIVE_SESSIONS,
    ):
        if max_live_sessions < 1:
            raise ValueError(f"max_live_sessions must be at least 1, got {max_live_sessions}")
        self.storage = storage
        self.key_prefix = key_prefix
        self.assumed_total_data_points = assumed_total_data_points
        self.max_live_sessions = max_live_sessions
        self._sessions: "OrderedDict[str, JourneySession]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def _key(self, session_id: str) -> str:
        return f"{self.key_prefix}:{session_id}"

    def create(self, lens: Optional[Union[PoliticalLens, str]] = None) -> JourneySession:
        session = JourneySession(assumed_total_data_points=self.assumed_total_data_points)
        if lens is not None:
            session.set_lens(lens)
        self._remember(session)
        self.save(session)
        logger.info(f"Created journey session {session.session_id}", extra={"session_id": session.session_id})
        return session

    def get(self, session_id: str) -> JourneySession:
        """
        Returns the live session, loading it from storage on first access.

        Raises:
            SessionNotFoundError: no live or readable persisted state.
        """
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
            return session

        session = self._load(session_id)
        if session is None:
            raise SessionNotFoundError(f"Journey session not found: {session_id}")
        self._remember(session)
        return session

    def _remember(self, session: JourneySession) -> None:
        self._sessions[session.session_id] = session
        self._sessions.move_to_end(session.session_id)
        while len(self._sessions) > self.max_live_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.debug(f"Evicted least recently used session '{evicted_id}' from memory")

    def _load(self, session_id: str) -> Optional[JourneySession]:
        if self.storage is None:
            return None
        key = self._key(session_id)
        try:
            payload = self.storage.get(key)
        except StorageError as e:
            logger.error(f"Failed to read session '{session_id}' from storage: {e}")
            return None
        if payload is None:
            logger.debug(f"No persisted state for session '{session_id}'")
            return None
        try:
            session = JourneySession.from_json(
                payload, assumed_total_data_points=self.assumed_total_data_points
            )
        except ValidationError as e:
            logger.error(f"Discarding unreadable persisted state for session '{session_id}': {e}")
            return None
        logger.info(f"Restored session '{session_id}' from storage")
        return session

    def save(self, session: JourneySession) -> bool:
        """Persists the session. Returns False (and logs) when storage is unavailable."""
        if self.storage is None:
            return False
        try:
            self.storage.set(self._key(session.session_id), session.to_json())
            return True
        except StorageError as e:
            logger.error(f"Failed to persist session '{session.session_id}': {e}. In-memory state kept.", extra={"session_id": session.session_id})
            return False

    def reset(self, session_id: str) -> JourneySession:
        """Start over: the session gets a fresh id and the old record is dropped."""
        session = self.get(session_id)
        self._sessions.pop(session_id, None)
        self._delete(session_id)
        session.reset()
        self._remember(session)
        self.save(session)
        return session

    def _delete(self, session_id: str) -> None:
        if self.storage is None:
            return
        try:
            self.storage.delete(self._key(session_id))
        except StorageError as e:
            logger.error(f"Failed to delete persisted session '{session_id}': {e}")

    def evict(self, session_id: str) -> None:
        """Drops the live copy; the persisted record stays."""
        self._sessions.pop(session_id, None)

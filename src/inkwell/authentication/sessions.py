"""
In-memory session registry.

Sessions live only in process memory: a restart invalidates every session,
and there is no expiry or eviction. Lookups take a shared read lock so many
requests can resolve their identity at once; creation and invalidation take
the exclusive write lock.
"""

from __future__ import annotations

import logging
import secrets
import threading
from contextlib import contextmanager
from typing import Generator

from .schemas import Session, UserState

logger = logging.getLogger(__name__)

SESSION_ID_BITS = 128


class ReadWriteLock:
    """
    Multiple-reader / single-writer lock.

    Waiting writers block new readers, so a steady stream of lookups cannot
    starve a login or logout.

    Example:
        >>> lock = ReadWriteLock()
        >>> with lock.read_locked():
        ...     pass
    """

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self, timeout: float | None = None) -> bool:
        with self._cond:
            acquired = self._cond.wait_for(
                lambda: not self._writer and not self._writers_waiting,
                timeout,
            )
            if acquired:
                self._readers += 1
            return acquired

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if not self._readers:
                self._cond.notify_all()

    def acquire_write(self, timeout: float | None = None) -> bool:
        with self._cond:
            self._writers_waiting += 1
            try:
                acquired = self._cond.wait_for(
                    lambda: not self._writer and not self._readers,
                    timeout,
                )
            finally:
                self._writers_waiting -= 1
            if acquired:
                self._writer = True
            else:
                self._cond.notify_all()
            return acquired

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self, timeout: float | None = None) -> Generator[None, None, None]:
        """
        Hold the shared lock for the duration of the block.

        Raises:
            TimeoutError: If the lock is not acquired within `timeout` seconds.
        """
        if not self.acquire_read(timeout):
            msg = "Timed out waiting for session store read lock"
            raise TimeoutError(msg)
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(
        self, timeout: float | None = None
    ) -> Generator[None, None, None]:
        """
        Hold the exclusive lock for the duration of the block.

        Raises:
            TimeoutError: If the lock is not acquired within `timeout` seconds.
        """
        if not self.acquire_write(timeout):
            msg = "Timed out waiting for session store write lock"
            raise TimeoutError(msg)
        try:
            yield
        finally:
            self.release_write()


class SessionStore:
    """
    Process-wide map of active sessions keyed by their 128-bit id.

    Only `create`, `lookup` and `invalidate` touch the underlying map; the
    collection itself is never handed out.

    Args:
        lock_timeout: Seconds any operation waits for the lock before giving
            up with `TimeoutError`. `None` waits forever.

    Example:
        >>> store = SessionStore()
        >>> sid = store.create(UserState.ADMIN)
        >>> store.lookup(sid).user_state
        <UserState.ADMIN: 'admin'>
        >>> store.invalidate(sid)
        True
        >>> store.lookup(sid) is None
        True
    """

    def __init__(self, lock_timeout: float | None = None) -> None:
        self._sessions: dict[int, Session] = {}
        self._lock = ReadWriteLock()
        self._lock_timeout = lock_timeout

    @staticmethod
    def _new_session_id() -> int:
        return secrets.randbits(SESSION_ID_BITS)

    def create(self, user_state: UserState) -> int:
        """
        Register a new session and return its id.

        Raises:
            TimeoutError: If the write lock cannot be acquired in time.
        """
        with self._lock.write_locked(self._lock_timeout):
            session_id = self._new_session_id()
            while session_id in self._sessions:
                session_id = self._new_session_id()
            self._sessions[session_id] = Session(id=session_id, user_state=user_state)
        logger.debug("Created %s session (%d active)", user_state.value, len(self))
        return session_id

    def lookup(self, session_id: int) -> Session | None:
        """
        Return the session registered under `session_id`, if any.

        Raises:
            TimeoutError: If the read lock cannot be acquired in time.
        """
        with self._lock.read_locked(self._lock_timeout):
            return self._sessions.get(session_id)

    def invalidate(self, session_id: int) -> bool:
        """
        Remove a session. Returns False when no such session was registered.

        Raises:
            TimeoutError: If the write lock cannot be acquired in time.
        """
        with self._lock.write_locked(self._lock_timeout):
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.debug("Invalidated session ending in ...%s", str(session_id)[-4:])
        return removed

    def __contains__(self, session_id: object) -> bool:
        if not isinstance(session_id, int):
            return False
        return self.lookup(session_id) is not None

    def __len__(self) -> int:
        with self._lock.read_locked(self._lock_timeout):
            return len(self._sessions)

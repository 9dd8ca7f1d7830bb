#!/usr/bin/env python3
"""Per-session parameter defaults"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

DEFAULT_SESSION_ID = "default"

# Setting one side of a pair as a default clears the other side
EXCLUSIVE_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("project_path", "workspace_path"),
    ("simulator_id", "simulator_name"),
)


class SessionStore:
    """
    Default parameter values keyed by session identifier.

    A session's defaults are created on first use and live until cleared; the
    store itself is owned by whoever created it. Writes are last-write-wins and
    no locking is done here.
    """

    def __init__(self, exclusive_pairs: Iterable[Tuple[str, str]] = EXCLUSIVE_PAIRS):
        self._sessions: Dict[str, Dict[str, Any]] = {}
        self._exclusive_pairs = tuple(exclusive_pairs)

    def _session(self, session_id: str) -> Dict[str, Any]:
        return self._sessions.setdefault(session_id, {})

    def get(self, session_id: str = DEFAULT_SESSION_ID) -> Dict[str, Any]:
        """Return a copy of the defaults for a session (empty if none were set)"""
        return dict(self._session(session_id))

    def set_defaults(self, session_id: str = DEFAULT_SESSION_ID, **fields: Any) -> Dict[str, Any]:
        """
        Set default values for a session. None values are ignored.

        Returns:
            The session's defaults after the update
        """
        session = self._session(session_id)
        for name, value in fields.items():
            if value is None:
                continue
            for first, second in self._exclusive_pairs:
                if name == first:
                    session.pop(second, None)
                elif name == second:
                    session.pop(first, None)
            session[name] = value
        return dict(session)

    def clear(self, session_id: str = DEFAULT_SESSION_ID, keys: Optional[List[str]] = None):
        """Clear some or all defaults for a session"""
        if keys is None:
            self._sessions.pop(session_id, None)
            return
        session = self._session(session_id)
        for key in keys:
            session.pop(key, None)

    def clear_all(self):
        self._sessions.clear()

    def session_ids(self) -> List[str]:
        return sorted(self._sessions)

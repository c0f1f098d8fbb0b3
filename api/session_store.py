#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Session Store - in-memory editor sessions with idle expiry
"""

import time
from typing import Dict, Optional

from fastapi import HTTPException

from config.logging_config import get_logger
from core.session import ConverterSession

logger = get_logger(__name__)


class SessionStore:
    """
    Holds one ConverterSession per browser tab.

    Features:
    - Session creation with random ids
    - Lookup with idle expiry
    - Explicit removal

    Usage:
        store = SessionStore(timeout_minutes=120)
        session = store.create()
        session = store.get(session.session_id)
    """

    def __init__(self, timeout_minutes: int = 120):
        self.sessions: Dict[str, ConverterSession] = {}
        self.timeout_seconds = timeout_minutes * 60

    def create(self) -> ConverterSession:
        """Create a new session"""
        self._cleanup_expired_sessions()
        session = ConverterSession()
        self.sessions[session.session_id] = session
        logger.info(f"Created session {session.session_id}")
        return session

    def get(self, session_id: str) -> ConverterSession:
        """
        Return the session for session_id

        Raises:
            HTTPException: 404 if unknown or expired
        """
        session = self.sessions.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail="Session not found. Please start a new session.")

        if self._is_expired(session):
            del self.sessions[session_id]
            raise HTTPException(status_code=404, detail="Session expired. Please start a new session.")

        session.touch()
        return session

    def remove(self, session_id: str) -> bool:
        """Drop a session; returns False if it did not exist"""
        return self.sessions.pop(session_id, None) is not None

    def _is_expired(self, session: ConverterSession, now: Optional[float] = None) -> bool:
        now = now or time.time()
        return now - session.last_activity > self.timeout_seconds

    def _cleanup_expired_sessions(self):
        """Remove expired sessions from memory"""
        now = time.time()
        expired = [sid for sid, s in self.sessions.items() if self._is_expired(s, now)]
        for sid in expired:
            del self.sessions[sid]
        if expired:
            logger.debug(f"Removed {len(expired)} expired sessions")

    def get_active_sessions_count(self) -> int:
        """Get number of active sessions"""
        self._cleanup_expired_sessions()
        return len(self.sessions)

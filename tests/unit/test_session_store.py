"""
Unit tests for api/session_store.py
"""
import time
import pytest
from fastapi import HTTPException

from api.session_store import SessionStore


class TestSessionStore:

    def test_create_and_get(self):
        store = SessionStore()
        session = store.create()
        assert store.get(session.session_id) is session
        assert store.get_active_sessions_count() == 1

    def test_unknown_session(self):
        with pytest.raises(HTTPException) as exc_info:
            SessionStore().get("missing")
        assert exc_info.value.status_code == 404

    def test_expired_session(self):
        store = SessionStore(timeout_minutes=1)
        session = store.create()
        session.last_activity = time.time() - 120

        with pytest.raises(HTTPException) as exc_info:
            store.get(session.session_id)
        assert "expired" in exc_info.value.detail
        assert session.session_id not in store.sessions

    def test_get_refreshes_activity(self):
        store = SessionStore(timeout_minutes=1)
        session = store.create()
        session.last_activity = time.time() - 30
        store.get(session.session_id)
        assert time.time() - session.last_activity < 5

    def test_remove(self):
        store = SessionStore()
        session = store.create()
        assert store.remove(session.session_id) is True
        assert store.remove(session.session_id) is False

    def test_cleanup_on_create(self):
        store = SessionStore(timeout_minutes=1)
        stale = store.create()
        stale.last_activity = time.time() - 120
        store.create()
        assert stale.session_id not in store.sessions

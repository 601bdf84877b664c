"""
Tests for the device-local session state: auth marker and theme.
"""

import pytest

from foco_finance.services import SessionStore
from foco_finance.services.storage import InMemoryLocalStore


@pytest.fixture
def session(local_store, local_settings):
    return SessionStore(local_store, local_settings, system_theme=lambda: "dark")


class TestAuthState:
    """Tests for get_auth/set_auth."""

    def test_default_is_signed_out(self, session):
        """Test the state before any sign-in."""
        state = session.get_auth()
        assert state.is_authenticated is False
        assert state.user_email is None

    def test_set_auth_defaults_name_to_email_local_part(self, session):
        """Test the display-name fallback."""
        state = session.set_auth("ana@example.com")
        assert state.is_authenticated
        assert state.user_name == "ana"
        assert state.last_login > 0
        assert session.get_auth() == state

    def test_set_auth_stores_camel_case(self, session, local_store, local_settings):
        """Test the stored document layout."""
        session.set_auth("ana@example.com", "Ana", "http://img", user_id="u1")
        stored = local_store.get(local_settings.auth_key)
        assert stored["isAuthenticated"] is True
        assert stored["userName"] == "Ana"
        assert stored["avatarUrl"] == "http://img"
        assert stored["userId"] == "u1"

    def test_set_auth_without_email_signs_out(self, session):
        """Test that a None email clears the state."""
        session.set_auth("ana@example.com")
        state = session.set_auth(None)
        assert state.is_authenticated is False
        assert session.get_auth().is_authenticated is False

    def test_corrupt_state_reads_as_signed_out(self, local_settings):
        """Test that an unreadable stored state falls back to the default."""
        local = InMemoryLocalStore({local_settings.auth_key: {"isAuthenticated": "maybe?"}})
        session = SessionStore(local, local_settings)
        assert session.get_auth().is_authenticated is False


class TestTheme:
    """Tests for theme persistence."""

    def test_default_follows_system(self, session):
        """Test that no stored theme means the system preference."""
        assert session.get_theme() == "dark"

    def test_set_and_toggle(self, session):
        """Test the theme is stored and toggled."""
        session.set_theme("light")
        assert session.get_theme() == "light"
        assert session.toggle_theme() == "dark"
        assert session.get_theme() == "dark"

    def test_unknown_theme_rejected(self, session):
        """Test that only light/dark are accepted."""
        with pytest.raises(ValueError):
            session.set_theme("blue")

    def test_theme_survives_sign_out(self, session):
        """Test that clearing auth leaves the theme alone."""
        session.set_theme("light")
        session.set_auth("ana@example.com")
        session.clear_auth()
        assert session.get_theme() == "light"

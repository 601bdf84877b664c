"""
Session Store

Explicit holder for the two pieces of device-only state: the local auth
marker and the theme. Both are read and written synchronously against the
local key-value store and never touch the network.

Defaults:
- auth: signed out
- theme: the system preference callback (AppSettings.default_theme when
  none is given)
"""

import time
from typing import Callable, Optional

from pydantic import ValidationError

from foco_finance.config import LocalStoreSettings, get_settings
from foco_finance.log import get_logger
from foco_finance.models.session import AuthState, Theme
from foco_finance.services.storage.interface import LocalStoreInterface


logger = get_logger(__name__)

THEMES = ("light", "dark")


class SessionStore:
    """get/set for auth state and theme, backed by device storage."""

    def __init__(
        self,
        local: LocalStoreInterface,
        settings: Optional[LocalStoreSettings] = None,
        system_theme: Optional[Callable[[], Theme]] = None,
    ):
        self._local = local
        self._settings = settings or get_settings().local_store
        self._system_theme = system_theme or (lambda: get_settings().app.default_theme)

    # -- auth -------------------------------------------------------------------------

    def get_auth(self) -> AuthState:
        data = self._local.get(self._settings.auth_key)
        if not data:
            return AuthState()
        try:
            return AuthState.model_validate(data)
        except ValidationError as e:
            logger.warning("stored_auth_state_invalid", error=str(e))
            return AuthState()

    def set_auth(
        self,
        email: Optional[str],
        name: Optional[str] = None,
        avatar: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> AuthState:
        """
        Record a signed-in user, or sign out when email is None.

        The display name falls back to the local part of the email.
        """
        if not email:
            self.clear_auth()
            return AuthState()
        state = AuthState(
            is_authenticated=True,
            user_email=email,
            user_name=name or email.split("@")[0],
            avatar_url=avatar,
            last_login=int(time.time() * 1000),
            user_id=user_id,
        )
        self._local.set(
            self._settings.auth_key,
            state.model_dump(mode="json", by_alias=True),
        )
        return state

    def clear_auth(self) -> None:
        self._local.remove(self._settings.auth_key)

    # -- theme ------------------------------------------------------------------------

    def get_theme(self) -> Theme:
        saved = self._local.get(self._settings.theme_key)
        if saved in THEMES:
            return saved
        return self._system_theme()

    def set_theme(self, theme: Theme) -> None:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme!r}")
        self._local.set(self._settings.theme_key, theme)

    def toggle_theme(self) -> Theme:
        theme: Theme = "dark" if self.get_theme() == "light" else "light"
        self.set_theme(theme)
        return theme

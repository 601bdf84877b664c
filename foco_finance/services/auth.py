"""
Identity Boundary

The identity provider is an external collaborator: it signs users in and
out and returns a UserIdentity or fails with an AuthError carrying a
provider code. This module defines that contract, maps provider codes to
the fixed set of messages shown to the user, and keeps the local
AuthState in step with the provider through AuthService.

LocalIdentityProvider keeps email/password accounts in a local store;
deployments with a hosted provider plug in their own IdentityProvider.
"""

import hashlib
import hmac
import secrets
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional
from uuid import NAMESPACE_URL, uuid5

from pydantic import ValidationError

from foco_finance.config import LocalStoreSettings, get_settings
from foco_finance.log import get_logger
from foco_finance.models.session import AuthState, StoredAccount, UserIdentity
from foco_finance.services.repository import PersistenceGateway
from foco_finance.services.session import SessionStore
from foco_finance.services.storage.interface import LocalStoreInterface


logger = get_logger(__name__)


class AuthErrorCode(str, Enum):
    """Provider failure codes the UI knows how to explain."""
    EMAIL_ALREADY_IN_USE = "auth/email-already-in-use"
    WRONG_PASSWORD = "auth/wrong-password"
    USER_NOT_FOUND = "auth/user-not-found"
    FEDERATED_FAILED = "auth/federated-failed"
    GENERIC = "auth/generic"


AUTH_ERROR_MESSAGES = {
    AuthErrorCode.EMAIL_ALREADY_IN_USE.value: "Este e-mail já está em uso.",
    AuthErrorCode.WRONG_PASSWORD.value: "Senha incorreta.",
    AuthErrorCode.USER_NOT_FOUND.value: "Usuário não encontrado.",
    AuthErrorCode.FEDERATED_FAILED.value: "Erro ao entrar com Google.",
}

GENERIC_AUTH_MESSAGE = "Erro ao autenticar. Verifique seus dados."


class AuthError(Exception):
    """Identity provider failure."""

    def __init__(self, code: str, message: Optional[str] = None):
        super().__init__(message or code)
        self.code = code

    @property
    def user_message(self) -> str:
        return auth_error_message(self.code)


def auth_error_message(code: str) -> str:
    """Display string for a provider code; unknown codes get the generic message."""
    return AUTH_ERROR_MESSAGES.get(code, GENERIC_AUTH_MESSAGE)


class IdentityProvider(ABC):
    """
    Contract of the external identity provider.

    Providers are shared by every session, so they never hold a
    "current user"; each AuthService keeps its own signed-in identity.
    """

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> UserIdentity:
        pass

    @abstractmethod
    async def sign_up_with_password(self, email: str, password: str) -> UserIdentity:
        pass

    @abstractmethod
    async def sign_in_federated(self) -> UserIdentity:
        """OAuth-style sign-in (e.g. Google)."""
        pass

    @abstractmethod
    async def update_display_name(self, uid: str, display_name: str) -> UserIdentity:
        pass

    @abstractmethod
    async def sign_out(self, uid: str) -> None:
        pass


def stable_uid(email: str) -> str:
    """Uid derived from the normalized email, identical across restarts."""
    return uuid5(NAMESPACE_URL, f"mailto:{email.strip().lower()}").hex


class LocalIdentityProvider(IdentityProvider):
    """
    Email/password accounts kept in a LocalStoreInterface, PBKDF2-hashed.

    Accounts live under LocalStoreSettings.accounts_key, so a file-backed
    store keeps them across restarts. Uids come from stable_uid, which
    keeps remote users/{uid} paths reachable even if the store is lost.

    Federated sign-in succeeds only when a federated identity was given
    at construction.
    """

    _ITERATIONS = 100_000

    def __init__(
        self,
        local: LocalStoreInterface,
        settings: Optional[LocalStoreSettings] = None,
        federated_identity: Optional[UserIdentity] = None,
    ):
        self._local = local
        self._key = (settings or get_settings().local_store).accounts_key
        self._federated_identity = federated_identity

    def _hash(self, password: str, salt: bytes) -> bytes:
        return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, self._ITERATIONS)

    def _load(self) -> dict[str, StoredAccount]:
        raw = self._local.get(self._key, {}) or {}
        accounts = {}
        for email, record in raw.items():
            try:
                accounts[email] = StoredAccount.model_validate(record)
            except ValidationError as e:
                logger.warning("stored_account_invalid", email=email, error=str(e))
        return accounts

    def _store(self, account: StoredAccount) -> None:
        raw = self._local.get(self._key, {}) or {}
        raw[account.email] = account.model_dump(by_alias=True)
        self._local.set(self._key, raw)

    async def sign_up_with_password(self, email: str, password: str) -> UserIdentity:
        key = email.strip().lower()
        if key in self._load():
            raise AuthError(AuthErrorCode.EMAIL_ALREADY_IN_USE.value)
        salt = secrets.token_bytes(16)
        account = StoredAccount(
            uid=stable_uid(key),
            email=key,
            salt=salt.hex(),
            password_hash=self._hash(password, salt).hex(),
        )
        self._store(account)
        return account.identity()

    async def sign_in_with_password(self, email: str, password: str) -> UserIdentity:
        account = self._load().get(email.strip().lower())
        if account is None:
            raise AuthError(AuthErrorCode.USER_NOT_FOUND.value)
        digest = self._hash(password, bytes.fromhex(account.salt))
        if not hmac.compare_digest(bytes.fromhex(account.password_hash), digest):
            raise AuthError(AuthErrorCode.WRONG_PASSWORD.value)
        return account.identity()

    async def sign_in_federated(self) -> UserIdentity:
        if self._federated_identity is None:
            raise AuthError(AuthErrorCode.FEDERATED_FAILED.value, "No federated provider configured")
        return self._federated_identity

    async def update_display_name(self, uid: str, display_name: str) -> UserIdentity:
        account = next((a for a in self._load().values() if a.uid == uid), None)
        if account is None:
            raise AuthError(AuthErrorCode.USER_NOT_FOUND.value)
        account = account.model_copy(update={"display_name": display_name})
        self._store(account)
        return account.identity()

    async def sign_out(self, uid: str) -> None:
        # No server-side session to revoke
        return None


class AuthService:
    """
    Sign-in/sign-up/sign-out as the login screen sees them.

    One AuthService per browser session: it owns the signed-in identity
    that its PersistenceGateway scopes remote paths with. Every successful
    provider call is mirrored into the SessionStore; sign-out also drops
    the cached documents of the previous user. AuthError propagates to
    the caller, which shows `user_message`.
    """

    def __init__(
        self,
        provider: IdentityProvider,
        session: SessionStore,
        gateway: Optional[PersistenceGateway] = None,
    ):
        self._provider = provider
        self._session = session
        self._gateway = gateway
        self._identity: Optional[UserIdentity] = None

    def attach_gateway(self, gateway: PersistenceGateway) -> None:
        self._gateway = gateway

    def current_user(self) -> Optional[UserIdentity]:
        return self._identity

    def current_user_id(self) -> Optional[str]:
        return self._identity.uid if self._identity is not None else None

    def _remember(self, identity: UserIdentity) -> AuthState:
        self._identity = identity
        logger.info("user_signed_in", user_id=identity.uid)
        return self._session.set_auth(
            identity.email,
            identity.display_name,
            identity.avatar_url,
            user_id=identity.uid,
        )

    async def sign_in(self, email: str, password: str) -> AuthState:
        identity = await self._provider.sign_in_with_password(email, password)
        return self._remember(identity)

    async def sign_up(self, email: str, password: str, display_name: str) -> AuthState:
        identity = await self._provider.sign_up_with_password(email, password)
        identity = await self._provider.update_display_name(identity.uid, display_name)
        return self._remember(identity)

    async def sign_in_federated(self) -> AuthState:
        identity = await self._provider.sign_in_federated()
        return self._remember(identity)

    async def sign_out(self) -> None:
        if self._identity is not None:
            await self._provider.sign_out(self._identity.uid)
        self._identity = None
        self._session.clear_auth()
        if self._gateway is not None:
            self._gateway.clear_cache()
        logger.info("user_signed_out")

"""
Session Models

Device-local state: who is signed in on this device and which theme
they picked. Never stored remotely.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


Theme = Literal["light", "dark"]


class AuthState(BaseModel):
    """
    Local mirror of the identity provider's session.

    The default instance is the signed-out state.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_authenticated: bool = False
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    avatar_url: Optional[str] = None
    last_login: Optional[int] = Field(
        default=None,
        description="Epoch milliseconds of the last successful sign-in"
    )
    user_id: Optional[str] = Field(
        default=None,
        description="Provider uid, scopes remote storage paths"
    )


class UserIdentity(BaseModel):
    """What the identity provider returns for a signed-in user."""

    uid: str = Field(..., min_length=1)
    email: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


class StoredAccount(BaseModel):
    """Email/password account as the local identity provider keeps it."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    uid: str = Field(..., min_length=1)
    email: str
    display_name: Optional[str] = None
    salt: str = Field(..., description="Hex-encoded PBKDF2 salt")
    password_hash: str = Field(..., description="Hex-encoded PBKDF2-SHA256 digest")

    def identity(self) -> UserIdentity:
        return UserIdentity(uid=self.uid, email=self.email, display_name=self.display_name)

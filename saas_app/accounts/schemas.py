"""
SaaS App: Account Boundary Types

Pydantic models for everything that crosses the repository boundary.
Token fields and the nonce have no place in any of the output views.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from saas_app.models.user import User

# Fields exposed outside the persistence boundary
PUBLIC_FIELDS: frozenset[str] = frozenset({
    "id",
    "display_name",
    "email",
    "public_address",
    "avatar_url",
    "slug",
    "is_signedup_via_google",
})

# Projection returned by slug lookups
SLUG_VIEW_FIELDS: tuple[str, ...] = ("email", "public_address", "display_name", "avatar_url")


class UserPublicView(BaseModel):
    """Sanitized user record."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    email: str
    slug: str
    display_name: str | None = None
    public_address: str | None = None
    avatar_url: str | None = None
    is_signedup_via_google: bool = False

    @classmethod
    def from_user(cls, user: User) -> UserPublicView:
        return cls.model_validate({name: getattr(user, name) for name in PUBLIC_FIELDS})


class UserSlugView(BaseModel):
    """Profile card shown on a user's public page."""

    model_config = ConfigDict(frozen=True)

    email: str
    public_address: str | None = None
    display_name: str | None = None
    avatar_url: str | None = None


class GoogleToken(BaseModel):
    """
    OAuth tokens received from Google. Either may be absent.

    Accepts snake_case or camelCase keys (`access_token` / `accessToken`).
    Any other key is a validation error.
    """

    model_config = ConfigDict(extra="forbid")

    access_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("access_token", "accessToken"),
    )
    refresh_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("refresh_token", "refreshToken"),
    )

    def is_empty(self) -> bool:
        return not (self.access_token or self.refresh_token)


class SignUpFields(BaseModel):
    """Column bounds for values written by the signup flows."""

    id: str | None = Field(default=None, min_length=1, max_length=64)
    email: str = Field(..., min_length=1, max_length=255)
    google_id: str | None = Field(default=None, max_length=255)
    display_name: str | None = Field(default=None, max_length=255)
    public_address: str | None = Field(default=None, max_length=255)
    avatar_url: str | None = Field(default=None, max_length=2048)


class ProfileUpdate(BaseModel):
    """Validated modifier written by update_profile."""

    display_name: str | None = Field(default=None, max_length=255)
    public_address: str | None = Field(default=None, max_length=255)
    avatar_url: str | None = Field(default=None, max_length=2048)
    slug: str = Field(..., min_length=1, max_length=255, pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$")


class EmailTemplateContent(BaseModel):
    """A rendered email template."""

    subject: str
    message: str

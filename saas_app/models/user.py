"""
SaaS App: User Model

The only account entity. Rows are created by the Google OAuth and passwordless
signup flows and never deleted by the application.

Uniqueness: slug, email, public_address, nonce and google_id are unique.
The nullable ones allow any number of NULLs.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import BOOLEAN, INTEGER, TIMESTAMP, String
from sqlalchemy.orm import Mapped, mapped_column

from saas_app.models.base import Base


def _new_user_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """
    Core user identity record.

    `id` is generated for Google signups and supplied by the identity provider
    for passwordless signups, hence a string key rather than a native UUID.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=_new_user_id,
        comment="Generated uuid4 hex, or the passwordless provider uid",
    )
    slug: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        comment="URL-safe identifier derived from display name / address / email",
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        comment="Account creation timestamp",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    public_address: Mapped[str | None] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
        comment="Wallet-style public address",
    )
    nonce: Mapped[int | None] = mapped_column(
        INTEGER,
        unique=True,
        nullable=True,
        comment="Wallet sign-in nonce",
    )
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    # --- Google identity link ---
    google_id: Mapped[str | None] = mapped_column(
        String(255),
        unique=True,
        nullable=True,
    )
    google_access_token: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    google_refresh_token: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    is_signedup_via_google: Mapped[bool] = mapped_column(
        BOOLEAN,
        default=False,
        server_default="false",
        nullable=False,
        comment="Set once at creation",
    )

    def __repr__(self) -> str:
        return f"<User id={self.id!r} slug={self.slug!r} email={self.email!r}>"

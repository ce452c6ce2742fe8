"""
SaaS App: User Repository

Typed operations over the `users` table:

- get_user_by_slug: public profile lookup, None when missing
- update_profile: display name / address / avatar, with slug regeneration
- sign_in_or_sign_up_via_google: Google OAuth upsert keyed by email
- sign_in_or_sign_up_by_passwordless: passwordless signup keyed by email
- public_fields: the projection every returned object is built from

New signups trigger two best-effort side effects through the
NotificationDispatcher (welcome email, "signups" mailing list). They run after
the user row is committed, one after the other, and their failures never reach
the caller. A missing welcome template, on the other hand, is a configuration
error and aborts the signup before anything is written.

No transaction spans the read and the write of update_profile: concurrent
updates of one user are last-writer-wins.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import structlog
from pydantic import ValidationError
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from saas_app.accounts.email_templates import get_email_template
from saas_app.accounts.errors import (
    TemplateMissingError,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserValidationError,
)
from saas_app.accounts.schemas import (
    PUBLIC_FIELDS,
    EmailTemplateContent,
    GoogleToken,
    ProfileUpdate,
    SignUpFields,
    UserPublicView,
    UserSlugView,
)
from saas_app.config import settings
from saas_app.models.user import User
from saas_app.notifications.dispatcher import NotificationDispatcher
from saas_app.utils.slugify import SlugExists, generate_slug, slug_base

logger = structlog.get_logger(__name__)


class UserRepository:
    """
    Persistence-backed user lifecycle operations.

    Usage:
        repo = UserRepository(get_session_factory(), NotificationDispatcher())
        user = await repo.sign_in_or_sign_up_by_passwordless(uid=uid, email=email)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        dispatcher: NotificationDispatcher | None = None,
    ):
        self.session_factory = session_factory
        self.dispatcher = dispatcher or NotificationDispatcher()

    @staticmethod
    def public_fields() -> frozenset[str]:
        return PUBLIC_FIELDS

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    @staticmethod
    def _slug_checker(session: AsyncSession, exclude_user_id: str | None = None) -> SlugExists:
        """Uniqueness predicate for generate_slug, optionally ignoring one user's own row."""

        async def exists(slug: str) -> bool:
            stmt = select(User.id).where(User.slug == slug)
            if exclude_user_id is not None:
                stmt = stmt.where(User.id != exclude_user_id)
            result = await session.execute(stmt.limit(1))
            return result.first() is not None

        return exists

    @staticmethod
    async def _find_by_email(session: AsyncSession, email: str) -> User | None:
        result = await session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def _welcome_template(session: AsyncSession, user_name: str | None) -> EmailTemplateContent:
        name = settings.WELCOME_TEMPLATE_NAME
        content = await get_email_template(session, name, {"user_name": user_name})
        if content is None:
            logger.error("welcome_template_missing", name=name, source="users")
            raise TemplateMissingError(name)
        return content

    @staticmethod
    def _check_sign_up(**fields: Any) -> None:
        try:
            SignUpFields.model_validate(fields)
        except ValidationError as e:
            logger.info("sign_up_rejected", reason="invalid_fields", error_count=e.error_count(), source="users")
            raise UserValidationError(str(e)) from e

    @staticmethod
    def _parse_token(google_token: GoogleToken | dict[str, Any] | None) -> GoogleToken:
        if isinstance(google_token, GoogleToken):
            return google_token
        try:
            return GoogleToken.model_validate(google_token or {})
        except ValidationError as e:
            raise UserValidationError(str(e)) from e

    @staticmethod
    async def _insert(session: AsyncSession, user: User) -> UserPublicView:
        session.add(user)
        try:
            await session.flush()
            view = UserPublicView.from_user(user)
            await session.commit()
        except IntegrityError as e:
            await session.rollback()
            logger.warning("user_insert_conflict", email=user.email, error=str(e.orig), source="users")
            raise UserValidationError("A user with the same unique field already exists") from e
        return view

    async def _notify_signup(self, email: str, content: EmailTemplateContent) -> None:
        # Results are deliberately discarded; the dispatcher logs failures.
        await self.dispatcher.send_welcome_email(email, content.subject, content.message)
        await self.dispatcher.register_signup(email, settings.SIGNUP_LIST_NAME)

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    async def get_user_by_slug(self, slug: str) -> UserSlugView | None:
        logger.debug("get_user_by_slug", slug=slug, source="users")

        stmt = select(
            User.email,
            User.public_address,
            User.display_name,
            User.avatar_url,
        ).where(User.slug == slug)

        async with self.session_factory() as session:
            row = (await session.execute(stmt)).first()

        if row is None:
            return None
        return UserSlugView.model_validate(dict(row._mapping))

    async def update_profile(
        self,
        user_id: str,
        name: str | None,
        public_address: str | None,
        avatar_url: str | None,
    ) -> UserPublicView:
        """
        Update display name, public address and avatar.

        The avatar is always overwritten. The slug is regenerated when the name
        or the address changed, and then once more from (name, address)
        unconditionally, so the final slug always reflects the new inputs.
        Slug uniqueness ignores the user's own row, which keeps the slug stable
        when nothing changed. With neither name nor address the slug is built
        from the email.

        Raises:
            UserNotFoundError: no user with `user_id`.
            UserValidationError: the modifier is invalid or collides with
                another user's unique field.
        """
        logger.info("update_profile", user_id=user_id, source="users")

        async with self.session_factory() as session:
            user = await session.get(User, user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            exists = self._slug_checker(session, exclude_user_id=user_id)

            def base(*parts: str | None) -> str:
                # No name and no address: same base as the passwordless signup
                return slug_base(*parts) or user.email

            modifier: dict[str, Any] = {
                "display_name": user.display_name,
                "public_address": user.public_address,
                "avatar_url": avatar_url,
                "slug": user.slug,
            }

            if public_address != user.public_address:
                modifier["public_address"] = public_address
                modifier["slug"] = await generate_slug(base(name, public_address), exists)

            if name != user.display_name:
                modifier["display_name"] = name
                modifier["slug"] = await generate_slug(base(name), exists)

            # Overrides both branch results above. Kept as-is pending product decision.
            modifier["slug"] = await generate_slug(base(name, public_address), exists)

            try:
                values = ProfileUpdate.model_validate(modifier).model_dump()
            except ValidationError as e:
                raise UserValidationError(str(e)) from e

            try:
                await session.execute(update(User).where(User.id == user_id).values(**values))
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                logger.warning("update_profile_conflict", user_id=user_id, error=str(e.orig), source="users")
                raise UserValidationError("Profile conflicts with another user") from e

            await session.refresh(user)
            view = UserPublicView.from_user(user)

        logger.info("update_profile_complete", user_id=user_id, slug=view.slug, source="users")
        return view

    async def sign_in_or_sign_up_via_google(
        self,
        *,
        google_id: str,
        email: str,
        public_address: str | None = None,
        nonce: int | None = None,
        display_name: str | None = None,
        avatar_url: str | None = None,
        google_token: GoogleToken | dict[str, Any] | None = None,
    ) -> UserPublicView:
        """
        Resolve a Google sign-in to a user, creating one on first sight.

        Existing user, no token, already linked: returned untouched.
        Existing user otherwise: google_id and the non-empty token fields are
        written; the projection read before the write is returned.
        New email: user created with is_signedup_via_google=True, then the
        welcome email and mailing-list registration are attempted.

        Raises:
            TemplateMissingError: the welcome template is not configured
                (nothing is written).
            UserValidationError: the token has unknown keys, a field exceeds
                its column bound, the new row collides with a unique field, or
                `google_id` is already linked to another user.
        """
        token = self._parse_token(google_token)

        async with self.session_factory() as session:
            user = await self._find_by_email(session, email)

            if user is not None:
                view = UserPublicView.from_user(user)

                if token.is_empty() and user.google_id:
                    logger.info("google_sign_in", user_id=user.id, source="users")
                    return view

                self._check_sign_up(email=email, google_id=google_id)
                modifier: dict[str, Any] = {"google_id": google_id}
                if token.access_token:
                    modifier["google_access_token"] = token.access_token
                if token.refresh_token:
                    modifier["google_refresh_token"] = token.refresh_token

                try:
                    await session.execute(update(User).where(User.email == email).values(**modifier))
                    await session.commit()
                except IntegrityError as e:
                    await session.rollback()
                    logger.warning("google_link_conflict", user_id=user.id, error=str(e.orig), source="users")
                    raise UserValidationError("Google account is already linked to another user") from e
                logger.info(
                    "google_account_linked",
                    user_id=user.id,
                    fields=sorted(modifier),
                    source="users",
                )
                return view

            self._check_sign_up(
                email=email,
                google_id=google_id,
                display_name=display_name,
                public_address=public_address,
                avatar_url=avatar_url,
            )
            content = await self._welcome_template(session, display_name)
            slug = await generate_slug(slug_base(display_name, public_address), self._slug_checker(session))

            view = await self._insert(
                session,
                User(
                    created_at=datetime.now(timezone.utc),
                    google_id=google_id,
                    email=email,
                    public_address=public_address,
                    nonce=nonce,
                    google_access_token=token.access_token,
                    google_refresh_token=token.refresh_token,
                    display_name=display_name,
                    avatar_url=avatar_url,
                    slug=slug,
                    is_signedup_via_google=True,
                ),
            )

        logger.info("google_sign_up", user_id=view.id, slug=view.slug, source="users")
        await self._notify_signup(email, content)
        return view

    async def sign_in_or_sign_up_by_passwordless(self, *, uid: str, email: str) -> UserPublicView:
        """
        Create a user for a passwordless (magic link) signup.

        Raises:
            UserAlreadyExistsError: the email is already registered.
            TemplateMissingError: the welcome template is not configured
                (nothing is written).
            UserValidationError: `uid` is already taken, or `uid` or `email`
                exceeds its column bound.
        """
        async with self.session_factory() as session:
            if await self._find_by_email(session, email) is not None:
                logger.info("passwordless_sign_up_rejected", reason="email_exists", source="users")
                raise UserAlreadyExistsError(email)

            self._check_sign_up(id=uid, email=email)
            content = await self._welcome_template(session, email)
            slug = await generate_slug(email, self._slug_checker(session))

            view = await self._insert(
                session,
                User(
                    id=uid,
                    created_at=datetime.now(timezone.utc),
                    email=email,
                    slug=slug,
                    is_signedup_via_google=False,
                ),
            )

        logger.info("passwordless_sign_up", user_id=view.id, slug=view.slug, source="users")
        await self._notify_signup(email, content)
        return view

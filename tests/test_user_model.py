"""Tests for the User and EmailTemplate models."""

from __future__ import annotations

import uuid

from saas_app.models.email_template import EmailTemplate
from saas_app.models.user import User, _new_user_id


class TestUserModel:
    def test_instantiation_with_explicit_id(self) -> None:
        """Passwordless signups supply the provider uid as id."""
        user = User(id="provider-uid-1", email="jane@example.com", slug="jane-example-com")
        assert user.id == "provider-uid-1"

    def test_generated_ids_are_distinct_uuid_hex(self) -> None:
        first, second = _new_user_id(), _new_user_id()
        assert first != second
        uuid.UUID(hex=first)

    def test_unique_columns(self) -> None:
        columns = User.__table__.c
        for name in ("slug", "email", "public_address", "nonce", "google_id"):
            assert columns[name].unique, name

    def test_nullable_identity_fields(self) -> None:
        columns = User.__table__.c
        assert columns["email"].nullable is False
        assert columns["slug"].nullable is False
        assert columns["public_address"].nullable is True
        assert columns["google_id"].nullable is True

    def test_repr_contains_key_info(self) -> None:
        user = User(id="u1", email="ash@pallet.town", slug="ash-pallet-town")
        r = repr(user)
        assert "User" in r
        assert "slug='ash-pallet-town'" in r
        assert "email=" in r
        assert "google_access_token" not in r


class TestEmailTemplateModel:
    def test_name_is_primary_key(self) -> None:
        assert [c.name for c in EmailTemplate.__table__.primary_key] == ["name"]

    def test_repr(self) -> None:
        assert repr(EmailTemplate(name="welcome")) == "<EmailTemplate name='welcome'>"

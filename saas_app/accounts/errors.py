"""
Account workflow exceptions.

All of these propagate to the caller. Notification failures are not in this
hierarchy: they are absorbed by the dispatcher.
"""

from __future__ import annotations


class AccountError(Exception):
    """Base class for account-related exceptions."""


class UserNotFoundError(AccountError):
    def __init__(self, user_id: str):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class UserAlreadyExistsError(AccountError):
    def __init__(self, email: str):
        super().__init__("User already exists")
        self.email = email


class TemplateMissingError(AccountError):
    """A required email template is not configured. Fatal to signup."""

    def __init__(self, name: str):
        super().__init__(f'Email template "{name}" not found in database.')
        self.name = name


class UserValidationError(AccountError):
    """A profile write failed validation or a uniqueness constraint."""

from saas_app.accounts.email_templates import get_email_template, insert_default_templates
from saas_app.accounts.errors import (
    AccountError,
    TemplateMissingError,
    UserAlreadyExistsError,
    UserNotFoundError,
    UserValidationError,
)
from saas_app.accounts.schemas import GoogleToken, UserPublicView, UserSlugView
from saas_app.accounts.user_repository import UserRepository

__all__ = [
    "AccountError",
    "GoogleToken",
    "TemplateMissingError",
    "UserAlreadyExistsError",
    "UserNotFoundError",
    "UserPublicView",
    "UserRepository",
    "UserSlugView",
    "UserValidationError",
    "get_email_template",
    "insert_default_templates",
]

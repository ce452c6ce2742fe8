"""
Models package: export all SQLAlchemy models.
"""

from saas_app.models.base import Base
from saas_app.models.email_template import EmailTemplate
from saas_app.models.user import User

__all__ = ["Base", "EmailTemplate", "User"]

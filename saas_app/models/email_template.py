"""
SaaS App: Email Template Model

Named transactional email templates. `subject` and `message` carry `$var`
placeholders rendered by saas_app.accounts.email_templates.
"""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from saas_app.models.base import Base


class EmailTemplate(Base):
    __tablename__ = "email_templates"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<EmailTemplate name={self.name!r}>"

"""
SaaS App: Email Template Lookup

Templates are rows in `email_templates`. Placeholders use `$name` /
`${name}` syntax. Unknown placeholders are left as-is and None renders as an
empty string.
"""

from __future__ import annotations

from string import Template
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from saas_app.accounts.schemas import EmailTemplateContent
from saas_app.models.email_template import EmailTemplate

logger = structlog.get_logger(__name__)

DEFAULT_TEMPLATES: dict[str, dict[str, str]] = {
    "welcome": {
        "subject": "Welcome to SaaS boilerplate by Async",
        "message": (
            "${user_name},\n"
            "<p>Thanks for signing up on our "
            '<a href="https://github.com/async-labs/saas" target="blank">SaaS boilerplate</a>!</p>\n'
            "<p>If you have any questions while learning the codebase, "
            "reply to this email and we will get back to you.</p>\n"
            "Kelly & Timur, Team Async\n"
        ),
    },
}


def render(source: str, params: dict[str, Any]) -> str:
    return Template(source).safe_substitute({k: "" if v is None else str(v) for k, v in params.items()})


async def get_email_template(
    session: AsyncSession,
    name: str,
    params: dict[str, Any] | None = None,
) -> EmailTemplateContent | None:
    """
    Load template `name` and render it with `params`.

    Returns:
        The rendered subject and message, or None when no such template exists.
    """
    result = await session.execute(select(EmailTemplate).where(EmailTemplate.name == name))
    template = result.scalar_one_or_none()
    if template is None:
        logger.warning("email_template_not_found", name=name)
        return None

    params = params or {}
    return EmailTemplateContent(
        subject=render(template.subject, params),
        message=render(template.message, params),
    )


async def insert_default_templates(session: AsyncSession) -> list[str]:
    """
    Seed DEFAULT_TEMPLATES. Existing rows are left untouched.

    Returns:
        Names of the templates inserted by this call.
    """
    result = await session.execute(select(EmailTemplate.name))
    existing = set(result.scalars().all())

    inserted: list[str] = []
    for name, body in DEFAULT_TEMPLATES.items():
        if name in existing:
            continue
        session.add(EmailTemplate(name=name, subject=body["subject"], message=body["message"]))
        inserted.append(name)

    if inserted:
        await session.commit()
        logger.info("email_templates_seeded", names=inserted)
    return inserted

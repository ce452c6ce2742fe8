"""
SaaS App: Mailchimp API Client

Registers email addresses on Mailchimp audience lists (Marketing API v3).

    POST https://{region}.api.mailchimp.com/3.0/lists/{list_id}/members/
    {"email_address": "...", "status": "subscribed"}

Authentication is HTTP Basic with the literal user "apikey" and the API key
as password. List names used by the application ("signups") map to list ids
configured in settings.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from saas_app.config import settings
from saas_app.notifications.errors import NotificationError

logger = structlog.get_logger(__name__)


def mailchimp_base_url(region: str) -> str:
    return f"https://{region}.api.mailchimp.com/3.0"


class MailchimpClient:
    """
    Async Mailchimp client.

    Usage:
        async with MailchimpClient() as client:
            await client.add_to_list("jane@example.com", "signups")

    When the API key is absent the client is disabled: add_to_list logs and
    returns False without any HTTP call.
    """

    def __init__(
        self,
        api_key: str | None = None,
        region: str | None = None,
        list_ids: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.MAILCHIMP_API_KEY
        self._region = region or settings.MAILCHIMP_REGION
        self._base_url = mailchimp_base_url(self._region)
        self._list_ids = list_ids if list_ids is not None else {
            settings.SIGNUP_LIST_NAME: settings.MAILCHIMP_SAAS_ALL_LIST_ID,
        }
        self._timeout = timeout or settings.MAILCHIMP_TIMEOUT_SECONDS
        self._enabled = bool(self._api_key)
        self._client: httpx.AsyncClient | None = None

        if not self._enabled:
            logger.warning(
                "mailchimp_client_disabled",
                reason="MAILCHIMP_API_KEY is empty or not set",
                source="mailchimp",
            )

    async def __aenter__(self) -> MailchimpClient:
        if self._enabled:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                auth=("apikey", self._api_key),
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def list_id(self, list_name: str) -> str:
        """Resolve an application list name to the Mailchimp list id."""
        list_id = self._list_ids.get(list_name)
        if not list_id:
            raise ValueError(f"Unknown or unconfigured Mailchimp list: {list_name!r}")
        return list_id

    async def add_to_list(self, email: str, list_name: str) -> bool:
        """
        Subscribe `email` to the list registered under `list_name`.

        Returns:
            True when Mailchimp accepted the member, False when the client is
            disabled.

        Raises:
            ValueError: list_name has no configured list id.
            NotificationError: the request failed or Mailchimp rejected it.
        """
        if not self._enabled:
            return False

        assert self._client is not None, "Client not initialized. Use 'async with'."

        list_id = self.list_id(list_name)
        path = f"/lists/{list_id}/members/"
        logger.info("mailchimp_add_member", list_name=list_name, path=path, source="mailchimp")

        try:
            response = await self._client.post(
                path,
                json={"email_address": email, "status": "subscribed"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise NotificationError(
                "mailchimp",
                f"HTTP {e.response.status_code} adding member to {list_name}",
            ) from e
        except httpx.RequestError as e:
            raise NotificationError("mailchimp", f"request failed: {e}") from e

        logger.info(
            "mailchimp_member_added",
            list_name=list_name,
            status_code=response.status_code,
            source="mailchimp",
        )
        return True

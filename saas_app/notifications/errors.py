"""Delivery failures raised by the notification adapters."""

from __future__ import annotations


class NotificationError(Exception):
    """
    An email or mailing-list call failed.

    Raised by the adapters, caught by NotificationDispatcher. Never reaches
    callers of the account operations.
    """

    def __init__(self, channel: str, message: str):
        super().__init__(f"{channel}: {message}")
        self.channel = channel
        self.message = message

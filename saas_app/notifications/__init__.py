from saas_app.notifications.dispatcher import NotificationDispatcher
from saas_app.notifications.errors import NotificationError
from saas_app.notifications.mailchimp import MailchimpClient
from saas_app.notifications.mailer import EmailSender

__all__ = [
    "EmailSender",
    "MailchimpClient",
    "NotificationDispatcher",
    "NotificationError",
]

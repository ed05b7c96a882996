"""Administrative notifications for catalog lifecycle events.

Delivery is fire-and-forget: a failing notifier is logged and never
propagates into the write that triggered it.
"""

import logging
from datetime import datetime

from subscription_catalog.config import Settings, settings
from subscription_catalog.protocols import Notifier

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d.%m.%Y %H:%M"

_TEMPLATES = {
    "created": (
        "A new subscription has been created:",
        "Creation date",
        "You can view the details by accessing the system admin panel.",
    ),
    "updated": (
        "Subscription information has been updated:",
        "Update date",
        "You can view the changes in the admin panel.",
    ),
    "activated": (
        "Subscription has been activated:",
        "Activation date",
        "The subscription will now be available to users.",
    ),
    "deactivated": (
        "Subscription has been deactivated:",
        "Deactivation date",
        "The subscription will no longer be available to users.",
    ),
}


def render_body(event: str, subscription_name: str, when: datetime) -> str:
    """Render the plain-text body for a lifecycle event."""
    headline, date_label, footer = _TEMPLATES[event]
    return (
        "Dear Admin,\n\n"
        f"{headline}\n\n"
        f"Subscription name: {subscription_name}\n"
        f"{date_label}: {when.strftime(DATE_FORMAT)}\n\n"
        f"{footer}\n\n"
        "Best regards,\n"
        "System"
    )


class NotificationService:
    """Sends lifecycle e-mails to the catalog administrator.

    Example:
        ```python
        notifications = NotificationService(
            notifier=LoggingNotifier(),
            admin_email="admin@example.com",
        )
        notifications.subscription_created("Netflix")
        ```
    """

    def __init__(
        self,
        notifier: Notifier,
        admin_email: str | None,
        subjects: dict[str, str] | None = None,
    ) -> None:
        """Initialize the notification service.

        Args:
            notifier: Delivery backend (required).
            admin_email: Recipient of every notification. None disables sending.
            subjects: Subject line per event name. Missing events fall back to settings.
        """
        self._notifier = notifier
        self._admin_email = admin_email
        self._subjects = {**_subjects_from(settings), **(subjects or {})}

    @classmethod
    def create(cls, notifier: Notifier, config: Settings | None = None) -> "NotificationService":
        """Factory method wiring recipient and subjects from settings."""
        config = config or settings
        return cls(notifier=notifier, admin_email=config.admin_email, subjects=_subjects_from(config))

    def subscription_created(self, subscription_name: str) -> None:
        self._dispatch("created", subscription_name)

    def subscription_updated(self, subscription_name: str) -> None:
        self._dispatch("updated", subscription_name)

    def subscription_activated(self, subscription_name: str) -> None:
        self._dispatch("activated", subscription_name)

    def subscription_deactivated(self, subscription_name: str) -> None:
        self._dispatch("deactivated", subscription_name)

    def _dispatch(self, event: str, subscription_name: str) -> None:
        if not self._admin_email:
            logger.debug("ADMIN_EMAIL not set, skipping '%s' notification for %s", event, subscription_name)
            return

        body = render_body(event, subscription_name, datetime.now())
        try:
            self._notifier.send(self._admin_email, self._subjects[event], body)
        except Exception as e:
            logger.warning("Failed to send '%s' notification for %s to %s: %s", event, subscription_name, self._admin_email, e)


def _subjects_from(config: Settings) -> dict[str, str]:
    return {
        "created": config.subject_created,
        "updated": config.subject_updated,
        "activated": config.subject_activated,
        "deactivated": config.subject_deactivated,
    }

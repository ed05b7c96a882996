"""Notification delivery protocol."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Notifier(Protocol):
    """Protocol for outbound message delivery (e-mail, chat, logs...).

    Implementations raise on delivery failure; NotificationService
    decides what to do with the error.
    """

    def send(self, to: str, subject: str, body: str) -> None:
        """Deliver a plain-text message.

        Args:
            to: Recipient address
            subject: Subject line
            body: Plain-text body
        """
        ...

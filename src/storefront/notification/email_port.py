"""Email channel port: abstract interface for email dispatch."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    """Abstract interface for email dispatch adapters."""

    @abstractmethod
    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        """Send one plain-text message, optionally with an HTML alternative.

        ``to`` is an already validated, lower-cased address.

        Returns:
            dict with keys: message_id, status ("sent")

        Raises:
            protean.exceptions.SendError: when the message could not be delivered
        """
        ...

"""Email channel port — abstract interface for email dispatch."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    """Abstract interface for email dispatch adapters.

    Adapters report delivery problems in the returned dict instead of raising.
    """

    @abstractmethod
    async def send(
        self,
        sender: str,
        to: list[str],
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        """Send one message to a joined recipient list.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...

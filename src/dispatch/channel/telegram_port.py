"""Telegram channel port — abstract interface for store chat messages."""

from abc import ABC, abstractmethod


class TelegramPort(ABC):
    """Abstract interface for Telegram bot adapters.

    One call per chat. Adapters report delivery problems in the returned dict
    instead of raising.
    """

    @abstractmethod
    async def send_message(self, chat_id: str, text: str) -> dict:
        """Post ``text`` to one chat.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...

    @abstractmethod
    async def edit_message(self, chat_id: str, message_id: str, text: str) -> dict:
        """Replace the text of a message previously posted by the bot."""
        ...

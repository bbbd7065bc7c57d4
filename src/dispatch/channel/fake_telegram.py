"""Fake Telegram adapter — records chat messages for testing."""

from itertools import count

from dispatch.channel.telegram_port import TelegramPort


class FakeTelegramAdapter(TelegramPort):
    """Telegram adapter that keeps posted and edited messages in memory."""

    def __init__(self):
        self.sent_messages: list[dict] = []
        self.edited_messages: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Telegram delivery failed"
        self._ids = count(1)

    def configure(self, should_succeed: bool = True, failure_reason: str = "Telegram delivery failed"):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    async def send_message(self, chat_id: str, text: str) -> dict:
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = str(next(self._ids))
        self.sent_messages.append({"message_id": message_id, "chat_id": chat_id, "text": text})
        return {"message_id": message_id, "status": "sent", "error": None}

    async def edit_message(self, chat_id: str, message_id: str, text: str) -> dict:
        if not self.should_succeed:
            return {"message_id": message_id, "status": "failed", "error": self.failure_reason}

        self.edited_messages.append({"message_id": message_id, "chat_id": chat_id, "text": text})
        return {"message_id": message_id, "status": "sent", "error": None}

    def sent_to(self, chat_id: str) -> list[dict]:
        return [message for message in self.sent_messages if message["chat_id"] == chat_id]

    def reset(self):
        """Clear recorded messages (useful between tests)."""
        self.sent_messages.clear()
        self.edited_messages.clear()
        self.should_succeed = True
        self.failure_reason = "Telegram delivery failed"
        self._ids = count(1)

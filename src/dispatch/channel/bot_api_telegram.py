"""Telegram Bot API adapter — posts and edits store chat messages over HTTPS."""

import httpx
import structlog

from dispatch.channel.telegram_port import TelegramPort

logger = structlog.get_logger(__name__)

API_URL = "https://api.telegram.org"


class BotApiTelegramAdapter(TelegramPort):
    def __init__(self, token: str, timeout: float = 30.0, transport: httpx.AsyncBaseTransport | None = None):
        if not token:
            raise ValueError("Telegram bot token is required")
        self.token = token
        self.timeout = timeout
        self.transport = transport

    def _url(self, method: str) -> str:
        return f"{API_URL}/bot{self.token}/{method}"

    async def _call(self, method: str, payload: dict) -> dict:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self._url(method), json=payload)
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Telegram request failed", method=method, chat_id=payload.get("chat_id"), error=str(exc))
            return {"message_id": None, "status": "failed", "error": str(exc)}

        if response.status_code != 200 or not data.get("ok"):
            error = data.get("description") or f"HTTP {response.status_code}"
            logger.error("Telegram API rejected request", method=method, chat_id=payload.get("chat_id"), error=error)
            return {"message_id": None, "status": "failed", "error": error}

        result = data.get("result")
        message_id = result.get("message_id") if isinstance(result, dict) else payload.get("message_id")
        return {"message_id": str(message_id) if message_id is not None else None, "status": "sent", "error": None}

    async def send_message(self, chat_id: str, text: str) -> dict:
        return await self._call(
            "sendMessage",
            {"chat_id": chat_id, "text": text, "link_preview_options": {"is_disabled": True}},
        )

    async def edit_message(self, chat_id: str, message_id: str, text: str) -> dict:
        try:
            numeric_id = int(message_id)
        except (TypeError, ValueError):
            return {"message_id": None, "status": "failed", "error": f"Invalid message id: {message_id}"}
        return await self._call(
            "editMessageText",
            {"chat_id": chat_id, "message_id": numeric_id, "text": text},
        )

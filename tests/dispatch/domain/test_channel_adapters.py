"""Tests for channel adapters and the channel registry."""

import asyncio
import json
import smtplib

import httpx
import pytest

from dispatch.channel import get_channel, reset_channels
from dispatch.channel.bot_api_telegram import BotApiTelegramAdapter
from dispatch.channel.fake_email import FakeEmailAdapter
from dispatch.channel.fake_telegram import FakeTelegramAdapter
from dispatch.channel.smtp_email import SmtpEmailAdapter
from dispatch.config import reset_settings


class TestFakeEmailAdapter:
    def setup_method(self):
        self.adapter = FakeEmailAdapter()

    def test_send_records_email(self):
        result = asyncio.run(self.adapter.send("orders@x.test", ["a@b.com", "c@d.com"], "Hi", "Hello!"))
        assert result["status"] == "sent"
        assert result["message_id"] is not None
        assert len(self.adapter.sent_emails) == 1
        assert self.adapter.sent_emails[0]["to"] == ["a@b.com", "c@d.com"]
        assert self.adapter.sent_to("c@d.com")[0]["subject"] == "Hi"

    def test_send_failure(self):
        self.adapter.configure(should_succeed=False, failure_reason="SMTP error")
        result = asyncio.run(self.adapter.send("orders@x.test", ["a@b.com"], "Hi", "Hello"))
        assert result["status"] == "failed"
        assert result["error"] == "SMTP error"
        assert len(self.adapter.sent_emails) == 0

    def test_reset(self):
        asyncio.run(self.adapter.send("orders@x.test", ["a@b.com"], "Hi", "Hello"))
        self.adapter.configure(should_succeed=False)
        self.adapter.reset()
        assert len(self.adapter.sent_emails) == 0
        assert self.adapter.should_succeed is True


class _RefusingSMTP:
    def __init__(self, *args, **kwargs):
        raise smtplib.SMTPConnectError(421, "Service not available")


class _RecordingSMTP:
    messages = []

    def __init__(self, host, port, timeout=None):
        self.host = host

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self, context=None):
        pass

    def login(self, username, password):
        pass

    def send_message(self, message):
        _RecordingSMTP.messages.append(message)


class TestSmtpEmailAdapter:
    def test_connection_failure_is_reported_not_raised(self, monkeypatch):
        monkeypatch.setattr(smtplib, "SMTP", _RefusingSMTP)
        adapter = SmtpEmailAdapter(host="smtp.invalid", username="u", password="p")
        result = asyncio.run(adapter.send("orders@x.test", ["a@b.com"], "Hi", "Hello"))
        assert result["status"] == "failed"
        assert "Service not available" in result["error"]

    def test_sends_one_message_to_joined_recipients(self, monkeypatch):
        _RecordingSMTP.messages = []
        monkeypatch.setattr(smtplib, "SMTP", _RecordingSMTP)
        adapter = SmtpEmailAdapter(host="smtp.test", username="u", password="p")
        result = asyncio.run(adapter.send("orders@x.test", ["a@b.com", "c@d.com"], "Hi", "Hello", "<b>Hello</b>"))
        assert result["status"] == "sent"
        assert len(_RecordingSMTP.messages) == 1
        assert _RecordingSMTP.messages[0]["To"] == "a@b.com, c@d.com"
        assert _RecordingSMTP.messages[0]["From"] == "orders@x.test"


class TestFakeTelegramAdapter:
    def setup_method(self):
        self.adapter = FakeTelegramAdapter()

    def test_send_and_edit_are_recorded(self):
        sent = asyncio.run(self.adapter.send_message("-100", "New order"))
        edited = asyncio.run(self.adapter.edit_message("-100", sent["message_id"], "New order\n\nOrder cancelled"))

        assert sent["status"] == edited["status"] == "sent"
        assert self.adapter.sent_to("-100")[0]["text"] == "New order"
        assert self.adapter.edited_messages == [
            {"message_id": sent["message_id"], "chat_id": "-100", "text": "New order\n\nOrder cancelled"}
        ]

    def test_failure_and_reset(self):
        self.adapter.configure(should_succeed=False, failure_reason="bot blocked")
        result = asyncio.run(self.adapter.send_message("-100", "New order"))
        assert result == {"message_id": None, "status": "failed", "error": "bot blocked"}

        self.adapter.reset()
        assert self.adapter.should_succeed is True
        assert self.adapter.sent_messages == []


def _bot_api(handler):
    return BotApiTelegramAdapter("123:abc", transport=httpx.MockTransport(handler))


class TestBotApiTelegramAdapter:
    def test_send_posts_to_bot_api(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"ok": True, "result": {"message_id": 77}})

        result = asyncio.run(_bot_api(handler).send_message("-100", "New order"))

        assert result == {"message_id": "77", "status": "sent", "error": None}
        assert requests[0].url.path == "/bot123:abc/sendMessage"
        assert json.loads(requests[0].content)["chat_id"] == "-100"

    def test_edit_sends_numeric_message_id(self):
        payloads = []

        def handler(request):
            payloads.append(json.loads(request.content))
            return httpx.Response(200, json={"ok": True, "result": {"message_id": 77}})

        result = asyncio.run(_bot_api(handler).edit_message("-100", "77", "Order cancelled"))

        assert result["status"] == "sent"
        assert payloads == [{"chat_id": "-100", "message_id": 77, "text": "Order cancelled"}]

    def test_api_rejection_is_reported_not_raised(self):
        def handler(request):
            return httpx.Response(400, json={"ok": False, "description": "Bad Request: chat not found"})

        result = asyncio.run(_bot_api(handler).send_message("-100", "New order"))

        assert result == {"message_id": None, "status": "failed", "error": "Bad Request: chat not found"}

    def test_network_error_is_reported_not_raised(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        result = asyncio.run(_bot_api(handler).send_message("-100", "New order"))

        assert result["status"] == "failed"
        assert "connection refused" in result["error"]

    def test_token_is_required(self):
        with pytest.raises(ValueError):
            BotApiTelegramAdapter("")

class TestChannelRegistry:
    def test_email_channel_is_fake_by_default(self):
        assert isinstance(get_channel("email"), FakeEmailAdapter)

    def test_registry_returns_singleton(self):
        assert get_channel("email") is get_channel("email")

    def test_smtp_adapter_selected_from_environment(self, monkeypatch):
        monkeypatch.setenv("EMAIL_ADAPTER", "smtp")
        monkeypatch.setenv("SMTP_HOST", "mail.test")
        reset_settings()
        reset_channels()
        adapter = get_channel("email")
        assert isinstance(adapter, SmtpEmailAdapter)
        assert adapter.host == "mail.test"

    def test_unknown_channel_raises(self):
        with pytest.raises(ValueError):
            get_channel("pigeon")

    def test_telegram_channel_is_fake_by_default(self):
        assert isinstance(get_channel("telegram"), FakeTelegramAdapter)

    def test_bot_adapter_selected_from_environment(self, monkeypatch):
        monkeypatch.setenv("TELEGRAM_ADAPTER", "bot")
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
        reset_settings()
        reset_channels()
        adapter = get_channel("telegram")
        assert isinstance(adapter, BotApiTelegramAdapter)
        assert adapter.token == "123:abc"

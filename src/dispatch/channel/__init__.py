"""Channel adapter registry — pluggable outbound notification transports.

Provides singleton access to channel adapters. Uses the fake email adapter
by default; the SMTP adapter is selected with ``EMAIL_ADAPTER=smtp``.
Store chats use the fake Telegram adapter unless ``TELEGRAM_ADAPTER=bot``.
Components accept a transport explicitly and only fall back to this
registry when none is given.
"""

from enum import Enum

from dispatch.config import get_settings


class NotificationChannel(Enum):
    EMAIL = "email"
    TELEGRAM = "telegram"


_channel_instances: dict[str, object] = {}


def get_channel(channel_type: str = NotificationChannel.EMAIL.value):
    """Return the configured channel adapter (singleton per channel type).

    Args:
        channel_type: One of NotificationChannel enum values ("email", "telegram")
    """
    if channel_type not in _channel_instances:
        if channel_type == NotificationChannel.EMAIL.value:
            settings = get_settings()
            if settings.email_adapter == "smtp":
                from dispatch.channel.smtp_email import SmtpEmailAdapter

                _channel_instances[channel_type] = SmtpEmailAdapter(
                    host=settings.smtp_host,
                    port=settings.smtp_port,
                    username=settings.smtp_username,
                    password=settings.smtp_password,
                )
            elif settings.email_adapter == "fake":
                from dispatch.channel.fake_email import FakeEmailAdapter

                _channel_instances[channel_type] = FakeEmailAdapter()
            else:
                raise ValueError(f"Unknown email adapter: {settings.email_adapter}")
        elif channel_type == NotificationChannel.TELEGRAM.value:
            settings = get_settings()
            if settings.telegram_adapter == "bot":
                from dispatch.channel.bot_api_telegram import BotApiTelegramAdapter

                _channel_instances[channel_type] = BotApiTelegramAdapter(settings.telegram_bot_token)
            elif settings.telegram_adapter == "fake":
                from dispatch.channel.fake_telegram import FakeTelegramAdapter

                _channel_instances[channel_type] = FakeTelegramAdapter()
            else:
                raise ValueError(f"Unknown telegram adapter: {settings.telegram_adapter}")
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()

"""Runtime settings for the dispatch engine, read from environment variables.

Protean's own configuration (database providers, event processing mode) lives
under ``[tool.protean]`` in ``pyproject.toml``. Everything else the engine
needs is read here once and cached.
"""

import os
from dataclasses import dataclass, field
from zoneinfo import ZoneInfo


def _split(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class Settings:
    # Platform operating timezone (fixed region, independent of the host clock)
    timezone_name: str = "America/Guayaquil"

    # Outbound mail
    email_adapter: str = "fake"
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    orders_sender: str = "orders@example.com"
    reminders_sender: str = "reminders@example.com"
    digest_sender: str = "digest@example.com"
    system_sender: str = "system@example.com"
    fallback_business_email: str = "info@example.com"
    platform_admin_email: str = "admin@example.com"

    # Store chat alerts
    telegram_adapter: str = "fake"
    telegram_bot_token: str | None = None

    # Courier action links
    action_base_url: str = "http://localhost:8000/delivery-action"
    dashboard_url: str = "http://localhost:3000/delivery/dashboard"

    # Courier fallback pool, checked in order when no coverage zone matches.
    # Empty unless FALLBACK_COURIER_PHONES lists the phones, comma separated.
    fallback_courier_phones: tuple[str, ...] = field(default_factory=tuple)

    # Periodic jobs
    reminder_lead_minutes: int = 30
    reminder_scan_minutes: int = 5
    digest_hour: int = 7

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone_name)

    @classmethod
    def from_env(cls) -> "Settings":
        env = os.environ
        defaults = cls()
        return cls(
            timezone_name=env.get("OPERATING_TIMEZONE", defaults.timezone_name),
            email_adapter=env.get("EMAIL_ADAPTER", defaults.email_adapter),
            smtp_host=env.get("SMTP_HOST", defaults.smtp_host),
            smtp_port=int(env.get("SMTP_PORT", defaults.smtp_port)),
            smtp_username=env.get("SMTP_USERNAME"),
            smtp_password=env.get("SMTP_PASSWORD"),
            orders_sender=env.get("MAIL_FROM_ORDERS", defaults.orders_sender),
            reminders_sender=env.get("MAIL_FROM_REMINDERS", defaults.reminders_sender),
            digest_sender=env.get("MAIL_FROM_DIGEST", defaults.digest_sender),
            system_sender=env.get("MAIL_FROM_SYSTEM", defaults.system_sender),
            fallback_business_email=env.get("FALLBACK_BUSINESS_EMAIL", defaults.fallback_business_email),
            platform_admin_email=env.get("PLATFORM_ADMIN_EMAIL", defaults.platform_admin_email),
            telegram_adapter=env.get("TELEGRAM_ADAPTER", defaults.telegram_adapter),
            telegram_bot_token=env.get("TELEGRAM_BOT_TOKEN"),
            action_base_url=env.get("ACTION_BASE_URL", defaults.action_base_url),
            dashboard_url=env.get("DASHBOARD_URL", defaults.dashboard_url),
            fallback_courier_phones=_split(env.get("FALLBACK_COURIER_PHONES", "")),
            reminder_lead_minutes=int(env.get("REMINDER_LEAD_MINUTES", defaults.reminder_lead_minutes)),
            reminder_scan_minutes=int(env.get("REMINDER_SCAN_MINUTES", defaults.reminder_scan_minutes)),
            digest_hour=int(env.get("DIGEST_HOUR", defaults.digest_hour)),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide settings, loading them from the environment once."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings():
    """Drop cached settings so the next call re-reads the environment (useful for testing)."""
    global _settings
    _settings = None

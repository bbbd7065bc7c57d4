"""NotificationDispatcher — sends one rendered message to a resolved recipient set.

Recipients are grouped per channel. Mail gets a single transport call with the
joined address list; chat messages go out one per chat, concurrently.
Transport failures are logged and recorded in the returned report; they are
never raised, because a lost notification must not undo
the state change that triggered it. No retry.
"""

import asyncio
from collections import defaultdict
from dataclasses import dataclass, field

import structlog

from dispatch.channel import NotificationChannel, get_channel
from dispatch.notification.recipients import Recipient

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RecipientOutcome:
    address: str
    channel: str
    status: str  # "sent" or "failed"
    message_id: str | None = None
    error: str | None = None


@dataclass
class DispatchReport:
    outcomes: list[RecipientOutcome] = field(default_factory=list)

    @property
    def attempted(self) -> bool:
        return bool(self.outcomes)

    @property
    def ok(self) -> bool:
        return all(outcome.status == "sent" for outcome in self.outcomes)

    @property
    def failed(self) -> list[RecipientOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status != "sent"]


class NotificationDispatcher:
    """Delivers messages through injected transports, one per channel.

    ``transports`` maps a channel name to an adapter. Channels without an
    entry use the registry adapter from ``dispatch.channel.get_channel``.
    """

    def __init__(self, transports: dict | None = None):
        self.transports = dict(transports or {})

    def transport_for(self, channel: str):
        if channel not in self.transports:
            self.transports[channel] = get_channel(channel)
        return self.transports[channel]

    async def dispatch(
        self,
        recipients: list[Recipient],
        subject: str,
        body: str,
        sender: str | None = None,
        html_body: str | None = None,
    ) -> DispatchReport:
        report = DispatchReport()
        if not recipients:
            return report

        by_channel: dict[str, list[str]] = defaultdict(list)
        for recipient in recipients:
            if recipient.address not in by_channel[recipient.channel]:
                by_channel[recipient.channel].append(recipient.address)

        for channel, addresses in by_channel.items():
            if channel == NotificationChannel.TELEGRAM.value:
                outcomes = await asyncio.gather(
                    *(self._post_to_chat(address, subject, body) for address in addresses)
                )
                report.outcomes.extend(outcomes)
                continue

            try:
                result = await self.transport_for(channel).send(
                    sender=sender,
                    to=addresses,
                    subject=subject,
                    body=body,
                    html_body=html_body,
                )
            except Exception as exc:
                result = {"message_id": None, "status": "failed", "error": str(exc)}

            status = "sent" if result.get("status") == "sent" else "failed"
            error = None if status == "sent" else result.get("error") or "Unknown dispatch error"
            if status == "sent":
                logger.info(
                    "Notification sent",
                    channel=channel,
                    recipients=addresses,
                    subject=subject,
                    message_id=result.get("message_id"),
                )
            else:
                logger.error(
                    "Notification dispatch failed",
                    channel=channel,
                    recipients=addresses,
                    subject=subject,
                    error=error,
                )

            report.outcomes.extend(
                RecipientOutcome(
                    address=address,
                    channel=channel,
                    status=status,
                    message_id=result.get("message_id"),
                    error=error,
                )
                for address in addresses
            )

        return report

    async def _post_to_chat(self, chat_id: str, subject: str, body: str) -> RecipientOutcome:
        channel = NotificationChannel.TELEGRAM.value
        try:
            result = await self.transport_for(channel).send_message(chat_id=chat_id, text=chat_text(subject, body))
        except Exception as exc:
            result = {"message_id": None, "status": "failed", "error": str(exc)}
        return self._chat_outcome(chat_id, result, "Chat message sent", "Chat message failed", subject=subject)

    async def revise(self, messages: list[dict], subject: str, body: str) -> DispatchReport:
        """Rewrite chat messages posted earlier; ``messages`` holds ``chat_id``/``message_id`` pairs."""
        transport = self.transport_for(NotificationChannel.TELEGRAM.value)

        async def edit(message: dict) -> RecipientOutcome:
            try:
                result = await transport.edit_message(
                    chat_id=message["chat_id"],
                    message_id=message["message_id"],
                    text=chat_text(subject, body),
                )
            except Exception as exc:
                result = {"message_id": None, "status": "failed", "error": str(exc)}
            result = {**result, "message_id": result.get("message_id") or message["message_id"]}
            return self._chat_outcome(message["chat_id"], result, "Chat message edited", "Chat message edit failed")

        return DispatchReport(outcomes=list(await asyncio.gather(*(edit(message) for message in messages))))

    @staticmethod
    def _chat_outcome(chat_id: str, result: dict, sent_event: str, failed_event: str, **fields) -> RecipientOutcome:
        channel = NotificationChannel.TELEGRAM.value
        if result.get("status") == "sent":
            logger.info(sent_event, channel=channel, chat_id=chat_id, message_id=result.get("message_id"), **fields)
            return RecipientOutcome(
                address=chat_id, channel=channel, status="sent", message_id=result.get("message_id")
            )

        error = result.get("error") or "Unknown dispatch error"
        logger.error(failed_event, channel=channel, chat_id=chat_id, error=error, **fields)
        return RecipientOutcome(address=chat_id, channel=channel, status="failed", error=error)


def chat_text(subject: str, body: str) -> str:
    return f"{subject}\n\n{body}"

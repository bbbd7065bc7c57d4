"""Tests for CheckoutProgressHandler."""

import asyncio

from protean import current_domain

from dispatch.business.business import Business, BusinessAdministrator, NotificationSettings
from dispatch.client.client import Client
from dispatch.documents import CheckoutProgressDocument
from dispatch.notification.checkout_events import CheckoutProgressHandler


def _business(email="shop@x.test", **preferences):
    business = Business(
        name="Burger Place",
        email=email,
        administrators=[BusinessAdministrator(email="owner@x.test")] if email else [],
        notification_settings=NotificationSettings(**preferences) if preferences else None,
    )
    current_domain.repository_for(Business).add(business)
    return str(business.id)


def _client():
    client = Client(name="Ana", phone="0980000000")
    current_domain.repository_for(Client).add(client)
    return str(client.id)


def _progress(business_id, client_id, step="payment"):
    return CheckoutProgressDocument(id="p-1", client_id=client_id, business_id=business_id, step=step)


class TestCheckoutProgress:
    def test_off_by_default(self, dispatcher, fake_email, settings):
        handler = CheckoutProgressHandler(dispatcher, settings)

        result = asyncio.run(handler.on_checkout_started(_progress(_business(), _client())))

        assert result is None
        assert fake_email.sent_emails == []

    def test_enabled_business_is_notified(self, dispatcher, fake_email, settings):
        business_id = _business(email_checkout_progress=True)
        handler = CheckoutProgressHandler(dispatcher, settings)

        result = asyncio.run(handler.on_checkout_started(_progress(business_id, _client())))

        assert result.ok
        assert len(fake_email.sent_emails) == 1
        assert fake_email.sent_emails[0]["to"] == ["shop@x.test", "owner@x.test"]
        assert fake_email.sent_emails[0]["subject"] == "Ana is checking out at Burger Place"
        assert "0980000000" in fake_email.sent_emails[0]["body"]

    def test_unknown_client_still_notifies(self, dispatcher, fake_email, settings):
        business_id = _business(email_checkout_progress=True)
        handler = CheckoutProgressHandler(dispatcher, settings)

        asyncio.run(handler.on_checkout_started(_progress(business_id, "missing-client")))

        assert fake_email.sent_emails[0]["subject"] == "Customer is checking out at Burger Place"
        assert "Not registered" in fake_email.sent_emails[0]["body"]

    def test_enabled_business_without_addresses_uses_fallback_inbox(self, dispatcher, fake_email, settings):
        business_id = _business(email=None, email_checkout_progress=True)
        handler = CheckoutProgressHandler(dispatcher, settings)

        asyncio.run(handler.on_checkout_started(_progress(business_id, _client())))

        assert fake_email.sent_emails[0]["to"] == ["info@example.com"]

    def test_missing_ids_are_ignored(self, dispatcher, fake_email, settings):
        handler = CheckoutProgressHandler(dispatcher, settings)

        assert asyncio.run(handler.on_checkout_started(CheckoutProgressDocument(id="p-1"))) is None
        assert fake_email.sent_emails == []

    def test_unknown_business_is_ignored(self, dispatcher, fake_email, settings):
        handler = CheckoutProgressHandler(dispatcher, settings)

        assert asyncio.run(handler.on_checkout_started(_progress("missing-business", _client()))) is None
        assert fake_email.sent_emails == []

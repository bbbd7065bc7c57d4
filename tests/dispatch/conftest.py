import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from dispatch.channel import reset_channels
from dispatch.channel.fake_email import FakeEmailAdapter
from dispatch.channel.fake_telegram import FakeTelegramAdapter
from dispatch.config import Settings, reset_settings
from dispatch.notification.dispatcher import NotificationDispatcher


@pytest.fixture(scope="session")
def dispatch_bed():
    from dispatch.domain import dispatch

    bed = DomainFixture(dispatch)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(dispatch_bed):
    reset_settings()
    reset_channels()
    with dispatch_bed.domain_context():
        yield
        # Clear all databases and drain the event store
        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()
    reset_channels()
    reset_settings()


@pytest.fixture
def settings():
    return Settings(fallback_courier_phones=("0991111111", "0992222222"))


@pytest.fixture
def fake_email():
    return FakeEmailAdapter()


@pytest.fixture
def fake_telegram():
    return FakeTelegramAdapter()


@pytest.fixture
def dispatcher(fake_email, fake_telegram):
    return NotificationDispatcher({"email": fake_email, "telegram": fake_telegram})

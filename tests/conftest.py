"""
Test configuration and fixtures.
Mocks the queue transport so no test touches Redis.
"""
import pytest
from unittest.mock import AsyncMock, patch

from event_proxy.config import ProxyConfig
from event_proxy.services.dispatcher import Dispatcher
from event_proxy.services.event_handler import EventHandler
from event_proxy.utils.auth import Authenticator

TEST_SECRET = "s3cret-token"
TEST_SUFFIX = "test"


@pytest.fixture
def proxy_config():
    """ProxyConfig built from a known secret and suffix."""
    return ProxyConfig.from_values(TEST_SECRET, TEST_SUFFIX)


@pytest.fixture
def mock_publisher():
    """Mock queue publisher — every publish succeeds."""
    publisher = AsyncMock()
    publisher.publish = AsyncMock(return_value=None)
    return publisher


@pytest.fixture
def dispatcher(mock_publisher, proxy_config):
    return Dispatcher(mock_publisher, proxy_config.queues)


@pytest.fixture
def event_handler(proxy_config, dispatcher):
    return EventHandler(Authenticator(proxy_config.auth_digest), dispatcher)


@pytest.fixture
def mock_redis():
    """Mock for async Redis — prevents real Redis calls in tests."""
    with patch("event_proxy.services.queue.get_redis") as mock:
        redis_mock = AsyncMock()
        redis_mock.lpush = AsyncMock(return_value=1)
        redis_mock.ping = AsyncMock(return_value=True)
        mock.return_value = redis_mock
        yield redis_mock


@pytest.fixture
def bounce_event():
    return {
        "email": "bounced@example.com",
        "timestamp": 1609459200,
        "event": "bounce",
        "status": "5.1.1",
        "reason": "550 5.1.1 User unknown",
        "sg_event_id": "evt_bounce_1",
        "sg_message_id": "14c5d75ce93.dfd.64b469.filter0001.16648.5515E0B88.0",
    }


@pytest.fixture
def delivered_event():
    return {
        "email": "delivered@example.com",
        "timestamp": 1609459260,
        "event": "delivered",
        "response": "250 OK",
        "sg_event_id": "evt_delivered_1",
        "sg_message_id": "abc123.filter0002.1.2.0",
    }


@pytest.fixture
def spam_event():
    return {
        "email": "complainer@example.com",
        "timestamp": 1609459320,
        "event": "spamreport",
        "sg_event_id": "evt_spam_1",
        "sg_message_id": "def456",
    }

"""
Pytest configuration and fixtures.

Provides shared test fixtures for gsmdriver tests.
"""

import pytest
import logging

from gsmdriver.core import MockTransport, ModemCore
from gsmdriver import GsmModem


# Enable logging for tests
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture
def mock_transport():
    """
    Create a MockTransport instance for testing.

    Example:
        def test_something(mock_transport):
            mock_transport.add_response(["OK"])
            # ... test code ...
    """
    transport = MockTransport()
    yield transport
    transport.close()


@pytest.fixture
def modem_core(mock_transport):
    """
    Create a ModemCore instance with MockTransport.

    Short deadlines and no inter-command rest keep the tests fast.

    Example:
        def test_at_command(modem_core, mock_transport):
            mock_transport.add_response(["+CSQ: 24,99", "OK"])
            response = modem_core.command("AT+CSQ")
            assert "+CSQ: 24,99" in response
    """
    core = ModemCore(
        transport=mock_transport,
        read_timeout=0.5,
        cmd_delay=0,
        retry_delay=0.05,
        lock_poll_interval=0.01
    )
    yield core
    core.close()


@pytest.fixture
def modem(mock_transport):
    """
    Create a GsmModem instance with MockTransport.

    Example:
        def test_hardware(modem, mock_transport):
            mock_transport.add_response(["WAVECOM MODEM", "OK"])
            ...
    """
    modem_instance = GsmModem(
        transport=mock_transport,
        read_timeout=0.5,
        cmd_delay=0,
        retry_delay=0.05,
        lock_poll_interval=0.01
    )
    yield modem_instance
    modem_instance.close()


def fragment(body: str, final: bool = False) -> str:
    """Build one part of a multipart message body."""
    marker = "\xad" if final else "\x00"
    return "\x82@\x00\x00\x03" + marker + "\x00" + body


@pytest.fixture
def make_fragment():
    """Factory for multipart message bodies."""
    return fragment


@pytest.fixture
def cmt_header():
    """Factory for +CMT notification header lines."""
    def build(sender: str = "+15551234567", timestamp: str = "23/01/01,12:00:00+08") -> str:
        return f'+CMT: "{sender}",,"{timestamp}"'
    return build

"""
Tests for the GsmModem facade.
"""

import pytest
from gsmdriver import GsmModem, MockTransport


def test_requires_port_or_transport():
    with pytest.raises(ValueError):
        GsmModem()


def test_context_manager_initializes_and_closes():
    transport = MockTransport()
    for _ in range(4):
        transport.add_response(["OK"])

    with GsmModem(transport=transport, read_timeout=0.5, cmd_delay=0) as modem:
        assert repr(modem) == "<GsmModem status=idle>"
        assert transport.written_text[0] == "ATE0\r"

    assert transport.is_open() is False


def test_auto_start():
    transport = MockTransport()
    for _ in range(4):
        transport.add_response(["OK"])

    modem = GsmModem(transport=transport, read_timeout=0.5, cmd_delay=0, auto_start=True)

    assert len(transport.written) == 4
    modem.close()


def test_raw_command_and_query(modem, mock_transport):
    mock_transport.add_response(["+CSQ: 24,99", "OK"])
    mock_transport.add_response(["MTCBA-G-F4", "OK"])

    assert modem.command("AT+CSQ") == ["+CSQ: 24,99", "OK"]
    assert modem.query("AT+CGMM") == "MTCBA-G-F4"

"""
Tests for the AT command engine.
"""

import logging
import time

import pytest
from gsmdriver.core import MockTransport, ModemCore
from gsmdriver.exceptions import (
    ModemError,
    ProtocolViolationError,
    ReadTimeoutError,
    WriteError,
)
from gsmdriver.types import ErrorCategory


def test_command_returns_lines_with_terminator(modem_core, mock_transport):
    """Test a simple command returns its lines including OK."""
    mock_transport.add_response(["+CSQ: 24,99", "OK"])

    assert modem_core.command("AT+CSQ") == ["+CSQ: 24,99", "OK"]
    assert mock_transport.written == [b"AT+CSQ\r"]


def test_command_adds_at_prefix(modem_core, mock_transport):
    """Test the AT prefix is added when missing."""
    mock_transport.add_response(["OK"])

    modem_core.command("+CMGF=1")

    assert mock_transport.written == [b"AT+CMGF=1\r"]


def test_command_custom_write_terminator(modem_core, mock_transport):
    """Test the write terminator can be changed."""
    mock_transport.add_response(["OK"])

    modem_core.command("AT", write_term="\r\n")

    assert mock_transport.written == [b"AT\r\n"]


def test_echo_is_stripped():
    """Test a device echoing the command only returns what follows the echo."""
    transport = MockTransport(echo=True)
    core = ModemCore(transport, read_timeout=0.5, cmd_delay=0)
    transport.add_response(["WAVECOM MODEM", "OK"])

    assert core.command("AT+CGMI") == ["WAVECOM MODEM", "OK"]
    core.close()


def test_empty_lines_are_dropped(modem_core, mock_transport):
    """Test extra CRLFs don't show up in the response."""
    mock_transport.add_response(["", "value", "", "OK"])

    assert modem_core.command("AT+CGMM") == ["value", "OK"]


@pytest.mark.parametrize("notification", ["+WIND: 4", "+CREG: 1", "+CGREG: 1"])
def test_unsolicited_lines_are_dropped(modem_core, mock_transport, notification):
    """Test status notifications never reach the caller."""
    mock_transport.add_response([notification, "value", "OK"])

    assert modem_core.command("AT+CGMM") == ["value", "OK"]


def test_prompt_terminates(modem_core, mock_transport):
    """Test the "> " prompt ends the response when accepted."""
    mock_transport.add_response(["> "], terminator="")

    out = modem_core.command('AT+CMGS="+15551234567"', read_term=["\r\n", "> "])

    assert out == [">"]


def test_pin_status_terminates_without_ok(modem_core, mock_transport):
    """Test +CPIN responses are treated as complete."""
    mock_transport.add_response(["+CPIN: READY"])

    assert modem_core.command("AT+CPIN?") == ["+CPIN: READY"]


def test_cme_error(modem_core, mock_transport):
    """Test +CME ERROR raises a ModemError with a description."""
    mock_transport.add_response(["+CME ERROR: 10"])

    with pytest.raises(ModemError) as exc_info:
        modem_core.command("AT+CPIN?")

    error = exc_info.value
    assert error.category == ErrorCategory.GENERAL
    assert error.code == 10
    assert error.description == "SIM not inserted"
    assert error.command == "AT+CPIN?"

    # not retried
    assert len(mock_transport.written) == 1


def test_bare_error(modem_core, mock_transport):
    """Test a bare ERROR raises a ModemError without a code."""
    mock_transport.add_response(["ERROR"])

    with pytest.raises(ModemError) as exc_info:
        modem_core.command("AT+WMBS?")

    assert exc_info.value.category is None
    assert exc_info.value.code is None
    assert exc_info.value.description is None


def test_retry_on_cms_515(modem_core, mock_transport, caplog):
    """Test CMS ERROR 515 is retried once after a short rest."""
    caplog.set_level(logging.DEBUG)
    mock_transport.add_response(["+CMS ERROR: 515"])
    mock_transport.add_response(["OK"])

    start = time.monotonic()
    out = modem_core.command("AT+CNMI=2,2,0,0,0")
    elapsed = time.monotonic() - start

    assert out == ["OK"]
    assert mock_transport.written == [b"AT+CNMI=2,2,0,0,0\r"] * 2
    assert elapsed >= modem_core.protocol.retry_delay
    assert "retrying" in caplog.text


def test_other_sms_errors_are_not_retried(modem_core, mock_transport):
    """Test other CMS errors propagate immediately."""
    mock_transport.add_response(["+CMS ERROR: 330"])
    mock_transport.add_response(["OK"])

    with pytest.raises(ModemError) as exc_info:
        modem_core.command('AT+CMGS="+15551234567"')

    assert exc_info.value.code == 330
    assert len(mock_transport.written) == 1


def test_lock_released_after_modem_error(modem_core, mock_transport):
    """Test the device isn't left locked after an error."""
    mock_transport.add_response(["ERROR"])

    with pytest.raises(ModemError):
        modem_core.command("AT+FOO")

    assert modem_core.lock.owner is None


def test_timeout_releases_lock(modem_core, mock_transport):
    """Test a timed out command raises and releases the device."""
    with pytest.raises(ReadTimeoutError):
        modem_core.command("AT")

    assert modem_core.lock.owner is None


def test_write_error_propagates(modem_core, mock_transport):
    """Test a dead device raises a WriteError and releases the device."""
    mock_transport.close()

    with pytest.raises(WriteError):
        modem_core.command("AT")

    assert modem_core.lock.owner is None


class TestQuery:
    """Test single-value queries."""

    def test_query_returns_value(self, modem_core, mock_transport):
        """Test a [value, OK] response returns the value."""
        mock_transport.add_response(["value", "OK"])

        assert modem_core.query("AT+CGMM") == "value"

    def test_query_ignores_notifications(self, modem_core, mock_transport):
        """Test notifications don't break the response shape."""
        mock_transport.add_response(["+CREG: 1", "value", "OK"])

        assert modem_core.query("AT+CGMM") == "value"

    @pytest.mark.parametrize("response", [
        ["OK"],
        ["a", "b", "OK"],
        ["+CPIN: READY"],
    ])
    def test_query_rejects_other_shapes(self, modem_core, mock_transport, response):
        """Test anything but [value, OK] is a protocol violation."""
        mock_transport.add_response(response)

        with pytest.raises(ProtocolViolationError):
            modem_core.query("AT+CGMM")


class TestStart:
    """Test modem initialization."""

    def test_start_sends_init_sequence(self, modem_core, mock_transport):
        """Test the initialization commands are sent in order."""
        for _ in range(4):
            mock_transport.add_response(["OK"])

        modem_core.start()

        assert mock_transport.written_text == [
            "ATE0\r",
            "AT+CMEE=1\r",
            "AT+WIND=0\r",
            "AT+CMGF=1\r",
        ]

    def test_start_failure_propagates(self, modem_core, mock_transport):
        """Test a failing init command is reported."""
        mock_transport.add_response(["OK"])
        mock_transport.add_response(["ERROR"])

        with pytest.raises(ModemError):
            modem_core.start()

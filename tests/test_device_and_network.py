"""
Tests for DeviceManager and NetworkManager.
"""

import pytest
from gsmdriver.types import HardwareInfo
from gsmdriver.exceptions import ProtocolViolationError


class TestDevice:
    """Test device identity and SIM PIN."""

    def test_hardware(self, modem, mock_transport):
        mock_transport.add_response(["Multitech", "OK"])
        mock_transport.add_response(["MTCBA-G-F4", "OK"])
        mock_transport.add_response(["123456789", "OK"])
        mock_transport.add_response(["ABCD", "OK"])

        assert modem.device.hardware() == HardwareInfo(
            manufacturer="Multitech",
            model="MTCBA-G-F4",
            revision="123456789",
            serial="ABCD"
        )
        assert mock_transport.written_text == ["AT+CGMI\r", "AT+CGMM\r", "AT+CGMR\r", "AT+CGSN\r"]

    def test_pin_not_required(self, modem, mock_transport):
        mock_transport.add_response(["+CPIN: READY"])

        assert modem.device.pin_required() is False

    def test_pin_required(self, modem, mock_transport):
        mock_transport.add_response(["+CPIN: SIM PIN"])

        assert modem.device.pin_required() is True

    def test_use_pin_accepted(self, modem, mock_transport):
        mock_transport.add_response(["+CPIN: SIM PIN"])
        mock_transport.add_response(["OK"])

        assert modem.device.use_pin("1234") is True
        assert mock_transport.written_text[-1] == "AT+CPIN=1234\r"

    def test_use_pin_rejected(self, modem, mock_transport):
        mock_transport.add_response(["+CPIN: SIM PIN"])
        mock_transport.add_response(["+CME ERROR: 16"])

        assert modem.device.use_pin("0000") is False

    def test_use_pin_when_ready(self, modem, mock_transport):
        mock_transport.add_response(["+CPIN: READY"])

        assert modem.device.use_pin("1234") is True
        assert len(mock_transport.written) == 1


class TestNetwork:
    """Test bands and signal strength."""

    def test_compatible_bands(self, modem, mock_transport):
        mock_transport.add_response(["+WMBS: (0,3,4),(0-1)", "OK"])

        assert modem.network.compatible_bands() == ["850", "1900", "850/1900"]

    def test_band(self, modem, mock_transport):
        mock_transport.add_response(["+WMBS: 5,0", "OK"])

        assert modem.network.band() == "900E/1800"

    def test_band_not_wmbs(self, modem, mock_transport):
        mock_transport.add_response(["+FOO: 5", "OK"])

        with pytest.raises(ProtocolViolationError):
            modem.network.band()

    def test_signal_strength(self, modem, mock_transport):
        mock_transport.add_response(["+CSQ: 24,99", "OK"])

        assert modem.network.signal_strength() == 24

    def test_signal_strength_unknown(self, modem, mock_transport):
        mock_transport.add_response(["+CSQ: 99,99", "OK"])

        assert modem.network.signal_strength() is None

    def test_wait_for_network(self, modem, mock_transport):
        mock_transport.add_response(["+CSQ: 99,99", "OK"])
        mock_transport.add_response(["+CSQ: 99,99", "OK"])
        mock_transport.add_response(["+CSQ: 17,0", "OK"])

        assert modem.network.wait_for_network(poll_interval=0.01) == 17
        assert len(mock_transport.written) == 3

"""
Network-specific response parsers.

Parses responses for band selection and signal strength commands.
"""

from typing import Optional

from .base import RegexParser, ResponseParser
from ..types import BANDS, SignalStrength


class BandListParser(ResponseParser[list[Optional[str]]]):
    """Parser for AT+WMBS=? (supported bands) response."""

    def __init__(self):
        self._regex = RegexParser(r"^\+WMBS: \(([\d,]+)\),", command="AT+WMBS=?")

    def parse(self, value: str) -> list[Optional[str]]:
        """
        Parse AT+WMBS=? response.

        Expected format: "+WMBS: (0,1,2,3,4,5,6),(0-1)"
        """
        indexes, = self._regex.parse(value)
        return [BANDS.get(index) for index in indexes.split(",")]


class BandParser(ResponseParser[Optional[str]]):
    """Parser for AT+WMBS? (current band) response."""

    def __init__(self):
        self._regex = RegexParser(r"^\+WMBS: (\d+),", command="AT+WMBS?")

    def parse(self, value: str) -> Optional[str]:
        """
        Parse AT+WMBS? response.

        Expected format: "+WMBS: 4,0"
        """
        index, = self._regex.parse(value)
        return BANDS.get(index)


class SignalStrengthParser(ResponseParser[SignalStrength]):
    """Parser for AT+CSQ (signal strength) response."""

    def __init__(self):
        self._regex = RegexParser(r"^\+CSQ: (\d+),(\d+)", command="AT+CSQ")

    def parse(self, value: str) -> SignalStrength:
        """
        Parse AT+CSQ response.

        Expected format: "+CSQ: 24,99"
        """
        rssi, ber = self._regex.parse(value)
        return SignalStrength(rssi=int(rssi), ber=int(ber))

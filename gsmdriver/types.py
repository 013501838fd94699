"""
Data types and structures for gsmdriver.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class ErrorCategory(Enum):
    """Categories of modem-reported errors."""
    GENERAL = "CME"  # Mobile equipment errors
    SMS = "CMS"      # SMS subsystem errors


@dataclass(frozen=True)
class IncomingMessage:
    """A complete inbound SMS, reassembled if it arrived in parts."""
    sender: str          # Sender phone number, as reported by the modem
    timestamp: datetime  # Service centre timestamp (timezone aware)
    text: str            # Message text


@dataclass
class HardwareInfo:
    """
    Modem identity from AT+CGMI, AT+CGMM, AT+CGMR and AT+CGSN.

    The contents of each field vary wildly between manufacturers.
    """
    manufacturer: str
    model: str
    revision: str
    serial: str


# Values accepted and returned by AT+WMBS, mapped to frequency bands in
# MHz. From the MultiTech AT command-set reference.
BANDS = {
    "0": "850",
    "1": "900",
    "2": "1800",
    "3": "1900",
    "4": "850/1900",
    "5": "900E/1800",
    "6": "900E/1900",
}


@dataclass
class SignalStrength:
    """
    Signal strength from AT+CSQ.

    RSSI:
        0...31: Increasing strength
        99: Not known or not detectable
    """
    rssi: int
    ber: int

    @property
    def value(self) -> Optional[int]:
        """RSSI, or None when the modem doesn't know."""
        return None if self.rssi == 99 else self.rssi

"""
gsmdriver - Python driver for GSM modems over a serial line.
"""

from .version import __version__
from .modem import GsmModem
from .core import MockTransport, SerialTransport

from .types import (
    ErrorCategory,
    IncomingMessage,
    HardwareInfo,
    SignalStrength,
)

from .exceptions import (
    GSMError,
    TransportError,
    WriteError,
    ReadError,
    ReadTimeoutError,
    ModemError,
    ProtocolViolationError,
)

__all__ = [
    "__version__",
    "GsmModem",
    "MockTransport",
    "SerialTransport",
    "ErrorCategory",
    "IncomingMessage",
    "HardwareInfo",
    "SignalStrength",
    "GSMError",
    "TransportError",
    "WriteError",
    "ReadError",
    "ReadTimeoutError",
    "ModemError",
    "ProtocolViolationError",
]

"""
Core modem infrastructure.

Provides low-level building blocks for modem communication:
- Transport: Serial communication abstraction
- LineTransport: Line framing with read deadlines
- AccessLock: Exclusive, re-entrant access to the device
- Protocol: AT command execution
- Incoming: Incoming SMS parsing, reassembly and queueing
- ReceiveLoop: Background polling for incoming SMS
- ModemCore: Coordination of all core components
"""

from .transport import Transport, SerialTransport, MockTransport
from .lines import LineTransport
from .lock import AccessLock
from .protocol import ATProtocol
from .incoming import IncomingQueue, IncomingMessageParser, parse_incoming_timestamp
from .receiver import ReceiveLoop, ReceiveCallback
from .modem import ModemCore

__all__ = [
    "Transport",
    "SerialTransport",
    "MockTransport",
    "LineTransport",
    "AccessLock",
    "ATProtocol",
    "IncomingQueue",
    "IncomingMessageParser",
    "parse_incoming_timestamp",
    "ReceiveLoop",
    "ReceiveCallback",
    "ModemCore",
]

"""
Transport layer abstraction for modem communication.

Provides a byte-oriented view of the serial device with dependency
injection support, so the protocol layers can be driven by a scripted
device in tests.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Optional
import serial
from serial import SerialException

from ..exceptions import GSMError, ReadError, WriteError

logger = logging.getLogger(__name__)


class Transport(ABC):
    """Abstract base class for modem transport."""

    @abstractmethod
    def write(self, data: bytes) -> int:
        """
        Write data to the transport.

        Args:
            data: Bytes to write

        Returns:
            Number of bytes written

        Raises:
            WriteError: If the device can't be written to
        """
        pass

    @abstractmethod
    def read_byte(self) -> Optional[bytes]:
        """
        Read a single byte from the transport.

        Returns:
            One byte, ``b""`` if nothing arrived within the transport's
            own (short) timeout, or None if the device reported a fault

        Raises:
            ReadError: If the read fails
        """
        pass

    @abstractmethod
    def is_open(self) -> bool:
        """Check if transport is open."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the transport."""
        pass


class SerialTransport(Transport):
    """Serial port transport implementation (8 data bits, 1 stop bit, no parity)."""

    def __init__(
        self,
        port: str,
        baudrate: int = 9600,
        timeout: float = 0.1
    ) -> None:
        """
        Initialize serial transport.

        Args:
            port: Serial port path (e.g., /dev/ttyUSB0)
            baudrate: Baud rate for serial communication
            timeout: Single-byte read timeout in seconds. Line deadlines
                     are enforced above this layer.

        Raises:
            GSMError: If serial port cannot be opened
        """
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout

        try:
            self._serial = serial.Serial(
                port=port,
                baudrate=baudrate,
                bytesize=serial.EIGHTBITS,
                stopbits=serial.STOPBITS_ONE,
                parity=serial.PARITY_NONE,
                timeout=timeout
            )
            logger.info(f"Opened serial port {port} at {baudrate} baud")
        except SerialException as e:
            logger.error(f"Failed to open serial port {port}: {e}")
            raise GSMError(f"Failed to open serial port {port}: {e}") from e

    def write(self, data: bytes) -> int:
        """Write data to serial port."""
        try:
            written = self._serial.write(data)
            self._serial.flush()
            return written
        except (SerialException, OSError) as e:
            # the device couldn't be written to, which
            # probably means that it crashed or was unplugged
            logger.error(f"Serial write failed: {e}")
            raise WriteError(f"Serial write failed: {e}") from e

    def read_byte(self) -> Optional[bytes]:
        """Read one byte from the serial port."""
        try:
            return self._serial.read(1)
        except (SerialException, OSError) as e:
            logger.error(f"Serial read failed: {e}")
            raise ReadError(f"Serial read failed: {e}") from e

    def is_open(self) -> bool:
        """Check if serial port is open."""
        return bool(self._serial and self._serial.is_open)

    def close(self) -> None:
        """Close the serial port."""
        if self._serial and self._serial.is_open:
            self._serial.close()
            logger.info(f"Closed serial port {self.port}")


class MockTransport(Transport):
    """
    Mock transport for testing.

    Behaves like a modem: every write releases the next queued response
    into the input buffer, where it is read back one byte at a time.
    """

    def __init__(self, echo: bool = False) -> None:
        """
        Initialize mock transport.

        Args:
            echo: Echo each command line back before its response, as a
                  modem does before ATE0
        """
        self.echo = echo
        self.written: list[bytes] = []
        self._open = True
        self._fault = False
        self._input = bytearray()
        self._response_queue: list[bytes] = []
        self._lock = threading.Lock()
        logger.info("Initialized MockTransport")

    def add_response(self, lines: list[str], terminator: str = "\r\n") -> None:
        """
        Queue a response to be released by the next write.

        Args:
            lines: Response lines (e.g., ["+CSQ: 24,99", "OK"])
            terminator: Appended to every line. Use "" for the "> " prompt.
        """
        data = "".join(line + terminator for line in lines).encode("latin-1")
        with self._lock:
            self._response_queue.append(data)
            logger.debug(f"Added mock response: {lines}")

    def inject(self, lines: list[str], terminator: str = "\r\n") -> None:
        """Make lines readable immediately, as unsolicited output."""
        data = "".join(line + terminator for line in lines).encode("latin-1")
        with self._lock:
            self._input += data

    def simulate_read_fault(self) -> None:
        """Make every subsequent read report a device fault."""
        self._fault = True

    @property
    def written_text(self) -> list[str]:
        """Everything written so far, decoded."""
        return [data.decode("latin-1") for data in self.written]

    def write(self, data: bytes) -> int:
        """Simulate writing data."""
        if not self._open:
            raise WriteError("MockTransport is closed (simulating device disconnection)")

        with self._lock:
            self.written.append(bytes(data))
            logger.debug(f"Mock write: {data!r}")

            if self.echo and data.endswith(b"\r"):
                self._input += data.rstrip(b"\r") + b"\r\n"

            if self._response_queue:
                self._input += self._response_queue.pop(0)

        return len(data)

    def read_byte(self) -> Optional[bytes]:
        """Simulate reading one byte from the modem."""
        if not self._open or self._fault:
            return None

        with self._lock:
            if self._input:
                byte = bytes(self._input[:1])
                del self._input[:1]
                return byte

        # nothing to read, behave like a serial timeout
        time.sleep(0.005)
        return b""

    def is_open(self) -> bool:
        """Check if mock transport is open."""
        return self._open

    def close(self) -> None:
        """Close mock transport."""
        self._open = False
        logger.info("Closed MockTransport")

    def clear_responses(self) -> None:
        """Clear all queued responses and pending input."""
        with self._lock:
            self._response_queue.clear()
            self._input.clear()
            logger.debug("Cleared mock response queue")

"""
Line framing over a byte transport.

The modem is a streaming byte source with no framing of its own. Lines
are read one byte at a time until the buffer ends with any of the
accepted terminators, which lets the same reader handle "OK\\r\\n" style
responses and the bare "> " prompt of AT+CMGS.
"""

import time
from typing import Iterable, Optional, Union

from .log import get_logger
from .transport import Transport
from ..exceptions import ReadError, ReadTimeoutError

logger = get_logger(__name__)

DEFAULT_READ_TERM = "\r\n"
DEFAULT_WRITE_TERM = "\r"

# the modem speaks 8-bit text; latin-1 keeps every byte value intact
# (multipart headers rely on bytes 130 and 173 surviving decoding)
ENCODING = "latin-1"

Terminators = Union[str, Iterable[str], None]


class LineTransport:
    """Reads and writes terminator-delimited lines."""

    def __init__(self, transport: Transport, read_timeout: float = 10.0) -> None:
        """
        Initialize line transport.

        Args:
            transport: Byte transport to the device
            read_timeout: Deadline in seconds for reading one line
        """
        self.transport = transport
        self.read_timeout = read_timeout

    def write(self, data: str) -> None:
        """Write data to the device, without any terminator."""
        logger.debug(f"Write: {data!r}")
        self.transport.write(data.encode(ENCODING, errors="replace"))

    def write_line(self, data: str, terminator: str = DEFAULT_WRITE_TERM) -> None:
        """Write data followed by the line terminator."""
        self.write(data + terminator)

    def read_line(
        self,
        terminators: Terminators = None,
        timeout: Optional[float] = None
    ) -> str:
        """
        Read until the buffer ends with any of the terminators.

        Args:
            terminators: One terminator or several (default "\\r\\n")
            timeout: Deadline in seconds (uses read_timeout if None)

        Returns:
            The line with surrounding whitespace stripped

        Raises:
            ReadTimeoutError: If no terminator arrived before the deadline
            ReadError: If the device reported a read fault
        """
        terms = self._encode_terminators(terminators)
        timeout_val = timeout if timeout is not None else self.read_timeout
        deadline = time.monotonic() + timeout_val
        buf = bytearray()

        while True:
            if time.monotonic() > deadline:
                logger.warning(f"Read: Timed out with {bytes(buf)!r} pending")
                raise ReadTimeoutError(f"No response within {timeout_val}s")

            byte = self.transport.read_byte()

            # None signifies a fault, not a timeout
            if byte is None:
                raise ReadError("Device returned no data (read fault)")

            if not byte:
                continue

            buf += byte
            for term in terms:
                if buf.endswith(term):
                    line = buf.decode(ENCODING)
                    logger.debug(f"Read: {line!r}")
                    return line.strip()

    @staticmethod
    def _encode_terminators(terminators: Terminators) -> list[bytes]:
        if terminators is None:
            terminators = [DEFAULT_READ_TERM]
        elif isinstance(terminators, str):
            terminators = [terminators]
        return [t.encode(ENCODING) for t in terminators]

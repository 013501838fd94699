"""
Incoming SMS handling.

With AT+CNMI=2,2 the modem pushes new messages as a "+CMT:" header line
followed by the message body, in the middle of whatever command happens
to be running. IncomingMessageParser pulls those pairs out of a
command's response, reassembles multipart messages and queues complete
messages on an IncomingQueue for the receive loop to pick up.
"""

import re
import threading
from collections import deque
from datetime import datetime
from typing import Callable, Deque, Optional

from .log import get_logger
from ..exceptions import ProtocolViolationError
from ..types import IncomingMessage

logger = get_logger(__name__)

CMT_PREFIX = "+CMT:"
CMT_PATTERN = re.compile(r'^\+CMT: "(.+?)",.*?,"(.+?)".*?$')

# e.g. 23/01/01,12:00:00+08, where the zone is counted in quarter hours
TIMESTAMP_PATTERN = re.compile(r"^(\d\d/\d\d/\d\d,\d\d:\d\d:\d\d)([+-])(\d+)$")
TIMESTAMP_FORMAT = "%y/%m/%d,%H:%M:%S%z"

# multipart bodies start with byte 130 and "@"; byte 173 at offset 5
# marks the last part, and the text proper starts after the header
MULTIPART_MARKER = 130
FINAL_PART_MARKER = 173
FINAL_PART_OFFSET = 5
MULTIPART_HEADER_LEN = 7


def parse_incoming_timestamp(timestamp: str) -> datetime:
    """
    Parse a service centre timestamp into an aware datetime.

    The trailing timezone is measured in 15-minute units, which strptime
    knows nothing about, so it is rewritten as +HHMM first. Leftover
    quarters become minutes rather than being truncated to whole hours
    ("+22" is +05:30, not +05:00).

    Args:
        timestamp: Timestamp as sent by the modem (e.g., "23/01/01,12:00:00+08")

    Returns:
        Timezone-aware datetime

    Raises:
        ProtocolViolationError: If the timestamp is malformed
    """
    m = TIMESTAMP_PATTERN.match(timestamp)
    if m is None:
        raise ProtocolViolationError(f"Couldn't parse timestamp: {timestamp!r}")

    stamp, sign, quarters = m.groups()
    hours, quarter = divmod(int(quarters), 4)

    try:
        return datetime.strptime(
            f"{stamp}{sign}{hours:02d}{quarter * 15:02d}", TIMESTAMP_FORMAT
        )
    except ValueError as e:
        raise ProtocolViolationError(f"Couldn't parse timestamp: {timestamp!r}") from e


def is_multipart(text: str) -> bool:
    """Check whether a message body is one part of a concatenated message."""
    return len(text) >= 2 and ord(text[0]) == MULTIPART_MARKER and text[1] == "@"


def is_final_part(text: str) -> bool:
    """Check whether a multipart body carries the last-part marker."""
    return len(text) > FINAL_PART_OFFSET and ord(text[FINAL_PART_OFFSET]) == FINAL_PART_MARKER


class IncomingQueue:
    """
    Thread-safe queue of complete incoming messages.

    Appended to by whichever thread's command delivered the message,
    drained by the receive loop.
    """

    def __init__(self, max_size: int = 1000) -> None:
        """
        Initialize incoming queue.

        Args:
            max_size: Maximum number of messages to hold (oldest dropped)
        """
        self._max_size = max_size
        self._messages: Deque[IncomingMessage] = deque(maxlen=max_size)
        self._lock = threading.Lock()

    def append(self, message: IncomingMessage) -> None:
        """Add a complete message to the end of the queue."""
        with self._lock:
            if len(self._messages) == self._max_size:
                dropped = self._messages[0]
                logger.warning(f"Incoming queue full, dropping message from {dropped.sender}")
            self._messages.append(message)

    def drain(self) -> list[IncomingMessage]:
        """Remove and return every queued message, oldest first."""
        with self._lock:
            messages = list(self._messages)
            self._messages.clear()
        return messages

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)


class IncomingMessageParser:
    """Extracts, reassembles and queues incoming messages from response lines."""

    def __init__(
        self,
        queue: IncomingQueue,
        acknowledge: Callable[[], None]
    ) -> None:
        """
        Initialize parser.

        Args:
            queue: Where complete messages are delivered
            acknowledge: Tells the network a message was accepted (AT+CNMA).
                         Called before the message is queued.
        """
        self.queue = queue
        self._acknowledge = acknowledge

        # sender -> parts received so far, in arrival order
        self._multipart: dict[str, list[str]] = {}
        self._lock = threading.Lock()

    def parse(self, lines: list[str]) -> list[str]:
        """
        Pull incoming messages out of a command's response.

        Args:
            lines: Response lines from the command engine

        Returns:
            The lines that were not part of an incoming message

        Raises:
            ProtocolViolationError: If a +CMT header can't be parsed
        """
        output: list[str] = []
        n = 0

        while n < len(lines):
            line = lines[n]

            if not line.startswith(CMT_PREFIX):
                output.append(line)
                n += 1
                continue

            m = CMT_PATTERN.match(line)
            if m is None:
                raise ProtocolViolationError(f"Couldn't parse CMT data: {line!r}", response=lines)

            if n + 1 >= len(lines):
                raise ProtocolViolationError(f"CMT header without message body: {line!r}", response=lines)

            sender, timestamp = m.groups()
            text = lines[n + 1]

            # the network must hear that we accepted the message before
            # anyone can see it in the queue and start acting on it
            self._acknowledge()
            self._receive(sender, timestamp, text)

            # skip the header and the body
            n += 2

        return output

    def _receive(self, sender: str, timestamp: str, text: str) -> Optional[IncomingMessage]:
        """Queue a message, or buffer it if it is an unfinished multipart part."""
        sent_at = parse_incoming_timestamp(timestamp)

        if is_multipart(text):
            with self._lock:
                parts = self._multipart.setdefault(sender, [])
                parts.append(text[MULTIPART_HEADER_LEN:])
                logger.info(f"Received part {len(parts)} of message from {sender}")

                if not is_final_part(text):
                    return None

                # sender and timestamp are the same for every part
                text = "".join(self._multipart.pop(sender))

        logger.info(f"Received message from {sender}: {text}")
        message = IncomingMessage(sender=sender, timestamp=sent_at, text=text)
        self.queue.append(message)
        return message

    def pending_parts(self, sender: str) -> list[str]:
        """Parts buffered so far for an unfinished multipart message."""
        with self._lock:
            return list(self._multipart.get(sender, []))

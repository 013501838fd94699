"""
Core modem class coordinating transport, protocol, locking and
incoming message handling.

This is the foundation that feature managers build upon.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from .incoming import IncomingMessageParser, IncomingQueue
from .lines import LineTransport, Terminators
from .lock import AccessLock
from .log import get_logger
from .protocol import ATProtocol
from .receiver import ReceiveCallback, ReceiveLoop
from .transport import Transport
from ..exceptions import ModemError

logger = get_logger(__name__)

INIT_COMMANDS = (
    "ATE0",       # echo off
    "AT+CMEE=1",  # useful errors
    "AT+WIND=0",  # no notifications
    "AT+CMGF=1",  # switch to text mode
)

ACK_COMMAND = "AT+CNMA"


class ModemCore:
    """
    Core modem functionality.

    Coordinates:
    - Line transport (framing over the serial device)
    - Access lock (one logical operation on the device at a time)
    - Protocol (AT command execution and retry)
    - Incoming message parsing and queueing
    - Receive loop (background polling)
    """

    def __init__(
        self,
        transport: Transport,
        read_timeout: float = 10.0,
        cmd_delay: float = 0.1,
        retry_delay: float = 2.0,
        lock_poll_interval: float = 0.05,
        max_incoming_queue: int = 1000
    ) -> None:
        """
        Initialize modem core.

        Args:
            transport: Transport instance for communication
            read_timeout: Deadline in seconds for each response line
            cmd_delay: Rest in seconds after each command
            retry_delay: Rest in seconds before retrying CMS ERROR 515
            lock_poll_interval: Seconds between lock re-checks while waiting
            max_incoming_queue: Maximum complete messages held for the receiver
        """
        self.transport = transport
        self.lines = LineTransport(transport, read_timeout=read_timeout)
        self.lock = AccessLock(poll_interval=lock_poll_interval)
        self.protocol = ATProtocol(
            self.lines,
            self.lock,
            cmd_delay=cmd_delay,
            retry_delay=retry_delay
        )

        self.incoming = IncomingQueue(max_size=max_incoming_queue)
        self.incoming_parser = IncomingMessageParser(
            self.incoming,
            acknowledge=self._acknowledge_incoming
        )
        self.protocol.incoming_parser = self.incoming_parser

        self._receiver: Optional[ReceiveLoop] = None
        self._started = False

        logger.info("Initialized ModemCore")

    def start(self) -> None:
        """
        Initialize the modem.

        Turns echo off, enables numeric error codes, disables vendor
        indications and switches to text mode.
        """
        if self._started:
            logger.warning("ModemCore already started")
            return

        for cmd in INIT_COMMANDS:
            self.protocol.command(cmd)

        self._started = True
        logger.info("Modem initialized")

    def receive(
        self,
        callback: ReceiveCallback,
        interval: float = 5.0,
        join: bool = False
    ) -> ReceiveLoop:
        """
        Start polling for incoming messages on a background thread.

        Messages that arrived before this was called are not lost; they
        wait in the incoming queue and are delivered on the first poll.

        Args:
            callback: Called as callback(sender, timestamp, text) per message
            interval: Seconds between polls
            join: Block the caller until the loop stops

        Returns:
            The running receive loop
        """
        if self._receiver is not None and self._receiver.is_running():
            logger.info("Replacing running receive loop")
            self._receiver.stop()

        self._receiver = ReceiveLoop(
            self.protocol,
            self.incoming,
            callback,
            interval=interval
        )
        self._receiver.start(join=join)
        return self._receiver

    def stop(self) -> None:
        """Stop the receive loop, if running."""
        if self._receiver is not None:
            self._receiver.stop()
            self._receiver = None

    def close(self) -> None:
        """
        Close the modem connection.

        Stops the receive loop and closes the transport.
        """
        logger.info("Closing modem connection")
        self.stop()
        self.transport.close()
        logger.info("Modem connection closed")

    def command(
        self,
        cmd: str,
        read_term: Terminators = None,
        write_term: str = "\r"
    ) -> list[str]:
        """
        Send an AT command.

        This is a convenience wrapper around protocol.command().
        """
        return self.protocol.command(cmd, read_term=read_term, write_term=write_term)

    def query(self, cmd: str) -> str:
        """
        Send a single-value AT command.

        This is a convenience wrapper around protocol.query().
        """
        return self.protocol.query(cmd)

    @contextmanager
    def exclusive(self) -> Iterator[None]:
        """Hold the device for a sequence of commands."""
        with self.lock.exclusive():
            yield

    def is_receiving(self) -> bool:
        """Check if the receive loop is running."""
        return self._receiver is not None and self._receiver.is_running()

    def _acknowledge_incoming(self) -> None:
        """Tell the network we accepted an incoming message."""
        try:
            self.protocol.command(ACK_COMMAND)
        except ModemError as e:
            # some networks don't expect an acknowledgement
            logger.warning(f"Incoming message acknowledgement rejected: {e}")

    def __enter__(self):
        """Context manager entry."""
        if not self._started:
            self.start()
        return self

    def __exit__(self, *exc):
        """Context manager exit."""
        self.close()

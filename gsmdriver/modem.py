"""
Main GsmModem class.

User-facing API that coordinates all feature managers.
"""

from typing import Optional

from .core import ModemCore, ReceiveCallback, ReceiveLoop, SerialTransport, Transport
from .core.lines import Terminators
from .core.log import get_logger
from .features import DeviceManager, NetworkManager, SMSManager

logger = get_logger(__name__)


class GsmModem:
    """
    Main interface for GSM modem control.

    Provides a high-level API for modem operations through feature managers:

    - device: Hardware identity and SIM PIN
    - network: Frequency bands and signal strength
    - sms: Sending and receiving text-mode SMS

    Example usage with context manager:

    .. code-block:: python

        def on_sms(sender, timestamp, text):
            print(f"From {sender} at {timestamp}: {text}")

        with GsmModem(port="/dev/ttyUSB0") as modem:
            modem.network.wait_for_network()
            modem.sms.send("+15551234567", "Hello")
            modem.sms.receive(on_sms)
            ...

    Example usage with manual lifecycle management:

    .. code-block:: python

        modem = GsmModem(port="/dev/ttyUSB0")
        modem.start()
        # ... use modem ...
        modem.close()
    """

    def __init__(
        self,
        port: Optional[str] = None,
        transport: Optional[Transport] = None,
        baudrate: int = 9600,
        read_timeout: float = 10.0,
        cmd_delay: float = 0.1,
        retry_delay: float = 2.0,
        lock_poll_interval: float = 0.05,
        max_incoming_queue: int = 1000,
        auto_start: bool = False
    ) -> None:
        """
        Initialize GsmModem.

        Args:
            port: Serial port path (e.g., "/dev/ttyUSB0"). Either port or transport required.
            transport: Custom transport instance (for testing). Overrides port if provided.
            baudrate: Serial port baud rate (default: 9600)
            read_timeout: Deadline in seconds for each response line (default: 10.0)
            cmd_delay: Rest in seconds after each command (default: 0.1)
            retry_delay: Rest in seconds before retrying CMS ERROR 515 (default: 2.0)
            lock_poll_interval: Seconds between device lock re-checks (default: 0.05)
            max_incoming_queue: Maximum incoming messages held for the receiver (default: 1000)
            auto_start: Initialize the modem immediately (default: False)

        Raises:
            ValueError: If neither port nor transport is provided
            GSMError: If serial port cannot be opened

        Example:

        .. code-block:: python

            # Using serial port
            modem = GsmModem(port="/dev/ttyUSB0", baudrate=115200)

            # Using custom transport (for testing)
            from gsmdriver.core import MockTransport
            modem = GsmModem(transport=MockTransport(), cmd_delay=0)
        """
        if transport is None and port is None:
            raise ValueError("Either 'port' or 'transport' must be provided")

        if transport is None:
            transport = SerialTransport(port=port, baudrate=baudrate)
            logger.info(f"Created serial transport for {port}")

        self._core = ModemCore(
            transport=transport,
            read_timeout=read_timeout,
            cmd_delay=cmd_delay,
            retry_delay=retry_delay,
            lock_poll_interval=lock_poll_interval,
            max_incoming_queue=max_incoming_queue
        )

        self.device = DeviceManager(self._core)
        self.network = NetworkManager(self._core)
        self.sms = SMSManager(self._core)

        logger.info("Initialized GsmModem")

        if auto_start:
            self.start()

    def start(self) -> None:
        """
        Initialize the modem (echo off, numeric errors, text mode).

        Must be called before using the modem (unless auto_start=True or
        using the context manager).
        """
        self._core.start()
        logger.info("Modem started")

    def stop(self) -> None:
        """Stop receiving SMS."""
        self._core.stop()
        logger.info("Modem stopped")

    def close(self) -> None:
        """
        Close the modem connection.

        Stops the receive loop and closes the transport.
        """
        self._core.close()
        logger.info("Modem closed")

    def command(
        self,
        cmd: str,
        read_term: Terminators = None,
        write_term: str = "\r"
    ) -> list[str]:
        """
        Send a raw AT command.

        For advanced users who need to send commands not covered by
        feature managers.

        Args:
            cmd: AT command (e.g., "AT+CGMI" or "+CGMI")
            read_term: Line terminator(s) to accept (default "\\r\\n")
            write_term: Terminator written after the command

        Returns:
            Response lines, including the terminating "OK"

        Raises:
            ModemError: If the modem returned an error
            TransportError: If the device couldn't be written or read
        """
        return self._core.command(cmd, read_term=read_term, write_term=write_term)

    def query(self, cmd: str) -> str:
        """
        Send a raw AT command with a single-line response.

        Raises:
            ProtocolViolationError: If the response is not [value, "OK"]

        Example:

        .. code-block:: python

            model = modem.query("AT+CGMM")
        """
        return self._core.query(cmd)

    def send(self, recipient: str, text: str) -> bool:
        """Send an SMS. See SMSManager.send()."""
        return self.sms.send(recipient, text)

    def receive(
        self,
        callback: ReceiveCallback,
        interval: float = 5.0,
        join: bool = False
    ) -> ReceiveLoop:
        """Start receiving SMS. See SMSManager.receive()."""
        return self.sms.receive(callback, interval=interval, join=join)

    @property
    def is_receiving(self) -> bool:
        """Check if the receive loop is running."""
        return self._core.is_receiving()

    def __enter__(self):
        """
        Context manager entry.

        Automatically initializes the modem.
        """
        self._core.__enter__()
        return self

    def __exit__(self, *exc):
        """
        Context manager exit.

        Automatically closes the modem connection.
        """
        self.close()

    def __repr__(self) -> str:
        """String representation of modem."""
        status = "receiving" if self.is_receiving else "idle"
        return f"<GsmModem status={status}>"

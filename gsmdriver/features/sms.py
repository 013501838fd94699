"""
SMS manager.

Handles sending text-mode SMS and receiving pushed incoming messages.
"""

from typing import TYPE_CHECKING

from ..core.log import get_logger
from ..core.protocol import PROMPT
from ..core.receiver import ReceiveCallback, ReceiveLoop
from ..exceptions import GSMError

if TYPE_CHECKING:
    from ..core import ModemCore

logger = get_logger(__name__)

# sending to this number never results in a real SMS
DRY_RUN_NUMBER = "+123456789"

# ends text entry after AT+CMGS
CTRL_Z = chr(26)

# AT+CMGS answers with a bare "> " prompt, or a line on failure
SEND_READ_TERM = ("\r\n", "> ")


class SMSManager:
    """
    Manages SMS messaging.

    Provides methods for sending SMS and receiving incoming SMS through
    a callback.
    """

    def __init__(self, modem_core: "ModemCore") -> None:
        """
        Initialize SMS manager.

        Args:
            modem_core: ModemCore instance for AT command execution
        """
        self.modem = modem_core
        logger.debug("Initialized SMSManager")

    def send(self, recipient: str, text: str) -> bool:
        """
        Send an SMS.

        The recipient is passed straight through to the SMSC, so use
        international format (with the plus and country code) for the
        best compatibility.

        The device is held for the whole sequence so the receive loop
        can't interleave its polling with the message entry.

        Args:
            recipient: Destination phone number
            text: Message text

        Returns:
            True if the network accepted the message for delivery. We
            can't handle delivery receipts, so this is not a guarantee
            of delivery.

        Example:

        .. code-block:: python

            if not modem.sms.send("+15551234567", "Hello"):
                print("Send failed")
        """
        if recipient == DRY_RUN_NUMBER:
            logger.info(f"Not sending test message: {text}")
            return False

        protocol = self.modem.protocol

        with self.modem.exclusive():
            with logger.indented(f"Sending SMS to {recipient}: {text}"):
                try:
                    out = protocol.command(f'AT+CMGS="{recipient}"', read_term=SEND_READ_TERM)
                except GSMError as e:
                    logger.error(f"Couldn't start SMS to {recipient}: {e}")
                    return False

                if not out or out[-1] != PROMPT:
                    logger.error(f"No text prompt for SMS to {recipient}: {out!r}")
                    return False

                try:
                    protocol.write(text + CTRL_Z)
                    result = protocol.wait()

                # the modem may now be stuck in text entry mode;
                # there's nothing more we can safely do about it
                except GSMError as e:
                    logger.error(f"Rescued {e} while sending SMS to {recipient}")
                    return False

                # the message is already with the network, so a bad
                # incoming message riding along doesn't make this a failure
                try:
                    protocol.parse_incoming(result)
                except GSMError as e:
                    logger.error(f"Couldn't handle incoming message after sending SMS to {recipient}: {e}")

        logger.info(f"Sent SMS to {recipient}")
        return True

    def receive(
        self,
        callback: ReceiveCallback,
        interval: float = 5.0,
        join: bool = False
    ) -> ReceiveLoop:
        """
        Start receiving SMS on a background thread.

        Args:
            callback: Called as callback(sender, timestamp, text) per message
            interval: Seconds between polls
            join: Block until the loop stops (single-threaded debugging)

        Returns:
            The running receive loop

        Example:

        .. code-block:: python

            def on_sms(sender, timestamp, text):
                print(f"From {sender} at {timestamp}: {text}")

            modem.sms.receive(on_sms)
        """
        logger.info(f"Receiving SMS every {interval}s")
        return self.modem.receive(callback, interval=interval, join=join)

"""
Background receive loop.

Polls the modem so that pushed messages get delivered and parsed, then
hands every complete message to the application's callback.
"""

import threading
from datetime import datetime
from typing import Callable, Optional

from .incoming import IncomingQueue
from .log import get_logger
from .protocol import ATProtocol
from ..exceptions import GSMError

logger = get_logger(__name__)

# Type alias for receive callbacks: callback(sender, timestamp, text)
ReceiveCallback = Callable[[str, datetime, str], None]

KEEPALIVE_COMMAND = "AT"
NOTIFY_COMMAND = "AT+CNMI=2,2,0,0,0"


class ReceiveLoop:
    """
    Polls the modem every ``interval`` seconds and dispatches messages.

    Each cycle issues a no-op command (which gives the modem a chance to
    push notifications), re-enables new message notifications every
    ``notify_every`` cycles in case the modem forgot them (power cycle,
    etc), and drains the incoming queue into the callback. A failing
    callback is logged and does not stop the loop.
    """

    def __init__(
        self,
        protocol: ATProtocol,
        queue: IncomingQueue,
        callback: ReceiveCallback,
        interval: float = 5.0,
        notify_every: int = 10,
        max_consecutive_errors: int = 5
    ) -> None:
        """
        Initialize receive loop.

        Args:
            protocol: Command engine to poll through
            queue: Queue the incoming message parser fills
            callback: Called as callback(sender, timestamp, text) per message
            interval: Seconds between polls
            notify_every: Re-issue AT+CNMI every this many polls
            max_consecutive_errors: Stop after this many failed polls in a row
        """
        self.protocol = protocol
        self.queue = queue
        self.callback = callback
        self.interval = interval
        self.notify_every = notify_every
        self.max_consecutive_errors = max_consecutive_errors

        self._polled = 0
        self._consecutive_errors = 0
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._running = False

    def start(self, join: bool = False) -> None:
        """
        Start polling on a background thread.

        Args:
            join: Block until the loop stops (handy when debugging
                  handsets single-threaded)
        """
        if self._running:
            logger.warning("Receive loop already started")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            daemon=True,
            name="receiver"
        )
        self._running = True
        self._thread.start()
        logger.info(f"Started receive loop (interval={self.interval}s)")

        if join:
            self._thread.join()

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop the loop after the current cycle.

        Args:
            timeout: Seconds to wait for the thread (waits for the
                     current cycle if None)
        """
        if self._thread is None:
            return

        logger.info("Stopping receive loop...")
        self._stop_event.set()

        if self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Receive loop did not terminate in time")

        self._running = False

    def is_running(self) -> bool:
        """Check if the loop is running."""
        return self._running

    def run_cycle(self) -> int:
        """
        Poll the modem once and dispatch queued messages.

        Returns:
            Number of messages handed to the callback
        """
        self.protocol.command(KEEPALIVE_COMMAND)

        if self._polled % self.notify_every == 0:
            self.protocol.command(NOTIFY_COMMAND)

        self._polled += 1
        return self.dispatch()

    def dispatch(self) -> int:
        """Drain the incoming queue into the callback, oldest first."""
        messages = self.queue.drain()

        for message in messages:
            try:
                self.callback(message.sender, message.timestamp, message.text)
            except Exception as e:
                logger.error(f"Error in receive callback for message from {message.sender}: {e}", exc_info=True)

        return len(messages)

    def _run(self) -> None:
        logger.debug("Receive loop started")

        while not self._stop_event.is_set():
            try:
                self.run_cycle()
                self._consecutive_errors = 0

            except GSMError as e:
                self._consecutive_errors += 1
                logger.error(f"Error in receive loop ({self._consecutive_errors}/{self.max_consecutive_errors}): {e}")

                if self._consecutive_errors >= self.max_consecutive_errors:
                    logger.error("Too many consecutive errors, stopping receive loop")
                    break

                # Exponential backoff: 0.1s, 0.2s, 0.4s, 0.8s
                backoff_time = 0.1 * (2 ** (self._consecutive_errors - 1))
                self._stop_event.wait(backoff_time)
                continue

            self._stop_event.wait(self.interval)

        self._running = False
        logger.debug("Receive loop stopped")

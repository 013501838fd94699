"""
Exclusive access to the modem device.

The receive loop and any foreground caller both need uninterrupted,
multi-round-trip access to the one serial line. A send must not be
interleaved with the poller's keepalive, so the lock is held for whole
operations rather than single commands, and the owner may re-enter it.
"""

import threading
import time
from contextlib import contextmanager
from typing import Hashable, Iterator, Optional

from .log import get_logger

logger = get_logger(__name__)


class AccessLock:
    """
    Re-entrant lock identified by its owner.

    The owner is an explicit identifier (the calling thread's ident by
    default). A caller whose identifier matches the current owner passes
    straight through; everyone else waits until the lock is free.
    """

    def __init__(self, poll_interval: float = 0.05) -> None:
        """
        Initialize access lock.

        Args:
            poll_interval: Seconds between re-checks while waiting
        """
        self.poll_interval = poll_interval
        self._owner: Optional[Hashable] = None
        self._cond = threading.Condition()

    @property
    def owner(self) -> Optional[Hashable]:
        """Current owner identifier, or None if the lock is free."""
        return self._owner

    def acquire(self, owner: Optional[Hashable] = None) -> Optional[Hashable]:
        """
        Block until the lock is free or already held by ``owner``.

        Args:
            owner: Identifier of the caller (current thread if None)

        Returns:
            The previous owner, to be handed back to release()
        """
        if owner is None:
            owner = threading.get_ident()

        with self._cond:
            if self._owner is not None and self._owner != owner:
                logger.debug(f"Locked by {self._describe(self._owner)}, waiting...")
                while self._owner is not None:
                    self._cond.wait(self.poll_interval)

            previous = self._owner
            self._owner = owner

        return previous

    def release(self, previous: Optional[Hashable] = None) -> None:
        """Restore the previous owner and wake any waiters."""
        with self._cond:
            self._owner = previous
            self._cond.notify_all()

        # give waiting threads a chance before we grab it again
        time.sleep(0)

    @contextmanager
    def exclusive(self, owner: Optional[Hashable] = None) -> Iterator[None]:
        """
        Run the block with exclusive access to the device.

        Example:

        .. code-block:: python

            with lock.exclusive():
                lines.write_line('AT+CMGS="+15551234"')
                ...
        """
        previous = self.acquire(owner)
        logger.incr("Got lock")
        try:
            yield
        finally:
            self.release(previous)
            logger.decr()

    def is_held(self) -> bool:
        """Check whether anyone holds the lock."""
        return self._owner is not None

    @staticmethod
    def _describe(owner: Hashable) -> str:
        for thread in threading.enumerate():
            if thread.ident == owner:
                return thread.name
        return str(owner)

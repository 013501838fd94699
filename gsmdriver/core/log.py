"""
Indented logging for nested command sequences.

A send holds the lock, issues a command, which reads lines, which may
trigger an acknowledgement command... Indenting each level per thread
keeps the traffic log readable when the receive loop and a foreground
caller take turns on the device.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

# shared by every module, so depth follows the thread through the layers
_state = threading.local()


class IndentedLogger(logging.LoggerAdapter):
    """Logger adapter that prefixes messages with the current thread's depth."""

    indent = "  "

    def __init__(self, logger: logging.Logger) -> None:
        super().__init__(logger, {})

    @property
    def depth(self) -> int:
        return getattr(_state, "depth", 0)

    def process(self, msg, kwargs):
        return f"{self.indent * self.depth}{msg}", kwargs

    def incr(self, msg: Optional[str] = None) -> None:
        """Log msg (if any) at DEBUG, then indent what follows."""
        if msg:
            self.debug(msg)
        _state.depth = self.depth + 1

    def decr(self, msg: Optional[str] = None) -> None:
        """Outdent, then log msg (if any) at DEBUG."""
        _state.depth = max(0, self.depth - 1)
        if msg:
            self.debug(msg)

    @contextmanager
    def indented(self, msg: Optional[str] = None) -> Iterator[None]:
        """Indent everything logged inside the block."""
        self.incr(msg)
        try:
            yield
        finally:
            self.decr()


def get_logger(name: str) -> IndentedLogger:
    """Return an indenting adapter around ``logging.getLogger(name)``."""
    return IndentedLogger(logging.getLogger(name))

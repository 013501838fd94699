"""
Exceptions for gsmdriver.

Three families of failure are distinguished:

- TransportError: the serial link could not be written, read, or timed out
- ModemError: the modem answered with ERROR or +CME/+CMS ERROR: <code>
- ProtocolViolationError: the modem answered in a shape we don't understand
"""

from typing import Optional

from .error_codes import classify, is_retryable
from .types import ErrorCategory


class GSMError(Exception):
    """
    Base exception for GSM modem errors.

    All gsmdriver exceptions inherit from this class.
    """

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        response: Optional[list[str]] = None
    ) -> None:
        """
        Initialize exception with context.

        Args:
            message: Error description
            command: AT command that caused the error (if applicable)
            response: Modem response lines (if applicable)
        """
        self.command = command
        self.response = response
        super().__init__(message)

    def __str__(self) -> str:
        """Format error message with context."""
        parts = [super().__str__()]

        if self.command:
            parts.append(f"Command: {self.command}")

        if self.response:
            parts.append(f"Response: {self.response}")

        return " | ".join(parts)


class TransportError(GSMError):
    """
    Raised when the serial link fails.

    Never retried by the command engine. The ``cause`` attribute is one
    of ``"write"``, ``"read"`` or ``"timeout"``.
    """

    cause = "io"


class WriteError(TransportError):
    """
    Raised when the device can't be written to.

    This usually means the modem crashed or was unplugged.
    """

    cause = "write"


class ReadError(TransportError):
    """Raised when the device reports a read fault."""

    cause = "read"


class ReadTimeoutError(TransportError):
    """
    Raised when no complete line arrived before the read deadline.

    Any bytes read before the deadline are discarded.
    """

    cause = "timeout"


class ModemError(GSMError):
    """
    Raised when the modem reports an error.

    ``category`` and ``code`` are populated for ``+CME ERROR: <code>``
    and ``+CMS ERROR: <code>`` responses, and are None for a bare
    ``ERROR``.
    """

    def __init__(
        self,
        category: Optional[ErrorCategory] = None,
        code: Optional[int] = None,
        command: Optional[str] = None,
        response: Optional[list[str]] = None
    ) -> None:
        self.category = category
        self.code = code

        if category is not None and code is not None:
            message = f"{category.value} ERROR {code}"
            if self.description:
                message += f": {self.description}"
        else:
            message = "Modem returned ERROR"

        super().__init__(message, command=command, response=response)

    @property
    def description(self) -> Optional[str]:
        """Human readable description, or None if the code is unknown."""
        return classify(self.category, self.code)

    @property
    def retryable(self) -> bool:
        """True if the command should be re-issued after a short rest."""
        return is_retryable(self)


class ProtocolViolationError(GSMError):
    """
    Raised when a response doesn't have the shape we rely on.

    This indicates:
    - query() got something other than [value, "OK"]
    - An incoming message header (+CMT) couldn't be parsed
    - A timestamp wasn't in the expected format
    """
    pass

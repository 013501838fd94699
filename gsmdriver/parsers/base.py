"""
Base parser classes and utilities.

Provides reusable parsing of single-value query responses.
"""

import re
from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from ..exceptions import ProtocolViolationError

T = TypeVar('T')


class ResponseParser(ABC, Generic[T]):
    """
    Abstract base class for response parsers.

    Parsers convert the value line returned by a query into typed data.
    """

    @abstractmethod
    def parse(self, value: str) -> T:
        """
        Parse a query response.

        Args:
            value: Value line returned by the modem

        Returns:
            Parsed data

        Raises:
            ProtocolViolationError: If the value cannot be parsed
        """
        pass


class RegexParser(ResponseParser[tuple[str, ...]]):
    """Parser that matches a pattern and returns its groups."""

    def __init__(self, pattern: str, command: Optional[str] = None):
        """
        Initialize parser.

        Args:
            pattern: Regular expression the value must match
            command: Command name used in error messages
        """
        self.pattern = re.compile(pattern)
        self.command = command

    def parse(self, value: str) -> tuple[str, ...]:
        """Return the pattern's groups."""
        m = self.pattern.match(value)
        if m is None:
            raise ProtocolViolationError(
                f"Unexpected response: {value!r}",
                command=self.command,
                response=[value]
            )
        return m.groups()

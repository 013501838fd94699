"""
AT command protocol handler.

Sends a command, reads lines until a response terminator, filters
unsolicited noise, raises modem-reported errors and retries the one
error the modem expects us to retry.
"""

import re
import time
from typing import Optional

from .incoming import CMT_PREFIX, IncomingMessageParser
from .lines import DEFAULT_WRITE_TERM, LineTransport, Terminators
from .lock import AccessLock
from .log import get_logger
from ..exceptions import ModemError, ProtocolViolationError
from ..types import ErrorCategory

logger = get_logger(__name__)

# status notifications some modems send regardless of AT+WIND=0
UNSOLICITED_PREFIXES = ("+WIND:", "+CREG:", "+CGREG:")

ERROR_PATTERN = re.compile(r"^\+(CM[ES]) ERROR: (\d+)$")
PIN_PATTERN = re.compile(r"^\+CPIN: (.+)$")

OK = "OK"
ERROR = "ERROR"
# "> " once stripped
PROMPT = ">"


class ATProtocol:
    """
    AT command protocol handler.

    Every command runs with exclusive access to the device. Incoming
    messages that arrive in the middle of a response are handed to the
    incoming message parser and never reach the caller.
    """

    def __init__(
        self,
        lines: LineTransport,
        lock: AccessLock,
        cmd_delay: float = 0.1,
        retry_delay: float = 2.0
    ) -> None:
        """
        Initialize AT protocol handler.

        Args:
            lines: Line transport to the device
            lock: Lock guarding the device
            cmd_delay: Rest in seconds after each command (modems are
                       slow, and get confused easily)
            retry_delay: Rest in seconds before retrying a CMS 515 error
        """
        self.lines = lines
        self.lock = lock
        self.cmd_delay = cmd_delay
        self.retry_delay = retry_delay
        self.incoming_parser: Optional[IncomingMessageParser] = None

    def command(
        self,
        cmd: str,
        read_term: Terminators = None,
        write_term: str = DEFAULT_WRITE_TERM
    ) -> list[str]:
        """
        Send an AT command and wait for the response.

        If the modem answers CMS ERROR 515 (please wait), the command is
        re-issued after ``retry_delay`` seconds, for as long as it takes.

        Args:
            cmd: AT command to send (e.g., "AT+CSQ" or "+CSQ")
            read_term: Line terminator(s) to accept (default "\\r\\n")
            write_term: Terminator written after the command

        Returns:
            Response lines, including the terminating "OK" or prompt

        Raises:
            ModemError: If the modem returned an error
            TransportError: If the device couldn't be written or read
            ProtocolViolationError: If an incoming message couldn't be parsed
        """
        cmd = self._normalize_command(cmd)
        logger.incr(f"Command: {cmd}")

        try:
            while True:
                try:
                    with self.lock.exclusive():
                        self.lines.write_line(cmd, write_term)
                        out = self.wait(read_term, echo=cmd)
                    break

                except ModemError as err:
                    if not err.retryable:
                        logger.debug(f"Rescued: {err}, propagating")
                        raise

                    logger.warning(f"Rescued: {err}, retrying in {self.retry_delay}s")
                    time.sleep(self.retry_delay)

            out = self.parse_incoming(out)
            logger.debug(f"={out!r}")

            if self.cmd_delay:
                time.sleep(self.cmd_delay)

            return out

        finally:
            logger.decr()

    def wait(self, read_term: Terminators = None, echo: Optional[str] = None) -> list[str]:
        """
        Read lines until a response terminator is hit.

        Must be called with the lock held.

        Args:
            read_term: Line terminator(s) to accept
            echo: Command text whose echo should be skipped

        Returns:
            Response lines, including the terminating line

        Raises:
            ModemError: If the modem returned an error
            TransportError: If the device couldn't be read
        """
        buffer: list[str] = []

        with logger.indented("Waiting for response"):
            while True:
                line = self.lines.read_line(read_term)

                # some hardware adds extra CRLFs to some responses
                if not line or line == echo:
                    continue

                if line.startswith(UNSOLICITED_PREFIXES):
                    logger.debug(f"Ignoring unsolicited: {line}")
                    continue

                buffer.append(line)

                # the line after an incoming message header is always the
                # message body, whatever it looks like
                if line.startswith(CMT_PREFIX):
                    buffer.append(self.lines.read_line(read_term))
                    continue

                # some errors contain useful error codes
                m = ERROR_PATTERN.match(line)
                if m is not None:
                    category, code = m.groups()
                    raise ModemError(
                        ErrorCategory(category), int(code),
                        command=echo, response=buffer
                    )

                # ...some are not so useful
                if line == ERROR:
                    raise ModemError(command=echo, response=buffer)

                # most commands return OK upon success, except
                # for those which prompt for more data (CMGS)
                if line in (OK, PROMPT):
                    return buffer

                # AT+CPIN? never sends OK, even when it succeeds
                if PIN_PATTERN.match(line):
                    return buffer

    def query(self, cmd: str) -> str:
        """
        Send a command whose response is a single value.

        Args:
            cmd: AT command to send

        Returns:
            The value line

        Raises:
            ProtocolViolationError: If the response is not exactly [value, "OK"]
        """
        with logger.indented(f"Query: {cmd}"):
            out = self.command(cmd)

            if len(out) == 2 and out[1] == OK:
                logger.debug(f"={out[0]!r}")
                return out[0]

            raise ProtocolViolationError(f"Invalid response: {out!r}", command=cmd, response=out)

    def write(self, data: str) -> None:
        """Write raw data to the device. Must be called with the lock held."""
        self.lines.write(data)

    def parse_incoming(self, lines: list[str]) -> list[str]:
        """Strip incoming messages out of response lines."""
        if self.incoming_parser is None:
            return lines
        return self.incoming_parser.parse(lines)

    @staticmethod
    def _normalize_command(cmd: str) -> str:
        """Ensure the command starts with "AT"."""
        cmd = cmd.strip()
        if not cmd.upper().startswith("AT"):
            cmd = "AT" + cmd
        return cmd

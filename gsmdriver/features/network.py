"""
Network manager.

Handles frequency bands and signal strength.
"""

import time
from typing import TYPE_CHECKING, Optional

from ..core.log import get_logger
from ..parsers.network import BandListParser, BandParser, SignalStrengthParser

if TYPE_CHECKING:
    from ..core import ModemCore

logger = get_logger(__name__)


class NetworkManager:
    """
    Manages network operations.

    Provides methods for band selection and signal monitoring.
    """

    def __init__(self, modem_core: "ModemCore") -> None:
        """
        Initialize network manager.

        Args:
            modem_core: ModemCore instance for AT command execution
        """
        self.modem = modem_core

        # Parsers
        self._band_list_parser = BandListParser()
        self._band_parser = BandParser()
        self._signal_parser = SignalStrengthParser()

        logger.debug("Initialized NetworkManager")

    def compatible_bands(self) -> list[Optional[str]]:
        """
        Get the frequency bands supported by the modem.

        Returns:
            Band descriptions in MHz (e.g., ["850", "900", "1800"])
        """
        logger.info("Getting compatible bands")
        return self._band_list_parser.parse(self.modem.query("AT+WMBS=?"))

    def band(self) -> Optional[str]:
        """
        Get the band currently selected for use by the modem.

        Returns:
            Band description in MHz (e.g., "850/1900")
        """
        logger.info("Getting current band")
        return self._band_parser.parse(self.modem.query("AT+WMBS?"))

    def signal_strength(self) -> Optional[int]:
        """
        Get the current signal strength.

        Returns:
            RSSI between 0 and 31, or None if not known or not detectable

        Example:

        .. code-block:: python

            csq = modem.network.signal_strength()
            if csq is None:
                print("No signal")
        """
        signal = self._signal_parser.parse(self.modem.query("AT+CSQ"))
        logger.debug(f"Signal strength: {signal.rssi}")
        return signal.value

    def wait_for_network(self, poll_interval: float = 1.0) -> int:
        """
        Block until the modem is active on the GSM network.

        It's a good idea to call this before sending or receiving.

        Args:
            poll_interval: Seconds between signal checks

        Returns:
            The last signal strength
        """
        logger.info("Waiting for network")
        while True:
            csq = self.signal_strength()
            if csq is not None:
                return csq
            time.sleep(poll_interval)

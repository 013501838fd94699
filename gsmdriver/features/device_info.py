"""
Device information manager.

Handles device identity and SIM PIN operations.
"""

from typing import TYPE_CHECKING

from ..core.log import get_logger
from ..exceptions import ModemError
from ..types import HardwareInfo

if TYPE_CHECKING:
    from ..core import ModemCore

logger = get_logger(__name__)

PIN_READY = "+CPIN: READY"


class DeviceManager:
    """
    Manages device information and SIM state.

    Provides methods for querying device identity and unlocking the SIM.
    """

    def __init__(self, modem_core: "ModemCore") -> None:
        """
        Initialize device manager.

        Args:
            modem_core: ModemCore instance for AT command execution
        """
        self.modem = modem_core
        logger.debug("Initialized DeviceManager")

    def hardware(self) -> HardwareInfo:
        """
        Get information about the physical modem.

        Returns:
            HardwareInfo with manufacturer, model, revision and serial

        Example:

        .. code-block:: python

            hw = modem.device.hardware()
            print(f"{hw.manufacturer} {hw.model}")
        """
        logger.info("Getting hardware info")
        info = HardwareInfo(
            manufacturer=self.modem.query("AT+CGMI"),
            model=self.modem.query("AT+CGMM"),
            revision=self.modem.query("AT+CGMR"),
            serial=self.modem.query("AT+CGSN")
        )
        logger.debug(f"Hardware info: {info}")
        return info

    def pin_required(self) -> bool:
        """
        Check if the modem is waiting for a SIM PIN.

        Some SIM cards refuse to work until the correct PIN is provided
        via use_pin().
        """
        return PIN_READY not in self.modem.command("AT+CPIN?")

    def use_pin(self, pin: str) -> bool:
        """
        Provide a SIM PIN to the modem.

        Args:
            pin: SIM PIN

        Returns:
            True if the PIN was accepted (or wasn't needed)
        """
        if not self.pin_required():
            return True

        logger.info("Unlocking SIM")
        try:
            self.modem.command(f"AT+CPIN={pin}")
        except ModemError as e:
            logger.warning(f"SIM PIN rejected: {e}")
            return False

        return True

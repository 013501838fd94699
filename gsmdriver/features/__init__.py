"""
Feature managers for modem functionality.

Provides high-level managers for different modem capabilities:
- DeviceManager: Hardware identity, SIM PIN
- NetworkManager: Bands, signal strength
- SMSManager: Sending and receiving SMS
"""

from .device_info import DeviceManager
from .network import NetworkManager
from .sms import SMSManager

__all__ = [
    "DeviceManager",
    "NetworkManager",
    "SMSManager",
]

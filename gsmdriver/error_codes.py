"""
Modem error code descriptions.

Strings and codes vary a bit by vendor, but they're sort-of standard.
"""

from typing import TYPE_CHECKING, Optional

from .types import ErrorCategory

if TYPE_CHECKING:
    from .exceptions import ModemError


ERROR_DESCRIPTIONS: dict[ErrorCategory, dict[int, str]] = {
    ErrorCategory.GENERAL: {
        3: "Operation not allowed",
        4: "Operation not supported",
        5: "PH-SIM PIN required (SIM lock)",
        10: "SIM not inserted",
        11: "SIM PIN required",
        12: "SIM PUK required",
        13: "SIM failure",
        14: "SIM busy",
        16: "Incorrect password",
        17: "SIM PIN2 required",
        18: "SIM PUK2 required",
        20: "Memory full",
        21: "Invalid index",
        22: "Not found",
        24: "Text string too long",
        26: "Dial string too long",
        27: "Invalid characters in dial string",
        30: "No network service",
        32: "Network not allowed – emergency calls only",
        40: "Network personal PIN required (Network lock)",
        103: "Illegal MS (#3)",
        106: "Illegal ME (#6)",
        107: "GPRS services not allowed (#7)",
        111: "PLMN not allowed (#11)",
        112: "Location area not allowed (#12)",
        113: "Roaming not allowed in this area (#13)",
        132: "service option not supported (#32)",
        133: "requested service option not subscribed (#33)",
        134: "service option temporarily out of order (#34)",
        148: "unspecified GPRS error",
        149: "PDP authentication failure",
        150: "invalid mobile class",
    },
    ErrorCategory.SMS: {
        301: "SMS service of ME reserved",
        302: "Operation not allowed",
        303: "Operation not supported",
        304: "Invalid PDU mode parameter",
        305: "Invalid text mode parameter",
        310: "SIM not inserted",
        311: "SIM PIN required",
        312: "PH-SIM PIN required",
        313: "SIM failure",
        316: "SIM PUK required",
        317: "SIM PIN2 required",
        318: "SIM PUK2 required",
        321: "Invalid memory index",
        322: "SIM memory full",
        330: "SC address unknown",
        340: "no +CNMA acknowledgement expected",
        500: "Unknown error",
        512: "MM establishment failure (for SMS)",
        513: "Lower layer failure (for SMS)",
        514: "CP error (for SMS)",
        515: "Please wait, init or command processing in progress",
        517: "SIM Toolkit facility not supported",
        518: "SIM Toolkit indication not received",
        526: "PIN deactivation forbidden with this SIM card",
        527: "Please wait, RR or MM is busy. Retry your selection later",
        528: "Location update failure. Emergency calls only",
        529: "PLMN selection failure. Emergency calls only",
    },
}

# The only condition the modem expects us to simply try again
RETRYABLE = (ErrorCategory.SMS, 515)


def classify(category: Optional[ErrorCategory], code: Optional[int]) -> Optional[str]:
    """
    Look up the description of a modem error.

    Args:
        category: Error category, or None for a bare ERROR
        code: Numeric error code, or None

    Returns:
        Description string, or None for unknown (category, code) pairs
    """
    if category is None or code is None:
        return None
    return ERROR_DESCRIPTIONS.get(category, {}).get(code)


def is_retryable(error: "ModemError") -> bool:
    """Check whether a modem error should be retried after a short rest."""
    return (error.category, error.code) == RETRYABLE

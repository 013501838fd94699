"""
Response parsers for AT command responses.

Provides type-safe parsing of modem responses into structured data.
"""

from .base import ResponseParser, RegexParser
from .network import BandListParser, BandParser, SignalStrengthParser

__all__ = [
    "ResponseParser",
    "RegexParser",
    "BandListParser",
    "BandParser",
    "SignalStrengthParser",
]

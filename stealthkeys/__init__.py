"""
stealthkeys - one-time stealth public keys over secp256k1 ECDH, with sanction
screening of recipients before any key material is generated.
"""

from stealthkeys.address import address_of
from stealthkeys.curve import CurveBackend, KeyPair, PublicPoint, Secp256k1Backend
from stealthkeys.engine import StealthKeyEngine, StealthPayment
from stealthkeys.errors import (
    ConfigError,
    InvalidPrivateScalar,
    InvalidPublicPoint,
    RandomSourceFailure,
    SanctionedRecipient,
    StealthKeyError,
)
from stealthkeys.screen import AddressScreen

__version__ = "0.1.0"

__all__ = [
    "AddressScreen",
    "ConfigError",
    "CurveBackend",
    "InvalidPrivateScalar",
    "InvalidPublicPoint",
    "KeyPair",
    "PublicPoint",
    "RandomSourceFailure",
    "SanctionedRecipient",
    "Secp256k1Backend",
    "StealthKeyEngine",
    "StealthKeyError",
    "StealthPayment",
    "address_of",
]

"""
Error taxonomy for stealth key derivation and sanction screening.

Every failure raised by the package derives from StealthKeyError, so callers
can catch one type and still tell the kinds apart. Messages never carry key
material.
"""


class StealthKeyError(Exception):
    """Base stealthkeys error."""
    pass


class SanctionedRecipient(StealthKeyError):
    """Recipient's derived address is on the sanction list."""

    def __init__(self, address: str):
        super().__init__(f"recipient address {address} is sanctioned")
        self.address = address


class InvalidPublicPoint(StealthKeyError):
    """Point is not on the curve, or is the point at infinity."""
    pass


class InvalidPrivateScalar(StealthKeyError):
    """Scalar is zero or not reduced modulo the curve order."""
    pass


class RandomSourceFailure(StealthKeyError):
    """The secure random source could not supply entropy."""
    pass


class ConfigError(StealthKeyError):
    """Configuration or sanctions list could not be loaded."""
    pass

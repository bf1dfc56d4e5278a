"""
Stealth key generation and recovery over ECDH.

Sender side (generate):
    e  = random scalar,  E = e*G
    s  = H(x(e * P_r))
    P_s = P_r + s*G

Recipient side (recover):
    s  = H(x(d_r * E))        (equal to the sender's s since d_r*e*G = e*d_r*G)
    d_s = (d_r + s) mod n,    d_s*G == P_s

H is Keccak-256 over the minimal big-endian bytes of the shared x
coordinate. s is used as the raw 256-bit hash value on both sides; it is only
reduced modulo n implicitly, by s*G on the sender side and by the final
mod n on the recipient side.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from stealthkeys.address import address_of
from stealthkeys.curve import CurveBackend, KeyPair, PublicPoint, Secp256k1Backend
from stealthkeys.errors import InvalidPrivateScalar, InvalidPublicPoint, SanctionedRecipient
from stealthkeys.screen import AddressScreen

logger = logging.getLogger(__name__)


@dataclass(frozen=True, repr=False)
class StealthPayment:
    """Result of generate: the one-time key and what the recipient needs to recover it."""
    stealth_public: PublicPoint
    ephemeral_private: int
    ephemeral_public: PublicPoint

    def __repr__(self) -> str:
        return (f"StealthPayment(stealth_public={self.stealth_public!r}, "
                f"ephemeral_public={self.ephemeral_public!r})")


def _minimal_bytes(value: int) -> bytes:
    return value.to_bytes((value.bit_length() + 7) // 8, 'big')


class StealthKeyEngine:
    """
    Derives and recovers stealth keypairs, refusing sanctioned recipients.

    The engine keeps no key material between calls; generate and recover may
    run concurrently from any number of threads.

    Usage:
        engine = StealthKeyEngine(AddressScreen(["0x..."]))
        payment = engine.generate(recipient.public)
        stealth = engine.recover(recipient.private, payment.ephemeral_public)
        assert stealth.public == payment.stealth_public
    """

    def __init__(self, screen: AddressScreen, backend: Optional[CurveBackend] = None):
        self.screen = screen
        self.backend = backend if backend is not None else Secp256k1Backend()

    def new_keypair(self) -> KeyPair:
        """Fresh keypair from the backend's secure random source."""
        d = self.backend.random_scalar()
        return KeyPair(d, self.backend.base_multiply(d))

    def shared_secret(self, private: int, public: PublicPoint) -> bytes:
        """H(x(private * public)); identical for (e, P_r) and (d_r, E)."""
        private = self.backend.validate_scalar(private)
        public = self.backend.validate_point(public)
        shared = self.backend.multiply(private, public)
        if shared is None:
            raise InvalidPublicPoint("shared point is the point at infinity")
        return self.backend.hash(_minimal_bytes(shared.x))

    def generate(self, recipient_public: PublicPoint) -> StealthPayment:
        """
        Derive a one-time stealth public key for recipient_public.

        Raises:
            InvalidPublicPoint: recipient point is off-curve or infinity
            SanctionedRecipient: recipient's address is screened; no
                ephemeral key is drawn
            RandomSourceFailure: entropy could not be obtained
        """
        recipient_public = self.backend.validate_point(recipient_public)

        address = address_of(recipient_public)
        if self.screen.is_sanctioned(address):
            logger.warning("Refusing stealth key generation for sanctioned recipient %s", address)
            raise SanctionedRecipient(address)

        e = self.backend.random_scalar()
        ephemeral_public = self.backend.base_multiply(e)

        s = int.from_bytes(self.shared_secret(e, recipient_public), 'big')
        tweak = self.backend.base_multiply(s)
        stealth_public = recipient_public if tweak is None else self.backend.add(recipient_public, tweak)
        if stealth_public is None:
            # s == -d_r mod n; unreachable short of a hash collision with the key
            raise InvalidPublicPoint("derived stealth point is the point at infinity")

        logger.debug("Generated stealth key for %s", address)
        return StealthPayment(stealth_public, e, ephemeral_public)

    def recover(self, recipient_private: int, ephemeral_public: PublicPoint) -> KeyPair:
        """
        Recover the stealth keypair matching a generate() call.

        The public half is recomputed from the recovered scalar, so the
        returned pair is always consistent.

        Raises:
            InvalidPrivateScalar: recipient_private is 0 or >= n
            InvalidPublicPoint: ephemeral_public is off-curve or infinity
        """
        s = int.from_bytes(self.shared_secret(recipient_private, ephemeral_public), 'big')

        d_s = (recipient_private + s) % self.backend.order
        if not d_s:
            raise InvalidPrivateScalar("recovered stealth scalar is zero")
        return KeyPair(d_s, self.backend.base_multiply(d_s))

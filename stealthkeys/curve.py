"""
Elliptic curve primitives for stealth key derivation.

The protocol only needs a handful of operations: scalar multiplication, point
addition, affine conversion, a hash and a random scalar. They sit behind
CurveBackend so the protocol logic never touches a curve library directly.
Secp256k1Backend is the implementation used everywhere, built on the ecdsa
library with Keccak-256 from pycryptodome.

The point at infinity is represented as None.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from Crypto.Hash import keccak
from ecdsa import SECP256k1
from ecdsa.ellipticcurve import INFINITY, PointJacobi

from stealthkeys.errors import InvalidPrivateScalar, InvalidPublicPoint, RandomSourceFailure

# Size of a secp256k1 scalar / coordinate in bytes
SCALAR_SIZE = 32


def keccak256(data: bytes) -> bytes:
    """Keccak-256 (the pre-standard SHA-3 padding used by Ethereum)."""
    return keccak.new(digest_bits=256, data=data).digest()


@dataclass(frozen=True)
class PublicPoint:
    """Affine curve point (x, y)."""
    x: int
    y: int

    def to_bytes(self, compressed: bool = False) -> bytes:
        """SEC1 encoding: 0x04 || X || Y, or 0x02/0x03 || X when compressed."""
        x = self.x.to_bytes(SCALAR_SIZE, 'big')
        if compressed:
            return (b'\x03' if self.y & 1 else b'\x02') + x
        return b'\x04' + x + self.y.to_bytes(SCALAR_SIZE, 'big')


@dataclass(frozen=True, repr=False)
class KeyPair:
    """Private scalar d and its public point d*G."""
    private: int
    public: PublicPoint

    def __repr__(self) -> str:
        return f"KeyPair(public={self.public!r})"


class CurveBackend(ABC):
    """
    Capability interface over a fixed elliptic curve.

    Point-valued operations return None for the point at infinity; callers
    decide whether that is an error.
    """

    order: int

    @abstractmethod
    def base_multiply(self, k: int) -> Optional[PublicPoint]:
        """k * G"""

    @abstractmethod
    def multiply(self, k: int, point: PublicPoint) -> Optional[PublicPoint]:
        """k * point"""

    @abstractmethod
    def add(self, p: PublicPoint, q: PublicPoint) -> Optional[PublicPoint]:
        """p + q"""

    @abstractmethod
    def is_on_curve(self, point: PublicPoint) -> bool:
        """True if point satisfies the curve equation with reduced coordinates."""

    @abstractmethod
    def hash(self, data: bytes) -> bytes:
        """Cryptographic hash with at least 256 bits of output."""

    @abstractmethod
    def random_scalar(self) -> int:
        """Uniform scalar in [1, n-1] from a cryptographically secure source."""

    def validate_point(self, point: Optional[PublicPoint]) -> PublicPoint:
        """Return point unchanged, or raise InvalidPublicPoint."""
        if point is None:
            raise InvalidPublicPoint("point at infinity is not a valid public key")
        if not isinstance(point, PublicPoint):
            raise InvalidPublicPoint(f"expected PublicPoint, got {type(point).__name__}")
        if not self.is_on_curve(point):
            raise InvalidPublicPoint("point is not on the curve")
        return point

    def validate_scalar(self, k: int) -> int:
        """Return k unchanged, or raise InvalidPrivateScalar unless 1 <= k < n."""
        if isinstance(k, bool) or not isinstance(k, int):
            raise InvalidPrivateScalar(f"expected integer scalar, got {type(k).__name__}")
        if not 1 <= k < self.order:
            raise InvalidPrivateScalar("private scalar must be in [1, n-1]")
        return k


class Secp256k1Backend(CurveBackend):
    """
    secp256k1 via the ecdsa library.

    Usage:
        backend = Secp256k1Backend()
        d = backend.random_scalar()
        P = backend.base_multiply(d)

    Args:
        entropy: callable returning n random bytes; defaults to os.urandom.
            Tests substitute a counting wrapper around os.urandom.
    """

    def __init__(self, entropy: Callable[[int], bytes] = os.urandom):
        self._generator = SECP256k1.generator
        self._curve = SECP256k1.curve
        self.order = SECP256k1.order
        self.field_prime = self._curve.p()
        self._entropy = entropy

    def _jacobian(self, point: PublicPoint) -> PointJacobi:
        return PointJacobi(self._curve, point.x, point.y, 1, self.order)

    @staticmethod
    def _affine(point) -> Optional[PublicPoint]:
        if point == INFINITY:
            return None
        return PublicPoint(int(point.x()), int(point.y()))

    def base_multiply(self, k: int) -> Optional[PublicPoint]:
        return self._affine(self._generator * k)

    def multiply(self, k: int, point: PublicPoint) -> Optional[PublicPoint]:
        return self._affine(self._jacobian(point) * k)

    def add(self, p: PublicPoint, q: PublicPoint) -> Optional[PublicPoint]:
        return self._affine(self._jacobian(p) + self._jacobian(q))

    def is_on_curve(self, point: PublicPoint) -> bool:
        if not (isinstance(point.x, int) and isinstance(point.y, int)):
            return False
        if not (0 <= point.x < self.field_prime and 0 <= point.y < self.field_prime):
            return False
        # cofactor is 1, so every point on the curve is in the prime-order group
        return self._curve.contains_point(point.x, point.y)

    def hash(self, data: bytes) -> bytes:
        return keccak256(data)

    def random_scalar(self) -> int:
        while True:
            try:
                seed = self._entropy(SCALAR_SIZE)
            except (OSError, NotImplementedError) as e:
                raise RandomSourceFailure("secure random source unavailable") from e
            if not isinstance(seed, (bytes, bytearray)) or len(seed) != SCALAR_SIZE:
                raise RandomSourceFailure("secure random source returned a short read")
            k = int.from_bytes(seed, 'big')
            # rejection sampling keeps the draw uniform over [1, n-1]
            if 1 <= k < self.order:
                return k

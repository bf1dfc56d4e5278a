"""
Addresses and hex key encoding.

An address is the Ethereum-style identifier of a public point:
    address = EIP-55 checksum hex of Keccak-256(X || Y)[12:]
It is only used as the lookup key for sanction screening.

The parse_* / format_* helpers are the textual boundary for the command line
front end. Decoding problems surface as InvalidPublicPoint or
InvalidPrivateScalar, never as raw ValueError.
"""

import re

from ecdsa import SECP256k1, VerifyingKey
from ecdsa.errors import MalformedPointError

from stealthkeys.curve import SCALAR_SIZE, PublicPoint, keccak256
from stealthkeys.errors import InvalidPrivateScalar, InvalidPublicPoint

ADDRESS_SIZE = 20

_ADDRESS_RE = re.compile(r'[0-9a-fA-F]{40}')


def _strip_hex_prefix(text: str) -> str:
    text = text.strip()
    if text[:2] in ('0x', '0X'):
        return text[2:]
    return text


def is_address(text: str) -> bool:
    """True if text is 40 hex digits with an optional 0x prefix."""
    if not isinstance(text, str):
        return False
    return _ADDRESS_RE.fullmatch(_strip_hex_prefix(text)) is not None


def to_checksum_address(text: str) -> str:
    """Normalise an address to 0x-prefixed EIP-55 mixed case."""
    if not is_address(text):
        raise ValueError(f"not an address: {text!r}")
    body = _strip_hex_prefix(text).lower()
    digest = keccak256(body.encode('ascii')).hex()
    return '0x' + ''.join(
        c.upper() if int(d, 16) >= 8 else c
        for c, d in zip(body, digest)
    )


def address_of(point: PublicPoint) -> str:
    """Derive the checksummed address of a public point."""
    raw = point.to_bytes()[1:]  # X || Y without the SEC1 prefix
    return to_checksum_address(keccak256(raw)[-ADDRESS_SIZE:].hex())


def parse_private_key(text: str, order: int = SECP256k1.order) -> int:
    """Decode a hex private key; raises InvalidPrivateScalar."""
    try:
        data = bytes.fromhex(_strip_hex_prefix(text))
    except (AttributeError, ValueError) as e:
        raise InvalidPrivateScalar("private key is not valid hex") from e
    if not data or len(data) > SCALAR_SIZE:
        raise InvalidPrivateScalar(f"private key must be 1 to {SCALAR_SIZE} bytes")
    k = int.from_bytes(data, 'big')
    if not 1 <= k < order:
        raise InvalidPrivateScalar("private scalar must be in [1, n-1]")
    return k


def parse_public_key(text: str) -> PublicPoint:
    """
    Decode a hex public key; raises InvalidPublicPoint.

    Accepts SEC1 uncompressed (65 bytes), compressed (33 bytes) and raw
    X || Y (64 bytes) encodings. The point is checked against the curve.
    """
    try:
        data = bytes.fromhex(_strip_hex_prefix(text))
    except (AttributeError, ValueError) as e:
        raise InvalidPublicPoint("public key is not valid hex") from e
    try:
        vk = VerifyingKey.from_string(data, curve=SECP256k1)
    except (MalformedPointError, ValueError) as e:
        raise InvalidPublicPoint("public key does not decode to a curve point") from e
    point = vk.pubkey.point
    return PublicPoint(int(point.x()), int(point.y()))


def format_private_key(k: int) -> str:
    return '0x' + k.to_bytes(SCALAR_SIZE, 'big').hex()


def format_public_key(point: PublicPoint, compressed: bool = False) -> str:
    return '0x' + point.to_bytes(compressed=compressed).hex()

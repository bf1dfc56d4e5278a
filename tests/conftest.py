import os
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from stealthkeys.curve import Secp256k1Backend
from stealthkeys.engine import StealthKeyEngine
from stealthkeys.screen import AddressScreen

# secp256k1 curve parameters
N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
Gx = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
Gy = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8


class CountingEntropy:
    """os.urandom wrapper that counts draws."""

    def __init__(self):
        self.calls = 0

    def __call__(self, size: int) -> bytes:
        self.calls += 1
        return os.urandom(size)


@pytest.fixture
def entropy():
    return CountingEntropy()


@pytest.fixture
def screen():
    return AddressScreen()


@pytest.fixture
def engine(screen, entropy):
    return StealthKeyEngine(screen, Secp256k1Backend(entropy=entropy))

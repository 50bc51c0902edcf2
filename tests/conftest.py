"""
Pytest configuration and fixtures.

This file ensures proper path setup for imports and provides shared keys.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from cryptography.hazmat.primitives.asymmetric import ec  # noqa: E402

# RFC 6979 appendix A.2.5 (ECDSA, 256 bits, prime field)
P256_SCALAR = "C9AFA9D845BA75166B5C215767B1D6934E50C3DB36E89B127B8A622B120F6721"
P256_X = "60FED4BA255A9D31C961EB74C6356D68C049B8923B61FA6CE669622E60F29FB6"
P256_Y = "7903FE1008B8BC99A41AE9E95628BC64F2F1B20C2D7E9F5177A3C294D4462299"
# sha256(04 || X || Y)
P256_SKI = "b18b86ce1389e46de87aa4a5131ce83c1160fa33c087ab15b863574d31d8ff3c"


@pytest.fixture
def p256_vector():
    """Hex strings of the RFC 6979 P-256 test key."""
    return {"scalar": P256_SCALAR, "x": P256_X, "y": P256_Y, "ski": P256_SKI}


@pytest.fixture
def p256_private_key():
    """The RFC 6979 P-256 test key as a cryptography object."""
    return ec.derive_private_key(int(P256_SCALAR, 16), ec.SECP256R1())


@pytest.fixture
def private_key():
    """A freshly generated private ECKey."""
    from eckey import ECKey

    return ECKey(ec.generate_private_key(ec.SECP256R1()))


@pytest.fixture
def public_key(private_key):
    """The public half of ``private_key``."""
    return private_key.get_public_key()

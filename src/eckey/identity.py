"""
Subject Key Identifier (SKI) computation.

The identity of an EC key is SHA-256 over the uncompressed point
``0x04 || X || Y``, with each coordinate left-padded to the curve's byte
length. The hash never depends on the curve size, so identities from
different curves are always 32 bytes.
"""

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

UNCOMPRESSED_POINT = 0x04  # X9.62 section 4.3.6


def coordinate_length(curve: ec.EllipticCurve) -> int:
    """Bytes needed per coordinate: ceil(bit length / 8)."""
    return (curve.key_size + 7) // 8


def point_to_octets(public_key: ec.EllipticCurvePublicKey) -> bytes:
    """
    Encode a public point as an uncompressed octet string.

    Coordinates are padded explicitly rather than trusting the encoder, so
    points whose X or Y has leading zero bytes keep a fixed-width layout.
    """
    length = coordinate_length(public_key.curve)
    numbers = public_key.public_numbers()
    return (
        bytes([UNCOMPRESSED_POINT])
        + numbers.x.to_bytes(length, "big")
        + numbers.y.to_bytes(length, "big")
    )


def compute_ski(public_key: ec.EllipticCurvePublicKey) -> bytes:
    """SHA-256 of the uncompressed point, regardless of key size."""
    digest = hashes.Hash(hashes.SHA256())
    digest.update(point_to_octets(public_key))
    return digest.finalize()

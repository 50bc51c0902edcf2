"""Named curve lookup between handle curve names and cryptography curve classes."""

from typing import Dict, Type

from cryptography.hazmat.primitives.asymmetric import ec

from .errors import InvalidKeyError

CURVES: Dict[str, Type[ec.EllipticCurve]] = {
    "P-256": ec.SECP256R1,
    "secp256r1": ec.SECP256R1,
    "prime256v1": ec.SECP256R1,
    "P-384": ec.SECP384R1,
    "secp384r1": ec.SECP384R1,
    "P-521": ec.SECP521R1,
    "secp521r1": ec.SECP521R1,
    "secp256k1": ec.SECP256K1,
}

# cryptography's curve.name -> the name written into handles
CANONICAL_NAMES: Dict[str, str] = {
    "secp256r1": "P-256",
    "secp384r1": "P-384",
    "secp521r1": "P-521",
    "secp256k1": "secp256k1",
}


def curve_for_name(name: str) -> ec.EllipticCurve:
    """Return a curve instance for ``name``; lookups ignore case."""
    for known, curve_cls in CURVES.items():
        if known.lower() == str(name).lower():
            return curve_cls()
    raise InvalidKeyError(f"unsupported curve '{name}'", key_type="EC")


def canonical_name(curve: ec.EllipticCurve) -> str:
    return CANONICAL_NAMES.get(curve.name, curve.name)

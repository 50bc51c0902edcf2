"""
Key handles.

An ECKey wraps exactly one of two shapes of key material:

- ``PrivateKeyData``: private scalar plus its public point
- ``PublicKeyData``: public point only

There is no "private field present but null" marker; which dataclass is held
is the whole answer to "is this key private".

``ECKeyHandle`` is the portable mapping form of the same material
(``{"type": "EC", "curve": "P-256", "pub_key_hex": "04...", "prv_key_hex": ...}``)
used to import keys produced elsewhere and to export them again.
"""

from dataclasses import dataclass
from collections.abc import Mapping as MappingABC
from typing import Any, Dict, Mapping, Optional, Union

from cryptography.hazmat.primitives.asymmetric import ec
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .curves import canonical_name, curve_for_name
from .errors import InvalidKeyError
from .identity import coordinate_length, point_to_octets


@dataclass(frozen=True)
class PublicKeyData:
    """Public-only key material."""
    public_key: ec.EllipticCurvePublicKey

    @property
    def curve(self) -> ec.EllipticCurve:
        return self.public_key.curve


@dataclass(frozen=True)
class PrivateKeyData:
    """Private scalar; the public point is always derived from it."""
    private_key: ec.EllipticCurvePrivateKey

    @property
    def public_key(self) -> ec.EllipticCurvePublicKey:
        return self.private_key.public_key()

    @property
    def curve(self) -> ec.EllipticCurve:
        return self.private_key.curve


KeyData = Union[PrivateKeyData, PublicKeyData]


class ECKeyHandle(BaseModel):
    """Mapping form of an EC key. ``prv_key_hex`` is None for public-only keys."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str
    curve: str = "P-256"
    pub_key_hex: str
    prv_key_hex: Optional[str] = None

    @field_validator("type")
    @classmethod
    def _check_type(cls, value: str) -> str:
        if value != "EC":
            raise ValueError(f"algorithm tag must be 'EC', got '{value}'")
        return value

    @field_validator("pub_key_hex")
    @classmethod
    def _check_pub_key_hex(cls, value: str) -> str:
        if not value:
            raise ValueError("public point is required")
        bytes.fromhex(value)
        return value.lower()

    @field_validator("prv_key_hex")
    @classmethod
    def _check_prv_key_hex(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        if not value:
            raise ValueError("private scalar must not be empty; use null for public-only keys")
        int(value, 16)
        return value.lower()


def _validation_reason(error: ValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    if first.get("type") == "missing":
        return f"handle is missing '{field}'"
    return f"{field}: {first.get('msg')}"


def parse_handle(handle: Optional[Mapping[str, Any]]) -> ECKeyHandle:
    """Validate a raw mapping into an ``ECKeyHandle``."""
    if handle is None:
        raise InvalidKeyError("a key handle is required")
    if isinstance(handle, ECKeyHandle):
        return handle
    if not isinstance(handle, MappingABC):
        raise InvalidKeyError(f"key handle must be a mapping, got {type(handle).__name__}")
    try:
        return ECKeyHandle.model_validate(dict(handle))
    except ValidationError as e:
        raise InvalidKeyError(_validation_reason(e), key_type=handle.get("type")) from e


def key_data_from_handle(handle: ECKeyHandle) -> KeyData:
    """Materialize key data, checking the point is on the curve and matches the scalar."""
    curve = curve_for_name(handle.curve)
    try:
        public_key = ec.EllipticCurvePublicKey.from_encoded_point(curve, bytes.fromhex(handle.pub_key_hex))
    except ValueError as e:
        raise InvalidKeyError(f"public point is not valid on {handle.curve}", key_type="EC") from e

    if handle.prv_key_hex is None:
        return PublicKeyData(public_key)

    try:
        private_key = ec.derive_private_key(int(handle.prv_key_hex, 16), curve)
    except ValueError as e:
        raise InvalidKeyError(f"private scalar is out of range for {handle.curve}", key_type="EC") from e

    if private_key.public_key().public_numbers() != public_key.public_numbers():
        raise InvalidKeyError("private scalar does not match the public point", key_type="EC")
    return PrivateKeyData(private_key)


def key_data_to_handle(data: KeyData) -> Dict[str, Any]:
    """Inverse of ``key_data_from_handle``."""
    prv_key_hex = None
    if isinstance(data, PrivateKeyData):
        length = coordinate_length(data.curve)
        prv_key_hex = data.private_key.private_numbers().private_value.to_bytes(length, "big").hex()

    handle = ECKeyHandle(
        type="EC",
        curve=canonical_name(data.curve),
        pub_key_hex=point_to_octets(data.public_key).hex(),
        prv_key_hex=prv_key_hex,
    )
    return handle.model_dump()

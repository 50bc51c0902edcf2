"""
Key Capability Interface and ECDSA Implementation

``Key`` is the interface the cryptographic provider programs against. Other
providers may supply symmetric or hardware-backed implementations; callers
only ever dispatch through the methods declared here.

``ECKey`` wraps the private or public half of an ECDSA key pair and provides:
- A stable SHA-256 identity (SKI) over the public point
- Public key derivation
- PKCS#10 CSR and short-lived self-signed certificate generation
- PEM serialization
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from collections.abc import Mapping as MappingABC
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from .certificates import ExtensionLike, build_csr, build_self_signed_certificate
from .config import settings
from .curves import canonical_name
from .errors import (
    CertificateGenerationError,
    CSRGenerationError,
    InvalidKeyError,
    NotPrivateKeyError,
    UnsupportedOperationError,
)
from .handle import (
    ECKeyHandle,
    KeyData,
    PrivateKeyData,
    PublicKeyData,
    key_data_from_handle,
    key_data_to_handle,
    parse_handle,
)
from .identity import compute_ski
from .logging import get_logger
from .names import parse_subject

logger = get_logger(__name__)

KeySource = Union[
    KeyData,
    ec.EllipticCurvePrivateKey,
    ec.EllipticCurvePublicKey,
    ECKeyHandle,
    Mapping[str, Any],
]


class Key(ABC):
    """Capability interface for keys managed by a cryptographic provider."""

    @abstractmethod
    def is_symmetric(self) -> bool:
        """True for secret keys, False for one half of a key pair."""

    @abstractmethod
    def is_private(self) -> bool:
        """True if this key carries private material."""

    @abstractmethod
    def get_public_key(self) -> "Key":
        """The public half of this key (``self`` if already public)."""

    @abstractmethod
    def get_identity(self) -> bytes:
        """Stable fingerprint used to look up and deduplicate keys."""

    @abstractmethod
    def get_handle_for_hsm(self) -> Any:
        """Handle of the key inside a hardware security module."""

    @abstractmethod
    def generate_csr(self, subject_dn: str, extensions: Optional[Iterable[ExtensionLike]] = None) -> str:
        """PEM-encoded PKCS#10 request signed by this key."""

    @abstractmethod
    def generate_self_signed_certificate(self, subject_dn: Optional[str] = None) -> str:
        """PEM-encoded self-signed X.509 certificate."""

    @abstractmethod
    def to_bytes(self) -> bytes:
        """PEM serialization of the key."""

    def get_ski(self) -> bytes:
        return self.get_identity()


def _to_key_data(key: Optional[KeySource]) -> KeyData:
    if key is None:
        raise InvalidKeyError("a key handle is required, whether for the public or the private key")

    if isinstance(key, (ECKeyHandle, MappingABC)):
        return key_data_from_handle(parse_handle(key))
    if isinstance(key, ec.EllipticCurvePrivateKey):
        return PrivateKeyData(key)
    if isinstance(key, ec.EllipticCurvePublicKey):
        return PublicKeyData(key)

    if isinstance(key, PrivateKeyData):
        if not isinstance(key.private_key, ec.EllipticCurvePrivateKey):
            raise InvalidKeyError("only EC keys are supported", key_type=type(key.private_key).__name__)
        return key
    if isinstance(key, PublicKeyData):
        if key.public_key is None:
            raise InvalidKeyError("key has no public point", key_type="EC")
        if not isinstance(key.public_key, ec.EllipticCurvePublicKey):
            raise InvalidKeyError("only EC keys are supported", key_type=type(key.public_key).__name__)
        return key

    raise InvalidKeyError("only EC keys are supported", key_type=type(key).__name__)


class ECKey(Key):
    """
    The private or public key of an ECDSA key pair.

    Instances are immutable. A private ECKey always knows its public point; a
    public ECKey never holds private material.

    Usage:
        key = ECKey(ec.generate_private_key(ec.SECP256R1()))
        ski = key.get_identity()
        csr_pem = key.generate_csr("CN=peer0,O=Org1")
    """

    def __init__(self, key: KeySource):
        """
        Args:
            key: One of
                - ``PrivateKeyData`` / ``PublicKeyData``
                - a cryptography EC private or public key
                - an ``ECKeyHandle`` or equivalent mapping

        Raises:
            InvalidKeyError: if the key is absent, not EC, or has no valid public point
        """
        self._data: KeyData = _to_key_data(key)

    @classmethod
    def from_handle(cls, handle: Optional[Mapping[str, Any]]) -> "ECKey":
        """Build a key from its mapping form (see ``eckey.handle.ECKeyHandle``)."""
        return cls(parse_handle(handle))

    @classmethod
    def from_pem(cls, data: Union[bytes, str], password: Optional[bytes] = None) -> "ECKey":
        """
        Load a key from PEM.

        Accepts PKCS#8 or SEC1 private keys and SubjectPublicKeyInfo public
        keys, which covers everything ``to_bytes()`` emits.
        """
        if isinstance(data, str):
            data = data.encode()
        try:
            if b"PRIVATE KEY" in data:
                loaded = serialization.load_pem_private_key(data, password=password)
            else:
                loaded = serialization.load_pem_public_key(data)
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise InvalidKeyError("could not parse PEM key material") from e
        return cls(loaded)

    @property
    def curve_name(self) -> str:
        return canonical_name(self._data.curve)

    @property
    def key_data(self) -> KeyData:
        return self._data

    def is_symmetric(self) -> bool:
        return False

    def is_private(self) -> bool:
        return isinstance(self._data, PrivateKeyData)

    def get_public_key(self) -> "ECKey":
        if not self.is_private():
            return self
        return ECKey(PublicKeyData(self._data.public_key))

    def get_identity(self) -> bytes:
        """
        SHA-256 over the uncompressed public point.

        A private key and its public half always have the same identity.
        """
        public = self.get_public_key()
        return compute_ski(public.key_data.public_key)

    def get_identity_hex(self) -> str:
        return self.get_identity().hex()

    def get_handle_for_hsm(self) -> Any:
        raise UnsupportedOperationError(
            "get_handle_for_hsm",
            "this key is held in software and has no PKCS#11 handle",
        )

    def generate_csr(self, subject_dn: str, extensions: Optional[Iterable[ExtensionLike]] = None) -> str:
        """
        Generate a PKCS#10 certificate signing request for this key.

        Args:
            subject_dn: Subject in LDAP (RFC 2253) form, e.g. ``CN=peer0,O=Org1``,
                or one-line form, e.g. ``/O=Org1/CN=peer0``
            extensions: Additional X.509v3 extensions, embedded as given

        Returns:
            PEM-encoded CSR

        Raises:
            NotPrivateKeyError: if this is a public key
            CSRGenerationError: if the request cannot be built or signed
        """
        if not self.is_private():
            raise NotPrivateKeyError("CSR generation")

        try:
            subject = parse_subject(subject_dn)
            csr_pem = build_csr(self._data.private_key, subject, extensions)
        except Exception as e:
            raise CSRGenerationError(str(e), subject=str(subject_dn)) from e

        logger.info(f"Generated CSR for {subject_dn} using key {self.get_identity_hex()[:16]}")
        return csr_pem

    def generate_self_signed_certificate(
        self,
        subject_dn: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> str:
        """
        Generate a short-lived self-signed X.509 certificate.

        Args:
            subject_dn: Subject and issuer. Default: ECKEY_DEFAULT_CERT_SUBJECT (``/CN=self``)
            now: Reference time for the validity window. Default: current UTC time

        Returns:
            PEM-encoded certificate

        Raises:
            NotPrivateKeyError: if this is a public key
            CertificateGenerationError: if the certificate cannot be built or signed
        """
        if not self.is_private():
            raise NotPrivateKeyError("X.509 certificate generation")

        if subject_dn is None:
            subject_dn = settings.DEFAULT_CERT_SUBJECT
        if now is None:
            now = datetime.now(timezone.utc)

        try:
            subject = parse_subject(subject_dn)
            cert_pem = build_self_signed_certificate(self._data.private_key, subject, now)
        except Exception as e:
            raise CertificateGenerationError(str(e), subject=str(subject_dn)) from e

        logger.info(f"Generated self-signed certificate for {subject_dn} using key {self.get_identity_hex()[:16]}")
        return cert_pem

    def to_bytes(self) -> bytes:
        """PKCS#8 PEM (unencrypted) for private keys, SubjectPublicKeyInfo PEM otherwise."""
        if self.is_private():
            return self._data.private_key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
        return self._data.public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )

    def to_handle(self) -> Dict[str, Any]:
        """Mapping form of this key; ``prv_key_hex`` is None for public keys."""
        return key_data_to_handle(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ECKey):
            return NotImplemented
        return self.is_private() == other.is_private() and self.get_identity() == other.get_identity()

    def __hash__(self) -> int:
        return hash((self.is_private(), self.get_identity()))

    def __repr__(self) -> str:
        kind = "private" if self.is_private() else "public"
        return f"ECKey({self.curve_name}, {kind}, ski={self.get_identity_hex()[:16]}...)"

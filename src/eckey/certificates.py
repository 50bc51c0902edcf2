"""
CSR and Self-Signed Certificate Builders

Pure functions over ``cryptography.x509`` builders. Callers resolve every
input (subject, clock, extensions) before calling in; nothing here reads
configuration or the system clock.

Self-signed certificates are bootstrap/test identities:
- serial number is always 4
- valid from 5 seconds in the past to 60 seconds in the future
- client authentication only, never a CA
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional, Union

from cryptography import x509
from cryptography.x509.oid import ExtendedKeyUsageOID
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from .logging import get_logger

logger = get_logger(__name__)

SELF_SIGNED_SERIAL = 4
NOT_BEFORE_SKEW = timedelta(seconds=5)
VALIDITY = timedelta(seconds=60)

ExtensionLike = Union[x509.Extension, x509.ExtensionType]


def _signature_hash() -> hashes.HashAlgorithm:
    # SHA256withECDSA for every curve
    return hashes.SHA256()


def build_csr(
    private_key: ec.EllipticCurvePrivateKey,
    subject: x509.Name,
    extensions: Optional[Iterable[ExtensionLike]] = None,
) -> str:
    """
    Build and sign a PKCS#10 certificate signing request.

    Args:
        private_key: Signing key; its public half becomes the request's key
        subject: Parsed subject name
        extensions: ``x509.Extension`` objects (criticality kept) or bare
            extension values (added as non-critical)

    Returns:
        PEM-encoded CSR
    """
    builder = x509.CertificateSigningRequestBuilder().subject_name(subject)

    for extension in extensions or ():
        if isinstance(extension, x509.Extension):
            builder = builder.add_extension(extension.value, critical=extension.critical)
        else:
            builder = builder.add_extension(extension, critical=False)

    csr = builder.sign(private_key, _signature_hash())
    return csr.public_bytes(serialization.Encoding.PEM).decode()


def build_self_signed_certificate(
    private_key: ec.EllipticCurvePrivateKey,
    subject: x509.Name,
    now: datetime,
) -> str:
    """
    Build and sign a short-lived self-signed X.509 certificate.

    Args:
        private_key: Signing key and certified key
        subject: Used as both subject and issuer
        now: Timezone-aware reference time for the validity window

    Returns:
        PEM-encoded certificate
    """
    now = now.replace(microsecond=0)
    not_before = now - NOT_BEFORE_SKEW
    not_after = now + VALIDITY

    builder = (
        x509.CertificateBuilder()
        .serial_number(SELF_SIGNED_SERIAL)
        .issuer_name(subject)
        .subject_name(subject)
        .not_valid_before(not_before)
        .not_valid_after(not_after)
        .public_key(private_key.public_key())
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .add_extension(
            x509.KeyUsage(
                digital_signature=True,
                content_commitment=True,  # nonRepudiation
                key_encipherment=False,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=False,
                crl_sign=False,
                encipher_only=False,
                decipher_only=False,
            ),
            critical=False,
        )
        .add_extension(x509.ExtendedKeyUsage([ExtendedKeyUsageOID.CLIENT_AUTH]), critical=False)
    )

    certificate = builder.sign(private_key, _signature_hash())
    logger.debug(f"Signed self-signed certificate valid {not_before.isoformat()} to {not_after.isoformat()}")
    return certificate.public_bytes(serialization.Encoding.PEM).decode()

"""
eckey: ECDSA Key Wrapper for Cryptographic Providers

Wraps one half of an elliptic-curve key pair behind the provider ``Key``
interface:
- SHA-256 subject key identifier over the uncompressed public point
- Public key derivation
- PKCS#10 CSRs and short-lived self-signed X.509 certificates
- PKCS#8 / SubjectPublicKeyInfo PEM serialization
"""

__version__ = "1.0.0"

from .errors import (
    CertificateGenerationError,
    CSRGenerationError,
    ECKeyError,
    InvalidKeyError,
    NotPrivateKeyError,
    UnsupportedOperationError,
)
from .handle import ECKeyHandle, PrivateKeyData, PublicKeyData
from .key import ECKey, Key

__all__ = [
    "__version__",
    # Keys
    "Key",
    "ECKey",
    "ECKeyHandle",
    "PrivateKeyData",
    "PublicKeyData",
    # Errors
    "ECKeyError",
    "InvalidKeyError",
    "NotPrivateKeyError",
    "UnsupportedOperationError",
    "CSRGenerationError",
    "CertificateGenerationError",
]

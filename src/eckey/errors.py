"""
eckey Error Taxonomy.

Every failure raised by eckey carries:
- A machine-readable error code
- Structured details (never key material)
- An optional request ID for correlation

Error Code Naming Convention:
- ECK_<COMPONENT>_<SPECIFIC>
- Components: KEY, CSR, CERT, CONFIG

Security:
- NEVER include private scalars, PEM blobs or passphrases in messages
- Public identities may be referenced by a short hex prefix only
"""

from typing import Any, Dict, Optional


class ECKeyError(Exception):
    """Base exception for all eckey errors.

    All eckey errors include:
    - code: Machine-readable error code (e.g., ECK_KEY_INVALID)
    - message: Human-readable description
    - details: Structured metadata (NEVER include sensitive data)
    - request_id: Optional correlation ID for tracing
    """

    def __init__(
        self,
        message: str,
        code: str = "ECK_INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.request_id = request_id

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.request_id:
            parts.append(f"(request_id: {self.request_id})")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "request_id": self.request_id,
        }


# =============================================================================
# Key Errors (ECK_KEY_*)
# =============================================================================


class KeyOperationError(ECKeyError):
    """Base class for errors about the key itself."""

    pass


class InvalidKeyError(KeyOperationError):
    """Raised when a key handle is absent, not EC, or has no usable public point."""

    def __init__(
        self,
        reason: str,
        key_type: Optional[str] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"Invalid key: {reason}",
            code="ECK_KEY_INVALID",
            details={"key_type": key_type} if key_type else {},
            request_id=request_id,
        )


class NotPrivateKeyError(KeyOperationError):
    """Raised when a private-key operation is invoked on a public-only key."""

    def __init__(
        self,
        operation: str,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"{operation} requires a private key, but this key is public-only",
            code="ECK_KEY_NOT_PRIVATE",
            details={"operation": operation},
            request_id=request_id,
        )


class UnsupportedOperationError(KeyOperationError):
    """Raised for operations this key type can never perform."""

    def __init__(
        self,
        operation: str,
        reason: str,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"Unsupported operation '{operation}': {reason}",
            code="ECK_KEY_UNSUPPORTED",
            details={"operation": operation},
            request_id=request_id,
        )


# =============================================================================
# Generation Errors (ECK_CSR_*, ECK_CERT_*)
# =============================================================================


class GenerationError(ECKeyError):
    """Base class for CSR and certificate generation errors."""

    pass


class CSRGenerationError(GenerationError):
    """Raised when building or signing a PKCS#10 request fails."""

    def __init__(
        self,
        reason: str,
        subject: Optional[str] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"CSR generation failed: {reason}",
            code="ECK_CSR_FAILED",
            details={"subject": subject} if subject else {},
            request_id=request_id,
        )


class CertificateGenerationError(GenerationError):
    """Raised when building or signing a self-signed X.509 certificate fails."""

    def __init__(
        self,
        reason: str,
        subject: Optional[str] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"Certificate generation failed: {reason}",
            code="ECK_CERT_FAILED",
            details={"subject": subject} if subject else {},
            request_id=request_id,
        )


# =============================================================================
# Configuration Errors (ECK_CONFIG_*)
# =============================================================================


class ConfigError(ECKeyError):
    """Base class for configuration errors."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when a configuration value is rejected."""

    def __init__(
        self,
        config_key: str,
        reason: str,
        request_id: Optional[str] = None,
    ):
        super().__init__(
            message=f"Invalid configuration for {config_key}: {reason}",
            code="ECK_CONFIG_VALIDATION_FAILED",
            details={"config_key": config_key},
            request_id=request_id,
        )


# =============================================================================
# Error Code Registry
# =============================================================================

ERROR_CODES = {
    # Key errors
    "ECK_KEY_INVALID": "Key handle is absent, not EC, or malformed",
    "ECK_KEY_NOT_PRIVATE": "Operation requires a private key",
    "ECK_KEY_UNSUPPORTED": "Operation not supported by this key type",
    # Generation errors
    "ECK_CSR_FAILED": "PKCS#10 request generation failed",
    "ECK_CERT_FAILED": "Self-signed certificate generation failed",
    # Config errors
    "ECK_CONFIG_VALIDATION_FAILED": "Configuration validation failed",
    # Internal
    "ECK_INTERNAL_ERROR": "Internal error",
}


def validate_error_code(code: str) -> bool:
    """Validate that an error code is registered."""
    return code in ERROR_CODES


__all__ = [
    # Base
    "ECKeyError",
    # Key
    "KeyOperationError",
    "InvalidKeyError",
    "NotPrivateKeyError",
    "UnsupportedOperationError",
    # Generation
    "GenerationError",
    "CSRGenerationError",
    "CertificateGenerationError",
    # Config
    "ConfigError",
    "ConfigValidationError",
    # Registry
    "ERROR_CODES",
    "validate_error_code",
]

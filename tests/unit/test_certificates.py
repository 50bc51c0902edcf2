"""
CSR and Self-Signed Certificate Tests

Decodes generated PEM with cryptography and checks every field the
generators promise.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import ExtendedKeyUsageOID, ExtensionOID, SignatureAlgorithmOID

from eckey import CertificateGenerationError, CSRGenerationError, ECKey
from eckey.certificates import SELF_SIGNED_SERIAL
from eckey.names import name_to_oneline


def _public_numbers(key: ECKey):
    return key.get_public_key().key_data.public_key.public_numbers()


# === CSR ===

class TestGenerateCSR:
    """Tests for PKCS#10 request generation."""

    def test_csr_is_signed_and_carries_public_key(self, private_key):
        pem = private_key.generate_csr("/CN=test")
        csr = x509.load_pem_x509_csr(pem.encode())

        assert pem.startswith("-----BEGIN CERTIFICATE REQUEST-----")
        assert csr.is_signature_valid
        assert csr.public_key().public_numbers() == _public_numbers(private_key)
        assert csr.signature_algorithm_oid == SignatureAlgorithmOID.ECDSA_WITH_SHA256

    def test_ldap_subject(self, private_key):
        """LDAP names are most-specific-first."""
        csr = x509.load_pem_x509_csr(private_key.generate_csr("CN=peer0,O=Org1,C=US").encode())

        assert name_to_oneline(csr.subject) == "/C=US/O=Org1/CN=peer0"
        assert csr.subject.rfc4514_string() == "CN=peer0,O=Org1,C=US"

    def test_oneline_subject(self, private_key):
        csr = x509.load_pem_x509_csr(private_key.generate_csr("/O=Org1/CN=peer0").encode())
        assert name_to_oneline(csr.subject) == "/O=Org1/CN=peer0"

    def test_no_extensions_by_default(self, private_key):
        csr = x509.load_pem_x509_csr(private_key.generate_csr("/CN=test").encode())
        assert len(csr.extensions) == 0

    def test_extensions_embedded_verbatim(self, private_key):
        """Extension values keep their criticality; bare values are non-critical."""
        san = x509.SubjectAlternativeName([x509.DNSName("peer0.example.com")])
        constraints = x509.Extension(
            ExtensionOID.BASIC_CONSTRAINTS,
            True,
            x509.BasicConstraints(ca=False, path_length=None),
        )

        pem = private_key.generate_csr("/CN=peer0", [san, constraints])
        csr = x509.load_pem_x509_csr(pem.encode())

        san_ext = csr.extensions.get_extension_for_class(x509.SubjectAlternativeName)
        assert san_ext.critical is False
        assert san_ext.value.get_values_for_type(x509.DNSName) == ["peer0.example.com"]

        bc_ext = csr.extensions.get_extension_for_class(x509.BasicConstraints)
        assert bc_ext.critical is True
        assert bc_ext.value.ca is False

    def test_duplicate_extension_wrapped(self, private_key):
        """Builder failures surface as CSRGenerationError."""
        san = x509.SubjectAlternativeName([x509.DNSName("a.example.com")])

        with pytest.raises(CSRGenerationError) as exc_info:
            private_key.generate_csr("/CN=peer0", [san, san])

        assert exc_info.value.code == "ECK_CSR_FAILED"
        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.parametrize("subject", ["not a dn", "/", "/XYZ=unknown", ""])
    def test_bad_subject_wrapped(self, private_key, subject):
        with pytest.raises(CSRGenerationError):
            private_key.generate_csr(subject)

    def test_signing_failure_wrapped(self, private_key):
        with patch("eckey.key.build_csr", side_effect=RuntimeError("signer offline")):
            with pytest.raises(CSRGenerationError, match="signer offline"):
                private_key.generate_csr("/CN=test")

    def test_other_curves(self):
        for curve in (ec.SECP384R1(), ec.SECP521R1()):
            key = ECKey(ec.generate_private_key(curve))
            csr = x509.load_pem_x509_csr(key.generate_csr("/CN=curve").encode())
            assert csr.is_signature_valid


# === Self-Signed Certificate ===

class TestSelfSignedCertificate:
    """Tests for short-lived self-signed certificates."""

    def _load(self, key: ECKey, subject="/CN=test-node", **kwargs) -> x509.Certificate:
        return x509.load_pem_x509_certificate(key.generate_self_signed_certificate(subject, **kwargs).encode())

    def test_issuer_equals_subject(self, private_key):
        cert = self._load(private_key)

        assert name_to_oneline(cert.subject) == "/CN=test-node"
        assert name_to_oneline(cert.issuer) == "/CN=test-node"

    def test_fixed_serial(self, private_key):
        assert self._load(private_key).serial_number == SELF_SIGNED_SERIAL == 4

    def test_basic_constraints_not_ca_and_critical(self, private_key):
        ext = self._load(private_key).extensions.get_extension_for_class(x509.BasicConstraints)

        assert ext.critical is True
        assert ext.value.ca is False

    def test_key_usage_bits(self, private_key):
        """digitalSignature and nonRepudiation only."""
        usage = self._load(private_key).extensions.get_extension_for_class(x509.KeyUsage).value

        assert usage.digital_signature is True
        assert usage.content_commitment is True
        assert usage.key_encipherment is False
        assert usage.data_encipherment is False
        assert usage.key_agreement is False
        assert usage.key_cert_sign is False
        assert usage.crl_sign is False

    def test_client_auth_only(self, private_key):
        eku = self._load(private_key).extensions.get_extension_for_class(x509.ExtendedKeyUsage).value
        assert list(eku) == [ExtendedKeyUsageOID.CLIENT_AUTH]

    def test_validity_window(self, private_key):
        """Valid from now - 5s to now + 60s."""
        now = datetime(2030, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        cert = self._load(private_key, now=now)

        assert cert.not_valid_before_utc == now - timedelta(seconds=5)
        assert cert.not_valid_after_utc == now + timedelta(seconds=60)

    def test_validity_window_uses_current_time(self, private_key):
        before = datetime.now(timezone.utc).replace(microsecond=0)
        cert = self._load(private_key)
        after = datetime.now(timezone.utc)

        assert before - timedelta(seconds=5) <= cert.not_valid_before_utc <= after
        assert cert.not_valid_after_utc - cert.not_valid_before_utc == timedelta(seconds=65)

    def test_self_signature_verifies(self, private_key):
        cert = self._load(private_key)

        assert cert.signature_algorithm_oid == SignatureAlgorithmOID.ECDSA_WITH_SHA256
        assert isinstance(cert.signature_hash_algorithm, hashes.SHA256)
        assert cert.public_key().public_numbers() == _public_numbers(private_key)
        cert.public_key().verify(
            cert.signature,
            cert.tbs_certificate_bytes,
            ec.ECDSA(cert.signature_hash_algorithm),
        )

    def test_default_subject(self, private_key):
        cert = x509.load_pem_x509_certificate(private_key.generate_self_signed_certificate().encode())
        assert name_to_oneline(cert.subject) == "/CN=self"

    def test_default_subject_from_settings(self, private_key, monkeypatch):
        from eckey.config import settings

        monkeypatch.setattr(settings, "DEFAULT_CERT_SUBJECT", "/O=Org1/CN=bootstrap")
        cert = x509.load_pem_x509_certificate(private_key.generate_self_signed_certificate().encode())

        assert name_to_oneline(cert.subject) == "/O=Org1/CN=bootstrap"

    def test_bad_subject_wrapped(self, private_key):
        with pytest.raises(CertificateGenerationError) as exc_info:
            private_key.generate_self_signed_certificate("/")
        assert exc_info.value.code == "ECK_CERT_FAILED"

    def test_signing_failure_wrapped(self, private_key):
        with patch("eckey.key.build_self_signed_certificate", side_effect=RuntimeError("boom")):
            with pytest.raises(CertificateGenerationError, match="boom"):
                private_key.generate_self_signed_certificate("/CN=test-node")

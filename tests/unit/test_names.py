"""Distinguished name parsing tests."""

import pytest
from cryptography import x509
from cryptography.x509.oid import NameOID

from eckey.names import name_to_oneline, parse_subject


class TestParseSubject:
    """Tests for parse_subject."""

    def test_oneline_keeps_order(self):
        name = parse_subject("/C=US/O=Org1/OU=peer/CN=peer0.org1.example.com")

        assert [a.oid for a in name] == [
            NameOID.COUNTRY_NAME,
            NameOID.ORGANIZATION_NAME,
            NameOID.ORGANIZATIONAL_UNIT_NAME,
            NameOID.COMMON_NAME,
        ]
        assert name.get_attributes_for_oid(NameOID.COMMON_NAME)[0].value == "peer0.org1.example.com"

    def test_ldap_is_reversed_into_asn1_order(self):
        """RFC 2253 lists the most specific RDN first."""
        assert parse_subject("CN=peer0,O=Org1,C=US") == parse_subject("/C=US/O=Org1/CN=peer0")

    def test_escaped_slash_in_oneline(self):
        name = parse_subject("/CN=a\\/b")
        assert name.get_attributes_for_oid(NameOID.COMMON_NAME)[0].value == "a/b"

    def test_short_name_aliases(self):
        name = parse_subject("/emailAddress=admin@example.com/ST=CA/L=SF")
        assert name.get_attributes_for_oid(NameOID.EMAIL_ADDRESS)[0].value == "admin@example.com"

    def test_ldap_email(self):
        name = parse_subject("emailAddress=admin@example.com,CN=admin")
        assert name.get_attributes_for_oid(NameOID.EMAIL_ADDRESS)[0].value == "admin@example.com"

    @pytest.mark.parametrize("dn", ["", "   ", "/", "/CN", "/=x", "/FOO=bar", "no equals"])
    def test_malformed(self, dn):
        with pytest.raises(ValueError):
            parse_subject(dn)

    def test_non_string(self):
        with pytest.raises(ValueError):
            parse_subject(None)


class TestNameToOneline:
    """Tests for name_to_oneline."""

    def test_round_trip(self):
        dn = "/C=US/O=Org1/CN=test-node"
        assert name_to_oneline(parse_subject(dn)) == dn

    def test_escapes_slash(self):
        name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "a/b")])
        assert name_to_oneline(name) == "/CN=a\\/b"

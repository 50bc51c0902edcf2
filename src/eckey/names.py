"""
Distinguished name parsing.

Two textual forms are accepted:
- OpenSSL one-line: ``/C=US/O=Org/CN=node``, attributes in ASN.1 order
- LDAP (RFC 2253 / RFC 4514): ``CN=node,O=Org,C=US``, most specific first
"""

import re
from typing import List

from cryptography import x509
from cryptography.x509.oid import NameOID

ATTRIBUTE_OIDS = {
    "CN": NameOID.COMMON_NAME,
    "C": NameOID.COUNTRY_NAME,
    "L": NameOID.LOCALITY_NAME,
    "ST": NameOID.STATE_OR_PROVINCE_NAME,
    "O": NameOID.ORGANIZATION_NAME,
    "OU": NameOID.ORGANIZATIONAL_UNIT_NAME,
    "SERIALNUMBER": NameOID.SERIAL_NUMBER,
    "EMAIL": NameOID.EMAIL_ADDRESS,
    "EMAILADDRESS": NameOID.EMAIL_ADDRESS,
    "E": NameOID.EMAIL_ADDRESS,
    "DC": NameOID.DOMAIN_COMPONENT,
    "UID": NameOID.USER_ID,
    "STREET": NameOID.STREET_ADDRESS,
    "T": NameOID.TITLE,
    "TITLE": NameOID.TITLE,
    "GN": NameOID.GIVEN_NAME,
    "SN": NameOID.SURNAME,
}

# Short names used when rendering a Name back to one-line form
_SHORT_NAMES = {
    NameOID.COMMON_NAME: "CN",
    NameOID.COUNTRY_NAME: "C",
    NameOID.LOCALITY_NAME: "L",
    NameOID.STATE_OR_PROVINCE_NAME: "ST",
    NameOID.ORGANIZATION_NAME: "O",
    NameOID.ORGANIZATIONAL_UNIT_NAME: "OU",
    NameOID.SERIAL_NUMBER: "SERIALNUMBER",
    NameOID.EMAIL_ADDRESS: "E",
    NameOID.DOMAIN_COMPONENT: "DC",
    NameOID.USER_ID: "UID",
    NameOID.STREET_ADDRESS: "STREET",
    NameOID.TITLE: "T",
    NameOID.GIVEN_NAME: "GN",
    NameOID.SURNAME: "SN",
}

# the RFC 4514 parser matches type names case-sensitively
_LDAP_OVERRIDES = {**ATTRIBUTE_OIDS, "emailAddress": NameOID.EMAIL_ADDRESS}

# split on "/" not preceded by a backslash
_ONELINE_SEPARATOR = re.compile(r"(?<!\\)/")


def _parse_oneline(dn: str) -> x509.Name:
    attributes: List[x509.NameAttribute] = []
    for part in _ONELINE_SEPARATOR.split(dn[1:]):
        if not part:
            continue
        key, sep, value = part.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"malformed attribute '{part}' in '{dn}'")
        oid = ATTRIBUTE_OIDS.get(key.strip().upper())
        if oid is None:
            raise ValueError(f"unknown attribute type '{key.strip()}'")
        attributes.append(x509.NameAttribute(oid, value.replace("\\/", "/")))
    if not attributes:
        raise ValueError(f"no attributes in '{dn}'")
    return x509.Name(attributes)


def parse_subject(dn: str) -> x509.Name:
    """
    Parse a distinguished name string into an ``x509.Name``.

    Raises:
        ValueError: if the string is empty or malformed
    """
    if not isinstance(dn, str) or not dn.strip():
        raise ValueError("subject name must be a non-empty string")
    dn = dn.strip()
    if dn.startswith("/"):
        return _parse_oneline(dn)
    return x509.Name.from_rfc4514_string(dn, _LDAP_OVERRIDES)


def name_to_oneline(name: x509.Name) -> str:
    """Render ``name`` in one-line form, e.g. ``/O=Org/CN=node``."""
    parts = []
    for attribute in name:
        short = _SHORT_NAMES.get(attribute.oid, attribute.oid.dotted_string)
        value = str(attribute.value).replace("/", "\\/")
        parts.append(f"/{short}={value}")
    return "".join(parts)

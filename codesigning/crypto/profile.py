"""Certificate profiles for the three roles in the code-signing hierarchy.

Each builder returns an unsigned ``x509.CertificateBuilder``; nothing is
issued until it is passed to ``codesigning.crypto.signer.sign_certificate``.
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Union

from cryptography import x509
from cryptography.x509.oid import NameOID

from codesigning.common import config
from codesigning.common.models import (
    BasicConstraints, ExtKeyUsage, Extension, KeyUsage, NameAttribute, ProjectInformation,
)
from codesigning.common.utils import add_years, as_utc, days, random_serial_number, utcnow
from codesigning.crypto.errors import InvalidValidityWindow
from codesigning.crypto.extensions import apply_extension_overrides, to_x509_extension

log = logging.getLogger(__name__)

_NAME_OIDS = {
    "commonName": NameOID.COMMON_NAME,
    "CN": NameOID.COMMON_NAME,
    "countryName": NameOID.COUNTRY_NAME,
    "C": NameOID.COUNTRY_NAME,
    "stateOrProvinceName": NameOID.STATE_OR_PROVINCE_NAME,
    "ST": NameOID.STATE_OR_PROVINCE_NAME,
    "localityName": NameOID.LOCALITY_NAME,
    "L": NameOID.LOCALITY_NAME,
    "organizationName": NameOID.ORGANIZATION_NAME,
    "O": NameOID.ORGANIZATION_NAME,
    "organizationalUnitName": NameOID.ORGANIZATIONAL_UNIT_NAME,
    "OU": NameOID.ORGANIZATIONAL_UNIT_NAME,
    "emailAddress": NameOID.EMAIL_ADDRESS,
    "E": NameOID.EMAIL_ADDRESS,
    "serialNumber": NameOID.SERIAL_NUMBER,
}

NameInput = Union[x509.Name, Sequence[NameAttribute]]


def build_name(attrs: NameInput) -> x509.Name:
    if isinstance(attrs, x509.Name):
        return attrs
    out = []
    for name, value in attrs:
        oid = _NAME_OIDS.get(name)
        if oid is None:
            raise ValueError(f"unknown distinguished name attribute: {name}")
        out.append(x509.NameAttribute(oid, value))
    return x509.Name(out)


def code_signing_extensions() -> List[Extension]:
    return [
        KeyUsage(digital_signature=True),
        ExtKeyUsage(code_signing=True),
    ]

def root_extensions() -> List[Extension]:
    return [
        BasicConstraints(ca=True),
        KeyUsage(key_cert_sign=True, crl_sign=True),
    ]

def intermediate_extensions() -> List[Extension]:
    return [
        # no subsequent intermediate certificates allowed
        BasicConstraints(ca=True, path_length=0, critical=True),
        KeyUsage(key_cert_sign=True, crl_sign=True, digital_signature=True),
        ExtKeyUsage(code_signing=True),
    ]

def development_extensions(app_id: str, scope_key: str) -> List[Extension]:
    return code_signing_extensions() + [ProjectInformation(app_id=app_id, scope_key=scope_key)]


def _check_validity(not_before: datetime, not_after: datetime):
    not_before, not_after = as_utc(not_before), as_utc(not_after)
    if not_after <= not_before:
        raise InvalidValidityWindow("validity not_after must be later than not_before")
    return not_before, not_after


def _builder(public_key, subject: x509.Name, issuer: x509.Name,
             not_before: datetime, not_after: datetime,
             extensions: Iterable[Extension]) -> x509.CertificateBuilder:
    not_before, not_after = _check_validity(not_before, not_after)
    builder = (x509.CertificateBuilder()
               .subject_name(subject)
               .issuer_name(issuer)
               .public_key(public_key)
               .serial_number(random_serial_number())
               .not_valid_before(not_before)
               .not_valid_after(not_after))
    for ext in extensions:
        value, critical = to_x509_extension(ext)
        builder = builder.add_extension(value, critical=critical)
    return builder


def build_self_signed_code_signing_certificate(
    public_key,
    common_name: str,
    not_before: datetime,
    not_after: datetime,
    overrides: Iterable[Extension] = (),
    omit: Iterable[str] = (),
) -> x509.CertificateBuilder:
    name = build_name([("commonName", common_name)])
    extensions = apply_extension_overrides(code_signing_extensions(), overrides, omit)
    log.info("building self-signed code signing certificate for %s", common_name)
    return _builder(public_key, name, name, not_before, not_after, extensions)


def build_root_certificate(
    public_key,
    attrs: NameInput,
    not_before: Optional[datetime] = None,
    not_after: Optional[datetime] = None,
    overrides: Iterable[Extension] = (),
    omit: Iterable[str] = (),
) -> x509.CertificateBuilder:
    not_before = not_before or utcnow()
    not_after = not_after or add_years(as_utc(not_before), config.ROOT_VALIDITY_YEARS)
    name = build_name(attrs)
    extensions = apply_extension_overrides(root_extensions(), overrides, omit)
    log.info("building root certificate for %s", name.rfc4514_string())
    return _builder(public_key, name, name, not_before, not_after, extensions)


def build_intermediate_certificate(
    public_key,
    attrs: NameInput,
    issuer_subject_attrs: NameInput,
    not_before: Optional[datetime] = None,
    not_after: Optional[datetime] = None,
    overrides: Iterable[Extension] = (),
    omit: Iterable[str] = (),
) -> x509.CertificateBuilder:
    not_before = not_before or utcnow()
    not_after = not_after or add_years(as_utc(not_before), config.INTERMEDIATE_VALIDITY_YEARS)
    subject = build_name(attrs)
    extensions = apply_extension_overrides(intermediate_extensions(), overrides, omit)
    log.info("building intermediate certificate for %s", subject.rfc4514_string())
    return _builder(public_key, subject, build_name(issuer_subject_attrs),
                    not_before, not_after, extensions)


def build_development_certificate(
    csr_public_key,
    csr_subject: x509.Name,
    issuer_subject_attrs: NameInput,
    app_id: str,
    scope_key: str,
    now: Optional[datetime] = None,
) -> x509.CertificateBuilder:
    """Development (leaf) certificate for a CSR, scoped to one project.

    The subject is taken from the CSR as-is. Validity runs from
    ``now - LEAF_BACKDATE_DAYS`` to ``now + LEAF_VALIDITY_DAYS``, both measured
    from the unadjusted ``now``.
    """
    now = as_utc(now or utcnow())
    not_before = now - days(config.LEAF_BACKDATE_DAYS)
    not_after = now + days(config.LEAF_VALIDITY_DAYS)
    log.info("building development certificate for %s (app %s)",
             csr_subject.rfc4514_string(), app_id)
    return _builder(csr_public_key, csr_subject, build_name(issuer_subject_attrs),
                    not_before, not_after, development_extensions(app_id, scope_key))

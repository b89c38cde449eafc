"""X.509 extension profile for code-signing certificates.

Extensions are described by the closed set of models in
``codesigning.common.models`` and converted to ``cryptography`` extension
types only when a certificate is built. Reading goes the other way so checks
never touch a field that the extension kind does not have.
"""
from typing import Iterable, List, Optional, Sequence, Tuple

from cryptography import x509
from cryptography.x509.oid import ExtendedKeyUsageOID

from codesigning.common.models import (
    BasicConstraints, ExtKeyUsage, Extension, KeyUsage, ProjectInformation,
)

# Custom extension carrying the project a development certificate may sign for.
# Generated once and fixed; resides in the Microsoft OID space.
EXPO_PROJECT_INFORMATION_OID = (
    "1.2.840.113556.1.8000.2554.43437.254.128.102.157.7894389.20439.2.1"
)
EXPO_PROJECT_INFORMATION = x509.ObjectIdentifier(EXPO_PROJECT_INFORMATION_OID)

_EKU_FLAGS = (
    ("server_auth", ExtendedKeyUsageOID.SERVER_AUTH),
    ("client_auth", ExtendedKeyUsageOID.CLIENT_AUTH),
    ("code_signing", ExtendedKeyUsageOID.CODE_SIGNING),
    ("email_protection", ExtendedKeyUsageOID.EMAIL_PROTECTION),
    ("time_stamping", ExtendedKeyUsageOID.TIME_STAMPING),
)


def to_x509_extension(ext: Extension) -> Tuple[x509.ExtensionType, bool]:
    if isinstance(ext, BasicConstraints):
        return x509.BasicConstraints(ca=ext.ca, path_length=ext.path_length), ext.critical
    if isinstance(ext, KeyUsage):
        return x509.KeyUsage(
            digital_signature=ext.digital_signature,
            content_commitment=ext.content_commitment,
            key_encipherment=ext.key_encipherment,
            data_encipherment=ext.data_encipherment,
            key_agreement=ext.key_agreement,
            key_cert_sign=ext.key_cert_sign,
            crl_sign=ext.crl_sign,
            encipher_only=False,
            decipher_only=False,
        ), ext.critical
    if isinstance(ext, ExtKeyUsage):
        usages = [oid for flag, oid in _EKU_FLAGS if getattr(ext, flag)]
        return x509.ExtendedKeyUsage(usages), ext.critical
    if isinstance(ext, ProjectInformation):
        # raw string in extnValue, no DER wrapping
        return x509.UnrecognizedExtension(
            EXPO_PROJECT_INFORMATION, ext.value.encode("utf-8")
        ), ext.critical
    raise TypeError(f"unsupported extension: {ext!r}")


def apply_extension_overrides(
    base: Sequence[Extension],
    overrides: Iterable[Extension] = (),
    omit: Iterable[str] = (),
) -> List[Extension]:
    """Return ``base`` with same-kind extensions replaced and ``omit`` kinds removed.

    An override whose kind is not in ``base`` is appended.
    """
    omitted = set(omit)
    result = [ext for ext in base if ext.kind not in omitted]
    for override in overrides:
        for i, ext in enumerate(result):
            if ext.kind == override.kind:
                result[i] = override
                break
        else:
            result.append(override)
    return result


def _find(cert, ext_type):
    try:
        return cert.extensions.get_extension_for_class(ext_type)
    except x509.ExtensionNotFound:
        return None


def get_basic_constraints(cert) -> Optional[BasicConstraints]:
    ext = _find(cert, x509.BasicConstraints)
    if ext is None:
        return None
    return BasicConstraints(ca=ext.value.ca, path_length=ext.value.path_length, critical=ext.critical)


def get_key_usage(cert) -> Optional[KeyUsage]:
    ext = _find(cert, x509.KeyUsage)
    if ext is None:
        return None
    ku = ext.value
    return KeyUsage(
        digital_signature=ku.digital_signature,
        content_commitment=ku.content_commitment,
        key_encipherment=ku.key_encipherment,
        data_encipherment=ku.data_encipherment,
        key_agreement=ku.key_agreement,
        key_cert_sign=ku.key_cert_sign,
        crl_sign=ku.crl_sign,
        critical=ext.critical,
    )


def get_ext_key_usage(cert) -> Optional[ExtKeyUsage]:
    ext = _find(cert, x509.ExtendedKeyUsage)
    if ext is None:
        return None
    present = set(ext.value)
    flags = {flag: oid in present for flag, oid in _EKU_FLAGS}
    return ExtKeyUsage(critical=ext.critical, **flags)


def project_information_from_certificate(cert) -> Optional[ProjectInformation]:
    try:
        ext = cert.extensions.get_extension_for_oid(EXPO_PROJECT_INFORMATION)
    except x509.ExtensionNotFound:
        return None
    raw = ext.value.value.decode("utf-8")
    # appId is a UUID, so everything after the first comma is the scope key
    app_id, sep, scope_key = raw.partition(",")
    if not sep:
        raise ValueError("malformed project information extension value")
    return ProjectInformation(app_id=app_id, scope_key=scope_key)

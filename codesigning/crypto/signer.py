import logging
from datetime import datetime

from cryptography import x509
from cryptography.hazmat.primitives import hashes

from codesigning.common.models import KeyPair
from codesigning.crypto.profile import build_self_signed_code_signing_certificate

log = logging.getLogger(__name__)


def sign_certificate(builder: x509.CertificateBuilder, issuer_private_key) -> x509.Certificate:
    # RSA keys sign with PKCS#1 v1.5; the builder is trusted as given
    cert = builder.sign(issuer_private_key, hashes.SHA256())
    log.info("issued certificate serial=%x subject=%s issuer=%s",
             cert.serial_number, cert.subject.rfc4514_string(), cert.issuer.rfc4514_string())
    return cert


def issue_self_signed_code_signing_certificate(
    key_pair: KeyPair,
    common_name: str,
    not_before: datetime,
    not_after: datetime,
) -> x509.Certificate:
    builder = build_self_signed_code_signing_certificate(
        key_pair.public_key, common_name, not_before, not_after)
    return sign_certificate(builder, key_pair.private_key)

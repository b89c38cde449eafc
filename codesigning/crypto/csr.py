import logging

from cryptography import x509
from cryptography.hazmat.primitives import hashes

from codesigning.common.models import KeyPair
from codesigning.crypto.errors import UntrustedCSR
from codesigning.crypto.profile import build_development_certificate, build_name
from codesigning.crypto.signer import sign_certificate

log = logging.getLogger(__name__)


def generate_csr(key_pair: KeyPair, common_name: str) -> x509.CertificateSigningRequest:
    return (x509.CertificateSigningRequestBuilder()
            .subject_name(build_name([("commonName", common_name)]))
            .sign(key_pair.private_key, hashes.SHA256()))


def verify_csr(csr: x509.CertificateSigningRequest) -> bool:
    """Check the CSR is signed by the key it carries.

    This proves possession of the private key only. Whether the requester may
    hold the subject name or sign for a project is for the caller to decide.
    """
    if not csr.is_signature_valid:
        log.warning("rejected CSR for %s: self-signature invalid", csr.subject.rfc4514_string())
        raise UntrustedCSR("CSR not self-signed")
    return True


def generate_development_certificate_from_csr(
    issuer_private_key,
    issuer_certificate: x509.Certificate,
    csr: x509.CertificateSigningRequest,
    app_id: str,
    scope_key: str,
) -> x509.Certificate:
    """Issue a 30 day development certificate for ``app_id``/``scope_key``.

    Assumes the issuer is trusted and that the requester has already been
    authorised for the project.
    """
    verify_csr(csr)
    builder = build_development_certificate(
        csr.public_key(), csr.subject, issuer_certificate.subject, app_id, scope_key)
    return sign_certificate(builder, issuer_private_key)

import logging
from datetime import datetime
from typing import List, Optional

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import padding as asymp, rsa

from codesigning.common.models import KeyPair, ProjectInformation
from codesigning.common.utils import as_utc, sha1_hex, to_bytes, utcnow
from codesigning.crypto import errors
from codesigning.crypto.extensions import (
    get_basic_constraints, get_ext_key_usage, get_key_usage, project_information_from_certificate,
)
from codesigning.crypto.keys import PEMInput

log = logging.getLogger(__name__)


def _name_hash(name: x509.Name) -> str:
    return sha1_hex(name.public_bytes())


def _fail(exc_type, message: str, cert: x509.Certificate):
    log.warning("certificate serial=%x subject=%s rejected: %s",
                cert.serial_number, cert.subject.rfc4514_string(), message)
    raise exc_type(message)


def _signature_valid(cert: x509.Certificate, public_key) -> bool:
    if not isinstance(public_key, rsa.RSAPublicKey):
        return False
    try:
        public_key.verify(cert.signature, cert.tbs_certificate_bytes,
                          asymp.PKCS1v15(), cert.signature_hash_algorithm)
        return True
    except InvalidSignature:
        return False


def _public_keys_equal(key1, key2) -> bool:
    if not (isinstance(key1, rsa.RSAPublicKey) and isinstance(key2, rsa.RSAPublicKey)):
        return False
    n1, n2 = key1.public_numbers(), key2.public_numbers()
    return n1.n == n2.n and n1.e == n2.e


def _private_and_public_keys_match(private_key, public_key) -> bool:
    if not (isinstance(private_key, rsa.RSAPrivateKey) and isinstance(public_key, rsa.RSAPublicKey)):
        return False
    priv = private_key.private_numbers().public_numbers
    pub = public_key.public_numbers()
    return pub.n == priv.n and pub.e == priv.e


def _check_validity(cert: x509.Certificate, now: datetime):
    if not (cert.not_valid_before_utc <= now < cert.not_valid_after_utc):
        _fail(errors.ValidityExpired, "Certificate validity expired", cert)


def _check_code_signing_usages(cert: x509.Certificate):
    key_usage = get_key_usage(cert)
    if key_usage is None or not key_usage.digital_signature:
        _fail(errors.MissingDigitalSignatureUsage,
              "X509v3 Key Usage: Digital Signature not present", cert)
    ext_key_usage = get_ext_key_usage(cert)
    if ext_key_usage is None or not ext_key_usage.code_signing:
        _fail(errors.MissingCodeSigningUsage,
              "X509v3 Extended Key Usage: Code Signing not present", cert)


def validate_self_signed_certificate(certificate: x509.Certificate, key_pair: KeyPair,
                                     now: Optional[datetime] = None) -> None:
    """Check that a certificate and key pair can be used for code signing.

    Checks run in a fixed order and the first failure is raised: self-issued,
    validity window, digitalSignature usage, codeSigning usage, self-signature,
    certificate key vs key pair, key pair consistency.
    """
    now = as_utc(now or utcnow())

    if _name_hash(certificate.issuer) != _name_hash(certificate.subject):
        _fail(errors.NotSelfSigned,
              "Certificate issuer hash does not match subject hash, "
              "indicating certificate is not self-signed.", certificate)

    _check_validity(certificate, now)
    _check_code_signing_usages(certificate)

    if not _signature_valid(certificate, certificate.public_key()):
        _fail(errors.InvalidSelfSignature, "Certificate signature not valid", certificate)

    if not _public_keys_equal(certificate.public_key(), key_pair.public_key):
        _fail(errors.PublicKeyMismatch,
              "Certificate public key does not match key pair public key", certificate)

    if not _private_and_public_keys_match(key_pair.private_key, key_pair.public_key):
        _fail(errors.KeyPairMismatch, "keyPair key mismatch", certificate)


def verify_issued_by(cert: x509.Certificate, issuer: x509.Certificate) -> bool:
    if cert.issuer != issuer.subject:
        _fail(errors.IssuerMismatch,
              f"issuer {cert.issuer.rfc4514_string()} does not match "
              f"{issuer.subject.rfc4514_string()}", cert)
    if not _signature_valid(cert, issuer.public_key()):
        _fail(errors.ChainSignatureInvalid, "Certificate signature not valid for issuer", cert)
    return True


def _project_information(cert: x509.Certificate) -> Optional[ProjectInformation]:
    try:
        return project_information_from_certificate(cert)
    except ValueError:
        # covers UnicodeDecodeError
        _fail(errors.MalformedProjectInformation,
              "project information extension is not \"<appId>,<scopeKey>\"", cert)


def _check_ca(cert: x509.Certificate):
    constraints = get_basic_constraints(cert)
    if constraints is None or not constraints.ca:
        _fail(errors.NotCertificateAuthority, "X509v3 Basic Constraints: CA not set", cert)
    return constraints


def verify_trust_chain(leaf: x509.Certificate, intermediate: x509.Certificate,
                       root: x509.Certificate,
                       now: Optional[datetime] = None) -> ProjectInformation:
    """Verify the fixed root -> intermediate -> development leaf hierarchy.

    Returns the project the leaf is allowed to sign for. This is not general
    path validation; only the three-tier shape issued by this package is
    accepted.
    """
    now = as_utc(now or utcnow())

    if _name_hash(root.issuer) != _name_hash(root.subject):
        _fail(errors.NotSelfSigned, "root certificate is not self-signed", root)
    if not _signature_valid(root, root.public_key()):
        _fail(errors.ChainSignatureInvalid, "root certificate signature not valid", root)
    verify_issued_by(intermediate, root)
    verify_issued_by(leaf, intermediate)

    for cert in (root, intermediate, leaf):
        _check_validity(cert, now)

    root_constraints = _check_ca(root)
    _check_ca(intermediate)
    if root_constraints.path_length is not None and root_constraints.path_length < 1:
        _fail(errors.PathLengthExceeded,
              "root path length does not allow an intermediate certificate", intermediate)

    _check_code_signing_usages(leaf)

    project = _project_information(leaf)
    if project is None:
        _fail(errors.MissingProjectInformation,
              "development certificate has no project information", leaf)
    intermediate_project = _project_information(intermediate)
    if intermediate_project is not None and intermediate_project != project:
        _fail(errors.ProjectInformationMismatch,
              "project information does not match intermediate certificate", leaf)
    return project


def load_certificate_chain_pem(pem: PEMInput) -> List[x509.Certificate]:
    return x509.load_pem_x509_certificates(to_bytes(pem))

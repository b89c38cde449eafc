import base64
import logging

from cryptography import x509
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding as asymp

from codesigning.common.utils import b64e
from codesigning.crypto.errors import SignatureSelfCheckFailed

log = logging.getLogger(__name__)


def sign_pkcs1v15_sha256(priv_key, data: bytes) -> bytes:
    return priv_key.sign(data, asymp.PKCS1v15(), hashes.SHA256())

def verify_pkcs1v15_sha256(pub_key, signature: bytes, data: bytes) -> bool:
    try:
        pub_key.verify(signature, data, asymp.PKCS1v15(), hashes.SHA256())
        return True
    except InvalidSignature:
        return False


def sign_string_rsa_sha256(private_key, string_to_sign: str) -> str:
    return b64e(sign_pkcs1v15_sha256(private_key, string_to_sign.encode("utf-8")))


def sign_string_rsa_sha256_and_verify(private_key, certificate: x509.Certificate,
                                      string_to_sign: str) -> str:
    """Sign the SHA-256 hash of ``string_to_sign`` and check it against ``certificate``.

    The check is meant for tooling and debugging. A production signer can use
    ``sign_string_rsa_sha256`` and skip it; the signature is the same.
    """
    data = string_to_sign.encode("utf-8")
    signature = sign_pkcs1v15_sha256(private_key, data)
    if not verify_pkcs1v15_sha256(certificate.public_key(), signature, data):
        log.warning("signature self-check failed for certificate %s",
                    certificate.subject.rfc4514_string())
        raise SignatureSelfCheckFailed("Signature generated with private key not valid for certificate")
    return b64e(signature)


def verify_string_signature(certificate: x509.Certificate, signed_string: str,
                            signature_b64: str) -> bool:
    try:
        signature = base64.b64decode(signature_b64, validate=True)
    except ValueError:
        return False
    return verify_pkcs1v15_sha256(certificate.public_key(), signature, signed_string.encode("utf-8"))

import logging
from typing import Dict, Union

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from codesigning.common.config import KEY_SIZE, PUBLIC_EXPONENT
from codesigning.common.models import KeyPair
from codesigning.common.utils import to_bytes

log = logging.getLogger(__name__)

PEMInput = Union[str, bytes]


def _ensure_rsa(key, expected):
    if not isinstance(key, expected):
        raise ValueError(f"expected an RSA key, got {type(key).__name__}")
    return key


def generate_key_pair(key_size: int = KEY_SIZE) -> KeyPair:
    key = rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=key_size)
    log.debug("generated %d-bit RSA key pair", key_size)
    return KeyPair(public_key=key.public_key(), private_key=key)


def convert_private_key_to_pem(private_key: rsa.RSAPrivateKey) -> str:
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption()
    ).decode()

def convert_public_key_to_pem(public_key: rsa.RSAPublicKey) -> str:
    return public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    ).decode()

def convert_key_pair_to_pem(key_pair: KeyPair) -> Dict[str, str]:
    return {
        "private_key_pem": convert_private_key_to_pem(key_pair.private_key),
        "public_key_pem": convert_public_key_to_pem(key_pair.public_key),
    }

def convert_private_key_pem_to_private_key(private_key_pem: PEMInput) -> rsa.RSAPrivateKey:
    key = serialization.load_pem_private_key(to_bytes(private_key_pem), password=None)
    return _ensure_rsa(key, rsa.RSAPrivateKey)

def convert_public_key_pem_to_public_key(public_key_pem: PEMInput) -> rsa.RSAPublicKey:
    key = serialization.load_pem_public_key(to_bytes(public_key_pem))
    return _ensure_rsa(key, rsa.RSAPublicKey)

def convert_key_pair_pem_to_key_pair(private_key_pem: PEMInput, public_key_pem: PEMInput) -> KeyPair:
    return KeyPair(
        private_key=convert_private_key_pem_to_private_key(private_key_pem),
        public_key=convert_public_key_pem_to_public_key(public_key_pem),
    )


def convert_certificate_to_pem(certificate: x509.Certificate) -> str:
    return certificate.public_bytes(serialization.Encoding.PEM).decode()

def convert_certificate_pem_to_certificate(certificate_pem: PEMInput) -> x509.Certificate:
    return x509.load_pem_x509_certificate(to_bytes(certificate_pem))

def convert_csr_to_pem(csr: x509.CertificateSigningRequest) -> str:
    return csr.public_bytes(serialization.Encoding.PEM).decode()

def convert_csr_pem_to_csr(csr_pem: PEMInput) -> x509.CertificateSigningRequest:
    return x509.load_pem_x509_csr(to_bytes(csr_pem))


def load_private_key(path: str) -> rsa.RSAPrivateKey:
    with open(path, "rb") as f:
        return convert_private_key_pem_to_private_key(f.read())

def load_certificate(path: str) -> x509.Certificate:
    with open(path, "rb") as f:
        return convert_certificate_pem_to_certificate(f.read())

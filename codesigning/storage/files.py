import os

from cryptography import x509

from codesigning.common.models import KeyPair
from codesigning.crypto.keys import (
    convert_certificate_to_pem, convert_csr_to_pem, convert_key_pair_to_pem, load_certificate,
    load_private_key,
)


def _write(path, text):
    with open(path, "w") as f:
        f.write(text)
    return path


def export_certificate_and_keys(out_dir: str, prefix: str, key_pair: KeyPair,
                                certificate: x509.Certificate):
    os.makedirs(out_dir, exist_ok=True)
    pems = convert_key_pair_to_pem(key_pair)
    return [
        _write(os.path.join(out_dir, f"{prefix}-public-key.pem"), pems["public_key_pem"]),
        _write(os.path.join(out_dir, f"{prefix}-private-key.pem"), pems["private_key_pem"]),
        _write(os.path.join(out_dir, f"{prefix}-certificate.pem"), convert_certificate_to_pem(certificate)),
    ]


def export_csr(out_dir: str, prefix: str, csr: x509.CertificateSigningRequest):
    os.makedirs(out_dir, exist_ok=True)
    return _write(os.path.join(out_dir, f"{prefix}-csr.pem"), convert_csr_to_pem(csr))


def load_certificate_and_private_key(out_dir: str, prefix: str):
    key_path = os.path.join(out_dir, f"{prefix}-private-key.pem")
    cert_path = os.path.join(out_dir, f"{prefix}-certificate.pem")
    if not (os.path.exists(key_path) and os.path.exists(cert_path)):
        raise FileNotFoundError(f"missing {key_path} or {cert_path}")
    return load_private_key(key_path), load_certificate(cert_path)

# scripts/sign_string.py
"""Sign the SHA-256 hash of a string (e.g. a manifest body) with an RSA key.

Usage: python3 scripts/sign_string.py <private_key.pem> <certificate.pem> <file-to-sign>
Prints the base64 signature.
"""
import sys

from codesigning.crypto.keys import load_certificate, load_private_key
from codesigning.crypto.sign import sign_string_rsa_sha256_and_verify


def main():
    if len(sys.argv) < 4:
        print("Usage: python3 scripts/sign_string.py <private_key.pem> <certificate.pem> <file>")
        sys.exit(1)
    key = load_private_key(sys.argv[1])
    cert = load_certificate(sys.argv[2])
    with open(sys.argv[3], "r") as f:
        data = f.read()
    print(sign_string_rsa_sha256_and_verify(key, cert, data))

if __name__ == "__main__":
    main()

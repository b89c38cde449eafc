# scripts/verify_string.py
import sys

from codesigning.crypto.keys import load_certificate
from codesigning.crypto.sign import verify_string_signature


def main():
    if len(sys.argv) < 4:
        print("Usage: python3 scripts/verify_string.py <certificate.pem> <signed-file> <signature_b64>")
        sys.exit(1)
    cert = load_certificate(sys.argv[1])
    with open(sys.argv[2], "r") as f:
        data = f.read()
    if not verify_string_signature(cert, data, sys.argv[3]):
        print("Signature not valid for certificate and string")
        sys.exit(1)
    print("Signature valid!")

if __name__ == "__main__":
    main()

# scripts/gen_intermediate.py
"""Re-issue the intermediate certificate from an existing root.

Copy expo-root-private-key.pem and expo-root-certificate.pem into the output
directory first.
"""
import logging
import sys

from codesigning.common.config import INTERMEDIATE_SUBJECT, LOG_LEVEL, OUT_DIR
from codesigning.crypto.keys import generate_key_pair
from codesigning.crypto.profile import build_intermediate_certificate
from codesigning.crypto.signer import sign_certificate
from codesigning.storage.files import export_certificate_and_keys, load_certificate_and_private_key


def main():
    logging.basicConfig(level=LOG_LEVEL)
    try:
        root_key, root_cert = load_certificate_and_private_key(OUT_DIR, "expo-root")
    except FileNotFoundError:
        print("Root missing. Run scripts/gen_chain.py first.")
        sys.exit(1)
    keys = generate_key_pair()
    cert = sign_certificate(
        build_intermediate_certificate(keys.public_key, INTERMEDIATE_SUBJECT, root_cert.subject),
        root_key)
    paths = export_certificate_and_keys(OUT_DIR, "expo-go", keys, cert)
    print("Generated " + ", ".join(paths))

if __name__ == "__main__":
    main()

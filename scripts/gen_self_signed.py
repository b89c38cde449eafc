# scripts/gen_self_signed.py
import logging
import sys

from codesigning.common.config import LOG_LEVEL, OUT_DIR
from codesigning.common.utils import add_years, utcnow
from codesigning.crypto.keys import generate_key_pair
from codesigning.crypto.pki import validate_self_signed_certificate
from codesigning.crypto.signer import issue_self_signed_code_signing_certificate
from codesigning.storage.files import export_certificate_and_keys


def main():
    logging.basicConfig(level=LOG_LEVEL)
    cn = sys.argv[1] if len(sys.argv) > 1 else "test"
    key_pair = generate_key_pair()
    not_before = utcnow()
    cert = issue_self_signed_code_signing_certificate(
        key_pair, cn, not_before, add_years(not_before, 100))
    validate_self_signed_certificate(cert, key_pair)
    paths = export_certificate_and_keys(OUT_DIR, cn, key_pair, cert)
    print("Generated " + ", ".join(paths))

if __name__ == "__main__":
    main()

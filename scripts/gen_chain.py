# scripts/gen_chain.py
"""Generate an example root -> intermediate -> development certificate chain.

- root: self-signed CA, private key kept offline
- intermediate: signed by the root, served alongside manifests and used to
  issue development certificates on demand
- development: issued from a CSR for one app id and scope key
"""
import logging
import sys

from codesigning.common.config import INTERMEDIATE_SUBJECT, LOG_LEVEL, OUT_DIR, ROOT_SUBJECT
from codesigning.crypto.csr import generate_csr, generate_development_certificate_from_csr
from codesigning.crypto.keys import generate_key_pair
from codesigning.crypto.pki import verify_trust_chain
from codesigning.crypto.profile import build_intermediate_certificate, build_root_certificate
from codesigning.crypto.signer import sign_certificate
from codesigning.storage.files import export_certificate_and_keys, export_csr

TEST_APP_ID = "285dc9ca-a25d-4f60-93be-36dc312266d7"
TEST_SCOPE_KEY = "@test/app"


def main():
    logging.basicConfig(level=LOG_LEVEL)
    app_id = sys.argv[1] if len(sys.argv) > 1 else TEST_APP_ID
    scope_key = sys.argv[2] if len(sys.argv) > 2 else TEST_SCOPE_KEY

    root_keys = generate_key_pair()
    root = sign_certificate(build_root_certificate(root_keys.public_key, ROOT_SUBJECT),
                            root_keys.private_key)
    export_certificate_and_keys(OUT_DIR, "expo-root", root_keys, root)

    go_keys = generate_key_pair()
    intermediate = sign_certificate(
        build_intermediate_certificate(go_keys.public_key, INTERMEDIATE_SUBJECT, root.subject),
        root_keys.private_key)
    export_certificate_and_keys(OUT_DIR, "expo-go", go_keys, intermediate)

    dev_keys = generate_key_pair()
    csr = generate_csr(dev_keys, f"Expo Go Development Certificate {app_id}")
    export_csr(OUT_DIR, "development", csr)
    leaf = generate_development_certificate_from_csr(
        go_keys.private_key, intermediate, csr, app_id, scope_key)
    export_certificate_and_keys(OUT_DIR, "development", dev_keys, leaf)

    verify_trust_chain(leaf, intermediate, root)
    print(f"Generated chain in {OUT_DIR}/: expo-root, expo-go, development")

if __name__ == "__main__":
    main()

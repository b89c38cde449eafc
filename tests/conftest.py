import os
from datetime import timedelta

import pytest

from codesigning.common.config import INTERMEDIATE_SUBJECT, ROOT_SUBJECT
from codesigning.common.utils import add_years, utcnow
from codesigning.crypto.csr import generate_csr, generate_development_certificate_from_csr
from codesigning.crypto.keys import (
    convert_certificate_pem_to_certificate, convert_private_key_pem_to_private_key, generate_key_pair,
)
from codesigning.crypto.profile import build_intermediate_certificate, build_root_certificate
from codesigning.crypto.signer import issue_self_signed_code_signing_certificate, sign_certificate

TEST_APP_ID = "285dc9ca-a25d-4f60-93be-36dc312266d7"
TEST_SCOPE_KEY = "@test/app"


# RSA generation is slow; share keys across the session
@pytest.fixture(scope="session")
def key_pair():
    return generate_key_pair()

@pytest.fixture(scope="session")
def other_key_pair():
    return generate_key_pair()

@pytest.fixture(scope="session")
def intermediate_key_pair():
    return generate_key_pair()

@pytest.fixture(scope="session")
def leaf_key_pair():
    return generate_key_pair()


@pytest.fixture
def validity():
    now = utcnow() - timedelta(minutes=1)
    return now, add_years(now, 1)

@pytest.fixture
def self_signed(key_pair, validity):
    return issue_self_signed_code_signing_certificate(key_pair, "Test", *validity)


@pytest.fixture(scope="session")
def root(key_pair):
    return sign_certificate(build_root_certificate(key_pair.public_key, ROOT_SUBJECT),
                            key_pair.private_key)

@pytest.fixture(scope="session")
def intermediate(root, key_pair, intermediate_key_pair):
    builder = build_intermediate_certificate(
        intermediate_key_pair.public_key, INTERMEDIATE_SUBJECT, root.subject)
    return sign_certificate(builder, key_pair.private_key)

@pytest.fixture(scope="session")
def csr(leaf_key_pair):
    return generate_csr(leaf_key_pair, "Test common name")

@pytest.fixture(scope="session")
def leaf(intermediate, intermediate_key_pair, csr):
    return generate_development_certificate_from_csr(
        intermediate_key_pair.private_key, intermediate, csr, TEST_APP_ID, TEST_SCOPE_KEY)


@pytest.fixture
def tamper():
    return tamper_pem_signature


def tamper_pem_signature(pem: str) -> str:
    """Change one base64 character inside the trailing signature bytes."""
    lines = pem.splitlines()
    idx = max(i for i, l in enumerate(lines) if l and not l.startswith("-----"))
    line = lines[idx]
    replacement = "a" if line[0] != "a" else "b"
    lines[idx] = replacement + line[1:]
    return "\n".join(lines) + "\n"


FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


@pytest.fixture(scope="session")
def published():
    """Key, certificate, manifest and signature published with the original tooling."""
    def read(name):
        with open(os.path.join(FIXTURES, name), "r") as f:
            return f.read()
    return {
        "private_key": convert_private_key_pem_to_private_key(read("test-private-key.pem")),
        "certificate": convert_certificate_pem_to_certificate(read("test-certificate.pem")),
        "manifest": read("manifest.json"),
        "signature": read("manifest-signature.txt"),
    }

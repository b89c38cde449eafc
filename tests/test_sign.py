import base64

import pytest

from codesigning.common.models import KeyPair
from codesigning.crypto.errors import SignatureSelfCheckFailed
from codesigning.crypto.pki import validate_self_signed_certificate
from codesigning.crypto.sign import (
    sign_string_rsa_sha256, sign_string_rsa_sha256_and_verify, verify_string_signature,
)

MANIFEST = '{"id":"0754dad0-d200-d634-113c-ef1f26106028","runtimeVersion":"1","extra":{"scopeKey":"@test/app"}}'


def test_sign_and_verify(key_pair, self_signed):
    signature = sign_string_rsa_sha256_and_verify(key_pair.private_key, self_signed, MANIFEST)
    assert len(base64.b64decode(signature)) == 256
    assert verify_string_signature(self_signed, MANIFEST, signature)


def test_production_signature_matches(key_pair, self_signed):
    # PKCS#1 v1.5 is deterministic
    assert sign_string_rsa_sha256(key_pair.private_key, MANIFEST) == \
        sign_string_rsa_sha256_and_verify(key_pair.private_key, self_signed, MANIFEST)


def test_self_check_fails_for_wrong_certificate(other_key_pair, self_signed):
    with pytest.raises(SignatureSelfCheckFailed, match="not valid for certificate"):
        sign_string_rsa_sha256_and_verify(other_key_pair.private_key, self_signed, MANIFEST)


@pytest.mark.parametrize("index", [0, 100, 255])
def test_flipped_signature_byte_fails(key_pair, self_signed, index):
    raw = bytearray(base64.b64decode(sign_string_rsa_sha256(key_pair.private_key, MANIFEST)))
    raw[index] ^= 0xFF
    assert not verify_string_signature(self_signed, MANIFEST, base64.b64encode(bytes(raw)).decode())


def test_modified_message_fails(key_pair, self_signed):
    signature = sign_string_rsa_sha256(key_pair.private_key, MANIFEST)
    assert not verify_string_signature(self_signed, MANIFEST + " ", signature)


def test_garbage_signature(self_signed):
    assert not verify_string_signature(self_signed, MANIFEST, "not base64!")


def test_published_signature_verifies(published):
    assert verify_string_signature(published["certificate"], published["manifest"], published["signature"])


def test_signing_reproduces_published_signature(published):
    signature = sign_string_rsa_sha256_and_verify(
        published["private_key"], published["certificate"], published["manifest"])
    assert signature == published["signature"]
    assert sign_string_rsa_sha256(published["private_key"], published["manifest"]) == published["signature"]


def test_published_certificate_is_valid_code_signing_certificate(published):
    key = published["private_key"]
    validate_self_signed_certificate(
        published["certificate"], KeyPair(public_key=key.public_key(), private_key=key))

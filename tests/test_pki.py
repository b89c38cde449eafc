from datetime import timedelta

import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from codesigning.common.models import ExtKeyUsage, KeyPair, KeyUsage
from codesigning.common.utils import add_years, utcnow
from codesigning.common.config import ROOT_SUBJECT
from codesigning.crypto import errors
from codesigning.crypto.keys import convert_certificate_pem_to_certificate, convert_certificate_to_pem
from codesigning.crypto.pki import validate_self_signed_certificate
from codesigning.crypto.profile import (
    build_intermediate_certificate, build_self_signed_code_signing_certificate,
)
from codesigning.crypto.signer import issue_self_signed_code_signing_certificate, sign_certificate


def _issue(key_pair, not_before, not_after, **kwargs):
    builder = build_self_signed_code_signing_certificate(
        key_pair.public_key, "Test", not_before, not_after, **kwargs)
    return sign_certificate(builder, key_pair.private_key)


@pytest.mark.parametrize("lifetime", [timedelta(minutes=5), timedelta(days=1), timedelta(days=365 * 100)])
def test_valid_certificate(key_pair, lifetime):
    not_before = utcnow() - timedelta(minutes=1)
    cert = issue_self_signed_code_signing_certificate(key_pair, "Test", not_before, not_before + lifetime)
    validate_self_signed_certificate(cert, key_pair)


def test_valid_after_pem_round_trip(self_signed, key_pair):
    cert = convert_certificate_pem_to_certificate(convert_certificate_to_pem(self_signed))
    validate_self_signed_certificate(cert, key_pair)


def test_not_self_signed(key_pair):
    # issuer name differs even though the key signed itself
    builder = build_intermediate_certificate(key_pair.public_key, [("commonName", "Test")], ROOT_SUBJECT)
    cert = sign_certificate(builder, key_pair.private_key)
    with pytest.raises(errors.NotSelfSigned, match="not self-signed"):
        validate_self_signed_certificate(cert, key_pair)


def test_expired(key_pair):
    now = utcnow()
    cert = _issue(key_pair, add_years(now, -1), now - timedelta(minutes=1))
    with pytest.raises(errors.ValidityExpired, match="Certificate validity expired"):
        validate_self_signed_certificate(cert, key_pair)


def test_not_yet_valid(key_pair):
    now = utcnow()
    cert = _issue(key_pair, now + timedelta(days=1), now + timedelta(days=2))
    with pytest.raises(errors.ValidityExpired):
        validate_self_signed_certificate(cert, key_pair)


def test_validity_end_is_exclusive(self_signed, key_pair):
    with pytest.raises(errors.ValidityExpired):
        validate_self_signed_certificate(self_signed, key_pair, now=self_signed.not_valid_after_utc)
    validate_self_signed_certificate(self_signed, key_pair, now=self_signed.not_valid_before_utc)


def test_missing_digital_signature(key_pair, validity):
    cert = _issue(key_pair, *validity, overrides=[KeyUsage(key_encipherment=True)])
    with pytest.raises(errors.MissingDigitalSignatureUsage,
                       match="Key Usage: Digital Signature not present"):
        validate_self_signed_certificate(cert, key_pair)


def test_missing_key_usage_extension(key_pair, validity):
    cert = _issue(key_pair, *validity, omit=["keyUsage"])
    with pytest.raises(errors.MissingDigitalSignatureUsage):
        validate_self_signed_certificate(cert, key_pair)


def test_missing_code_signing(key_pair, validity):
    cert = _issue(key_pair, *validity, overrides=[ExtKeyUsage(server_auth=True)])
    with pytest.raises(errors.MissingCodeSigningUsage,
                       match="Extended Key Usage: Code Signing not present"):
        validate_self_signed_certificate(cert, key_pair)


def test_missing_ext_key_usage_extension(key_pair, validity):
    cert = _issue(key_pair, *validity, omit=["extKeyUsage"])
    with pytest.raises(errors.MissingCodeSigningUsage):
        validate_self_signed_certificate(cert, key_pair)


def test_expired_wins_over_missing_digital_signature(key_pair):
    now = utcnow()
    cert = _issue(key_pair, add_years(now, -1), now - timedelta(minutes=1),
                  overrides=[KeyUsage(key_encipherment=True)])
    with pytest.raises(errors.ValidityExpired):
        validate_self_signed_certificate(cert, key_pair)


def test_tampered_signature(self_signed, key_pair, tamper):
    pem = tamper(convert_certificate_to_pem(self_signed))
    cert = convert_certificate_pem_to_certificate(pem)
    with pytest.raises(errors.InvalidSelfSignature, match="signature not valid"):
        validate_self_signed_certificate(cert, key_pair)


def test_public_key_mismatch(self_signed, other_key_pair):
    with pytest.raises(errors.PublicKeyMismatch):
        validate_self_signed_certificate(self_signed, other_key_pair)


def test_key_pair_mismatch(self_signed, key_pair, other_key_pair):
    mixed = KeyPair(public_key=key_pair.public_key, private_key=other_key_pair.private_key)
    with pytest.raises(errors.KeyPairMismatch, match="keyPair key mismatch"):
        validate_self_signed_certificate(self_signed, mixed)


def test_validation_errors_share_base(self_signed, other_key_pair):
    with pytest.raises(errors.CertificateValidationError):
        validate_self_signed_certificate(self_signed, other_key_pair)


def test_non_rsa_key_pair_is_public_key_mismatch(self_signed):
    ec_key = ec.generate_private_key(ec.SECP256R1())
    with pytest.raises(errors.PublicKeyMismatch):
        validate_self_signed_certificate(self_signed, KeyPair(public_key=ec_key.public_key(), private_key=ec_key))


def test_non_rsa_certificate_rejected(validity):
    ec_key = ec.generate_private_key(ec.SECP256R1())
    builder = build_self_signed_code_signing_certificate(ec_key.public_key(), "Test", *validity)
    cert = sign_certificate(builder, ec_key)
    with pytest.raises(errors.InvalidSelfSignature):
        validate_self_signed_certificate(cert, KeyPair(public_key=ec_key.public_key(), private_key=ec_key))

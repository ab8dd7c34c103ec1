"""Tests for password hashing and code digests."""

from wastepay_app.core.crypto import CodeSigner, hash_password, mask_phone, verify_password


def test_password_hash_verifies() -> None:
    encoded = hash_password("s3cret-pass")

    assert encoded.startswith("scrypt$")
    assert verify_password("s3cret-pass", encoded)
    assert not verify_password("other", encoded)
    assert not verify_password("s3cret-pass", "plain-text")


def test_hashes_are_salted() -> None:
    assert hash_password("same") != hash_password("same")


def test_code_signer_binds_subject() -> None:
    signer = CodeSigner.generate()
    digest = signer.digest("9876541001", "123456")

    assert signer.matches("9876541001", "123456", digest)
    assert not signer.matches("9876541002", "123456", digest)
    assert not CodeSigner.generate().matches("9876541001", "123456", digest)


def test_mask_phone() -> None:
    assert mask_phone("9876541001") == "******1001"
    assert mask_phone("123") == "***"

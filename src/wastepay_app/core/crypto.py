"""Password hashing and one-time code digests."""

from __future__ import annotations

import base64
import os
from dataclasses import dataclass

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import constant_time, hashes, hmac
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt


SALT_SIZE = 16
KEY_SIZE = 32
SCRYPT_N = 2**14
SCRYPT_R = 8
SCRYPT_P = 1
HASH_PREFIX = "scrypt"


def _b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii")


def _unb64(text: str) -> bytes:
    return base64.urlsafe_b64decode(text.encode("ascii"))


def _kdf(salt: bytes) -> Scrypt:
    return Scrypt(salt=salt, length=KEY_SIZE, n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P)


def hash_password(password: str) -> str:
    """Return an encoded scrypt hash: scrypt$<salt>$<key>."""
    salt = os.urandom(SALT_SIZE)
    key = _kdf(salt).derive(password.encode("utf-8"))
    return f"{HASH_PREFIX}${_b64(salt)}${_b64(key)}"


def verify_password(password: str, encoded: str) -> bool:
    """Check a password against a value produced by hash_password."""
    try:
        prefix, salt_b64, key_b64 = encoded.split("$")
    except ValueError:
        return False
    if prefix != HASH_PREFIX:
        return False
    try:
        _kdf(_unb64(salt_b64)).verify(password.encode("utf-8"), _unb64(key_b64))
    except InvalidKey:
        return False
    return True


@dataclass
class CodeSigner:
    """Keyed HMAC-SHA256 digests so one-time codes are never stored in clear."""

    key: bytes

    @classmethod
    def generate(cls) -> "CodeSigner":
        return cls(key=os.urandom(KEY_SIZE))

    def digest(self, subject: str, code: str) -> bytes:
        mac = hmac.HMAC(self.key, hashes.SHA256())
        mac.update(f"{subject}:{code}".encode("utf-8"))
        return mac.finalize()

    def matches(self, subject: str, code: str, expected: bytes) -> bool:
        return constant_time.bytes_eq(self.digest(subject, code), expected)


def mask_phone(phone: str) -> str:
    """Mask a phone number except last 4 digits."""
    if len(phone) <= 4:
        return "*" * len(phone)
    return "*" * (len(phone) - 4) + phone[-4:]

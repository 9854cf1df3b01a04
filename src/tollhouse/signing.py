"""Signed-cookie codec — HMAC-SHA256 tags over cookie values.

Wire format::

    <plaintext>.<tag>

``tag`` is the unpadded base64url HMAC-SHA256 of the UTF-8 plaintext,
keyed directly with the configured secret. The tag alphabet never
contains ``.``, so splitting on the *last* ``.`` recovers the pair even
when the plaintext itself contains dots.

Signing and verification are delegated to ``itsdangerous.Signer``,
which compares tags with ``hmac.compare_digest``. A naive ``==`` here
would be a timing oracle.
"""

import hashlib
import secrets
from collections.abc import Sequence
from typing import TypeAlias

from itsdangerous import BadSignature, Signer

from tollhouse.errors import ConfigurationError, InvalidSignature

CookieKey: TypeAlias = str | bytes

SEPARATOR = "."


class CookieSigner:
    """Encode and verify signed cookie values.

    Immutable after construction and safe to share across concurrent
    requests.

    ``fallback_keys`` supports key rotation: values are always signed
    with ``key``, but verify if any of ``key`` or ``fallback_keys``
    produced them::

        signer = CookieSigner(new_key, fallback_keys=(old_key,))
    """

    __slots__ = ("_signer",)

    def __init__(self, key: CookieKey, *, fallback_keys: Sequence[CookieKey] = ()) -> None:
        if not key:
            msg = "Cookie signing key must not be empty."
            raise ConfigurationError(msg)
        if any(not k for k in fallback_keys):
            msg = "Cookie fallback keys must not be empty."
            raise ConfigurationError(msg)
        # itsdangerous signs with the last key and verifies against all of them
        keys = [*reversed(fallback_keys), key]
        self._signer = Signer(
            keys,
            sep=SEPARATOR,
            key_derivation="none",
            digest_method=hashlib.sha256,
        )

    def encode(self, plaintext: str) -> str:
        """Return ``"<plaintext>.<tag>"``."""
        return self._signer.sign(plaintext).decode("utf-8")

    def decode(self, wire_value: str) -> str:
        """Verify *wire_value* and return its plaintext.

        Raises:
            InvalidSignature: On a tag mismatch, a missing separator, an
                empty or undecodable tag, or a plaintext that is not UTF-8.
                Nothing else escapes.
        """
        try:
            return self._signer.unsign(wire_value).decode("utf-8")
        except (BadSignature, UnicodeError) as exc:
            raise InvalidSignature(str(exc)) from None

    def verify(self, wire_value: str) -> bool:
        """True if *wire_value* carries a valid tag."""
        try:
            self.decode(wire_value)
        except InvalidSignature:
            return False
        return True

    def __repr__(self) -> str:
        # Never leak key material
        return "<CookieSigner hmac-sha256>"


def encode(plaintext: str, key: CookieKey) -> str:
    """Sign *plaintext* with *key*. Shorthand for ``CookieSigner(key).encode``."""
    return CookieSigner(key).encode(plaintext)


def decode(wire_value: str, key: CookieKey) -> str:
    """Verify *wire_value* against *key* and return the plaintext.

    Raises ``InvalidSignature`` on any verification failure.
    """
    return CookieSigner(key).decode(wire_value)


def generate_key(nbytes: int = 32) -> str:
    """Return a fresh random url-safe key with *nbytes* of entropy."""
    return secrets.token_urlsafe(nbytes)

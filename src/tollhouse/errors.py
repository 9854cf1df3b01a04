"""Tollhouse exception hierarchy.

Shared by the codec, the middleware, the writers and the CLI so every
module raises and catches the same types.
"""


class TollhouseError(Exception):
    """Base for all tollhouse-specific errors."""


class ConfigurationError(TollhouseError):
    """Raised when cookie keys or middleware settings are invalid."""


class CookieError(TollhouseError):
    """Base for errors raised by the signed-cookie machinery."""


class InvalidSignature(CookieError):  # noqa: N818 — mirrors itsdangerous.BadSignature
    """A signed cookie value failed verification.

    Never escapes ``CookiesMiddleware``: the partitioner treats it as
    "cookie absent".
    """


class ReservedNameError(CookieError, ValueError):
    """A cookie name violates the ``s.`` prefix rules.

    Raised when an unsigned cookie is written with the reserved prefix,
    or when a signed cookie is written with the prefix already attached.
    This is a programming error; the write is aborted.
    """


class MissingKeyError(CookieError, ConfigurationError):
    """A signed cookie was written without a configured key."""


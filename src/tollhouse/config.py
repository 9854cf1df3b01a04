"""Cookie middleware configuration.

One frozen dataclass, validated on construction and loadable from the
environment so keys never have to live in source code.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from tollhouse.errors import ConfigurationError
from tollhouse.signing import CookieKey, CookieSigner


@dataclass(frozen=True, slots=True)
class CookiesConfig:
    """Cookie middleware configuration.

    ``key`` is optional. Without it, signed cookies are disabled: every
    ``s.`` cookie is ignored on read and ``set_signed_cookie`` raises
    ``MissingKeyError``. Cookies are signed, not encrypted.

    ``fallback_keys`` are accepted for verification only, so a key can
    be rotated without logging everybody out::

        CookiesConfig(key=new_key, fallback_keys=(old_key,))
    """

    key: CookieKey | None = None
    fallback_keys: tuple[CookieKey, ...] = ()

    def __post_init__(self) -> None:
        if self.key is not None and not self.key:
            msg = "CookiesConfig.key must not be empty. Use key=None to disable signed cookies."
            raise ConfigurationError(msg)
        if self.fallback_keys and self.key is None:
            msg = "CookiesConfig.fallback_keys requires a primary key."
            raise ConfigurationError(msg)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        prefix: str = "TOLLHOUSE_",
    ) -> CookiesConfig:
        """Load configuration from environment variables.

        Reads ``{prefix}COOKIE_KEY`` and the comma-separated
        ``{prefix}COOKIE_FALLBACK_KEYS``. A missing or blank key leaves
        signed cookies disabled.
        """
        env = os.environ if environ is None else environ
        key = env.get(f"{prefix}COOKIE_KEY", "").strip() or None
        raw_fallbacks = env.get(f"{prefix}COOKIE_FALLBACK_KEYS", "")
        fallback_keys = tuple(k.strip() for k in raw_fallbacks.split(",") if k.strip())
        return cls(key=key, fallback_keys=fallback_keys)

    def make_signer(self) -> CookieSigner | None:
        """Build the signer for this configuration, or None when disabled."""
        if self.key is None:
            return None
        return CookieSigner(self.key, fallback_keys=self.fallback_keys)

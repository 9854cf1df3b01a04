"""Cookie middleware — partitions request cookies into signed and unsigned.

A cookie whose name starts with ``s.`` is *signed*: its value carries an
HMAC tag (see ``tollhouse.signing``). On every request the middleware
walks the ``Cookie`` header once and builds two disjoint mappings:

- ``unsigned`` — every cookie without the prefix, exactly as sent;
- ``signed`` — every prefixed cookie whose tag verified, keyed by the
  name with ``s.`` stripped and holding the plaintext.

A forged, corrupted, or (without a key) unverifiable signed cookie is
dropped. The request proceeds as if that cookie had never been sent.

Both mappings live in a frozen ``CookieState`` held in a ContextVar,
accessible via ``get_cookie_state()`` from any handler or later
middleware.

Usage::

    from tollhouse import CookiesConfig, CookiesMiddleware, Request, Response
    from tollhouse.middleware import (
        chain,
        delete_cookie,
        get_cookie_state,
        set_signed_cookie,
        set_unsigned_cookie,
    )

    async def index(request: Request) -> Response:
        state = get_cookie_state()
        response = Response(f"theme={state.unsigned.get('theme')}")
        response = set_signed_cookie(response, "session_id", "abc123", secure=True)
        response = set_unsigned_cookie(response, "theme", "dark")
        return delete_cookie(response, "old_cookie")

    pipeline = chain([CookiesMiddleware(CookiesConfig(key=cookie_key))], index)
"""

import logging
from collections.abc import Iterable, Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import TypedDict, Unpack

from tollhouse.config import CookiesConfig
from tollhouse.errors import InvalidSignature, MissingKeyError, ReservedNameError
from tollhouse.http.cookies import validate_cookie_name
from tollhouse.http.request import Request
from tollhouse.http.response import Response
from tollhouse.middleware.protocol import Next
from tollhouse.signing import CookieKey, CookieSigner

logger = logging.getLogger("tollhouse.cookies")

SIGNED_PREFIX = "s."


# -- Classified cookies --


@dataclass(frozen=True, slots=True)
class UnsignedCookie:
    """A plain cookie, trusted no more than any other client input."""

    name: str
    value: str


@dataclass(frozen=True, slots=True)
class SignedCookie:
    """A signed cookie whose tag verified. ``name`` has no prefix."""

    name: str
    value: str

    @property
    def wire_name(self) -> str:
        """The name as it travels in headers."""
        return SIGNED_PREFIX + self.name


def classify_cookie(
    name: str,
    value: str,
    signer: CookieSigner | None,
) -> UnsignedCookie | SignedCookie | None:
    """Classify one raw cookie pair. Returns None if it must be dropped."""
    if not name.startswith(SIGNED_PREFIX):
        return UnsignedCookie(name, value)

    bare_name = name[len(SIGNED_PREFIX) :]
    if signer is None or not bare_name:
        return None
    try:
        plaintext = signer.decode(value)
    except InvalidSignature:
        logger.debug("Dropping signed cookie %r: signature did not verify", name)
        return None
    return SignedCookie(bare_name, plaintext)


# -- Per-request state --


def _empty() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class CookieState:
    """Cookies of the current request, partitioned by trust.

    ``unsigned`` and ``signed`` are read-only and disjoint. ``signer``
    is set when the middleware was configured with a key.
    """

    unsigned: Mapping[str, str] = field(default_factory=_empty)
    signed: Mapping[str, str] = field(default_factory=_empty)
    signer: CookieSigner | None = None

    @property
    def signing_enabled(self) -> bool:
        """True if a key is configured for this request."""
        return self.signer is not None


def partition_cookies(
    pairs: Iterable[tuple[str, str]],
    signer: CookieSigner | None = None,
) -> CookieState:
    """Partition raw cookie pairs into unsigned and verified signed cookies.

    Pairs are processed in header order; a later duplicate name
    overwrites an earlier one within its own mapping. Never raises for
    bad cookie input.
    """
    unsigned: dict[str, str] = {}
    signed: dict[str, str] = {}
    for name, value in pairs:
        if not name:
            continue
        match classify_cookie(name, value, signer):
            case SignedCookie(name=bare_name, value=plaintext):
                signed[bare_name] = plaintext
            case UnsignedCookie():
                unsigned[name] = value
    return CookieState(
        unsigned=MappingProxyType(unsigned),
        signed=MappingProxyType(signed),
        signer=signer,
    )


_cookie_state_var: ContextVar[CookieState | None] = ContextVar("tollhouse_cookies", default=None)


def get_cookie_state() -> CookieState:
    """Return the cookie state of the current request.

    Raises ``LookupError`` if called outside a request with
    ``CookiesMiddleware`` active.
    """
    state = _cookie_state_var.get()
    if state is None:
        msg = (
            "No cookie state. Ensure CookiesMiddleware runs ahead of "
            "the code reading cookies."
        )
        raise LookupError(msg)
    return state


def unsigned_cookies() -> Mapping[str, str]:
    """Unsigned cookies of the current request."""
    return get_cookie_state().unsigned


def signed_cookies() -> Mapping[str, str]:
    """Verified signed cookies of the current request, prefix stripped."""
    return get_cookie_state().signed


# -- Middleware --


class CookiesMiddleware:
    """Parse and verify request cookies, expose them to handlers.

    Never short-circuits: it always calls ``next`` and returns its
    response untouched. Cookie problems never fail a request.

    Usage::

        from tollhouse.middleware.cookies import CookiesMiddleware

        CookiesMiddleware()  # unsigned only

        CookiesMiddleware(CookiesConfig(key="..."))
    """

    __slots__ = ("_config", "_signer")

    def __init__(self, config: CookiesConfig | None = None) -> None:
        self._config = config or CookiesConfig()
        self._signer = self._config.make_signer()

    @property
    def signing_enabled(self) -> bool:
        return self._signer is not None

    async def __call__(self, request: Request, next: Next) -> Response:
        """Partition cookies, dispatch, then drop the state."""
        state = partition_cookies(request.cookie_pairs, self._signer)
        token = _cookie_state_var.set(state)
        try:
            return await next(request)
        finally:
            _cookie_state_var.reset(token)


# -- Writers --


class CookieAttributes(TypedDict, total=False):
    """Optional ``Set-Cookie`` attributes accepted by the writers."""

    max_age: int | None
    expires: datetime | None
    path: str
    domain: str | None
    secure: bool
    httponly: bool
    samesite: str | None
    partitioned: bool


def set_unsigned_cookie(
    response: Response,
    name: str,
    value: str,
    **attributes: Unpack[CookieAttributes],
) -> Response:
    """Return *response* with an unsigned ``Set-Cookie`` for *name*.

    Raises:
        ReservedNameError: If *name* starts with ``s.``.
        ValueError: If *name* is not a cookie token or *value* holds
            characters a cookie cannot carry (``;``, ``,``, whitespace, ...).
    """
    validate_cookie_name(name)
    if name.startswith(SIGNED_PREFIX):
        msg = (
            f'Unsigned cookie name cannot start with "{SIGNED_PREFIX}". '
            "This prefix is reserved for signed cookies."
        )
        raise ReservedNameError(msg)
    return response.with_cookie(name, value, **attributes)


def _resolve_signer(key: CookieKey | CookieSigner | None) -> CookieSigner:
    if isinstance(key, CookieSigner):
        return key
    # An empty key counts as no key
    if key:
        return CookieSigner(key)
    state = _cookie_state_var.get()
    if state is None or state.signer is None:
        msg = (
            "Cannot set signed cookie without a cookie key. Pass key=... or "
            "configure CookiesMiddleware with CookiesConfig(key=...)."
        )
        raise MissingKeyError(msg)
    return state.signer


def set_signed_cookie(
    response: Response,
    name: str,
    value: str,
    *,
    key: CookieKey | CookieSigner | None = None,
    **attributes: Unpack[CookieAttributes],
) -> Response:
    """Return *response* with a signed ``Set-Cookie`` named ``s.<name>``.

    The key defaults to the one configured on ``CookiesMiddleware`` for
    the current request.

    Raises:
        ReservedNameError: If *name* already starts with ``s.``.
        MissingKeyError: If no key is passed and none is configured.
        ValueError: If *name* or *value* cannot be carried in a cookie.
    """
    validate_cookie_name(name)
    if name.startswith(SIGNED_PREFIX):
        msg = (
            f'Signed cookie name cannot start with "{SIGNED_PREFIX}". '
            "This prefix is added automatically."
        )
        raise ReservedNameError(msg)
    signer = _resolve_signer(key)
    return response.with_cookie(SIGNED_PREFIX + name, signer.encode(value), **attributes)


# -- Deleter --


def delete_cookie(
    response: Response,
    name: str,
    *,
    state: CookieState | None = None,
    path: str = "/",
    domain: str | None = None,
    secure: bool = False,
    httponly: bool = True,
    partitioned: bool = False,
) -> Response:
    """Return *response* with expiry directives for cookie *name*.

    Only cookies the client actually sent are deleted: the plain
    ``name`` if it is among the unsigned cookies, and ``s.<name>`` if
    *name* is among the verified signed cookies. Both may apply.
    Deleting a cookie that was never sent is a no-op.

    *state* defaults to the current request's ``CookieState``.
    """
    state = state if state is not None else get_cookie_state()
    targets: list[str] = []
    if name in state.unsigned:
        targets.append(name)
    if name in state.signed:
        targets.append(SIGNED_PREFIX + name)
    for target in targets:
        response = response.without_cookie(
            target,
            path=path,
            domain=domain,
            secure=secure,
            httponly=httponly,
            partitioned=partitioned,
        )
    return response

"""Tollhouse — signed and unsigned cookies for async request pipelines.

Cookies named ``s.<name>`` carry an HMAC-SHA256 tag and are only exposed
to handlers once verified; everything else is passed through as plain,
untrusted input.

Basic usage::

    from tollhouse import CookiesConfig, CookiesMiddleware, Request, Response
    from tollhouse.middleware import chain, get_cookie_state, set_signed_cookie

    async def index(request: Request) -> Response:
        user = get_cookie_state().signed.get("user", "anonymous")
        return set_signed_cookie(Response(f"Hello, {user}"), "user", "alice")

    pipeline = chain([CookiesMiddleware(CookiesConfig.from_env())], index)
    response = await pipeline(Request.from_scope(scope))
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "CookieError",
    "CookieSigner",
    "CookieState",
    "CookiesConfig",
    "CookiesMiddleware",
    "InvalidSignature",
    "Middleware",
    "MissingKeyError",
    "Next",
    "Request",
    "ReservedNameError",
    "Response",
    "SetCookie",
    "TollhouseError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import tollhouse`` (and the CLI) from loading the middleware.
    """
    if name == "CookiesConfig":
        from tollhouse.config import CookiesConfig

        return CookiesConfig

    if name == "Request":
        from tollhouse.http.request import Request

        return Request

    if name == "Response":
        from tollhouse.http.response import Response

        return Response

    if name == "SetCookie":
        from tollhouse.http.cookies import SetCookie

        return SetCookie

    if name == "CookieSigner":
        from tollhouse.signing import CookieSigner

        return CookieSigner

    if name in ("CookieState", "CookiesMiddleware"):
        from tollhouse.middleware import cookies as _cookies

        return getattr(_cookies, name)

    if name in ("Middleware", "Next"):
        from tollhouse.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in (
        "ConfigurationError",
        "CookieError",
        "InvalidSignature",
        "MissingKeyError",
        "ReservedNameError",
        "TollhouseError",
    ):
        from tollhouse import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

"""Cookie middleware and the writers that go with it.

Any ``async (request, next) -> Response`` callable is a middleware;
``chain`` composes several around a handler.
"""

from tollhouse.middleware.cookies import (
    CookieState,
    CookiesMiddleware,
    delete_cookie,
    get_cookie_state,
    partition_cookies,
    set_signed_cookie,
    set_unsigned_cookie,
    signed_cookies,
    unsigned_cookies,
)
from tollhouse.middleware.protocol import Middleware, Next, chain

__all__ = [
    "CookieState",
    "CookiesMiddleware",
    "Middleware",
    "Next",
    "chain",
    "delete_cookie",
    "get_cookie_state",
    "partition_cookies",
    "set_signed_cookie",
    "set_unsigned_cookie",
    "signed_cookies",
    "unsigned_cookies",
]

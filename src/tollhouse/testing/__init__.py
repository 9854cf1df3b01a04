"""Test utilities for code built on tollhouse.

    from tollhouse.testing import CookieClient, get_set_cookie
"""

from tollhouse.testing.client import CookieClient
from tollhouse.testing.cookies import (
    apply_set_cookies,
    cookie_header,
    get_set_cookie,
    get_set_cookies,
)

__all__ = [
    "CookieClient",
    "apply_set_cookies",
    "cookie_header",
    "get_set_cookie",
    "get_set_cookies",
]

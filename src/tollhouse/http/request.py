"""The inbound side of the cookie contract.

``CookiesMiddleware`` needs one thing from a request: its cookie pairs,
in the order the client sent them. ``Request`` carries those plus the
method, path and headers a handler might want, and nothing the cookie
layer cannot use. Hosts build one per request with ``from_scope`` (ASGI)
or ``build`` (everything else, tests included).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from tollhouse.http.cookies import parse_cookie_pairs

HeaderPairs: TypeAlias = tuple[tuple[str, str], ...]


@dataclass(frozen=True, slots=True)
class Request:
    """A frozen request whose cookies were parsed exactly once.

    ``cookie_pairs`` holds every pair of every ``Cookie`` header line,
    signed ones included and unverified. Sorting them by trust is the
    middleware's job.
    """

    method: str = "GET"
    path: str = "/"
    headers: HeaderPairs = ()
    cookie_pairs: HeaderPairs = ()

    @property
    def cookies(self) -> dict[str, str]:
        """Raw cookies as sent; a repeated name keeps its last value."""
        return dict(self.cookie_pairs)

    def header_values(self, name: str) -> list[str]:
        """Every value of header *name*, case-insensitively, in order."""
        wanted = name.lower()
        return [value for key, value in self.headers if key.lower() == wanted]

    @classmethod
    def build(
        cls,
        method: str = "GET",
        path: str = "/",
        *,
        headers: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ) -> Request:
        """Create a Request from plain string headers.

        Pass a list of pairs to send a header more than once::

            Request.build(headers=[("Cookie", "a=1"), ("Cookie", "s.b=x.tag")])
        """
        if headers is None:
            pairs: HeaderPairs = ()
        elif isinstance(headers, Mapping):
            pairs = tuple(headers.items())
        else:
            pairs = tuple(headers)
        return cls(
            method=method.upper(),
            path=path,
            headers=pairs,
            cookie_pairs=_collect_cookie_pairs(pairs),
        )

    @classmethod
    def from_scope(cls, scope: Mapping[str, Any]) -> Request:
        """Create a Request from an ASGI HTTP scope.

        ASGI header names and values are bytes; they are decoded as
        latin-1, the encoding HTTP/1.1 headers travel in.
        """
        pairs = tuple(
            (name.decode("latin-1"), value.decode("latin-1"))
            for name, value in scope.get("headers", ())
        )
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=pairs,
            cookie_pairs=_collect_cookie_pairs(pairs),
        )


def _collect_cookie_pairs(headers: HeaderPairs) -> HeaderPairs:
    # HTTP/2 clients may split cookies across several ``Cookie`` lines
    pairs: list[tuple[str, str]] = []
    for name, value in headers:
        if name.lower() == "cookie":
            pairs.extend(parse_cookie_pairs(value))
    return tuple(pairs)

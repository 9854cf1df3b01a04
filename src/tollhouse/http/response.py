"""The outbound side of the cookie contract.

A ``Response`` is the "outbound header collection" the cookie writers
append to. It never changes in place: every ``with_*`` call returns a
new ``Response`` with one more header or ``Set-Cookie`` directive, so a
handler that discards the result has written nothing.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime

from tollhouse.http.cookies import SetCookie, expired_cookie


@dataclass(frozen=True, slots=True)
class Response:
    """Status, body, headers and pending ``Set-Cookie`` directives."""

    body: str = ""
    status: int = 200
    headers: tuple[tuple[str, str], ...] = ()
    cookies: tuple[SetCookie, ...] = ()

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        return replace(self, headers=(*self.headers, (name, value)))

    def with_cookie(
        self,
        name: str,
        value: str,
        *,
        max_age: int | None = None,
        expires: datetime | None = None,
        path: str = "/",
        domain: str | None = None,
        secure: bool = False,
        httponly: bool = True,
        samesite: str | None = "lax",
        partitioned: bool = False,
    ) -> Response:
        """Append a ``Set-Cookie`` directive for *name*, written verbatim.

        No prefix rules apply here; ``set_signed_cookie`` and
        ``set_unsigned_cookie`` are the checked entry points. Raises
        ``ValueError`` for a name or value a cookie cannot carry.
        """
        directive = SetCookie(
            name=name,
            value=value,
            max_age=max_age,
            expires=expires,
            path=path,
            domain=domain,
            secure=secure,
            httponly=httponly,
            samesite=samesite,
            partitioned=partitioned,
        )
        return self.with_cookies([directive])

    def with_cookies(self, directives: Iterable[SetCookie]) -> Response:
        """Append ready-made directives, keeping their order."""
        return replace(self, cookies=(*self.cookies, *directives))

    def without_cookie(
        self,
        name: str,
        *,
        path: str = "/",
        domain: str | None = None,
        secure: bool = False,
        httponly: bool = True,
        partitioned: bool = False,
    ) -> Response:
        """Append an expiry directive for *name*, whether or not it was sent.

        ``delete_cookie`` is the variant that only expires cookies the
        client actually holds.
        """
        directive = expired_cookie(
            name,
            path=path,
            domain=domain,
            secure=secure,
            httponly=httponly,
            partitioned=partitioned,
        )
        return self.with_cookies([directive])

    def header_pairs(self) -> list[tuple[str, str]]:
        """Headers as a host should emit them: one ``Set-Cookie`` per directive."""
        return [
            *self.headers,
            *(("Set-Cookie", directive.to_header_value()) for directive in self.cookies),
        ]

"""Cookie parsing and SetCookie serialization.

Consolidates the read side (``parse_cookie_pairs``, used by Request and
the cookie partitioner) and the write side (``SetCookie``, used by
Response) in one module.

Parsing is lenient: a segment without ``=`` or with an empty name is
dropped, never fatal. A header that is not cookie syntax at all yields
no pairs.
"""

import string
from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import format_datetime, parsedate_to_datetime

# Expiry used for deletion directives, alongside Max-Age=0
EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

# RFC 6265 §4.1.1: cookie-name is an HTTP token
_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")
# cookie-octet: visible US-ASCII except DQUOTE, comma, semicolon and backslash
_VALUE_CHARS = frozenset(chr(code) for code in range(0x21, 0x7F)) - frozenset('",;\\')
# Attribute values may hold any printable character except ";"
_ATTRIBUTE_CHARS = frozenset(chr(code) for code in range(0x20, 0x7F)) - frozenset(";")


def _describe(chars: set[str]) -> str:
    return ", ".join(repr(c) for c in sorted(chars))


def validate_cookie_name(name: str) -> None:
    """Raise ``ValueError`` unless *name* is a non-empty RFC 6265 token."""
    if not name:
        msg = "Cookie name must not be empty."
        raise ValueError(msg)
    invalid = set(name) - _NAME_CHARS
    if invalid:
        msg = (
            f"Cookie name {name!r} contains characters not allowed in a token: "
            f"{_describe(invalid)}"
        )
        raise ValueError(msg)


def validate_cookie_value(name: str, value: str) -> None:
    """Raise ``ValueError`` if *value* would break out of its ``Set-Cookie`` pair.

    The value itself is left out of the message; it may be a secret.
    """
    invalid = set(value) - _VALUE_CHARS
    if invalid:
        msg = (
            f"Value of cookie {name!r} contains characters not allowed in a cookie: "
            f"{_describe(invalid)}"
        )
        raise ValueError(msg)


def parse_cookie_pairs(header: str | None) -> list[tuple[str, str]]:
    """Parse a ``Cookie`` header value into ordered ``(name, value)`` pairs.

    Order is preserved and duplicate names are kept, so callers decide
    the merge policy. Returns an empty list for empty or missing headers.
    """
    if not header:
        return []
    pairs: list[tuple[str, str]] = []
    for segment in header.split(";"):
        name, sep, value = segment.partition("=")
        if not sep:
            continue
        name = name.strip()
        if not name:
            continue
        pairs.append((name, value.strip()))
    return pairs


def parse_cookies(header: str | None) -> dict[str, str]:
    """Parse a ``Cookie`` header value into a name-value dict.

    Later duplicates overwrite earlier ones.
    """
    return dict(parse_cookie_pairs(header))


@dataclass(frozen=True, slots=True)
class SetCookie:
    """A ``Set-Cookie`` directive attached to a Response.

    Validated on construction: a name or value that could smuggle extra
    attributes into the header raises ``ValueError``.
    """

    name: str
    value: str
    max_age: int | None = None
    expires: datetime | None = None
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = True
    samesite: str | None = "lax"
    partitioned: bool = False

    def __post_init__(self) -> None:
        validate_cookie_name(self.name)
        validate_cookie_value(self.name, self.value)
        attributes = (("Path", self.path), ("Domain", self.domain), ("SameSite", self.samesite))
        for label, attribute in attributes:
            if attribute and not set(attribute) <= _ATTRIBUTE_CHARS:
                msg = f"{label} of cookie {self.name!r} contains ';' or control characters"
                raise ValueError(msg)

    def to_header_value(self) -> str:
        """Serialize to a ``Set-Cookie`` header value string."""
        parts = [f"{self.name}={self.value}"]
        if self.max_age is not None:
            parts.append(f"Max-Age={self.max_age}")
        if self.expires is not None:
            parts.append(f"Expires={format_datetime(self.expires.astimezone(UTC), usegmt=True)}")
        if self.path:
            parts.append(f"Path={self.path}")
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.secure:
            parts.append("Secure")
        if self.httponly:
            parts.append("HttpOnly")
        if self.samesite:
            parts.append(f"SameSite={self.samesite}")
        if self.partitioned:
            parts.append("Partitioned")
        return "; ".join(parts)


def expired_cookie(
    name: str,
    *,
    path: str = "/",
    domain: str | None = None,
    secure: bool = False,
    httponly: bool = True,
    partitioned: bool = False,
) -> SetCookie:
    """Build a directive that makes the browser drop cookie *name*.

    Path and Domain must match the original cookie for the browser to
    apply the deletion.
    """
    return SetCookie(
        name=name,
        value="",
        max_age=0,
        expires=EPOCH,
        path=path,
        domain=domain,
        secure=secure,
        httponly=httponly,
        samesite=None,
        partitioned=partitioned,
    )


def parse_set_cookie(header_value: str) -> SetCookie:
    """Parse one ``Set-Cookie`` header value back into a ``SetCookie``.

    Attributes absent from the header take their "off" value (no path,
    no HttpOnly, no SameSite), so the result describes exactly what was
    sent. Unknown attributes are ignored.

    Raises:
        ValueError: If the first segment is not ``name=value``.
    """
    first, *attributes = header_value.split(";")
    name, sep, value = first.partition("=")
    name = name.strip()
    if not sep or not name:
        msg = f"Not a Set-Cookie value: {header_value!r}"
        raise ValueError(msg)

    fields: dict[str, object] = {
        "path": "",
        "httponly": False,
        "samesite": None,
    }
    for attribute in attributes:
        key, _, attr_value = attribute.strip().partition("=")
        match key.lower():
            case "max-age":
                fields["max_age"] = int(attr_value)
            case "expires":
                fields["expires"] = parsedate_to_datetime(attr_value)
            case "path":
                fields["path"] = attr_value
            case "domain":
                fields["domain"] = attr_value
            case "secure":
                fields["secure"] = True
            case "httponly":
                fields["httponly"] = True
            case "samesite":
                fields["samesite"] = attr_value
            case "partitioned":
                fields["partitioned"] = True
    return SetCookie(name=name, value=value.strip(), **fields)  # type: ignore[arg-type]

"""In-process client that keeps cookies between requests.

Runs a handler behind middleware exactly as a host would and plays the
browser's part for cookies: what one response sets, the next request
sends back.
"""

from collections.abc import Mapping

from tollhouse.http.request import Request
from tollhouse.http.response import Response
from tollhouse.middleware.protocol import Middleware, Next, chain
from tollhouse.testing.cookies import apply_set_cookies, cookie_header


class CookieClient:
    """Drive a middleware pipeline with a persistent cookie jar.

    Usage::

        client = CookieClient(handler, CookiesMiddleware(CookiesConfig(key=key)))
        await client.get("/login")
        assert "s.user" in client.jar
        response = await client.get("/whoami")

    ``jar`` is a plain dict of wire names to wire values; tests may
    edit it directly to forge or drop cookies.
    """

    __test__ = False  # Tell pytest this is not a test class
    __slots__ = ("_pipeline", "jar")

    def __init__(self, handler: Next, *middleware: Middleware) -> None:
        self._pipeline = chain(middleware, handler)
        self.jar: dict[str, str] = {}

    async def get(self, path: str = "/", *, headers: Mapping[str, str] | None = None) -> Response:
        """Send a GET request."""
        return await self.request("GET", path, headers=headers)

    async def post(self, path: str = "/", *, headers: Mapping[str, str] | None = None) -> Response:
        """Send a POST request."""
        return await self.request("POST", path, headers=headers)

    async def request(
        self,
        method: str,
        path: str = "/",
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Send the jar (plus any *headers*) through the pipeline and absorb the reply."""
        pairs = list((headers or {}).items())
        if self.jar:
            pairs.extend(cookie_header(self.jar).items())
        response = await self._pipeline(Request.build(method, path, headers=pairs))
        self.jar = apply_set_cookies(self.jar, response)
        return response

"""Middleware shape and composition.

A middleware takes the request and the rest of the pipeline::

    async def mw(request: Request, next: Next) -> Response: ...

Plain functions and objects with ``async __call__`` both qualify; the
shape is checked structurally, never through a base class.
"""

from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, TypeAlias

from tollhouse.http.request import Request
from tollhouse.http.response import Response

# The rest of the pipeline, as seen from inside a middleware
Next: TypeAlias = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Anything awaitable as ``middleware(request, next) -> Response``.

    ``CookiesMiddleware`` is one; a host's own middleware is another::

        async def no_cache(request: Request, next: Next) -> Response:
            return (await next(request)).with_header("Cache-Control", "no-store")
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...


def chain(middleware: Sequence[Middleware], handler: Next) -> Next:
    """Wrap *handler* so each middleware runs around it, first one outermost.

    ``chain([cookies, auth], handler)`` calls ``cookies``, which calls
    ``auth``, which calls ``handler``.
    """
    pipeline = handler
    for mw in reversed(middleware):

        async def step(request: Request, _mw: Middleware = mw, _next: Next = pipeline) -> Response:
            return await _mw(request, _next)

        pipeline = step
    return pipeline

"""Tests for tollhouse.middleware.protocol — composing middleware around a handler."""

import pytest

from tollhouse.http.request import Request
from tollhouse.http.response import Response
from tollhouse.middleware import Middleware, Next, chain


def _tagging(label: str, calls: list[str]) -> Middleware:
    async def mw(request: Request, next: Next) -> Response:
        calls.append(f"{label}:in")
        response = await next(request)
        calls.append(f"{label}:out")
        return response.with_header("X-Seen", label)

    return mw


class TestChain:
    async def test_empty_chain_is_handler(self) -> None:
        async def handler(request: Request) -> Response:
            return Response("plain")

        assert chain([], handler) is handler

    async def test_first_middleware_is_outermost(self) -> None:
        calls: list[str] = []

        async def handler(request: Request) -> Response:
            calls.append("handler")
            return Response()

        pipeline = chain([_tagging("a", calls), _tagging("b", calls)], handler)
        response = await pipeline(Request.build())

        assert calls == ["a:in", "b:in", "handler", "b:out", "a:out"]
        assert response.headers == (("X-Seen", "b"), ("X-Seen", "a"))

    async def test_short_circuit_skips_handler(self) -> None:
        async def handler(request: Request) -> Response:
            pytest.fail("handler should not run")

        async def deny(request: Request, next: Next) -> Response:
            return Response("denied", 403)

        response = await chain([deny], handler)(Request.build())
        assert response == Response("denied", 403)

    async def test_request_passed_along(self) -> None:
        seen: list[str] = []

        async def handler(request: Request) -> Response:
            seen.append(request.path)
            return Response()

        async def rewrite(request: Request, next: Next) -> Response:
            return await next(Request.build(request.method, "/rewritten"))

        await chain([rewrite], handler)(Request.build(path="/original"))
        assert seen == ["/rewritten"]

    async def test_pipeline_reusable(self) -> None:
        async def handler(request: Request) -> Response:
            return Response(request.path)

        pipeline = chain([_tagging("a", [])], handler)
        first = await pipeline(Request.build(path="/one"))
        second = await pipeline(Request.build(path="/two"))
        assert (first.body, second.body) == ("/one", "/two")

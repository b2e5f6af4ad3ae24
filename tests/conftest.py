from __future__ import annotations

import httpx
import pytest
from fastapi import FastAPI, Request, Response


def make_target():
    """Small HTTP target. Returns the app and the list of requests it saw."""
    app = FastAPI()
    seen: list[dict] = []
    state = {"flaky": 0}

    @app.api_route("/ok", methods=["GET", "POST", "PUT", "DELETE"])
    async def ok(request: Request):
        seen.append(
            {
                "method": request.method,
                "authorization": request.headers.get("authorization"),
                "body": await request.body(),
            }
        )
        return {"ok": True}

    @app.get("/flaky")
    def flaky():
        state["flaky"] += 1
        seen.append({"method": "GET"})
        code = 200 if state["flaky"] % 2 else 500
        return Response(status_code=code)

    return app, seen


@pytest.fixture
def target():
    return make_target()


@pytest.fixture
def asgi_client(target):
    app, _ = target

    def factory() -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.ASGITransport(app=app))

    return factory

"""
Public redirect routes.

Catch-all routing: any path not claimed by another router is handed to
the active redirect handler chain, whatever the request method.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool
from starlette.types import Receive, Scope, Send

from redirector.api.deps import get_active_handler


class RedirectEndpoint:
    """
    ASGI endpoint dispatching to the handler chain.

    A plain ASGI app rather than a decorated function, so the route carries
    no method filter and unknown verbs reach the chain instead of a 405.
    """

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        handler = get_active_handler(request)
        # Handlers are synchronous and may query the database.
        response = await run_in_threadpool(handler, request)
        await response(scope, receive, send)


router = APIRouter()
router.add_route("/{path:path}", RedirectEndpoint(), include_in_schema=False)

"""
Wanderlust Backend — Method Override Middleware
=================================================

What:  Lets HTML forms issue PUT, PATCH and DELETE requests.
Why:   Browsers only submit GET and POST. The edit form and the delete
       buttons POST with a hidden `_method` field naming the real verb.
How:   For POST requests only, the override is read from (first match wins):
           1. the X-HTTP-Method-Override header
           2. the `_method` query parameter
           3. the `_method` field of a URL-encoded body
       A recognized value rewrites scope["method"] before routing. The body
       is buffered to read the field and then replayed unchanged, so the
       route handler still receives the full form.

This is a plain ASGI middleware rather than a BaseHTTPMiddleware: it has to
change the method seen by the router and hand the consumed body back.
"""

import logging
from typing import Optional
from urllib.parse import parse_qsl

from starlette.datastructures import Headers, QueryParams
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from wanderlust.config import settings

logger = logging.getLogger(__name__)

OVERRIDABLE_METHODS = {"PUT", "PATCH", "DELETE"}


class MethodOverrideMiddleware:

    def __init__(self, app: ASGIApp, field: Optional[str] = None) -> None:
        self.app = app
        self.field = field or settings.method_override_field

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] != "POST":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        override = headers.get("x-http-method-override")
        if not override:
            override = QueryParams(scope.get("query_string", b"")).get(self.field)

        if not override and headers.get("content-type", "").startswith(
            "application/x-www-form-urlencoded"
        ):
            body = await self._read_body(receive)
            receive = self._replay(body, receive)
            fields = dict(parse_qsl(body.decode("latin-1"), keep_blank_values=True))
            override = fields.get(self.field)

        if override:
            method = override.strip().upper()
            if method in OVERRIDABLE_METHODS:
                logger.debug("Method override: POST → %s %s", method, scope["path"])
                scope = dict(scope, method=method)
            else:
                logger.warning("Ignoring unsupported method override %r", override)

        await self.app(scope, receive, send)

    @staticmethod
    async def _read_body(receive: Receive) -> bytes:
        chunks = []
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                break
            chunks.append(message.get("body", b""))
            more_body = message.get("more_body", False)
        return b"".join(chunks)

    @staticmethod
    def _replay(body: bytes, receive: Receive) -> Receive:
        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        return replay

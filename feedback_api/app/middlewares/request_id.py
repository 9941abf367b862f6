"""Per-request context shared with the log filter.

``request_id_ctx`` is set for every request. ``tenant_ctx`` starts empty and
is filled by the tenant dependency once ``X-Org-Id`` has been resolved to an
organization id, so engine log lines carry the tenant without threading it
through every call.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
tenant_ctx: ContextVar[str | None] = ContextVar("tenant", default=None)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Assign a request id and start each request without a tenant."""

    async def dispatch(self, request: Request, call_next):
        req_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        rid_token = request_id_ctx.set(req_id)
        tenant_token = tenant_ctx.set(None)
        request.state.request_id = req_id
        try:
            response = await call_next(request)
        finally:
            tenant_ctx.reset(tenant_token)
            request_id_ctx.reset(rid_token)
        response.headers["X-Request-ID"] = req_id
        return response

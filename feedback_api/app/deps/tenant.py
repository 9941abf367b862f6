"""Dependency helpers for tenant resolution.

The organization is taken from the ``X-Org-Id`` header (id or code) and
verified against the store; it is never read from query or body.
"""

from __future__ import annotations

import re
from dataclasses import asdict

from fastapi import Depends, Header, HTTPException, Request

from ..db.store import FeedbackStore
from ..domain.records import OrgRecord
from ..middlewares.request_id import tenant_ctx
from ..utils.ttl_cache import NullCache, TTLCache

ORG_KEY_RE = re.compile(r"^[A-Za-z0-9_-]{2,64}$")


def get_store(request: Request) -> FeedbackStore:
    return request.app.state.store


def get_org_cache(request: Request) -> TTLCache:
    return getattr(request.app.state, "org_cache", None) or NullCache()


async def resolve_org(
    store: FeedbackStore, cache: TTLCache, key: str
) -> OrgRecord | None:
    """Look up an organization by id or code, memoized in ``cache``."""
    cached = await cache.get(f"o:{key}")
    if cached is not None:
        return OrgRecord(**cached)
    org = await store.get_organization(key)
    if org is not None:
        await cache.set(f"o:{key}", asdict(org))
    return org


async def get_org_id(
    x_org_id: str | None = Header(default=None),
    store: FeedbackStore = Depends(get_store),
    cache: TTLCache = Depends(get_org_cache),
) -> str:
    """Return the resolved organization id and record it as the log tenant.

    Raises:
        HTTPException: 400 for a missing or malformed header, 404 for an
            unknown organization, 403 for an inactive one.
    """
    key = (x_org_id or "").strip()
    if not key:
        raise HTTPException(400, "Missing X-Org-Id")
    if not ORG_KEY_RE.match(key):
        raise HTTPException(400, "Invalid X-Org-Id")
    org = await resolve_org(store, cache, key)
    if org is None:
        raise HTTPException(404, "Organization not found")
    if not org.is_active:
        raise HTTPException(403, "Organization inactive")
    tenant_ctx.set(org.id)
    return org.id

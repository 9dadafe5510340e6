"""HTTP boundary - JSON endpoints for claiming and redeeming codes."""

from __future__ import annotations

import logging

from aiohttp import web

from agt_claim.errors import ClaimError
from agt_claim.service import ClaimService

log = logging.getLogger(__name__)

SERVICE_KEY = web.AppKey("service", ClaimService)
TRUST_PROXY_KEY = web.AppKey("trust_proxy", bool)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def client_identity(request: web.Request, trust_proxy: bool = False) -> str:
    """Key used for rate limiting: the peer address, or the first
    X-Forwarded-For hop when running behind a trusted proxy."""
    if trust_proxy:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.remote or "unknown"


async def _read_body(request: web.Request) -> dict:
    """Parse a JSON object body; anything else is treated as empty."""
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


# ── Middleware ─────────────────────────────────────────


@web.middleware
async def headers_middleware(request: web.Request, handler) -> web.StreamResponse:
    if request.method == "OPTIONS":
        return web.Response(status=204, headers={**SECURITY_HEADERS, **CORS_HEADERS})
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        # Router 404/405 responses are raised, not returned
        exc.headers.update(SECURITY_HEADERS)
        exc.headers.update(CORS_HEADERS)
        raise
    response.headers.update(SECURITY_HEADERS)
    response.headers.update(CORS_HEADERS)
    return response


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    try:
        return await handler(request)
    except ClaimError as exc:
        return web.json_response(exc.to_json(), status=exc.status)
    except web.HTTPException:
        raise
    except Exception:
        log.exception("Unhandled error on %s %s", request.method, request.path)
        return web.json_response({"error": "internal_error"}, status=500)


# ── Handlers ───────────────────────────────────────────


async def handle_claim(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    body = await _read_body(request)
    client = client_identity(request, request.app[TRUST_PROXY_KEY])
    issued = await service.request_claim(body.get("address"), client)
    return web.json_response(issued.to_json())


async def handle_redeem(request: web.Request) -> web.Response:
    service = request.app[SERVICE_KEY]
    body = await _read_body(request)
    redemption = await service.redeem(body.get("code"))
    return web.json_response(redemption.to_json())


async def handle_health(request: web.Request) -> web.Response:
    return web.json_response({"ok": True})


def build_app(service: ClaimService, trust_proxy: bool = False) -> web.Application:
    """Build the aiohttp application around a ClaimService."""
    app = web.Application(middlewares=[headers_middleware, error_middleware])
    app[SERVICE_KEY] = service
    app[TRUST_PROXY_KEY] = trust_proxy
    for prefix in ("/api", ""):
        app.router.add_post(f"{prefix}/claim", handle_claim)
        app.router.add_post(f"{prefix}/redeem", handle_redeem)
        app.router.add_get(f"{prefix}/health", handle_health)
    return app

from __future__ import annotations

import base64
from typing import TYPE_CHECKING

from litestar import Litestar, Request, Response, get
from litestar.config.cors import CORSConfig
from litestar.handlers import asgi
from litestar.plugins.prometheus import PrometheusConfig, PrometheusController

from .models import AppConfig, AssetRequest
from .proxy import AssetProxy
from .settings import load_proxy_settings_from_env, load_storage_settings_from_env

if TYPE_CHECKING:
    from litestar.types import Message, Receive, Scope, Send

    from .models import NormalizedResponse
    from .settings import ProxySettings


prometheus_config = PrometheusConfig(app_name="asset_proxy", prefix="asset_proxy")


def build_asset_request(
    path: str, validator: str | None, settings: ProxySettings
) -> AssetRequest:
    """Map a URL path onto a direct proxy fetch or a captured request."""
    trimmed = path.strip("/")
    config = AppConfig(spa=settings.spa)
    prefix = f"{settings.static_prefix}/"
    if settings.static_prefix and trimmed.startswith(prefix):
        return AssetRequest(
            bucket=settings.bucket,
            key=trimmed[len(prefix) :],
            validator=validator,
            is_proxy=True,
            config=config,
        )

    return AssetRequest(
        bucket=settings.bucket,
        key=trimmed,
        validator=validator,
        is_proxy=False,
        config=config,
    )


def to_litestar_response(normalized: NormalizedResponse) -> Response:
    if normalized.is_base64_encoded:
        content = base64.b64decode(normalized.body)
    else:
        content = normalized.body.encode("utf-8")
    headers = dict(normalized.headers)
    media_type = headers.pop("Content-Type", "text/plain")
    return Response(
        content=content,
        status_code=normalized.status_code,
        headers=headers,
        media_type=media_type,
    )


def without_body(send: Send) -> Send:
    """Wrap ``send`` so headers, including Content-Length, go out but no body."""

    async def send_headers_only(message: Message) -> None:
        if message["type"] == "http.response.body":
            message = {**message, "body": b"", "more_body": False}
        await send(message)

    return send_headers_only


def create_app(
    proxy: AssetProxy | None = None, settings: ProxySettings | None = None
) -> Litestar:
    """Create the asset proxy ASGI application."""
    settings = settings or load_proxy_settings_from_env()
    proxy = proxy or AssetProxy.from_settings(
        settings, load_storage_settings_from_env()
    )

    @get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @asgi(path="/", is_mount=True, copy_scope=True)
    async def asset_handler(scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope=scope, receive=receive)
        if request.method not in {"GET", "HEAD"}:
            response = Response(
                content="Method Not Allowed",
                status_code=405,
                headers={"Allow": "GET, HEAD"},
                media_type="text/plain",
            )
        else:
            path = scope.get("path", "/")
            if not path.startswith("/"):
                path = f"/{path}"
            if path != "/" and path.endswith("/"):
                path = path.rstrip("/") or "/"
            asset_request = build_asset_request(
                path,
                request.headers.get("if-none-match"),
                settings,
            )
            normalized = await proxy.read(asset_request)
            response = to_litestar_response(normalized)
            if request.method == "HEAD":
                send = without_body(send)
        asgi_response = response.to_asgi_response(None, request)
        await asgi_response(scope, receive, send)

    cors_config = CORSConfig(
        allow_origins=["*"],
        allow_methods=["GET", "HEAD"],
        allow_headers=["*"],
        expose_headers=["ETag"],
    )

    return Litestar(
        route_handlers=[health, asset_handler, PrometheusController],
        cors_config=cors_config,
        middleware=[prometheus_config.middleware],
    )


app = create_app()

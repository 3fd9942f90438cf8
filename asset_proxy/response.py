from __future__ import annotations

import base64
from typing import TYPE_CHECKING, assert_never

from .content_types import is_dynamic_type, is_text_type
from .models import (
    NormalizedResponse,
    NotFound,
    NotModified,
    OriginError,
    OriginOutcome,
    Success,
)
from .rewrite import maybe_rewrite

if TYPE_CHECKING:
    from .manifest import Manifest
    from .models import AssetRequest

NO_CACHE = "no-cache, no-store, must-revalidate, max-age=0, s-maxage=0"
DEFAULT_CACHE = "max-age=86400"
ERROR_CONTENT_TYPE = "text/plain; charset=utf-8"


def cache_control_for(content_type: str) -> str:
    return NO_CACHE if is_dynamic_type(content_type) else DEFAULT_CACHE


def normalize(
    request: AssetRequest, outcome: OriginOutcome, manifest: Manifest
) -> NormalizedResponse:
    """Turn an origin outcome into the response handed back to callers."""
    match outcome:
        case NotModified():
            headers = {"ETag": request.validator} if request.validator else {}
            return NormalizedResponse(status_code=304, headers=headers)
        case NotFound(detail=detail):
            return NormalizedResponse(
                status_code=404,
                headers={"Content-Type": ERROR_CONTENT_TYPE},
                body=f"Not Found: {detail}",
            )
        case OriginError(detail=detail):
            return NormalizedResponse(
                status_code=500,
                headers={"Content-Type": ERROR_CONTENT_TYPE},
                body=f"Internal Server Error: {detail}",
            )
        case Success():
            return _success(request, maybe_rewrite(outcome, request, manifest))
        case _:
            assert_never(outcome)


def _success(request: AssetRequest, outcome: Success) -> NormalizedResponse:
    headers = {"Content-Type": outcome.content_type}
    if outcome.etag:
        headers["ETag"] = outcome.etag
    headers["Cache-Control"] = cache_control_for(outcome.content_type)

    # Captured text documents go out as-is; everything else is base64.
    if not request.is_proxy and is_text_type(outcome.content_type):
        try:
            text = outcome.body.decode("utf-8")
        except UnicodeDecodeError:
            pass
        else:
            return NormalizedResponse(
                status_code=200, headers=headers, body=text, is_base64_encoded=False
            )

    return NormalizedResponse(
        status_code=200,
        headers=headers,
        body=base64.b64encode(outcome.body).decode("ascii"),
        is_base64_encoded=True,
    )

"""Serve assets from a local directory during development and testing."""

from __future__ import annotations

import hashlib
import logging
import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING

from ._threads import run_sync
from .content_types import DEFAULT_CONTENT_TYPE
from .manifest import Manifest
from .models import NotFound, NotModified, OriginError, OriginOutcome, Success
from .response import normalize

if TYPE_CHECKING:
    from .models import AssetRequest, NormalizedResponse

LOG = logging.getLogger("asset_proxy.sandbox")


def _etag(body: bytes) -> str:
    return f'"{hashlib.md5(body, usedforsecurity=False).hexdigest()}"'


class LocalOriginReader:
    """Origin reader backed by files under ``root``; buckets are ignored."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def _locate(self, key: str) -> Path | None:
        root = self._root.resolve()
        candidate = (root / key.lstrip("/")).resolve()
        if candidate != root and root not in candidate.parents:
            return None
        return candidate

    async def read(
        self, bucket: str, key: str, validator: str | None = None
    ) -> OriginOutcome:
        path = self._locate(key)
        if path is None:
            LOG.warning("rejected sandbox key outside of %s: %s", self._root, key)
            return NotFound(detail=f"NoSuchKey: {key}")

        try:
            body = await run_sync(path.read_bytes)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            LOG.debug("sandbox miss for %s", path)
            return NotFound(detail=f"NoSuchKey: {key}")
        except OSError as error:
            LOG.warning("sandbox read failed for %s: %s", path, error)
            return OriginError(detail=f"{type(error).__name__}: {error}")

        etag = _etag(body)
        if validator and validator.strip('"') == etag.strip('"'):
            return NotModified()

        content_type, _ = mimetypes.guess_type(path.name)
        return Success(
            content_type=content_type or DEFAULT_CONTENT_TYPE,
            etag=etag,
            body=body,
        )


class SandboxReader:
    """Complete stand-in for the live pipeline.

    Keys are read as requested and asset directives resolve to their logical
    paths, since local files are never fingerprinted.
    """

    def __init__(self, origin: LocalOriginReader) -> None:
        self._origin = origin
        self._manifest = Manifest.empty()

    @classmethod
    def from_root(cls, root: str | Path) -> SandboxReader:
        return cls(LocalOriginReader(root))

    async def read(self, request: AssetRequest) -> NormalizedResponse:
        LOG.debug("sandbox read key=%s", request.logical_key)
        outcome = await self._origin.read(
            request.bucket, request.logical_key, request.validator
        )
        return normalize(request, outcome, self._manifest)

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from .manifest import Manifest, load_manifest
from .origin import S3OriginReader, build_s3_client
from .response import normalize
from .sandbox import SandboxReader
from .settings import load_proxy_settings_from_env, load_storage_settings_from_env

if TYPE_CHECKING:
    from .models import AssetRequest, NormalizedResponse, OriginOutcome
    from .settings import Mode, ProxySettings, StorageSettings

LOG = logging.getLogger("asset_proxy.proxy")


class OriginReader(Protocol):
    async def read(
        self, bucket: str, key: str, validator: str | None = None
    ) -> OriginOutcome: ...


class Sandbox(Protocol):
    async def read(self, request: AssetRequest) -> NormalizedResponse: ...


class AssetProxy:
    """Read-through proxy resolving fingerprinted assets from an origin store."""

    def __init__(
        self,
        origin: OriginReader,
        manifest: Manifest,
        sandbox: Sandbox,
        mode: Mode = "live",
    ):
        self._origin = origin
        self._manifest = manifest
        self._sandbox = sandbox
        self._mode = mode

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def manifest(self) -> Manifest:
        return self._manifest

    async def read(self, request: AssetRequest) -> NormalizedResponse:
        if self._mode == "sandbox":
            LOG.debug("sandbox mode, reading %s locally", request.key)
            return await self._sandbox.read(request)

        key = self.resolve_key(request)
        LOG.debug(
            "read s3://%s/%s (requested=%s proxy=%s)",
            request.bucket,
            key,
            request.key,
            request.is_proxy,
        )
        outcome = await self._origin.read(request.bucket, key, request.validator)
        return normalize(request, outcome, self._manifest)

    def resolve_key(self, request: AssetRequest) -> str:
        """Captured requests go through the manifest; proxy fetches do not."""
        if request.is_proxy:
            return request.logical_key
        return self._manifest.resolve(request.logical_key)

    @classmethod
    def from_settings(
        cls, settings: ProxySettings, storage: StorageSettings
    ) -> AssetProxy:
        manifest = load_manifest(settings.manifest_path)
        mode = settings.mode or "live"
        proxy = cls(
            origin=S3OriginReader(build_s3_client(storage)),
            manifest=manifest,
            sandbox=SandboxReader.from_root(settings.sandbox_root),
            mode=mode,
        )
        LOG.info(
            "asset proxy ready (mode=%s, endpoint=%s, manifest=%d entries)",
            mode,
            storage.endpoint or "aws",
            len(manifest),
        )
        return proxy

    @classmethod
    def from_env(cls) -> AssetProxy:
        """Create an AssetProxy instance from environment variables.

        Returns:
            AssetProxy configured from environment variables.

        Raises:
            ManifestLoadError: if a manifest file exists but is invalid.
        """
        return cls.from_settings(
            load_proxy_settings_from_env(), load_storage_settings_from_env()
        )

"""Read-through proxy for fingerprinted static assets in S3."""

from .manifest import Manifest, ManifestLoadError, load_manifest
from .models import (
    AppConfig,
    AssetRequest,
    NormalizedResponse,
    NotFound,
    NotModified,
    OriginError,
    OriginOutcome,
    Success,
)
from .proxy import AssetProxy
from .sandbox import LocalOriginReader, SandboxReader
from .session import SessionStore
from .settings import ProxySettings, StorageSettings

__all__ = [
    "AppConfig",
    "AssetProxy",
    "AssetRequest",
    "LocalOriginReader",
    "Manifest",
    "ManifestLoadError",
    "NormalizedResponse",
    "NotFound",
    "NotModified",
    "OriginError",
    "OriginOutcome",
    "ProxySettings",
    "SandboxReader",
    "SessionStore",
    "StorageSettings",
    "Success",
    "load_manifest",
]

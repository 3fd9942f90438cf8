from __future__ import annotations

from dataclasses import dataclass, field
from posixpath import splitext
from typing import Any, TypeAlias


INDEX_KEY = "index.html"


@dataclass(frozen=True, slots=True)
class AppConfig:
    spa: bool = False


@dataclass(frozen=True, slots=True)
class AssetRequest:
    """A single read against the asset store.

    ``is_proxy`` marks a direct static fetch whose key is used verbatim.
    Otherwise the request is *captured* (an entry page, for example): its key
    is resolved through the manifest and text bodies are returned unencoded.
    """

    bucket: str
    key: str
    validator: str | None = None
    is_proxy: bool = True
    config: AppConfig = field(default_factory=AppConfig)

    @property
    def logical_key(self) -> str:
        """The asset path this request asks for, before fingerprinting.

        Captured requests for the root, or for extension-less routes of a
        single-page app, are served the index document.
        """
        if self.is_proxy:
            return self.key
        key = self.key.strip("/")
        if not key or (self.config.spa and not splitext(key)[1]):
            return INDEX_KEY
        return key


@dataclass(frozen=True, slots=True)
class Success:
    content_type: str
    etag: str
    body: bytes


@dataclass(frozen=True, slots=True)
class NotModified:
    pass


@dataclass(frozen=True, slots=True)
class NotFound:
    detail: str


@dataclass(frozen=True, slots=True)
class OriginError:
    detail: str


OriginOutcome: TypeAlias = Success | NotModified | NotFound | OriginError


@dataclass(frozen=True, slots=True)
class NormalizedResponse:
    status_code: int
    headers: dict[str, str]
    body: str = ""
    is_base64_encoded: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return the response in its wire shape."""
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers),
            "body": self.body,
            "isBase64Encoded": self.is_base64_encoded,
        }

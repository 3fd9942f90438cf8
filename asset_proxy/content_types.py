from __future__ import annotations

_TEXT_TYPES = frozenset(
    {
        "application/ecmascript",
        "application/javascript",
        "application/json",
        "application/ld+json",
        "application/manifest+json",
        "application/x-javascript",
        "application/xhtml+xml",
        "application/xml",
    }
)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def media_type(content_type: str | None) -> str:
    """Return the bare, lower-cased media type without parameters."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def is_text_type(content_type: str | None) -> bool:
    """Whether template directives can appear in bodies of this type."""
    media = media_type(content_type)
    if not media:
        return False
    if media.startswith("text/") or media in _TEXT_TYPES:
        return True
    return media.startswith("application/") and media.endswith(("+json", "+xml"))


def is_dynamic_type(content_type: str | None) -> bool:
    """HTML and JSON documents are served with an anti-cache policy."""
    media = media_type(content_type)
    return media in {"text/html", "application/xhtml+xml"} or (
        media.endswith("/json") or media.endswith("+json")
    )

"""Build-time manifest mapping logical asset paths to fingerprinted keys."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from pydantic import TypeAdapter, ValidationError

from .content_types import is_text_type

LOG = logging.getLogger("asset_proxy.manifest")

_MANIFEST_ADAPTER = TypeAdapter(dict[str, str])

# ${STATIC('path')} and ${arc.static('path')}
_DIRECTIVE_RE = re.compile(
    r"\$\{\s*(?:STATIC|arc\.static)\(\s*"
    r"(?P<quote>['\"`])(?P<path>[^'\"`]*)(?P=quote)"
    r"\s*\)\s*\}"
)


class ManifestLoadError(Exception):
    """Raised when a manifest file exists but cannot be used."""


class Manifest(Mapping[str, str]):
    """Read-only mapping from logical asset path to storage key.

    An empty manifest resolves every path to itself.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._entries = MappingProxyType(dict(entries or {}))

    @classmethod
    def empty(cls) -> Manifest:
        return cls()

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Manifest({len(self._entries)} entries)"

    def resolve(self, logical_path: str) -> str:
        """Return the fingerprinted key for ``logical_path``.

        Paths the manifest does not track resolve to themselves so the
        un-fingerprinted object is read instead.
        """
        resolved = self._entries.get(logical_path)
        if resolved is None:
            return logical_path
        return resolved

    def interpolate(self, text: str, content_type: str | None) -> str:
        """Replace asset directives in ``text`` with their resolved keys.

        Both ``${STATIC('path')}`` and ``${arc.static('path')}`` are
        recognised. Non-text content types are returned unchanged.
        """
        if not is_text_type(content_type):
            return text
        return _DIRECTIVE_RE.sub(lambda match: self.resolve(match["path"]), text)


def load_manifest(path: str | Path) -> Manifest:
    """Load the manifest at ``path``.

    A missing file yields an empty manifest. A file that cannot be read or
    parsed raises :class:`ManifestLoadError`.
    """
    manifest_path = Path(path)
    if not manifest_path.is_file():
        LOG.info("no asset manifest at %s, using identity mapping", manifest_path)
        return Manifest.empty()

    try:
        raw = manifest_path.read_bytes()
    except OSError as error:
        msg = f"unable to read asset manifest {manifest_path}: {error}"
        raise ManifestLoadError(msg) from error

    try:
        entries = _MANIFEST_ADAPTER.validate_json(raw)
    except ValidationError as error:
        msg = f"invalid asset manifest {manifest_path}: {error}"
        raise ManifestLoadError(msg) from error

    LOG.info("loaded asset manifest %s (%d entries)", manifest_path, len(entries))
    return Manifest(entries)

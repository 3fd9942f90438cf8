from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

if TYPE_CHECKING:
    from collections.abc import Callable, Generator
    from pathlib import Path

FILE_CONTENTS = b"this is just some file contents\n"

STATIC_MANIFEST = {
    "images/this-is-fine.gif": "images/this-is-fine-a1c3e5.gif",
    "images/hold-onto-your-butts.gif": "images/hold-onto-your-butts-b2d4f6.gif",
    "app.js": "app-a1c3e5.js",
    "index.html": "index-b2d4f6.html",
}

TEMPLATED_CONTENTS = (
    "this is just some file contents with an image "
    "<img src=${STATIC('images/this-is-fine.gif')}>\n"
    " and another image <img src=${arc.static('images/hold-onto-your-butts.gif')}>"
    " among other things \n"
)

_PROXY_ENV_PREFIXES = ("ASSET_PROXY_",)


def make_client_error(code: str, message: str, operation: str = "GetObject") -> ClientError:
    status = int(code) if code.isdigit() else 400
    return ClientError(
        {
            "Error": {"Code": code, "Message": message},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


def make_s3_client(
    content_type: str = "image/gif",
    body: bytes = FILE_CONTENTS,
    etag: str = "etagvalue",
    error: Exception | None = None,
) -> MagicMock:
    client = MagicMock()
    if error is not None:
        client.get_object.side_effect = error
        return client
    stream = MagicMock()
    stream.read.return_value = body
    client.get_object.return_value = {
        "ContentType": content_type,
        "ETag": etag,
        "Body": stream,
    }
    return client


@pytest.fixture
def s3_client_factory() -> Callable[..., MagicMock]:
    return make_s3_client


@pytest.fixture
def manifest_file(tmp_path: Path) -> Path:
    path = tmp_path / "static.json"
    path.write_text(json.dumps(STATIC_MANIFEST))
    return path


@pytest.fixture
def clean_env() -> Generator[None]:
    """Remove asset proxy variables for the duration of a test."""
    original = {
        key: value
        for key, value in os.environ.items()
        if key.startswith(_PROXY_ENV_PREFIXES)
    }
    for key in original:
        os.environ.pop(key)

    yield

    for key in [k for k in os.environ if k.startswith(_PROXY_ENV_PREFIXES)]:
        os.environ.pop(key)
    os.environ.update(original)


@pytest.fixture
def set_env(clean_env) -> Callable[[dict[str, str]], None]:
    """Set environment variables; ``clean_env`` restores them afterwards."""

    def apply(values: dict[str, str]) -> None:
        os.environ.update(values)

    return apply

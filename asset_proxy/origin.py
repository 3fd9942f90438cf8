from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Any

from boto3.session import Session
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from ._threads import run_sync
from .content_types import DEFAULT_CONTENT_TYPE
from .models import NotFound, NotModified, OriginError, OriginOutcome, Success

if TYPE_CHECKING:
    from .settings import StorageSettings

LOG = logging.getLogger("asset_proxy.origin")

NOT_MODIFIED_CODES = frozenset({"304", "NotModified"})
NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound", "NoSuchBucket"})


def build_s3_client(settings: StorageSettings):
    session = Session(
        aws_access_key_id=settings.access_key,
        aws_secret_access_key=settings.secret_key,
        aws_session_token=settings.session_token,
        region_name=settings.region,
    )
    return session.client(
        "s3",
        endpoint_url=settings.endpoint,
        config=BotoConfig(
            signature_version="s3v4",
            retries={"max_attempts": 1},
            s3={"addressing_style": settings.addressing_style},
        ),
    )


def describe_error(error: Exception) -> str:
    """Build a human-readable detail string for an origin failure."""
    if isinstance(error, ClientError):
        info = error.response.get("Error", {})
        code = info.get("Code") or type(error).__name__
        message = info.get("Message") or str(error)
        return f"{code}: {message}"
    return f"{type(error).__name__}: {error}"


def classify_client_error(error: ClientError) -> OriginOutcome:
    code = str(error.response.get("Error", {}).get("Code", ""))
    if code in NOT_MODIFIED_CODES:
        return NotModified()
    if code in NOT_FOUND_CODES:
        return NotFound(detail=describe_error(error))
    return OriginError(detail=describe_error(error))


class S3OriginReader:
    """Conditional reads against an S3-compatible object store."""

    def __init__(self, client: Any) -> None:
        self._client = client

    async def read(
        self, bucket: str, key: str, validator: str | None = None
    ) -> OriginOutcome:
        get_kwargs = {"Bucket": bucket, "Key": key}
        if validator:
            get_kwargs["IfNoneMatch"] = validator

        try:
            result = await run_sync(partial(self._client.get_object, **get_kwargs))
            stream = result["Body"]
            try:
                body = await run_sync(stream.read)
            finally:
                await run_sync(stream.close)
        except ClientError as error:
            outcome = classify_client_error(error)
            if isinstance(outcome, OriginError):
                LOG.warning("origin error for s3://%s/%s: %s", bucket, key, error)
            else:
                LOG.debug(
                    "%s for s3://%s/%s", type(outcome).__name__, bucket, key
                )
            return outcome
        except BotoCoreError as error:
            LOG.warning("origin failure for s3://%s/%s: %s", bucket, key, error)
            return OriginError(detail=describe_error(error))

        LOG.debug("read s3://%s/%s (%d bytes)", bucket, key, len(body))
        return Success(
            content_type=result.get("ContentType") or DEFAULT_CONTENT_TYPE,
            etag=result.get("ETag") or "",
            body=body,
        )

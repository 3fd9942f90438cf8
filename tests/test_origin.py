"""Tests for conditional reads against the S3 origin."""

from __future__ import annotations

import logging

import pytest
from asset_proxy import NotFound, NotModified, OriginError, Success
from asset_proxy.origin import S3OriginReader, classify_client_error, describe_error
from botocore.exceptions import EndpointConnectionError

from conftest import FILE_CONTENTS, make_client_error, make_s3_client


class TestClassifyClientError:
    @pytest.mark.parametrize("code", ["304", "NotModified"])
    def test_not_modified(self, code):
        assert classify_client_error(make_client_error(code, "Not Modified")) == NotModified()

    @pytest.mark.parametrize("code", ["404", "NoSuchKey", "NotFound", "NoSuchBucket"])
    def test_not_found(self, code):
        outcome = classify_client_error(make_client_error(code, "missing"))
        assert isinstance(outcome, NotFound)
        assert code in outcome.detail

    def test_anything_else_is_origin_error(self):
        outcome = classify_client_error(make_client_error("AccessDenied", "Forbidden"))
        assert outcome == OriginError(detail="AccessDenied: Forbidden")

    def test_describe_non_client_error(self):
        error = EndpointConnectionError(endpoint_url="http://nowhere")
        assert describe_error(error).startswith("EndpointConnectionError: ")


class TestS3OriginReader:
    @pytest.mark.anyio
    async def test_success(self):
        client = make_s3_client()
        reader = S3OriginReader(client)

        outcome = await reader.read("a-bucket", "this-is-fine.gif", "abc123")

        assert outcome == Success(
            content_type="image/gif", etag="etagvalue", body=FILE_CONTENTS
        )
        client.get_object.assert_called_once_with(
            Bucket="a-bucket", Key="this-is-fine.gif", IfNoneMatch="abc123"
        )
        client.get_object.return_value["Body"].close.assert_called_once()

    @pytest.mark.anyio
    async def test_no_validator_omits_if_none_match(self):
        client = make_s3_client()
        await S3OriginReader(client).read("a-bucket", "app.js")
        client.get_object.assert_called_once_with(Bucket="a-bucket", Key="app.js")

    @pytest.mark.anyio
    async def test_missing_content_type_defaults(self):
        client = make_s3_client()
        del client.get_object.return_value["ContentType"]
        outcome = await S3OriginReader(client).read("a-bucket", "blob")
        assert isinstance(outcome, Success)
        assert outcome.content_type == "application/octet-stream"

    @pytest.mark.anyio
    async def test_not_modified(self):
        client = make_s3_client(error=make_client_error("304", "Not Modified"))
        outcome = await S3OriginReader(client).read("a-bucket", "key", "abc123")
        assert outcome == NotModified()

    @pytest.mark.anyio
    async def test_not_found(self):
        client = make_s3_client(
            error=make_client_error("NoSuchKey", "The specified key does not exist.")
        )
        outcome = await S3OriginReader(client).read("a-bucket", "key")
        assert outcome == NotFound(
            detail="NoSuchKey: The specified key does not exist."
        )

    @pytest.mark.anyio
    async def test_client_error_is_logged(self, caplog):
        client = make_s3_client(error=make_client_error("boom", "boom"))
        with caplog.at_level(logging.WARNING, logger="asset_proxy.origin"):
            outcome = await S3OriginReader(client).read("a-bucket", "key")

        assert outcome == OriginError(detail="boom: boom")
        assert any("origin error" in r.message for r in caplog.records)

    @pytest.mark.anyio
    async def test_transport_error(self):
        client = make_s3_client(
            error=EndpointConnectionError(endpoint_url="http://nowhere")
        )
        outcome = await S3OriginReader(client).read("a-bucket", "key")
        assert isinstance(outcome, OriginError)
        assert "EndpointConnectionError" in outcome.detail

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Any

from boto3.session import Session

from ._threads import run_sync

if TYPE_CHECKING:
    from .settings import StorageSettings

LOG = logging.getLogger("asset_proxy.session")

SESSION_KEY = "_idx"


def build_dynamodb_resource(settings: StorageSettings):
    session = Session(
        aws_access_key_id=settings.access_key,
        aws_secret_access_key=settings.secret_key,
        aws_session_token=settings.session_token,
        region_name=settings.region,
    )
    return session.resource("dynamodb", endpoint_url=settings.dynamodb_endpoint)


class SessionStore:
    """Look up session records by their ``_idx`` key."""

    def __init__(self, resource: Any, table: str | None = None) -> None:
        self._resource = resource
        self._table = table

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> SessionStore:
        return cls(build_dynamodb_resource(settings), table=settings.session_table)

    @property
    def table(self) -> str | None:
        return self._table

    async def find_session(self, key: str) -> dict[str, Any]:
        """Look ``key`` up in the configured session table."""
        if not self._table:
            message = "no session table configured"
            raise RuntimeError(message)
        return await self.find(self._table, key)

    async def find(self, table: str, key: str) -> dict[str, Any]:
        """Return the record stored under ``key`` in ``table``.

        When no record exists a placeholder holding only the key is returned.
        Store errors propagate to the caller.
        """
        dynamo_table = self._resource.Table(table)
        result = await run_sync(
            partial(
                dynamo_table.get_item,
                Key={SESSION_KEY: key},
                ConsistentRead=True,
            )
        )
        item = result.get("Item")
        if not item:
            LOG.debug("no session %s in %s", key, table)
            return {SESSION_KEY: key}
        return dict(item)

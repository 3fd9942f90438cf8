from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Mode = Literal["live", "sandbox"]


class ProxySettings(BaseSettings):
    """Configuration for request routing and asset resolution."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, extra="ignore"
    )

    mode: Mode | None = Field(
        default=None,
        validation_alias="ASSET_PROXY_MODE",
    )
    environment: str | None = Field(
        default=None,
        validation_alias="ASSET_PROXY_ENV",
    )
    local: str | None = Field(
        default=None,
        validation_alias="ASSET_PROXY_LOCAL",
    )
    bucket: str = Field(
        default="static",
        validation_alias="ASSET_PROXY_BUCKET",
    )
    manifest_path: Path = Field(
        default=Path("static.json"),
        validation_alias="ASSET_PROXY_MANIFEST",
    )
    sandbox_root: Path = Field(
        default=Path("public"),
        validation_alias="ASSET_PROXY_SANDBOX_ROOT",
    )
    spa: bool = Field(
        default=False,
        validation_alias="ASSET_PROXY_SPA",
    )
    static_prefix: str = Field(
        default="_static",
        validation_alias="ASSET_PROXY_STATIC_PREFIX",
    )

    @field_validator("static_prefix", mode="after")
    @classmethod
    def _strip_prefix(cls, value: str) -> str:
        return value.strip("/")

    @model_validator(mode="after")
    def _derive_mode(self) -> ProxySettings:
        if self.mode is None:
            testing = (self.environment or "").strip().lower() == "testing"
            local = (self.local or "").strip().lower() not in {"", "0", "false", "no"}
            self.mode = "sandbox" if testing or local else "live"
        return self


class StorageSettings(BaseSettings):
    """Configuration for the S3 origin and the DynamoDB session table."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, extra="ignore"
    )

    endpoint: str | None = Field(
        default=None,
        validation_alias="ASSET_PROXY_S3_ENDPOINT",
    )
    access_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "ASSET_PROXY_ACCESS_KEY_ID",
            "AWS_ACCESS_KEY_ID",
        ),
    )
    secret_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "ASSET_PROXY_SECRET_ACCESS_KEY",
            "AWS_SECRET_ACCESS_KEY",
        ),
    )
    session_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "ASSET_PROXY_SESSION_TOKEN",
            "AWS_SESSION_TOKEN",
        ),
    )
    region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices(
            "ASSET_PROXY_REGION",
            "AWS_REGION",
        ),
    )
    addressing_style: Literal["auto", "virtual", "path"] = Field(
        default="auto",
        validation_alias="ASSET_PROXY_S3_ADDRESSING_STYLE",
    )
    dynamodb_endpoint: str | None = Field(
        default=None,
        validation_alias="ASSET_PROXY_DYNAMODB_ENDPOINT",
    )
    session_table: str | None = Field(
        default=None,
        validation_alias="ASSET_PROXY_SESSION_TABLE",
    )


def load_proxy_settings_from_env() -> ProxySettings:
    """Load routing settings from environment variables.

    Returns:
        ProxySettings instance populated from environment variables.
    """
    return ProxySettings()


def load_storage_settings_from_env() -> StorageSettings:
    """Load storage settings from environment variables.

    Returns:
        StorageSettings instance populated from environment variables.
    """
    return StorageSettings()

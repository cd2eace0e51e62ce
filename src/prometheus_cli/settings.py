"""Environment-driven settings for prometheus-cli.

Centralises every environment variable the tools read so that neither
the CLI nor the infrastructure adapters call ``os.environ`` for
configuration directly.  Values may also come from a ``.env`` file in
the working directory.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from prometheus_cli.exceptions import ConfigurationError

DEFAULT_USDC_LEDGER_CANISTER_ID = "53nhb-haaaa-aaaar-qbn5q-cai"


class AppSettings(BaseSettings):
    """Central settings contract shared by the CLI and infra adapters."""

    model_config = SettingsConfigDict(
        env_prefix="PROMETHEUS_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    canister_ids_file: Path | None = Field(
        default=None,
        description="dfx-format canister_ids.json holding production canister IDs.",
    )
    identity: str | None = Field(
        default=None,
        description="dfx identity name; defaults to `dfx identity whoami`.",
    )
    dfx_config_root: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("DFX_CONFIG_ROOT", "PROMETHEUS_DFX_CONFIG_ROOT"),
        description="Root of the dfx configuration tree (defaults to ~/.config/dfx).",
    )
    usdc_ledger_canister_id: str = Field(
        default=DEFAULT_USDC_LEDGER_CANISTER_ID,
        min_length=1,
        validation_alias=AliasChoices(
            "CANISTER_ID_USDC_LEDGER",
            "PROMETHEUS_USDC_LEDGER_CANISTER_ID",
        ),
        description="Ledger canister used for USDC amounts.",
    )
    github_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_TOKEN", "PROMETHEUS_GITHUB_TOKEN"),
        description="Forwarded to the reproducible docker build.",
    )

    ic_host: str = Field(default="https://icp-api.io", min_length=8)
    local_host: str = Field(default="http://127.0.0.1:4943", min_length=8)

    upgrade_poll_attempts: int = Field(
        default=20,
        ge=1,
        le=500,
        description="Number of upgrade-status polls before giving up.",
    )
    upgrade_poll_interval: float = Field(
        default=3.0,
        ge=0,
        description="Delay between upgrade-status polls (seconds).",
    )


def load_settings() -> AppSettings:
    """Read settings from the environment (and ``.env``) once per invocation.

    Raises
    ------
    ConfigurationError
        If an environment value fails validation.
    """
    try:
        return AppSettings()
    except PydanticValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigurationError(
            f"Invalid settings: {problems}",
            hint="Check the PROMETHEUS_* environment variables and your .env file.",
        ) from exc

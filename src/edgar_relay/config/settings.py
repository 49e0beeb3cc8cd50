# src/edgar_relay/config/settings.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""Edgar Relay Configuration (Pydantic Settings, v2)

Summary:
    Typed, validated configuration for the relay: upstream identity and
    endpoint, listener address, result-size thresholds, session keep-alive,
    the optional shared secret and interaction logging. Only adapters and
    infrastructure should read it; other layers receive values explicitly.

Design:
    - Pydantic v2 BaseSettings with ``extra='forbid'`` to catch unknown keys
      in ``.env``.
    - Explicit field declarations with constrained types and ranges.
    - Singleton accessor ``get_settings()`` with LRU cache; invalid or missing
      configuration surfaces as :class:`FatalConfigError`.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import Field, SecretStr, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from edgar_relay.domain.exceptions.errors import FatalConfigError
from edgar_relay.infrastructure.logging.logger import get_json_logger

logger = get_json_logger(__name__)


class Environment(str, Enum):
    """Logical deployment environment."""

    DEVELOPMENT = "development"
    TEST = "test"
    CI = "ci"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Typed configuration for the relay."""

    # ---------------------------
    # Core environment
    # ---------------------------
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Logical deployment environment.",
        validation_alias="ENVIRONMENT",
    )
    host: str = Field(
        default="0.0.0.0",
        description="HTTP listen address.",
        validation_alias="HOST",
    )
    port: int = Field(
        default=4000,
        ge=1,
        le=65535,
        description="HTTP listen port.",
        validation_alias="PORT",
    )

    # ---------------------------
    # Upstream (SEC EDGAR)
    # ---------------------------
    sec_api_mail: str = Field(
        ...,
        min_length=3,
        description="Contact e-mail sent in the User-Agent header (SEC fair-access policy).",
        validation_alias="SEC_API_MAIL",
    )
    sec_api_company: str = Field(
        ...,
        min_length=1,
        description="Organization name sent in the User-Agent header.",
        validation_alias="SEC_API_COMPANY",
    )
    edgar_base_url: str = Field(
        default="https://data.sec.gov",
        description="Base URL for SEC EDGAR data APIs.",
        validation_alias="EDGAR_BASE_URL",
    )
    edgar_timeout_s: float = Field(
        default=30.0,
        ge=0.1,
        le=300.0,
        description="Per-request timeout in seconds for upstream calls.",
        validation_alias="EDGAR_TIMEOUT_S",
    )

    # ---------------------------
    # Result shaping
    # ---------------------------
    max_payload_bytes: int = Field(
        default=100_000,
        ge=1_000,
        le=50_000_000,
        description="Serialized-size ceiling above which results become an advisory.",
        validation_alias="MAX_PAYLOAD_BYTES",
    )
    default_page_size: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Default page size for filing history.",
        validation_alias="DEFAULT_PAGE_SIZE",
    )
    default_top_n: int = Field(
        default=20,
        ge=1,
        le=10_000,
        description="Default number of ranked frame rows.",
        validation_alias="DEFAULT_TOP_N",
    )

    # ---------------------------
    # Transport
    # ---------------------------
    sse_keepalive_s: float = Field(
        default=15.0,
        gt=0.0,
        le=600.0,
        description="Idle interval in seconds between keep-alive comment frames.",
        validation_alias="SSE_KEEPALIVE_S",
    )
    mcp_api_key: SecretStr | None = Field(
        default=None,
        description="Shared secret required in X-Api-Key when set.",
        validation_alias="MCP_API_KEY",
    )

    # Raw env for CORS; the parsed list is computed in a model validator.
    cors_allow_origins_raw: str | None = Field(
        default=None,
        description="Raw env for allowed CORS origins (comma-separated).",
        validation_alias="ALLOWED_ORIGINS",
    )
    cors_allow_origins: list[str] = Field(
        default_factory=list,
        description=(
            "Allowed CORS origins. Derived from ALLOWED_ORIGINS. "
            "'*' is rejected outside development/test."
        ),
    )

    # ---------------------------
    # Logging
    # ---------------------------
    log_level: str = Field(
        default="INFO",
        description="Root log level (e.g. 'DEBUG', 'INFO').",
        validation_alias="LOG_LEVEL",
    )
    interaction_log_dir: str | None = Field(
        default=None,
        description="Directory for daily JSON-array interaction logs; unset disables them.",
        validation_alias="INTERACTION_LOG_DIR",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="forbid",
        case_sensitive=False,
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _compute_cors(self) -> Settings:
        """Compute the CORS list from the raw env value.

        Raises:
            ValueError: If ``*`` is configured outside development/test.
        """
        raw = (self.cors_allow_origins_raw or "").strip()
        entries = [e.strip() for e in raw.split(",") if e.strip()]
        if "*" in entries and self.environment not in (Environment.DEVELOPMENT, Environment.TEST):
            raise ValueError("'*' CORS origin is only allowed in development/test environments.")
        self.cors_allow_origins = entries
        return self

    @property
    def user_agent(self) -> str:
        """User-Agent sent upstream: ``"<company> <mail>"``."""
        return f"{self.sec_api_company} {self.sec_api_mail}"

    @property
    def api_key(self) -> str | None:
        """Plain shared secret, or ``None`` when authentication is disabled."""
        if self.mcp_api_key is None:
            return None
        return self.mcp_api_key.get_secret_value() or None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton :class:`Settings` instance.

    Raises:
        FatalConfigError: If configuration is missing or invalid.
    """
    try:
        settings = Settings()
    except ValidationError as exc:
        fields = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
        logger.error("settings.invalid", extra={"extra": {"fields": fields}})
        raise FatalConfigError(
            "Invalid or missing configuration.",
            details={"fields": fields},
        ) from exc

    logger.info(
        "settings.loaded",
        extra={
            "extra": {
                "environment": settings.environment.value,
                "edgar_base_url": settings.edgar_base_url,
                "cors_count": len(settings.cors_allow_origins),
                "auth_enabled": settings.api_key is not None,
                "interaction_log": settings.interaction_log_dir is not None,
            }
        },
    )
    return settings

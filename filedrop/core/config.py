"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Bucket bindings and the storage backend are validated
at load time so a misconfigured deployment fails on startup, not on the
first request.
"""

from dataclasses import dataclass
from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_STORAGE_BACKENDS = ("memory", "local", "s3")


@dataclass(frozen=True)
class BucketBinding:
    """One entry of BUCKETS: public bucket name plus backend target.

    ``FILES`` binds bucket ``FILES`` to target ``FILES``;
    ``FILES=my-s3-bucket`` binds it to S3 bucket ``my-s3-bucket`` (or the
    ``my-s3-bucket`` subdirectory for the local backend).
    """

    name: str
    target: str


def parse_bucket_bindings(raw: str) -> list[BucketBinding]:
    """Parse ``NAME[=target],NAME[=target]`` into bindings (order preserved)."""
    bindings: list[BucketBinding] = []
    for entry in (raw or "").split(","):
        entry = entry.strip()
        if not entry:
            continue
        name, _, target = entry.partition("=")
        name = name.strip()
        target = target.strip() or name
        if not name:
            raise ValueError(f"Invalid bucket binding: {entry!r}")
        bindings.append(BucketBinding(name, target))
    return bindings


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Every field has a default; validate_storage rejects unknown backends,
    empty or duplicated bucket lists and a non-positive upload limit.
    """

    # App
    app_name: str = "filedrop"
    app_version: str = "1.0.0"
    debug: bool = False

    # Auth: empty means authentication is not enforced.
    api_token: SecretStr | None = None

    # CORS
    allowed_origins: str = "*"

    # Storage
    storage_backend: str = "local"
    storage_root: str = "./data"
    buckets: str = "FILES"
    default_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: SecretStr | None = None
    max_upload_size: int = 100 * 1024 * 1024  # 100MB
    # Relay the store's own error message to API callers (500 bodies).
    expose_storage_errors: bool = True

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_storage(self) -> "Settings":
        """Validate storage backend, bucket bindings and upload limit."""
        backend = self.storage_backend.lower()
        if backend not in SUPPORTED_STORAGE_BACKENDS:
            raise ValueError(
                f"Invalid storage_backend '{self.storage_backend}'. "
                f"Must be one of: {', '.join(SUPPORTED_STORAGE_BACKENDS)}"
            )
        bindings = parse_bucket_bindings(self.buckets)
        if not bindings:
            raise ValueError(
                "At least one bucket is required. Set BUCKETS, e.g. BUCKETS=FILES"
            )
        names = [b.name for b in bindings]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate bucket names in BUCKETS: {self.buckets!r}")
        if self.max_upload_size <= 0:
            raise ValueError("max_upload_size must be positive")
        return self

    @property
    def bucket_bindings(self) -> list[BucketBinding]:
        return parse_bucket_bindings(self.buckets)

    @property
    def allowed_origin_list(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()] or ["*"]

    @property
    def api_token_value(self) -> str:
        """Configured bearer secret, or empty string when auth is disabled."""
        if self.api_token is None:
            return ""
        return self.api_token.get_secret_value()


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()

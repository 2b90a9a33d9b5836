"""Tests for settings parsing and validation."""

import pytest
from pydantic import ValidationError

from filedrop.core.config import BucketBinding, Settings, get_settings, parse_bucket_bindings


def test_parse_bucket_bindings() -> None:
    """NAME and NAME=target entries, whitespace and empty entries tolerated."""
    assert parse_bucket_bindings("FILES") == [BucketBinding("FILES", "FILES")]
    assert parse_bucket_bindings(" FILES = files-bucket , ARCHIVE,, ") == [
        BucketBinding("FILES", "files-bucket"),
        BucketBinding("ARCHIVE", "ARCHIVE"),
    ]
    assert parse_bucket_bindings("") == []


def test_parse_bucket_bindings_rejects_missing_name() -> None:
    with pytest.raises(ValueError):
        parse_bucket_bindings("=target")


def test_defaults() -> None:
    settings = Settings()
    assert settings.storage_backend == "local"
    assert settings.bucket_bindings == [BucketBinding("FILES", "FILES")]
    assert settings.max_upload_size == 100 * 1024 * 1024
    assert settings.expose_storage_errors is True
    assert settings.api_token_value == ""
    assert settings.allowed_origin_list == ["*"]


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Env vars override defaults; get_settings caches until cleared."""
    monkeypatch.setenv("STORAGE_BACKEND", "memory")
    monkeypatch.setenv("BUCKETS", "A,B=b-target")
    monkeypatch.setenv("API_TOKEN", "s3cret")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("EXPOSE_STORAGE_ERRORS", "false")
    get_settings.cache_clear()
    settings = get_settings()
    assert settings.storage_backend == "memory"
    assert [b.name for b in settings.bucket_bindings] == ["A", "B"]
    assert settings.bucket_bindings[1].target == "b-target"
    assert settings.api_token_value == "s3cret"
    assert "s3cret" not in repr(settings)
    assert settings.allowed_origin_list == ["https://a.example", "https://b.example"]
    assert settings.expose_storage_errors is False
    assert get_settings() is settings


@pytest.mark.parametrize(
    "overrides",
    [
        {"storage_backend": "ftp"},
        {"buckets": ""},
        {"buckets": " , "},
        {"buckets": "A,A"},
        {"max_upload_size": 0},
    ],
)
def test_invalid_settings_fail_at_load(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(**overrides)


def test_backend_name_is_case_insensitive() -> None:
    assert Settings(storage_backend="MEMORY").storage_backend == "MEMORY"

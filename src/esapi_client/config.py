from __future__ import annotations

import os
from dataclasses import dataclass, field
from urllib.parse import urlsplit


DEFAULT_URL = "http://localhost:9200"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class TransportConfig:
    base_url: str = DEFAULT_URL
    timeout_seconds: float = 30.0
    verify_ssl: bool = True
    headers: dict[str, str] = field(default_factory=dict)


def _parse_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default

    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"{name} must be a boolean (true/false).")


def _parse_url_env(name: str, default: str) -> str:
    value = (os.getenv(name) or "").strip() or default
    parts = urlsplit(value)
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        raise ConfigError(
            f"{name} must be an absolute http(s) URL, got {value!r}."
        )
    return value.rstrip("/")


def load_config() -> TransportConfig:
    base_url = _parse_url_env("ELASTICSEARCH_URL", DEFAULT_URL)
    verify_ssl = _parse_bool_env("ELASTICSEARCH_VERIFY_SSL", True)

    timeout_raw = os.getenv("ELASTICSEARCH_TIMEOUT_SECONDS", "30").strip()
    try:
        timeout_seconds = float(timeout_raw)
        if timeout_seconds <= 0:
            raise ValueError
    except ValueError as exc:
        raise ConfigError(
            "ELASTICSEARCH_TIMEOUT_SECONDS must be a positive number."
        ) from exc

    return TransportConfig(
        base_url=base_url,
        timeout_seconds=timeout_seconds,
        verify_ssl=verify_ssl,
    )

"""
Configuration module for the True Opinion client.

Copyright (c) 2025 Gimel Foundation and the persons identified as the document authors.
All rights reserved. This file is subject to the Gimel Foundation's Legal Provisions Relating to GiFo Documents.
See http://GimelFoundation.com or https://github.com/Gimel-Foundation for details.
Code Components extracted from GiFo-RfC 0111 must include this license text and are provided without warranty.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

from ..errors import ConfigurationError
from ..util.config import (
    get_bool_config,
    get_config_value,
    get_int_config,
    load_config_file,
    load_config_from_env,
    merge_configs,
    normalize_config,
)


@dataclass
class RetryConfig:
    """Retry and circuit breaker settings"""
    max_attempts: int = 3
    max_failures: int = 5
    base_delay_ms: int = 1000
    max_delay_ms: int = 5000
    reset_timeout_ms: int = 30_000

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RetryConfig":
        known = {f.name for f in fields(cls)}
        return cls(**{k: int(v) for k, v in normalize_config(data).items() if k in known})


@dataclass
class ClientConfig:
    """Configuration for the resilient API client"""
    base_url: str = "http://localhost:5173/api"
    timeout_ms: int = 30_000
    retry: RetryConfig = field(default_factory=RetryConfig)
    cache_ttl_ms: int = 300_000
    cache_reads: bool = False
    upload_timeout_ms: int = 120_000
    app_version: str = "1.0.0"
    refresh_path: str = "/auth/refresh"
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Create configuration from TRUEOPINION_* environment variables"""
        defaults = cls()
        retry_defaults = defaults.retry
        return cls(
            base_url=get_config_value("base_url", defaults.base_url),
            timeout_ms=get_int_config("timeout_ms", defaults.timeout_ms),
            retry=RetryConfig(
                max_attempts=get_int_config("retry_max_attempts", retry_defaults.max_attempts),
                max_failures=get_int_config("retry_max_failures", retry_defaults.max_failures),
                base_delay_ms=get_int_config("retry_base_delay_ms", retry_defaults.base_delay_ms),
                max_delay_ms=get_int_config("retry_max_delay_ms", retry_defaults.max_delay_ms),
                reset_timeout_ms=get_int_config("retry_reset_timeout_ms", retry_defaults.reset_timeout_ms),
            ),
            cache_ttl_ms=get_int_config("cache_ttl_ms", defaults.cache_ttl_ms),
            cache_reads=get_bool_config("cache_reads", defaults.cache_reads),
            upload_timeout_ms=get_int_config("upload_timeout_ms", defaults.upload_timeout_ms),
            app_version=get_config_value("app_version", defaults.app_version),
            refresh_path=get_config_value("refresh_path", defaults.refresh_path),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientConfig":
        """
        Create configuration from a mapping.

        Accepts snake_case keys as well as the camelCase names used by the
        web build (``baseURL``, ``timeoutMs``, ``retry.maxAttempts``, ...).
        """
        data = normalize_config(data)
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}

        if isinstance(kwargs.get("retry"), dict):
            kwargs["retry"] = RetryConfig.from_dict(kwargs["retry"])

        return cls(**kwargs)

    @staticmethod
    def _file_data(path: str) -> Dict[str, Any]:
        data = load_config_file(path)
        if "client" in data and isinstance(data["client"], dict):
            data = data["client"]
        return normalize_config(data)

    @classmethod
    def _env_data(cls) -> Dict[str, Any]:
        """Typed values for the TRUEOPINION_* variables actually set"""
        env_config = cls.from_env()
        data: Dict[str, Any] = {}
        for key in load_config_from_env():
            retry_key = key[len("retry_"):] if key.startswith("retry_") else None
            if retry_key and hasattr(env_config.retry, retry_key):
                data.setdefault("retry", {})[retry_key] = getattr(env_config.retry, retry_key)
            elif key not in ("retry", "headers") and hasattr(env_config, key):
                data[key] = getattr(env_config, key)
        return data

    @classmethod
    def from_file(cls, path: str) -> "ClientConfig":
        """Create configuration from a YAML or JSON file"""
        return cls.from_dict(cls._file_data(path))

    @classmethod
    def load(cls, path: Optional[str] = None, **overrides) -> "ClientConfig":
        """
        Create configuration from layered sources.

        File values (if ``path`` is given) are overridden by TRUEOPINION_*
        variables, which are overridden by keyword arguments. Nested
        ``retry`` settings are merged key by key.
        """
        file_data = cls._file_data(path) if path else {}
        return cls.from_dict(merge_configs(file_data, cls._env_data(), normalize_config(overrides)))

    def validate(self) -> bool:
        """Validate the configuration"""
        if not self.base_url:
            raise ConfigurationError("base_url is required", config_key="base_url")
        if self.timeout_ms <= 0:
            raise ConfigurationError("timeout_ms must be positive", config_key="timeout_ms")
        if self.retry.max_attempts < 0:
            raise ConfigurationError("retry.max_attempts must be >= 0", config_key="retry.max_attempts")
        if self.retry.max_failures < 1:
            raise ConfigurationError("retry.max_failures must be >= 1", config_key="retry.max_failures")
        if self.retry.base_delay_ms < 0 or self.retry.max_delay_ms < self.retry.base_delay_ms:
            raise ConfigurationError("retry delays must satisfy 0 <= base_delay_ms <= max_delay_ms",
                                     config_key="retry.base_delay_ms")
        if self.retry.reset_timeout_ms <= 0:
            raise ConfigurationError("retry.reset_timeout_ms must be positive", config_key="retry.reset_timeout_ms")
        if self.cache_ttl_ms < 0:
            raise ConfigurationError("cache_ttl_ms must be >= 0", config_key="cache_ttl_ms")
        return True

    def default_headers(self) -> Dict[str, str]:
        return {"X-App-Version": self.app_version, **self.headers}

    def describe(self) -> Dict[str, Any]:
        return {
            "base_url": self.base_url,
            "timeout_ms": self.timeout_ms,
            "retry": vars(self.retry),
            "cache_ttl_ms": self.cache_ttl_ms,
        }

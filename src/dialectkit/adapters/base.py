"""
Connection configuration for dialectkit connections.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from ..drivers.base import DriverConfigurationError
from ..security.dsns import DSNConfig, parse_dsn


@dataclass
class SSLConfig:
    ca: str | None = None
    cert: str | None = None
    key: str | None = None
    check_hostname: bool | None = None

    def mysql_options(self) -> dict[str, Any]:
        ssl: dict[str, Any] = {}
        if self.ca:
            ssl["ca"] = self.ca
        if self.cert:
            ssl["cert"] = self.cert
        if self.key:
            ssl["key"] = self.key
        if self.check_hostname is not None:
            ssl["check_hostname"] = self.check_hostname
        if not ssl:
            return {}
        return {"ssl": ssl}


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

_INT_OPTIONS = {"connect_timeout", "read_timeout", "write_timeout", "port"}


def _parse_bool(value: str, *, key: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise DriverConfigurationError(f"Invalid boolean value for '{key}': {value!r}")


def _parse_float(value: str, *, key: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise DriverConfigurationError(f"Invalid float value for '{key}': {value!r}") from exc


def _parse_int(value: str, *, key: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise DriverConfigurationError(f"Invalid integer value for '{key}': {value!r}") from exc


def _pop_bool(query: dict[str, str], key: str) -> bool | None:
    if key not in query:
        return None
    return _parse_bool(query.pop(key), key=key)


def _pop_float(query: dict[str, str], key: str) -> float | None:
    if key not in query:
        return None
    return _parse_float(query.pop(key), key=key)


def _parse_ssl(query: dict[str, str]) -> SSLConfig | None:
    ssl = SSLConfig(
        ca=query.pop("ssl_ca", None),
        cert=query.pop("ssl_cert", None),
        key=query.pop("ssl_key", None),
    )
    if "ssl_check_hostname" in query:
        ssl.check_hostname = _parse_bool(query.pop("ssl_check_hostname"), key="ssl_check_hostname")
    if ssl.ca or ssl.cert or ssl.key or ssl.check_hostname is not None:
        return ssl
    return None


def _parse_option_values(query: dict[str, str]) -> dict[str, Any]:
    options: dict[str, Any] = {}
    for key, value in query.items():
        if key in _INT_OPTIONS:
            options[key] = _parse_int(value, key=key)
        else:
            options[key] = value
    return options


@dataclass
class ConnectionConfig:
    """
    Normalized connection configuration.

    Query-string options other than the recognized ones are kept in ``options``;
    ``charset`` and ``sql_mode`` there also feed :class:`DriverOptions`.
    """

    url: str
    autocommit: bool = True
    timeout: float | None = None
    options: dict[str, Any] | None = None
    ssl: SSLConfig | None = None
    dsn: DSNConfig | None = None
    source: str | None = None

    @classmethod
    def from_dsn(cls, dsn: str, **kwargs: Any) -> "ConnectionConfig":
        parsed = parse_dsn(dsn)
        if parsed.driver not in {"mysql", "mysql+pymysql", "mariadb"}:
            raise DriverConfigurationError(
                f"Unsupported DSN scheme {parsed.driver!r}; expected mysql://"
            )
        query = dict(parsed.query)

        parsed_autocommit = _pop_bool(query, "autocommit")
        parsed_timeout = _pop_float(query, "timeout")
        parsed_ssl = _parse_ssl(query)

        options = _parse_option_values(query)
        options.update(kwargs.pop("options", None) or {})

        autocommit = kwargs.pop("autocommit", parsed_autocommit)
        if autocommit is None:
            autocommit = True

        return cls(
            url=dsn,
            dsn=parsed,
            autocommit=autocommit,
            timeout=kwargs.pop("timeout", parsed_timeout),
            options=options or None,
            ssl=kwargs.pop("ssl", parsed_ssl),
            **kwargs,
        )

    @classmethod
    def from_env(cls, env_var: str, **kwargs: Any) -> "ConnectionConfig":
        value = os.getenv(env_var)
        if not value:
            raise DriverConfigurationError(f"Environment variable {env_var} is not set")
        return cls.from_dsn(value, source=env_var, **kwargs)

    def redacted_dsn(self) -> str:
        """
        Return a DSN safe for logging (credentials removed).
        """

        if self.dsn:
            return self.dsn.redacted()
        return self.url

    def descriptive_label(self) -> str:
        redacted = self.redacted_dsn()
        if self.source:
            return f"{self.source} ({redacted})"
        return redacted

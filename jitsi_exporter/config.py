# =============================================
# File: jitsi_exporter/config.py
# Purpose: Startup configuration (env defaults + CLI overrides), fixed for the process lifetime
# =============================================
from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Optional, Tuple

DEFAULT_LISTEN_ADDRESS = ":9888"
DEFAULT_VIDEOBRIDGE_URL = "http://localhost:8888/stats"
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    listen_address: str = DEFAULT_LISTEN_ADDRESS
    videobridge_url: str = DEFAULT_VIDEOBRIDGE_URL
    user: str = ""
    password: str = ""
    # None -> no timeout on the upstream call
    timeout: Optional[float] = None
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be a positive number of seconds")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}")
        self.host_port()

    @property
    def use_basic_auth(self) -> bool:
        return bool(self.user) and bool(self.password)

    def host_port(self) -> Tuple[str, int]:
        """Split 'host:port'. An empty host (':9888') binds all interfaces."""
        host, sep, port = self.listen_address.rpartition(":")
        if not sep:
            raise ValueError(f"listen address must be host:port, got {self.listen_address!r}")
        try:
            port_num = int(port)
        except ValueError:
            raise ValueError(f"invalid port in listen address {self.listen_address!r}") from None
        if not 0 < port_num < 65536:
            raise ValueError(f"port out of range in listen address {self.listen_address!r}")
        host = host.strip("[]") or "0.0.0.0"
        return host, port_num


def _env_timeout() -> Optional[float]:
    raw = os.getenv("JVB_TIMEOUT_SECONDS", "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"JVB_TIMEOUT_SECONDS must be a number, got {raw!r}") from None


_ENV_READERS = {
    "listen_address": lambda: os.getenv("JVB_EXPORTER_LISTEN_ADDRESS", DEFAULT_LISTEN_ADDRESS),
    "videobridge_url": lambda: os.getenv("JVB_STATS_URL", DEFAULT_VIDEOBRIDGE_URL),
    "user": lambda: os.getenv("JVB_USER", ""),
    "password": lambda: os.getenv("JVB_PASSWORD", ""),
    "timeout": _env_timeout,
    "log_level": lambda: os.getenv("LOG_LEVEL", "INFO"),
    "log_file": lambda: os.getenv("LOG_FILE") or None,
}


def load_settings(**overrides) -> Settings:
    """Read env at call time so tests/env overrides take effect; non-None overrides win."""
    for key in overrides:
        if key not in _ENV_READERS:
            raise TypeError(f"unknown setting: {key}")
    # env is only consulted for settings without an explicit override
    values = {
        key: overrides[key] if overrides.get(key) is not None else read()
        for key, read in _ENV_READERS.items()
    }
    values["log_level"] = str(values["log_level"]).upper()
    return Settings(**values)

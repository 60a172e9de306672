"""Configuration for the symbol cache and its collaborators."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .errors import ConfigError
from .logging import get_logger

logger = get_logger(__name__)


def default_db_path() -> Path:
    base = os.getenv("XDG_DATA_HOME") or os.path.join(
        os.path.expanduser("~"), ".local", "share"
    )
    return Path(base) / "dynasym" / "static_functions.db"


@dataclass
class CacheConfig:
    demangle_enabled: bool = True
    demangle_batch_size: int = 1000
    load_wait_timeout: float = 5.0
    target_os: str = "unknown"

    agent_host: Optional[str] = None
    agent_port: int = 3030
    agent_token: Optional[str] = None
    agent_timeout: float = 30.0

    static_db_path: Path = field(default_factory=default_db_path)
    cxxfilt_path: str = "c++filt"
    log_level: str = "WARNING"

    def __post_init__(self):
        self.agent_host = os.getenv("DYNASYM_AGENT_HOST", self.agent_host)
        self.agent_token = os.getenv("DYNASYM_AGENT_TOKEN", self.agent_token)
        self.target_os = os.getenv("DYNASYM_TARGET_OS", self.target_os)
        self.cxxfilt_path = os.getenv("DYNASYM_CXXFILT", self.cxxfilt_path)
        self.log_level = os.getenv("DYNASYM_LOG_LEVEL", self.log_level)
        if db := os.getenv("DYNASYM_STATIC_DB"):
            self.static_db_path = Path(db)
        if demangle := os.getenv("DYNASYM_DEMANGLE"):
            self.demangle_enabled = demangle.lower() not in ("0", "false", "no", "off")
        if port := os.getenv("DYNASYM_AGENT_PORT"):
            try:
                self.agent_port = int(port)
            except ValueError:
                logger.warning("invalid_config_value", key="agent_port", value=port)
        if timeout := os.getenv("DYNASYM_LOAD_WAIT_TIMEOUT"):
            try:
                self.load_wait_timeout = float(timeout)
            except ValueError:
                logger.warning(
                    "invalid_config_value", key="load_wait_timeout", value=timeout
                )
        self.static_db_path = Path(self.static_db_path)
        self.validate()

    def validate(self) -> None:
        if self.demangle_batch_size <= 0:
            raise ConfigError(
                f"demangle_batch_size must be positive, got {self.demangle_batch_size}"
            )
        if self.load_wait_timeout < 0:
            raise ConfigError(
                f"load_wait_timeout must not be negative, got {self.load_wait_timeout}"
            )
        if not 0 < self.agent_port < 65536:
            raise ConfigError(f"agent_port out of range: {self.agent_port}")

    @property
    def agent_base_url(self) -> Optional[str]:
        if not self.agent_host:
            return None
        return f"http://{self.agent_host}:{self.agent_port}"


_config: Optional[CacheConfig] = None


def get_config() -> CacheConfig:
    global _config
    if _config is None:
        _config = CacheConfig()
    return _config


def set_config(config: CacheConfig) -> None:
    global _config
    _config = config

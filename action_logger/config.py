"""Configuration module: frozen dataclasses loaded from environment variables."""

import os
from dataclasses import dataclass, field

_TRUE_VALUES = ("true", "1", "yes", "t", "y", "on")
_FALSE_VALUES = ("false", "0", "no", "f", "n", "off")


def _parse_bool(value: str | None, default: bool) -> bool:
    """Parse a boolean env value, falling back to default when empty or unrecognised."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return default


@dataclass(frozen=True)
class LokiConfig:
    enabled: bool = False
    push_url: str = ""
    username: str = ""
    password: str = ""
    job: str = ""
    timeout: float = 10.0


@dataclass(frozen=True)
class Config:
    loki: LokiConfig = field(default_factory=LokiConfig)
    save_to_file: bool = True
    data_dir: str = "./data"
    server_host: str = "0.0.0.0"
    server_port: int = 3000
    log_level: str = "INFO"
    templates_path: str = ""


def load_loki_config() -> LokiConfig:
    """Build LokiConfig from the LOKI_* environment variables."""
    return LokiConfig(
        enabled=_parse_bool(os.environ.get("LOKI_ENABLED"), LokiConfig.enabled),
        push_url=os.environ.get("LOKI_PUSH_URL", LokiConfig.push_url),
        username=os.environ.get("LOKI_USERNAME", LokiConfig.username),
        password=os.environ.get("LOKI_PASSWORD", LokiConfig.password),
        job=os.environ.get("LOKI_JOB", LokiConfig.job),
        timeout=float(os.environ.get("LOKI_TIMEOUT", LokiConfig.timeout)),
    )


def load_config() -> Config:
    """Build Config from environment variables with sensible defaults."""
    return Config(
        loki=load_loki_config(),
        save_to_file=_parse_bool(os.environ.get("SAVE_TO_FILE"), Config.save_to_file),
        data_dir=os.environ.get("DATA_DIR") or Config.data_dir,
        server_host=os.environ.get("SERVER_HOST", Config.server_host),
        server_port=int(os.environ.get("SERVER_PORT", Config.server_port)),
        log_level=os.environ.get("LOG_LEVEL", Config.log_level).upper(),
        templates_path=os.environ.get("TEMPLATES_PATH", Config.templates_path),
    )

# SPDX-License-Identifier: MIT
"""
Settings loader for pdfsi.

Search order, later sources overriding earlier ones:
1. built-in defaults
2. YAML file (explicit ``--config`` path, else .pdfsi.yml/.pdfsi.yaml in cwd)
3. environment variables
"""
from __future__ import annotations

import os
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, Any, List, Mapping, Optional

import yaml

from pdfsi.core.exceptions import InspectorConfigError

logger = logging.getLogger(__name__)

CONFIG_NAMES = [".pdfsi.yml", ".pdfsi.yaml"]

# env var -> (settings field, parser)
ENV_VARS = {
    "PROMPT_SECURITY_API_URL": ("api_url", str),
    "PROMPT_SECURITY_APP_ID": ("app_id", str),
    "PROMPT_SECURITY_TIMEOUT": ("remote_timeout", float),
    "MAX_FILE_SIZE": ("max_file_size", int),
    "ALLOWED_FILE_TYPES": ("allowed_types", "list"),
    "CORS_ORIGIN": ("cors_origins", "list"),
    "LOG_LEVEL": ("log_level", str),
    "LOG_FORMAT": ("log_json", "format"),
    "PDFSI_HOST": ("host", str),
    "PORT": ("port", int),
}


@dataclass
class Settings:
    api_url: Optional[str] = None
    app_id: Optional[str] = None
    remote_timeout: float = 10.0
    max_file_size: int = 10 * 1024 * 1024
    allowed_types: List[str] = field(default_factory=lambda: ["application/pdf"])
    cors_origins: List[str] = field(default_factory=lambda: ["chrome-extension://*", "http://localhost:*"])
    log_level: str = "INFO"
    log_json: bool = False
    host: str = "127.0.0.1"
    port: int = 3000

    @property
    def remote_configured(self) -> bool:
        return bool(self.api_url and self.app_id)


def _split_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [v.strip() for v in value.split(",") if v.strip()]
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    raise ValueError(f"expected a list or comma separated string, got {type(value).__name__}")


def _coerce(value: Any, parser) -> Any:
    if parser == "list":
        return _split_list(value)
    if parser == "format":
        return str(value).strip().lower() == "json"
    if parser is str:
        return str(value)
    return parser(value)


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    """Load and validate YAML config file."""
    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise ValueError("Config must be a dictionary")

    return config


def _find_config_file(config_path: Optional[str], search_dir: str) -> Optional[Path]:
    if config_path:
        path = Path(config_path).resolve()
        if not path.exists():
            raise InspectorConfigError(
                f"Specified config file not found: {path}",
                config_path=str(path),
            )
        return path

    for name in CONFIG_NAMES:
        candidate = Path(search_dir).resolve() / name
        if candidate.exists():
            return candidate
    return None


def _apply_file_values(settings: Settings, config: Mapping[str, Any], config_path: Path) -> None:
    known = {f.name: f for f in fields(Settings)}
    remote = config.get("remote") or {}
    if not isinstance(remote, Mapping):
        raise InspectorConfigError("'remote' must be a mapping", config_path=str(config_path), section="remote")

    values = dict(config)
    values.pop("remote", None)
    if "api_url" in remote:
        values["api_url"] = remote["api_url"]
    if "app_id" in remote:
        values["app_id"] = remote["app_id"]
    if "timeout" in remote:
        values["remote_timeout"] = remote["timeout"]

    for key, value in values.items():
        if key not in known:
            logger.warning("Ignoring unknown config key %r in %s", key, config_path)
            continue
        if value is None or value == "":
            continue
        default = getattr(Settings(), key)
        try:
            if isinstance(default, bool):
                coerced = value.strip().lower() in ("1", "true", "yes", "on") if isinstance(value, str) else bool(value)
            elif isinstance(default, list):
                coerced = _split_list(value)
            elif isinstance(default, (int, float)):
                coerced = type(default)(value)
            else:
                coerced = str(value)
        except (TypeError, ValueError) as e:
            raise InspectorConfigError(
                f"Invalid value for {key}: {e}",
                config_path=str(config_path),
                section=key,
            )
        setattr(settings, key, coerced)


def _apply_env(settings: Settings, environ: Mapping[str, str]) -> None:
    for var, (name, parser) in ENV_VARS.items():
        raw = environ.get(var)
        if raw is None or raw.strip() == "":
            continue
        try:
            setattr(settings, name, _coerce(raw.strip(), parser))
        except ValueError as e:
            raise InspectorConfigError(f"Invalid value for {var}: {e}", section=var)


def _validate(settings: Settings) -> None:
    if not settings.remote_timeout > 0:
        raise InspectorConfigError(
            f"Invalid value for remote_timeout: must be positive, got {settings.remote_timeout}",
            section="remote_timeout",
        )


def load_settings(
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    search_dir: str = ".",
) -> Settings:
    """
    Build Settings from defaults, an optional YAML file and the environment.

    Args:
        config_path: Explicit config path from the --config CLI flag
        environ: Environment mapping (defaults to os.environ)
        search_dir: Directory searched for .pdfsi.yml/.pdfsi.yaml

    Returns:
        Populated Settings. Missing remote credentials are not an error.

    Raises:
        InspectorConfigError: If an explicit config is missing or any source is malformed
    """
    environ = os.environ if environ is None else environ
    settings = Settings()

    path = _find_config_file(config_path, search_dir)
    if path is not None:
        try:
            config = _load_yaml_config(path)
        except (yaml.YAMLError, ValueError, OSError) as e:
            raise InspectorConfigError(f"Failed to parse config file: {e}", config_path=str(path))
        _apply_file_values(settings, config, path)
        logger.info("Loaded config: %s", path)

    _apply_env(settings, environ)
    _validate(settings)

    if not settings.remote_configured:
        logger.info("Remote classifier not configured - local detection only")
    return settings


def create_default_config_template() -> str:
    """
    Create a minimal .pdfsi.yml template with commented examples.

    Returns:
        YAML string with default configuration template
    """
    return """# PDF Secret Inspector configuration
# Environment variables override every value in this file.

# Remote classifier (both values required, otherwise local rules are used)
remote:
  api_url: ""      # PROMPT_SECURITY_API_URL
  app_id: ""       # PROMPT_SECURITY_APP_ID
  timeout: 10      # seconds, PROMPT_SECURITY_TIMEOUT

# Upload limits
max_file_size: 10485760
allowed_types:
  - "application/pdf"

# Allowed CORS origins for the HTTP service
cors_origins:
  - "chrome-extension://*"
  - "http://localhost:*"

log_level: INFO
log_json: false

host: 127.0.0.1
port: 3000
"""

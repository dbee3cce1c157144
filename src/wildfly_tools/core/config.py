"""
Lifecycle configuration loading (YAML-only).

Configuration sources (highest to lowest priority):
1. Environment variables: WILDFLY_TOOLS_<section>__<key>
2. An explicit YAML file passed to :func:`load_lifecycle_config`
3. Bundled defaults: wildfly_tools.data/config/lifecycle.yaml

The merged ``lifecycle`` section is validated against
``wildfly_tools.data/schemas/lifecycle-config.schema.yaml``.
"""
from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import jsonschema
import yaml

from wildfly_tools.core.exceptions import ConfigError
from wildfly_tools.core.utils.merge import deep_merge
from wildfly_tools.data import get_data_path, read_yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "WILDFLY_TOOLS_"
SECTION = "lifecycle"
SCHEMA_FILE = "lifecycle-config.schema.yaml"


@dataclass(frozen=True)
class LifecycleConfig:
    """Timeouts and intervals used by the lifecycle helpers."""

    startup_timeout_seconds: float = 60.0
    reload_timeout_seconds: float = 60.0
    shutdown_timeout: int = 0
    poll_interval_seconds: float = 0.1
    process_destroy_timeout_seconds: float = 10.0

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "LifecycleConfig":
        validate_lifecycle_section(raw)
        return cls(
            startup_timeout_seconds=float(raw["startup_timeout_seconds"]),
            reload_timeout_seconds=float(raw["reload_timeout_seconds"]),
            shutdown_timeout=int(raw["shutdown_timeout"]),
            poll_interval_seconds=float(raw["poll_interval_seconds"]),
            process_destroy_timeout_seconds=float(raw["process_destroy_timeout_seconds"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _as_bool(v: str) -> Optional[bool]:
    low = v.strip().lower()
    if low in {"true", "false"}:
        return low == "true"
    return None


def _as_int(v: str) -> Optional[int]:
    if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
        return int(v)
    return None


def _as_float(v: str) -> Optional[float]:
    s = v.strip()
    if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
        return float(s)
    return None


def _as_json(v: str) -> Optional[Any]:
    s = v.strip()
    if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
        try:
            return json.loads(s)
        except json.JSONDecodeError:
            return None
    return None


def _coerce_type(value: str) -> Any:
    for caster in (_as_bool, _as_int, _as_float, _as_json):
        result = caster(value)
        if result is not None:
            return result
    return value.strip()


def _parse_env_key(raw: str) -> List[str]:
    segs = raw.split("__")
    if any(seg == "" for seg in segs):
        raise ConfigError(f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.")
    return [seg.lower() for seg in segs]


def apply_env_overrides(cfg: Dict[str, Any], environ: Mapping[str, str]) -> Dict[str, Any]:
    """Return ``cfg`` with ``WILDFLY_TOOLS_<a>__<b>`` variables applied."""
    result = dict(cfg)
    for key in sorted(environ.keys()):
        if not key.startswith(ENV_PREFIX):
            continue
        path = _parse_env_key(key[len(ENV_PREFIX):])
        override: Dict[str, Any] = {path[-1]: _coerce_type(environ[key])}
        for part in reversed(path[:-1]):
            override = {part: override}
        logger.debug("Applying configuration override from %s", key)
        result = deep_merge(result, override)
    return result


def load_schema() -> Dict[str, Any]:
    path = get_data_path("schemas", SCHEMA_FILE)
    schema = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(schema, dict):
        raise ConfigError(f"Schema must be a YAML mapping, got {type(schema).__name__}")
    return schema


def validate_lifecycle_section(section: Mapping[str, Any]) -> None:
    """Validate a ``lifecycle`` section.

    Raises:
        ConfigError: If the section does not match the bundled schema.
    """
    try:
        jsonschema.validate(instance=dict(section), schema=load_schema())
    except jsonschema.ValidationError as exc:
        location = ".".join(str(p) for p in exc.absolute_path) or SECTION
        raise ConfigError(
            f"Invalid lifecycle configuration at '{location}': {exc.message}",
            context={"path": location},
        ) from exc


def _read_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}", context={"path": str(path)})
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}", context={"path": str(path)}) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} must contain a mapping", context={"path": str(path)})
    return data


def load_lifecycle_config(
    config_path: Optional[Path | str] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> LifecycleConfig:
    """Load, merge and validate the lifecycle configuration.

    Args:
        config_path: Optional YAML file layered over the bundled defaults.
        environ: Environment used for overrides (defaults to ``os.environ``).

    Raises:
        ConfigError: On missing files, invalid YAML or schema violations.
    """
    cfg: Dict[str, Any] = deep_merge({}, read_yaml("config", "lifecycle.yaml"))
    if config_path is not None:
        cfg = deep_merge(cfg, _read_config_file(Path(config_path).expanduser()))
    cfg = apply_env_overrides(cfg, os.environ if environ is None else environ)

    section = cfg.get(SECTION)
    if not isinstance(section, Mapping):
        raise ConfigError(f"'{SECTION}' configuration section is missing")
    return LifecycleConfig.from_raw(section)


__all__ = [
    "ENV_PREFIX",
    "LifecycleConfig",
    "apply_env_overrides",
    "load_lifecycle_config",
    "validate_lifecycle_section",
]

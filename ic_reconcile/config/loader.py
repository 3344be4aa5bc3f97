from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.column_map import DEFAULT_HEADER_VARIANTS, DEFAULT_POSITION_LABEL, HeaderVariants
from ..services.normalizer import normalize

"""Config loader.

Responsibilities:
- Load YAML config (default config/reconcile.yml)
- Validate against the bundled JSON schema
- Apply defaults for every missing key
- Apply the IC_RECONCILE_OUTPUT_DIR environment override
"""

__all__ = [
    "ConfigError",
    "ReconcileConfig",
    "DEFAULT_CONFIG_PATH",
    "OUTPUT_DIR_ENV",
    "load_config",
    "default_config",
]

SCHEMA_PATH = Path(__file__).with_name("schema.json")
DEFAULT_CONFIG_PATH = Path("config/reconcile.yml")
OUTPUT_DIR_ENV = "IC_RECONCILE_OUTPUT_DIR"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ReconcileConfig:
    output_directory: str = "./storage"
    output_prefix: str = "updated_excel_"
    position_header_label: str = DEFAULT_POSITION_LABEL
    header_variants: HeaderVariants = field(default=DEFAULT_HEADER_VARIANTS)


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the bundled JSON schema.

    Raises:
        ConfigError: schema file missing/invalid, or data failing validation
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _build_variants(raw: dict[str, list[str]] | None) -> HeaderVariants:
    # Configured variants replace the defaults per role; stored normalized
    raw = raw or {}
    base = DEFAULT_HEADER_VARIANTS

    def pick(key: str, default: frozenset[str]) -> frozenset[str]:
        if key not in raw:
            return default
        values = frozenset(normalize(v) for v in raw[key]) - {""}
        if not values:
            raise ConfigError(f"header_variants.{key} has no usable entries after normalization")
        return values

    return HeaderVariants(
        name=pick("name", base.name),
        identity_number=pick("identity_number", base.identity_number),
        position=pick("position", base.position),
    )


def _apply_env(cfg: ReconcileConfig) -> ReconcileConfig:
    env_dir = os.getenv(OUTPUT_DIR_ENV)
    if env_dir:
        return ReconcileConfig(
            output_directory=env_dir,
            output_prefix=cfg.output_prefix,
            position_header_label=cfg.position_header_label,
            header_variants=cfg.header_variants,
        )
    return cfg


def default_config() -> ReconcileConfig:
    """Built-in defaults with the environment override applied."""
    return _apply_env(ReconcileConfig())


def load_config(path: Path) -> ReconcileConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    _validate_config_schema(data)

    defaults = ReconcileConfig()
    cfg = ReconcileConfig(
        output_directory=data.get("output_directory", defaults.output_directory),
        output_prefix=data.get("output_prefix", defaults.output_prefix),
        position_header_label=data.get("position_header_label", defaults.position_header_label),
        header_variants=_build_variants(data.get("header_variants")),
    )
    return _apply_env(cfg)

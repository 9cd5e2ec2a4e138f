import datetime
import uuid
from pathlib import Path

import yaml

from hopfviz.core.config import AppConfig
from hopfviz.core.exceptions import ConfigError
from hopfviz.core.logging import logger

PACKAGE_CONFIG_DIR = Path(__file__).resolve().parent.parent / "configs"
DEFAULT_CONFIG_NAME = "default_hopfviz.yml"


def apply_overrides(config, cli_overrides=None):
    """
    Merge dot-notation overrides (``fibers.fiber_resolution=256``) into a config dict.
    Values are parsed as YAML scalars, so ``true``, ``0.5`` and ``[1, 0, 0]`` work.
    """
    for override in cli_overrides or []:
        if "=" not in override:
            raise ConfigError(f"Override must look like key=value, got: {override}")
        key, val = override.split("=", 1)
        keys = key.strip().split(".")
        d = config
        for k in keys[:-1]:
            d = d.setdefault(k, {})
            if not isinstance(d, dict):
                raise ConfigError(f"Cannot override '{key}': '{k}' is not a section")
        try:
            d[keys[-1]] = yaml.safe_load(val)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Could not parse override value for '{key}': {val}") from exc
    return config


def load_config(config_file=None, cli_overrides=None):
    """
    Load a YAML config and merge CLI overrides.
    Returns the config dict and the full config path used (None when only defaults apply).
    """
    config = {}
    if config_file is not None:
        config_file = Path(config_file)
        if not config_file.exists():
            raise ConfigError(f"Config file not found: {config_file}")
        try:
            with open(config_file, "r") as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_file}: {exc}") from exc
        if not isinstance(config, dict):
            raise ConfigError(f"Top level of {config_file} must be a mapping")
        logger.info(f"Loaded config: {config_file}")

    config = apply_overrides(config, cli_overrides)
    return config, (str(config_file) if config_file is not None else None)


def load_app_config(config_file=None, cli_overrides=None) -> AppConfig:
    """Validated AppConfig from an optional YAML file plus overrides."""
    data, _ = load_config(config_file, cli_overrides)
    return AppConfig.from_mapping(data)


def dump_config(config: AppConfig) -> str:
    return yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False)


def make_output_dir(script_name, base_output_dir=None):
    """
    Creates a timestamped output directory for the run.
    Returns the path to the created output directory.
    """
    timestamp = datetime.datetime.now().strftime("%Y%m%d-%H%M%S")
    run_id = uuid.uuid4().hex[:6]
    out_base = Path(base_output_dir or "outputs") / script_name
    out_dir = out_base / f"{timestamp}-{run_id}"
    out_dir.mkdir(parents=True, exist_ok=False)
    return out_dir

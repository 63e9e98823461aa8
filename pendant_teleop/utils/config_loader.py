"""YAML configuration for the jog variants and the simulated hardware.

Layout under config/ at the project root:

    default.yaml             system defaults (variant, log level, duration)
    teleop/<variant>.yaml    one top-level <variant> section per jog variant
    hardware/<name>.yaml     one top-level <name> section per hardware model

A teleop section may carry a 'hardware_overrides' block; it is merged over
the hardware section it names, so a variant can retune joint speeds or
limits without editing the shared hardware file.
"""

from pathlib import Path
from typing import Any

from omegaconf import DictConfig, OmegaConf
import yaml

from pendant_teleop.interfaces.robot_output import ConfigurationError


_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "config"


def load_yaml(file_path: str | Path) -> dict:
    """Parse a YAML file (absolute, or relative to config/).

    Raises:
        ConfigurationError: If the file does not exist.
    """
    path = Path(file_path)
    if not path.is_absolute():
        path = _CONFIG_DIR / path
    if not path.is_file():
        raise ConfigurationError(f"Config file not found: {path}")
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def merge_configs(*configs: DictConfig | dict | None) -> DictConfig:
    """Merge configurations left to right; later values win. None entries are skipped."""
    result = OmegaConf.create({})
    for cfg in configs:
        if cfg is None:
            continue
        if isinstance(cfg, dict):
            cfg = OmegaConf.create(cfg)
        result = OmegaConf.merge(result, cfg)
    return result


def load_config(
    config_name: str = "default",
    overrides: dict[str, Any] | None = None,
) -> DictConfig:
    """Load config/{config_name}.yaml with optional overrides merged on top."""
    return merge_configs(load_yaml(f"{config_name}.yaml"), overrides)


def _load_section(group: str, name: str, overrides: dict[str, Any] | None) -> DictConfig:
    cfg = load_config(f"{group}/{name}")
    if name not in cfg:
        raise ConfigurationError(f"config/{group}/{name}.yaml has no top-level '{name}' section")
    return merge_configs(cfg[name], overrides)


def load_teleop_config(
    variant: str,
    overrides: dict[str, Any] | None = None,
) -> DictConfig:
    """Load the section of one jog variant (e.g. 'arm_jog', 'bone_jog').

    Args:
        variant: Variant name, also the file name under config/teleop/.
        overrides: Values merged over the variant section.

    Returns:
        The variant section as a DictConfig.

    Raises:
        ConfigurationError: If the file or its section is missing.
    """
    return _load_section("teleop", variant, overrides)


def load_hardware_config(
    hardware_name: str,
    overrides: dict[str, Any] | None = None,
) -> DictConfig:
    """Load the section of one simulated hardware model (e.g. 'sim_arm')."""
    return _load_section("hardware", hardware_name, overrides)


def resolve_hardware(teleop_section: DictConfig) -> DictConfig:
    """Hardware section named by a teleop section, with its overrides applied.

    Raises:
        ConfigurationError: If the section names no hardware.
    """
    name = teleop_section.get("hardware")
    if not name:
        raise ConfigurationError("Teleop section does not name a 'hardware' model")
    overrides = teleop_section.get("hardware_overrides")
    if isinstance(overrides, DictConfig):
        overrides = OmegaConf.to_container(overrides, resolve=True)
    return load_hardware_config(name, overrides)

"""
Config and output path helpers shared across hopfviz commands.
"""
import typer
from pathlib import Path
from typing import List, Optional

from hopfviz.core.config import AppConfig
from hopfviz.core.utils import DEFAULT_CONFIG_NAME, PACKAGE_CONFIG_DIR, load_app_config

def resolve_config_path(config: Optional[Path], search_dirs: list = None) -> Path:
    """
    Resolve configuration file path with smart defaults.

    Args:
        config: Explicit config path from user
        search_dirs: Directories to search (default: ./configs, then the packaged configs)

    Returns:
        Path to configuration file

    Raises:
        typer.BadParameter: If an explicit config file is not found
    """
    if config:
        if config.exists():
            return config.resolve()
        raise typer.BadParameter(f"Configuration file not found: {config}")

    if search_dirs is None:
        search_dirs = [
            Path.cwd() / "configs",
            PACKAGE_CONFIG_DIR,
        ]

    default_names = [
        DEFAULT_CONFIG_NAME,
        DEFAULT_CONFIG_NAME.replace(".yml", ".yaml"),
    ]

    for search_dir in search_dirs:
        if not search_dir.exists():
            continue
        for name in default_names:
            candidate = search_dir / name
            if candidate.exists():
                return candidate.resolve()

    raise typer.BadParameter(
        f"No configuration file found. Searched: {search_dirs} for files like: {default_names}"
    )

def resolve_app_config(config: Optional[Path], overrides: Optional[List[str]] = None) -> AppConfig:
    """Locate, load and validate the configuration for a command."""
    return load_app_config(resolve_config_path(config), overrides)

def resolve_output_path(output: Optional[Path], script_name: str, base_name: str = "snapshot.png") -> Path:
    """
    Resolve the output file with smart defaults.

    Args:
        output: Explicit output path from user
        script_name: Name of the calling command
        base_name: File name used inside an auto-generated directory

    Returns:
        Path to the output file (parent directory created if necessary)
    """
    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        return output.resolve()

    from hopfviz.core.utils import make_output_dir
    return make_output_dir(script_name, base_output_dir=Path.cwd() / "outputs") / base_name

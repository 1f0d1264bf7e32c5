"""
Configuration management for opsynth.

Loads and validates config.yaml from the opsynth home directory
($OPSYNTH_HOME, default ~/.config/opsynth).
"""

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


class ConfigError(Exception):
    """Configuration validation error."""
    pass


def get_opsynth_home() -> Path:
    """Get the opsynth home directory, honouring OPSYNTH_HOME."""
    env_home = os.environ.get("OPSYNTH_HOME")
    if env_home:
        return Path(env_home)
    return Path("~/.config/opsynth").expanduser()


@dataclass
class OpsynthConfig:
    """
    Settings shared by the synthesizer, the generator adapter and the loader.

    Attributes:
        document_path: Well-known path the synthesized document is written to
        output_dir: Directory the generator writes the client package into
        package_name: Import name of the generated client package
        generator_name: Generator target passed to the codegen tool (-g)
        generator_command: Executable of the codegen tool
        api_class: Name of the generated API class holding the operations
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: "pretty" (rich console) or "structured" (JSON lines)
        log_file: Optional log file path
    """
    document_path: str = "generated/openapi.yaml"
    output_dir: str = "generated/client"
    package_name: str = "generated_client"
    generator_name: str = "python"
    generator_command: str = "openapi-generator-cli"
    api_class: str = "DefaultApi"
    log_level: str = "INFO"
    log_format: str = "pretty"
    log_file: Optional[str] = None

    def __post_init__(self):
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(
                f"log_level must be one of {LOG_LEVELS}, got: {self.log_level}"
            )
        if self.log_format not in ("pretty", "structured"):
            raise ConfigError(
                f"log_format must be 'pretty' or 'structured', got: {self.log_format}"
            )
        if not self.package_name.isidentifier():
            raise ConfigError(f"package_name is not a valid identifier: {self.package_name}")

    @property
    def document_file(self) -> Path:
        return Path(self.document_path).expanduser()

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir).expanduser()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OpsynthConfig":
        """Create from a parsed config mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys: {unknown}")
        return cls(**data)


def load_config(config_path: Optional[Path] = None) -> OpsynthConfig:
    """
    Load opsynth configuration from YAML file.

    Args:
        config_path: Path to config file. Defaults to $OPSYNTH_HOME/config.yaml

    Returns:
        OpsynthConfig instance

    Raises:
        FileNotFoundError: If the config file does not exist
        ConfigError: If the config is invalid
    """
    if config_path is None:
        config_path = get_opsynth_home() / "config.yaml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"opsynth config.yaml not found at {config_path}. Run 'opsynth init'."
        )

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {config_path}: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping: {config_path}")

    return OpsynthConfig.from_dict(data)

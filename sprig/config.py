"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables
  2. Project config (.sprig/config.yaml)
  3. User config (~/.sprig/config.yaml)
  4. Defaults
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


VALID_SYMBOLS = ("unicode", "ascii", "auto")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Environment variable -> (section, setting)
ENV_OVERRIDES = {
    "SPRIG_DEFAULT_BRANCH": ("core", "default_branch"),
    "SPRIG_SYMBOLS": ("display", "symbols"),
    "SPRIG_LOG_LEVEL": ("log", "level"),
}


@dataclass
class CoreConfig:
    """Repository defaults."""
    default_branch: str = "main"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        from .core.errors import InvalidBranchName
        from .core.refs import validate_branch_name

        try:
            validate_branch_name(self.default_branch)
        except InvalidBranchName as e:
            return str(e)
        return None


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"

    def validate(self) -> Optional[str]:
        if self.symbols not in VALID_SYMBOLS:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(VALID_SYMBOLS)}"
        return None


@dataclass
class LogConfig:
    """Diagnostic logging threshold for the core."""
    level: str = "WARNING"

    def validate(self) -> Optional[str]:
        if self.level.upper() not in VALID_LOG_LEVELS:
            return f"Unknown log level '{self.level}'. Valid: {', '.join(VALID_LOG_LEVELS)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    core: CoreConfig = field(default_factory=CoreConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    log: LogConfig = field(default_factory=LogConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "core": {"default_branch": self.core.default_branch},
            "display": {"symbols": self.display.symbols},
            "log": {"level": self.log.level},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        core_data = data.get("core", {})
        display_data = data.get("display", {})
        log_data = data.get("log", {})

        return cls(
            core=CoreConfig(default_branch=core_data.get("default_branch", "main")),
            display=DisplayConfig(symbols=display_data.get("symbols", "auto")),
            log=LogConfig(level=str(log_data.get("level", "WARNING")).upper()),
        )

    def validate(self) -> Optional[str]:
        for section in (self.core, self.display, self.log):
            error = section.validate()
            if error:
                return error
        return None


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment
      2. Project config (.sprig/config.yaml)
      3. User config (~/.sprig/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".sprig"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".sprig"
    PROJECT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.USER_CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}

        # User file, then project file (higher priority)
        for path in (self.user_config_path, self.project_config_path):
            config_data = self._merge(config_data, self._read_yaml(path))

        # Environment overrides
        for env_key, (section, setting) in ENV_OVERRIDES.items():
            if not os.environ.get(env_key):
                continue
            section_data = config_data.get(section)
            if not isinstance(section_data, dict):
                section_data = config_data[section] = {}
            section_data[setting] = os.environ[env_key]

        self._config = Config.from_dict(config_data)
        return self._config

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError:
            return {}  # Ignore malformed config
        return data if isinstance(data, dict) else {}

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.project_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)
        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.user_config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.user_config_path, 'w') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False)
        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "core.default_branch")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'log.level')"

        section, setting = parts

        if section == "core":
            if setting != "default_branch":
                return f"Unknown core setting: {setting}. Valid: default_branch"
            config.core.default_branch = value
            error = config.core.validate()
        elif section == "display":
            if setting != "symbols":
                return f"Unknown display setting: {setting}. Valid: symbols"
            config.display.symbols = value
            error = config.display.validate()
        elif section == "log":
            if setting != "level":
                return f"Unknown log setting: {setting}. Valid: level"
            config.log.level = value.upper()
            error = config.log.validate()
        else:
            return f"Unknown section: {section}. Valid: core, display, log"

        if error:
            self._config = None
            return error

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)
        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        parts = key.split(".")
        if len(parts) != 2:
            return None
        section, setting = parts
        return self.load().to_dict().get(section, {}).get(setting)

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        lines = ["Configuration:", ""]
        for section, values in config.to_dict().items():
            lines.append(f"{section}:")
            for setting, value in values.items():
                lines.append(f"  {setting}: {value}")
            lines.append("")
        lines.extend([
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ])
        return "\n".join(lines)


def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()

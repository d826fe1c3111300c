"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables (MINDMODE_MODE, MINDMODE_SYMBOLS)
  2. Project config (.mindmode/config.yaml)
  3. User config (~/.mindmode/config.yaml)
  4. Defaults
"""

import copy
import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from .core.navigation import SpatialSettings
from .core.types import Mode
from .presentation.symbols import get_symbols


DEFAULT_MIN_DISTANCE = 20.0
DEFAULT_CROSS_AXIS_WEIGHT = 0.5

SYMBOL_CHOICES = ("unicode", "ascii", "auto")
MODE_CHOICES = tuple(mode.value for mode in Mode)


@dataclass
class NavigationConfig:
    """Spatial fallback tuning for directional motion."""
    min_distance: float = DEFAULT_MIN_DISTANCE
    cross_axis_weight: float = DEFAULT_CROSS_AXIS_WEIGHT

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.min_distance < 0:
            return f"min_distance must be >= 0, got {self.min_distance}"
        if self.cross_axis_weight < 0:
            return f"cross_axis_weight must be >= 0, got {self.cross_axis_weight}"
        return None

    def to_settings(self) -> SpatialSettings:
        return SpatialSettings(min_distance=self.min_distance, cross_axis_weight=self.cross_axis_weight)


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.symbols not in SYMBOL_CHOICES:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(SYMBOL_CHOICES)}"
        return None


@dataclass
class EditorConfig:
    """Modal editing preferences."""
    default_mode: str = Mode.NORMAL.value
    vim_enabled: bool = True

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.default_mode not in MODE_CHOICES:
            return f"Unknown mode '{self.default_mode}'. Valid: {', '.join(MODE_CHOICES)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    navigation: NavigationConfig = field(default_factory=NavigationConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    editor: EditorConfig = field(default_factory=EditorConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "navigation": {
                "min_distance": self.navigation.min_distance,
                "cross_axis_weight": self.navigation.cross_axis_weight
            },
            "display": {
                "symbols": self.display.symbols
            },
            "editor": {
                "default_mode": self.editor.default_mode,
                "vim_enabled": self.editor.vim_enabled
            }
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        navigation_data = data.get("navigation") or {}
        display_data = data.get("display") or {}
        editor_data = data.get("editor") or {}

        return cls(
            navigation=NavigationConfig(
                min_distance=float(navigation_data.get("min_distance", DEFAULT_MIN_DISTANCE)),
                cross_axis_weight=float(navigation_data.get("cross_axis_weight", DEFAULT_CROSS_AXIS_WEIGHT))
            ),
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto")
            ),
            editor=EditorConfig(
                default_mode=editor_data.get("default_mode", Mode.NORMAL.value),
                vim_enabled=bool(editor_data.get("vim_enabled", True))
            )
        )


def _parse_bool(value: str) -> bool:
    return value.lower() in ('true', '1', 'yes')


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Environment variables
      2. Project config (.mindmode/config.yaml)
      3. User config (~/.mindmode/config.yaml)
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".mindmode"
    PROJECT_CONFIG_DIR = ".mindmode"
    CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None, user_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.user_dir = Path(user_dir) if user_dir else self.USER_CONFIG_DIR
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self.user_dir / self.CONFIG_FILE

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        # Start with defaults
        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        if self.user_config_path.exists():
            try:
                with open(self.user_config_path) as f:
                    user_data = yaml.safe_load(f) or {}
                    config_data = self._merge(config_data, user_data)
            except Exception:
                pass  # Ignore malformed user config

        # Layer 2: Project config (higher priority)
        if self.project_config_path.exists():
            try:
                with open(self.project_config_path) as f:
                    project_data = yaml.safe_load(f) or {}
                    config_data = self._merge(config_data, project_data)
            except Exception:
                pass  # Ignore malformed project config

        # Layer 3: Environment overrides
        if os.environ.get("MINDMODE_MODE"):
            config_data.setdefault("editor", {})["default_mode"] = os.environ["MINDMODE_MODE"]
        if os.environ.get("MINDMODE_SYMBOLS"):
            config_data.setdefault("display", {})["symbols"] = os.environ["MINDMODE_SYMBOLS"]

        try:
            self._config = Config.from_dict(config_data)
        except (TypeError, ValueError, AttributeError):
            self._config = Config()  # Wrong-typed values fall back to defaults
        return self._config

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
            key: Dot-separated key (e.g., "display.symbols")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = copy.deepcopy(self.load())

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'display.symbols')"

        section, setting = parts

        if section == "navigation":
            if setting not in ("min_distance", "cross_axis_weight"):
                return f"Unknown navigation setting: {setting}. Valid: min_distance, cross_axis_weight"
            try:
                number = float(value)
            except ValueError:
                return f"Invalid number for {key}: {value}"
            setattr(config.navigation, setting, number)
            error = config.navigation.validate()
            if error:
                return error

        elif section == "display":
            if setting == "symbols":
                config.display.symbols = value
            else:
                return f"Unknown display setting: {setting}. Valid: symbols"
            error = config.display.validate()
            if error:
                return error

        elif section == "editor":
            if setting == "default_mode":
                config.editor.default_mode = value
            elif setting == "vim_enabled":
                config.editor.vim_enabled = _parse_bool(value)
            else:
                return f"Unknown editor setting: {setting}. Valid: default_mode, vim_enabled"
            error = config.editor.validate()
            if error:
                return error
        else:
            return f"Unknown section: {section}. Valid: navigation, display, editor"

        if scope == "project":
            self.save_project(config)
        else:
            self.save_user(config)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return None

        section, setting = parts

        if section == "navigation":
            if setting == "min_distance":
                return str(config.navigation.min_distance)
            elif setting == "cross_axis_weight":
                return str(config.navigation.cross_axis_weight)
        elif section == "display":
            if setting == "symbols":
                return config.display.symbols
        elif section == "editor":
            if setting == "default_mode":
                return config.editor.default_mode
            elif setting == "vim_enabled":
                return str(config.editor.vim_enabled).lower()

        return None

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
        symbols = get_symbols(config.display.symbols)

        vim_status = f"{symbols.check_pass} Enabled" if config.editor.vim_enabled else f"{symbols.check_fail} Disabled"
        lines = [
            "Configuration:",
            "",
            "Navigation:",
            f"  Min distance: {config.navigation.min_distance}",
            f"  Cross-axis weight: {config.navigation.cross_axis_weight}",
            "",
            "Display:",
            f"  Symbols: {config.display.symbols}",
            "",
            "Editor:",
            f"  Default mode: {config.editor.default_mode}",
            f"  Vim keys: {vim_status}",
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Project: {self.project_config_path}",
        ]

        return "\n".join(lines)


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()

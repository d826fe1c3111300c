"""
Tests for Config — layered settings for navigation, display and editor

These tests validate:
- Config hierarchy (env > project > user > defaults)
- Validation of set() values
- Malformed files fall back instead of failing
"""

import yaml

from mindmode.config import Config, ConfigManager, NavigationConfig, get_config


class TestDefaults:
    """Default configuration."""

    def test_defaults(self, tmp_path):
        """No files means defaults."""
        config = ConfigManager(tmp_path).load()
        assert config.navigation.min_distance == 20.0
        assert config.navigation.cross_axis_weight == 0.5
        assert config.display.symbols == "auto"
        assert config.editor.default_mode == "normal"
        assert config.editor.vim_enabled is True

    def test_to_settings(self):
        """Navigation config feeds the spatial fallback."""
        settings = NavigationConfig(min_distance=5, cross_axis_weight=1.0).to_settings()
        assert (settings.min_distance, settings.cross_axis_weight) == (5, 1.0)

    def test_dict_round_trip(self):
        """to_dict and from_dict agree."""
        config = Config.from_dict({"display": {"symbols": "ascii"}, "editor": {"vim_enabled": False}})
        assert Config.from_dict(config.to_dict()) == config


class TestHierarchy:
    """Layering of user, project and environment."""

    def write(self, path, data):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.dump(data))

    def test_project_overrides_user(self, tmp_path):
        """Project values win; untouched user values survive."""
        manager = ConfigManager(tmp_path / "project", user_dir=tmp_path / "user")
        self.write(manager.user_config_path, {"display": {"symbols": "ascii"}, "editor": {"vim_enabled": False}})
        self.write(manager.project_config_path, {"display": {"symbols": "unicode"}})

        config = manager.load()
        assert config.display.symbols == "unicode"
        assert config.editor.vim_enabled is False

    def test_env_overrides_files(self, tmp_path, monkeypatch):
        """Environment variables win over files."""
        manager = ConfigManager(tmp_path)
        self.write(manager.project_config_path, {"editor": {"default_mode": "visual"}})
        monkeypatch.setenv("MINDMODE_MODE", "insert")
        monkeypatch.setenv("MINDMODE_SYMBOLS", "ascii")

        config = manager.load()
        assert config.editor.default_mode == "insert"
        assert config.display.symbols == "ascii"

    def test_malformed_file_ignored(self, tmp_path):
        """Invalid YAML falls back to lower layers."""
        manager = ConfigManager(tmp_path)
        manager.project_config_path.parent.mkdir(parents=True)
        manager.project_config_path.write_text("display: [unclosed")
        assert manager.load().display.symbols == "auto"

    def test_wrong_types_fall_back_to_defaults(self, tmp_path):
        """Values that cannot be converted reset to defaults."""
        manager = ConfigManager(tmp_path)
        self.write(manager.project_config_path, {"navigation": {"min_distance": "far"}})
        assert manager.load().navigation.min_distance == 20.0

    def test_get_config(self, tmp_path):
        """Convenience loader reads the project directory."""
        self.write(tmp_path / ".mindmode" / "config.yaml", {"display": {"symbols": "ascii"}})
        assert get_config(tmp_path).display.symbols == "ascii"


class TestSet:
    """Changing values."""

    def test_set_project_value(self, tmp_path):
        """set() writes the project file."""
        manager = ConfigManager(tmp_path)
        assert manager.set("navigation.min_distance", "35") is None
        saved = yaml.safe_load(manager.project_config_path.read_text())
        assert saved["navigation"]["min_distance"] == 35.0
        assert manager.get("navigation.min_distance") == "35.0"

    def test_set_user_value(self, tmp_path):
        """scope=user writes the user file."""
        manager = ConfigManager(tmp_path, user_dir=tmp_path / "home")
        assert manager.set("editor.vim_enabled", "no", scope="user") is None
        assert manager.user_config_path.exists()
        assert manager.get("editor.vim_enabled") == "false"

    def test_invalid_values(self, tmp_path):
        """Bad keys and values return errors and write nothing."""
        manager = ConfigManager(tmp_path)
        assert "Invalid key format" in manager.set("symbols", "ascii")
        assert "Unknown section" in manager.set("theme.color", "red")
        assert "Invalid number" in manager.set("navigation.min_distance", "far")
        assert "must be >= 0" in manager.set("navigation.cross_axis_weight", "-1")
        assert "Unknown mode" in manager.set("editor.default_mode", "replace")
        assert "Unknown symbols setting" in manager.set("display.symbols", "emoji")
        assert not manager.project_config_path.exists()

    def test_rejected_value_leaves_loaded_config_unchanged(self, tmp_path):
        """A value that fails validation never reaches the cached config."""
        manager = ConfigManager(tmp_path)
        before = manager.load().display.symbols
        assert manager.set("display.symbols", "bogus") is not None
        assert manager.load().display.symbols == before
        assert manager.set("navigation.min_distance", "-5") is not None
        assert manager.load().navigation.min_distance >= 0

    def test_display(self, tmp_path):
        """display() lists every section and both paths."""
        manager = ConfigManager(tmp_path)
        manager.set("display.symbols", "ascii")
        text = manager.display()
        assert "Symbols: ascii" in text
        assert "Vim keys: [OK] Enabled" in text
        assert str(manager.project_config_path) in text

"""
Settings tests

Tests defaults, environment overrides and the helper methods.
"""

from platecraft.config import AppSettings


class TestAppSettings:
    """Test configuration loading"""

    def test_defaults(self):
        settings = AppSettings(_env_file=None)
        assert settings.folder_delimiter == "::"
        assert settings.batch_delimiter == "|"
        assert settings.strict_mode is False
        assert settings.debug_mode is False
        assert "woff2" in settings.font_extensions

    def test_environment_overrides(self, monkeypatch):
        """PLATECRAFT_-prefixed variables override defaults"""
        monkeypatch.setenv("PLATECRAFT_STRICT_MODE", "true")
        monkeypatch.setenv("PLATECRAFT_ASSET_ROOT", "/var/www")
        monkeypatch.setenv("PLATECRAFT_VERBOSITY", "3")
        settings = AppSettings(_env_file=None)
        assert settings.strict_mode is True
        assert settings.asset_root == "/var/www"
        assert settings.verbosity == 3

    def test_transform_names_split(self):
        settings = AppSettings(_env_file=None)
        assert settings.transformNames_split("trim | upper|") == ["trim", "upper"]
        assert settings.transformNames_split("") == []

    def test_template_name_is(self):
        settings = AppSettings(_env_file=None)
        assert settings.templateName_is("components::card")
        assert not settings.templateName_is("startBlock")

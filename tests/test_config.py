"""
Tests for user settings: defaults, environment overrides and settings files.
"""

import json

from disawsm.config import Settings


class TestSettingsDefaults:

    def test_defaults(self):
        settings = Settings()
        assert settings.label_prefix == "_"
        assert settings.assembler_syntax == "acme"
        assert settings.custom_syntax == {}
        assert settings.use_patterns is False
        assert settings.show_comments is True


class TestSettingsFromEnv:

    def test_no_overrides(self, monkeypatch):
        for name in ("DISAWSM_LABEL_PREFIX", "DISAWSM_SYNTAX",
                     "DISAWSM_USE_PATTERNS", "DISAWSM_SHOW_COMMENTS"):
            monkeypatch.delenv(name, raising=False)
        assert Settings.from_env() == Settings()

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("DISAWSM_LABEL_PREFIX", "L")
        monkeypatch.setenv("DISAWSM_SYNTAX", "KickAss")
        monkeypatch.setenv("DISAWSM_USE_PATTERNS", "yes")
        monkeypatch.setenv("DISAWSM_SHOW_COMMENTS", "off")
        settings = Settings.from_env()
        assert settings.label_prefix == "L"
        assert settings.assembler_syntax == "kickass"
        assert settings.use_patterns is True
        assert settings.show_comments is False

    def test_empty_prefix_allowed(self, monkeypatch):
        monkeypatch.setenv("DISAWSM_LABEL_PREFIX", "")
        assert Settings.from_env().label_prefix == ""

    def test_unrecognized_bool_ignored(self, monkeypatch):
        monkeypatch.setenv("DISAWSM_USE_PATTERNS", "maybe")
        assert Settings.from_env().use_patterns is False

    def test_base_not_modified(self, monkeypatch):
        monkeypatch.setenv("DISAWSM_LABEL_PREFIX", "L")
        base = Settings(label_prefix="x", custom_syntax={"comment_prefix": "*"})
        settings = Settings.from_env(base)
        assert base.label_prefix == "x"
        assert settings.label_prefix == "L"
        assert settings.custom_syntax == {"comment_prefix": "*"}
        assert settings.custom_syntax is not base.custom_syntax


class TestSettingsFile:

    def test_round_trip(self, tmp_path):
        path = tmp_path / "settings.json"
        original = Settings(label_prefix="lbl_", assembler_syntax="ca65", use_patterns=True)
        original.save(path)
        assert Settings.load(path) == original

    def test_merged_over_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"label_prefix": "L", "unknown_key": 1}))
        settings = Settings.load(path)
        assert settings.label_prefix == "L"
        assert settings.assembler_syntax == "acme"

    def test_missing_file_gives_defaults(self, tmp_path):
        assert Settings.load(tmp_path / "nope.json") == Settings()

    def test_bad_file_gives_defaults(self, tmp_path, caplog):
        path = tmp_path / "settings.json"
        path.write_text("{broken")
        with caplog.at_level("WARNING"):
            assert Settings.load(path) == Settings()
        assert "Failed to load settings" in caplog.text

    def test_non_object_ignored(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        assert Settings.load(path) == Settings()

    def test_wrong_types_fall_back(self, tmp_path, caplog):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({
            "label_prefix": None,
            "use_patterns": "no",
            "assembler_syntax": "ca65",
        }))
        with caplog.at_level("WARNING"):
            settings = Settings.load(path)
        assert settings.label_prefix == "_"
        assert settings.use_patterns is False
        assert settings.assembler_syntax == "ca65"
        assert "Ignoring invalid setting label_prefix=None" in caplog.text
        assert "Ignoring invalid setting use_patterns='no'" in caplog.text


class TestSettingsFromDict:

    def test_valid(self):
        settings = Settings.from_dict({
            "custom_syntax": {"comment_prefix": "*"},
            "show_comments": False,
        })
        assert settings.custom_syntax == {"comment_prefix": "*"}
        assert settings.show_comments is False

    def test_bad_custom_syntax(self, caplog):
        with caplog.at_level("WARNING"):
            settings = Settings.from_dict({"custom_syntax": {"comment_prefix": 1}})
        assert settings.custom_syntax == {}
        assert "custom_syntax" in caplog.text

    def test_number_is_not_a_flag(self):
        assert Settings.from_dict({"show_comments": 0}).show_comments is True

"""Tests for Settings persistence and the Thresholds record."""

import dataclasses
import json

import pytest

from mythforge.settings import DEFAULT_THRESHOLDS, Settings, Thresholds
from mythforge.utils.exceptions import ConfigError


class TestThresholds:
    """Tests for the Thresholds record."""

    def test_defaults(self):
        """Should carry the documented default minimums."""
        assert DEFAULT_THRESHOLDS == Thresholds(
            min_entities=5,
            min_locations=5,
            min_vocabulary=10,
            min_timeline_events=5,
            min_story_length=50,
            min_story_word_count=600,
        )

    def test_negative_raises_value_error(self):
        """Should reject negative minimums."""
        with pytest.raises(ValueError, match="min_entities"):
            Thresholds(min_entities=-1)

    def test_non_integer_raises_type_error(self):
        """Should reject non-integer minimums, bools included."""
        with pytest.raises(TypeError):
            Thresholds(min_locations="5")  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            Thresholds(min_vocabulary=True)

    def test_replace_validates(self):
        """Overrides via dataclasses.replace should be validated too."""
        assert dataclasses.replace(DEFAULT_THRESHOLDS, min_entities=3).min_entities == 3
        with pytest.raises(ValueError):
            dataclasses.replace(DEFAULT_THRESHOLDS, min_timeline_events=-2)


class TestSettings:
    """Tests for Settings defaults and validation."""

    def test_default_values(self, tmp_settings):
        """Should have sensible defaults."""
        assert tmp_settings.log_level == "INFO"
        assert tmp_settings.min_fidelity_score == 85.0
        assert tmp_settings.min_term_length == 3
        assert tmp_settings.min_entity_name_length == 3

    def test_thresholds_record(self):
        """Should build Thresholds from the threshold fields."""
        settings = Settings(min_entities=2, min_story_word_count=100)
        thresholds = settings.thresholds()
        assert thresholds.min_entities == 2
        assert thresholds.min_story_word_count == 100
        assert thresholds.min_locations == 5

    def test_validate_passes_for_valid_settings(self, tmp_settings):
        """Should not raise for defaults."""
        tmp_settings.validate()

    @pytest.mark.parametrize(
        "field_name, value",
        [
            ("log_level", "LOUD"),
            ("min_entities", -1),
            ("min_vocabulary", "ten"),
            ("min_fidelity_score", 120.0),
            ("min_fidelity_score", -1.0),
            ("min_term_length", 0),
            ("min_entity_name_length", 0),
        ],
    )
    def test_validate_raises_on_invalid_value(self, tmp_settings, field_name, value):
        """Should raise ValueError for out-of-range or mistyped values."""
        setattr(tmp_settings, field_name, value)
        with pytest.raises(ValueError):
            tmp_settings.validate()


class TestSettingsLoad:
    """Tests for Settings.load."""

    def test_missing_file_gives_defaults_without_writing(self, isolate_settings_file):
        """Should fall back to defaults and not create a file."""
        settings = Settings.load()
        assert settings == Settings()
        assert not isolate_settings_file.exists()

    def test_custom_values_preserved_and_missing_keys_added(self, isolate_settings_file):
        """Should keep customized values and write back new keys."""
        isolate_settings_file.write_text(json.dumps({"min_entities": 3, "obsolete": True}))

        settings = Settings.load()

        assert settings.min_entities == 3
        stored = json.loads(isolate_settings_file.read_text())
        assert stored["min_entities"] == 3
        assert "obsolete" not in stored
        assert stored["min_fidelity_score"] == 85.0

    def test_corrupt_file_falls_back_and_is_backed_up(self, isolate_settings_file):
        """Should use defaults and keep a copy of the corrupt file."""
        isolate_settings_file.write_text("{not json")

        settings = Settings.load()

        assert settings == Settings()
        assert isolate_settings_file.with_suffix(".json.corrupt").exists()

    def test_non_object_file_falls_back(self, isolate_settings_file):
        """Should treat a JSON array as corrupt."""
        isolate_settings_file.write_text("[1, 2]")
        assert Settings.load() == Settings()

    @pytest.mark.parametrize(
        "stored",
        [{"min_entities": -5}, {"min_locations": "many"}, {"log_level": "LOUD"}],
    )
    def test_invalid_stored_value_raises(self, isolate_settings_file, stored):
        """Should raise ValueError for invalid stored values."""
        isolate_settings_file.write_text(json.dumps(stored))
        with pytest.raises(ValueError):
            Settings.load()

    def test_cache(self, isolate_settings_file):
        """Should return the cached instance unless asked to reload."""
        first = Settings.load()
        assert Settings.load() is first
        assert Settings.load(use_cache=False) is not first


class TestSettingsSave:
    """Tests for Settings.save."""

    def test_save_then_load(self, isolate_settings_file):
        """Should persist settings that load back equal."""
        Settings(min_entities=4, log_level="DEBUG").save()

        loaded = Settings.load(use_cache=False)

        assert loaded.min_entities == 4
        assert loaded.log_level == "DEBUG"

    def test_save_validates(self, isolate_settings_file):
        """Should refuse to save invalid settings."""
        with pytest.raises(ValueError):
            Settings(min_fidelity_score=101.0).save()
        assert not isolate_settings_file.exists()

    def test_save_failure_raises_config_error(self, tmp_path, monkeypatch):
        """Should wrap write failures in ConfigError."""
        monkeypatch.setattr(
            "mythforge.settings._settings.SETTINGS_FILE", tmp_path / "missing" / "settings.json"
        )
        with pytest.raises(ConfigError):
            Settings().save()

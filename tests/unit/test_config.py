"""Tests for engine settings and environment overrides."""

from __future__ import annotations

import pytest

from isovibe.config import EngineSettings


def test_defaults_match_acquisition_fallbacks() -> None:
    settings = EngineSettings()

    assert settings.default_g_scale == 16.0
    assert settings.default_fmax == 400.0
    assert settings.default_lor == 6400
    assert settings.peak_count == 5


def test_from_env_reads_prefixed_variables() -> None:
    settings = EngineSettings.from_env(
        {
            "ISOVIBE_PEAK_COUNT": "3",
            "ISOVIBE_DEFAULT_FMAX": "1000",
            "ISOVIBE_PAD_TO_POW2": "yes",
            "UNRELATED": "x",
        }
    )

    assert settings.peak_count == 3
    assert settings.default_fmax == 1000.0
    assert settings.pad_to_pow2 is True
    assert settings.default_lor == 6400


def test_from_env_ignores_blank_values() -> None:
    assert EngineSettings.from_env({"ISOVIBE_PEAK_COUNT": "  "}) == EngineSettings()


def test_from_env_rejects_malformed_values() -> None:
    with pytest.raises(ValueError, match="ISOVIBE_DEFAULT_LOR"):
        EngineSettings.from_env({"ISOVIBE_DEFAULT_LOR": "many"})
    with pytest.raises(ValueError, match="ISOVIBE_PAD_TO_POW2"):
        EngineSettings.from_env({"ISOVIBE_PAD_TO_POW2": "maybe"})


def test_settings_validate_ranges() -> None:
    with pytest.raises(ValueError, match="peak_count"):
        EngineSettings(peak_count=0)
    with pytest.raises(ValueError, match="default_g_scale"):
        EngineSettings(default_g_scale=-1.0)


def test_velocity_low_cut_reads_from_env_and_validates() -> None:
    assert EngineSettings().velocity_low_cut_hz == 2.0
    assert EngineSettings.from_env({"ISOVIBE_VELOCITY_LOW_CUT_HZ": "10"}).velocity_low_cut_hz == 10.0
    with pytest.raises(ValueError, match="velocity_low_cut_hz"):
        EngineSettings(velocity_low_cut_hz=-1.0)

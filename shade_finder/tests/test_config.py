from __future__ import annotations

from pathlib import Path

import pytest

from shade_finder.src.shade_match.config import Settings


def test_defaults_without_environment():
    settings = Settings.from_env({})

    assert settings == Settings()
    assert settings.catalog_path is None
    assert settings.min_alpha == 125
    assert settings.min_brightness == 20.0
    assert settings.max_brightness == 240.0
    assert settings.work_width == 400


def test_environment_overrides():
    settings = Settings.from_env(
        {
            "SHADE_MATCH_CATALOG_PATH": "/tmp/shades.csv",
            "SHADE_MATCH_LOG_LEVEL": "debug",
            "SHADE_MATCH_TOP_N": "5",
            "SHADE_MATCH_MAX_BRIGHTNESS": "230.5",
        }
    )

    assert settings.catalog_path == Path("/tmp/shades.csv")
    assert settings.log_level == "DEBUG"
    assert settings.top_n == 5
    assert settings.max_brightness == 230.5


@pytest.mark.parametrize(
    "env",
    [
        {"SHADE_MATCH_TOP_N": "many"},
        {"SHADE_MATCH_TOP_N": "0"},
        {"SHADE_MATCH_MIN_ALPHA": "300"},
        {"SHADE_MATCH_MIN_BRIGHTNESS": "250"},
    ],
)
def test_invalid_values_raise(env):
    with pytest.raises(ValueError, match="SHADE_MATCH_"):
        Settings.from_env(env)

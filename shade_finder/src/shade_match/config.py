from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "SHADE_MATCH_"


@dataclass(frozen=True)
class Settings:
    """Runtime defaults, overridable through ``SHADE_MATCH_*`` variables."""

    catalog_path: Path | None = None
    log_level: str = "INFO"
    top_n: int = 3
    min_alpha: int = 125
    min_brightness: float = 20.0
    max_brightness: float = 240.0
    work_width: int = 400

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        defaults = cls()

        catalog_raw = env.get(f"{ENV_PREFIX}CATALOG_PATH", "").strip()
        settings = cls(
            catalog_path=Path(catalog_raw) if catalog_raw else None,
            log_level=env.get(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level).upper(),
            top_n=_read(env, "TOP_N", int, defaults.top_n),
            min_alpha=_read(env, "MIN_ALPHA", int, defaults.min_alpha),
            min_brightness=_read(env, "MIN_BRIGHTNESS", float, defaults.min_brightness),
            max_brightness=_read(env, "MAX_BRIGHTNESS", float, defaults.max_brightness),
            work_width=_read(env, "WORK_WIDTH", int, defaults.work_width),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if self.top_n < 1:
            raise ValueError(f"{ENV_PREFIX}TOP_N must be at least 1")
        if not 0 <= self.min_alpha <= 255:
            raise ValueError(f"{ENV_PREFIX}MIN_ALPHA must be within [0, 255]")
        if self.min_brightness > self.max_brightness:
            raise ValueError(
                f"{ENV_PREFIX}MIN_BRIGHTNESS must not exceed {ENV_PREFIX}MAX_BRIGHTNESS"
            )
        if self.work_width < 1:
            raise ValueError(f"{ENV_PREFIX}WORK_WIDTH must be positive")


def _read(env: Mapping[str, str], name: str, cast, default):
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} has an invalid value: {raw!r}") from exc

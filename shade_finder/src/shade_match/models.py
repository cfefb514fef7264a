from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral, Real
from typing import Any

from .errors import InvalidColorInput

RGB = tuple[int, int, int]
LAB = tuple[float, float, float]


@dataclass(frozen=True)
class RGBColor:
    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        for channel in ("red", "green", "blue"):
            value = getattr(self, channel)
            if isinstance(value, bool) or not isinstance(value, Integral):
                raise InvalidColorInput(
                    f"{channel} channel must be an integer, got {value!r}"
                )
            if not 0 <= value <= 255:
                raise InvalidColorInput(
                    f"{channel} channel must be within [0, 255], got {value}"
                )
            object.__setattr__(self, channel, int(value))

    @classmethod
    def clamped(cls, red: float, green: float, blue: float) -> RGBColor:
        """Round and clamp arbitrary real channel values into [0, 255]."""
        channels = []
        for value in (red, green, blue):
            if isinstance(value, bool) or not isinstance(value, Real):
                raise InvalidColorInput(f"channel must be a number, got {value!r}")
            if value != value:
                raise InvalidColorInput("channel must not be NaN")
            channels.append(int(min(255.0, max(0.0, float(value))) + 0.5))
        return cls(*channels)

    @property
    def hex(self) -> str:
        return f"#{self.red:02X}{self.green:02X}{self.blue:02X}"

    def as_tuple(self) -> RGB:
        return self.red, self.green, self.blue


@dataclass(frozen=True)
class LABColor:
    l: float
    a: float
    b: float

    def as_tuple(self) -> LAB:
        return self.l, self.a, self.b


@dataclass(frozen=True)
class ShadeEntry:
    brand: str
    shade: str
    hex: str

    @property
    def label(self) -> str:
        return f"{self.brand} {self.shade}"

    def to_dict(self) -> dict[str, Any]:
        return {"brand": self.brand, "shade": self.shade, "hex": self.hex}


@dataclass(frozen=True)
class RankedShade:
    entry: ShadeEntry
    distance: float

    def to_dict(self) -> dict[str, Any]:
        return {**self.entry.to_dict(), "distance": float(self.distance)}


@dataclass(frozen=True)
class MatchResult:
    entry: ShadeEntry
    distance: float
    sampled: RGBColor
    sampled_lab: LABColor
    quality: str
    alternatives: tuple[RankedShade, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "brand": self.entry.brand,
            "shade": self.entry.shade,
            "hex": self.entry.hex,
            "distance": float(self.distance),
            "quality": self.quality,
            "sampled_rgb": list(self.sampled.as_tuple()),
            "sampled_hex": self.sampled.hex,
            "sampled_lab": [float(v) for v in self.sampled_lab.as_tuple()],
            "alternatives": [item.to_dict() for item in self.alternatives],
        }

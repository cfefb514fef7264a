from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .catalog import ShadeCatalog, default_catalog
from .convert import rgb_to_lab
from .delta_e import ciede2000
from .errors import EmptyCatalogError
from .models import MatchResult, RankedShade, RGBColor, ShadeEntry

# Upper delta E bound for each label, checked in order.
QUALITY_BUCKETS: tuple[tuple[str, float], ...] = (
    ("Excellent", 1.0),
    ("Very Good", 2.0),
    ("Good", 5.0),
    ("Close", 10.0),
)


def match_quality(distance: float) -> str:
    for label, upper in QUALITY_BUCKETS:
        if distance <= upper:
            return label
    return "Poor"


class ShadeMatcher:
    """Nearest-shade search over a catalog.

    Plain sequences of entries are wrapped in a ``ShadeCatalog``. The most
    recent wrapper is kept and reused while the sequence holds the same
    entries, so repeated calls do not convert the catalog again.
    """

    def __init__(self, catalog: Sequence[ShadeEntry] | None = None) -> None:
        self._wrapped: tuple[tuple[ShadeEntry, ...], ShadeCatalog] | None = None
        self.catalog = self._as_catalog(catalog) if catalog is not None else None

    def find_closest(
        self,
        sampled: RGBColor,
        catalog: Sequence[ShadeEntry] | None = None,
        alternatives: int = 0,
    ) -> MatchResult:
        """Return the catalog entry with the smallest CIEDE2000 distance.

        Ties resolve to the entry that comes first in catalog order. With
        ``alternatives > 0`` the next-closest entries are attached to the
        result as well.
        """
        resolved = self._resolve(catalog)
        sampled_lab = rgb_to_lab(sampled)
        distances = self._distances(sampled_lab.as_tuple(), resolved)

        best_idx = int(np.argmin(distances))
        runners_up: tuple[RankedShade, ...] = ()
        if alternatives > 0:
            ordered = np.argsort(distances, kind="stable")
            runners_up = tuple(
                RankedShade(entry=resolved[int(idx)], distance=float(distances[idx]))
                for idx in ordered[1 : 1 + alternatives]
            )

        distance = float(distances[best_idx])
        return MatchResult(
            entry=resolved[best_idx],
            distance=distance,
            sampled=sampled,
            sampled_lab=sampled_lab,
            quality=match_quality(distance),
            alternatives=runners_up,
        )

    def rank(
        self,
        sampled: RGBColor,
        catalog: Sequence[ShadeEntry] | None = None,
        top_n: int | None = 5,
    ) -> list[RankedShade]:
        resolved = self._resolve(catalog)
        distances = self._distances(rgb_to_lab(sampled).as_tuple(), resolved)

        ordered = np.argsort(distances, kind="stable")
        if top_n is not None:
            if top_n < 1:
                raise ValueError("top_n must be at least 1")
            ordered = ordered[:top_n]
        return [
            RankedShade(entry=resolved[int(idx)], distance=float(distances[idx]))
            for idx in ordered
        ]

    def _resolve(self, catalog: Sequence[ShadeEntry] | None) -> ShadeCatalog:
        if catalog is not None:
            resolved = self._as_catalog(catalog)
        elif self.catalog is not None:
            resolved = self.catalog
        else:
            resolved = default_catalog()

        if len(resolved) == 0:
            raise EmptyCatalogError("cannot match against an empty shade catalog")
        return resolved

    def _as_catalog(self, catalog: Sequence[ShadeEntry]) -> ShadeCatalog:
        if isinstance(catalog, ShadeCatalog):
            return catalog

        entries = tuple(catalog)
        cached = self._wrapped
        if cached is not None and cached[0] == entries:
            return cached[1]
        wrapped = ShadeCatalog(entries)
        self._wrapped = (entries, wrapped)
        return wrapped

    @staticmethod
    def _distances(sampled_lab: tuple[float, float, float], catalog: ShadeCatalog) -> np.ndarray:
        source = np.asarray(sampled_lab, dtype=np.float64).reshape(1, 3)
        return ciede2000(source, catalog.lab_matrix()).reshape(-1)

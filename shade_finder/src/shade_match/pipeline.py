from __future__ import annotations

import logging
from pathlib import Path

from .catalog import ShadeCatalog, cached_catalog, default_catalog
from .config import Settings
from .io import read_image_rgba
from .matcher import ShadeMatcher
from .models import MatchResult
from .sampling import FixedRegionLocator, SampleRegionLocator, sample_skin_color

logger = logging.getLogger(__name__)


class ShadeMatchPipeline:
    def __init__(
        self,
        catalog: ShadeCatalog | None = None,
        locator: SampleRegionLocator | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or Settings()
        if catalog is None:
            catalog = (
                cached_catalog(self.settings.catalog_path)
                if self.settings.catalog_path is not None
                else default_catalog()
            )
        self.catalog = catalog
        self.locator = locator or FixedRegionLocator()
        self.matcher = ShadeMatcher(catalog)

    def run(self, image_path: str | Path, alternatives: int | None = None) -> MatchResult:
        image = read_image_rgba(image_path)
        sampled = sample_skin_color(
            image,
            locator=self.locator,
            work_width=self.settings.work_width,
            min_alpha=self.settings.min_alpha,
            min_brightness=self.settings.min_brightness,
            max_brightness=self.settings.max_brightness,
        )
        if alternatives is None:
            alternatives = self.settings.top_n - 1

        result = self.matcher.find_closest(sampled, alternatives=alternatives)
        logger.info(
            "matched sample %s to %s (delta E %.2f, %s)",
            sampled.hex,
            result.entry.label,
            result.distance,
            result.quality,
        )
        return result

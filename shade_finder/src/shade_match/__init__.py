from .catalog import ShadeCatalog, cached_catalog, default_catalog, load_catalog
from .convert import hex_to_rgb, lab_to_rgb, rgb_to_hex, rgb_to_lab
from .delta_e import ciede2000, delta_e_2000
from .errors import EmptyCatalogError, InvalidColorInput, NoSampleError, ShadeMatchError
from .matcher import ShadeMatcher, match_quality
from .models import LABColor, MatchResult, RankedShade, RGBColor, ShadeEntry
from .pipeline import ShadeMatchPipeline
from .sampling import FixedRegionLocator, Region, SampleRegionLocator

__all__ = [
    "EmptyCatalogError",
    "FixedRegionLocator",
    "InvalidColorInput",
    "LABColor",
    "MatchResult",
    "NoSampleError",
    "RGBColor",
    "RankedShade",
    "Region",
    "SampleRegionLocator",
    "ShadeCatalog",
    "ShadeEntry",
    "ShadeMatchError",
    "ShadeMatchPipeline",
    "ShadeMatcher",
    "cached_catalog",
    "ciede2000",
    "default_catalog",
    "delta_e_2000",
    "hex_to_rgb",
    "lab_to_rgb",
    "load_catalog",
    "match_quality",
    "rgb_to_hex",
    "rgb_to_lab",
]

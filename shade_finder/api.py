from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from shade_finder.src.shade_match.catalog import ShadeCatalog, cached_catalog, default_catalog
from shade_finder.src.shade_match.config import Settings
from shade_finder.src.shade_match.errors import (
    EmptyCatalogError,
    InvalidColorInput,
    NoSampleError,
    ShadeMatchError,
)
from shade_finder.src.shade_match.matcher import ShadeMatcher
from shade_finder.src.shade_match.models import MatchResult, RGBColor
from shade_finder.src.shade_match.pipeline import ShadeMatchPipeline
from shade_finder.src.shade_match.sampling import FixedRegionLocator

logger = logging.getLogger(__name__)


class SampleBox(BaseModel):
    x: float = Field(..., ge=0.0, le=1.0)
    y: float = Field(..., ge=0.0, le=1.0)
    width: float = Field(..., gt=0.0, le=1.0)
    height: float = Field(..., gt=0.0, le=1.0)


class MatchImageRequest(BaseModel):
    image_url: str = Field(..., description="HTTP(S) URL of a front-facing photo")
    top_n: int = Field(default=3, ge=1, le=30, description="Shades to return")
    region: SampleBox | None = Field(
        default=None,
        description="Optional sample box as fractions of the image",
    )


class MatchRGBRequest(BaseModel):
    red: int = Field(..., ge=0, le=255)
    green: int = Field(..., ge=0, le=255)
    blue: int = Field(..., ge=0, le=255)
    top_n: int = Field(default=3, ge=1, le=30)


class ShadeItem(BaseModel):
    brand: str
    shade: str
    hex: str


class RankedShadeItem(ShadeItem):
    distance: float


class MatchResponse(BaseModel):
    match: RankedShadeItem
    quality: str
    sampled_rgb: list[int]
    sampled_hex: str
    alternatives: list[RankedShadeItem]


app = FastAPI(
    title="Foundation Shade Finder API",
    version="1.0.0",
    description="Match a sampled skin tone to the closest foundation shade using CIEDE2000.",
)


def _get_catalog() -> ShadeCatalog:
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        raise EmptyCatalogError(f"invalid settings: {exc}") from exc

    if settings.catalog_path is None:
        return default_catalog()
    try:
        return cached_catalog(settings.catalog_path)
    except FileNotFoundError as exc:
        raise EmptyCatalogError(str(exc)) from exc


def _build_pipeline(region: SampleBox | None) -> ShadeMatchPipeline:
    locator = (
        FixedRegionLocator(region.x, region.y, region.width, region.height)
        if region is not None
        else None
    )
    return ShadeMatchPipeline(catalog=_get_catalog(), locator=locator)


def _to_response(result: MatchResult) -> MatchResponse:
    return MatchResponse(
        match=RankedShadeItem(
            brand=result.entry.brand,
            shade=result.entry.shade,
            hex=result.entry.hex,
            distance=float(result.distance),
        ),
        quality=result.quality,
        sampled_rgb=list(result.sampled.as_tuple()),
        sampled_hex=result.sampled.hex,
        alternatives=[
            RankedShadeItem(**item.to_dict()) for item in result.alternatives
        ],
    )


def _http_error(exc: ShadeMatchError) -> HTTPException:
    if isinstance(exc, NoSampleError):
        return HTTPException(status_code=422, detail=f"no_usable_sample: {exc}")
    if isinstance(exc, EmptyCatalogError):
        return HTTPException(status_code=503, detail=f"catalog_unavailable: {exc}")
    if isinstance(exc, InvalidColorInput):
        return HTTPException(status_code=400, detail=f"invalid_color_input: {exc}")
    return HTTPException(status_code=400, detail=f"failed_to_match: {exc}")


@app.get("/foundation-shades", response_model=list[ShadeItem])
async def list_foundation_shades() -> list[ShadeItem]:
    try:
        catalog = _get_catalog()
    except ShadeMatchError as exc:
        raise _http_error(exc) from exc
    return [ShadeItem(**entry.to_dict()) for entry in catalog]


@app.post("/match", response_model=MatchResponse)
async def match_image(payload: MatchImageRequest) -> MatchResponse:
    try:
        pipeline = _build_pipeline(payload.region)
        result = await run_in_threadpool(
            pipeline.run, payload.image_url, payload.top_n - 1
        )
    except ShadeMatchError as exc:
        raise _http_error(exc) from exc
    except Exception as exc:
        logger.exception("matching failed for %s", payload.image_url)
        raise HTTPException(
            status_code=400, detail=f"failed_to_match: {exc}"
        ) from exc

    return _to_response(result)


@app.post("/match/rgb", response_model=MatchResponse)
async def match_rgb(payload: MatchRGBRequest) -> MatchResponse:
    try:
        sampled = RGBColor(payload.red, payload.green, payload.blue)
        result = ShadeMatcher(_get_catalog()).find_closest(
            sampled, alternatives=payload.top_n - 1
        )
    except ShadeMatchError as exc:
        raise _http_error(exc) from exc

    return _to_response(result)

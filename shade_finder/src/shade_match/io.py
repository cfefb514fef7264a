from __future__ import annotations

import io
import json
from pathlib import Path

import numpy as np
import requests
from PIL import Image, ImageOps

from .models import MatchResult


def read_image_rgba(image_path: str | Path) -> np.ndarray:
    """Load a local file or HTTP(S) URL as an ``(H, W, 4)`` uint8 array."""
    path_str = str(image_path)
    if path_str.startswith(("http://", "https://")):
        response = requests.get(path_str, timeout=10)
        response.raise_for_status()
        with Image.open(io.BytesIO(response.content)) as image:
            return _to_rgba_array(image)

    with Image.open(Path(image_path)) as image:
        return _to_rgba_array(image)


def _to_rgba_array(image: Image.Image) -> np.ndarray:
    # Phone photos usually carry their orientation in EXIF.
    upright = ImageOps.exif_transpose(image)
    return np.asarray(upright.convert("RGBA"), dtype=np.uint8)


def write_result_json(result: MatchResult, output_path: str | Path) -> None:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(result.to_dict(), indent=2)
    path.write_text(payload + "\n", encoding="utf-8")

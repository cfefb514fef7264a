from __future__ import annotations

import csv
import json
import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from functools import lru_cache
from pathlib import Path
from typing import overload

import numpy as np

from .convert import hex_to_rgb, rgb_to_hex, rgb_to_lab
from .errors import EmptyCatalogError, InvalidColorInput
from .models import LABColor, ShadeEntry

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parents[2] / "data" / "foundations.csv"


class ShadeCatalog(Sequence[ShadeEntry]):
    """Ordered, immutable collection of foundation shades.

    LAB values are computed once when the catalog is built and kept in a map
    owned by the catalog, so a single instance can be shared by concurrent
    readers. Iteration order is insertion order, which also decides ties when
    matching.
    """

    def __init__(self, entries: Iterable[ShadeEntry] = ()) -> None:
        self._entries: tuple[ShadeEntry, ...] = tuple(entries)
        # Converted one color at a time, exactly as samples are.
        self._lab_by_entry: dict[ShadeEntry, LABColor] = {}
        for entry in self._entries:
            if entry not in self._lab_by_entry:
                self._lab_by_entry[entry] = rgb_to_lab(hex_to_rgb(entry.hex))

        self._lab = np.array(
            [self._lab_by_entry[entry].as_tuple() for entry in self._entries],
            dtype=np.float64,
        ).reshape(-1, 3)
        self._lab.setflags(write=False)

    @classmethod
    def from_records(
        cls, records: Iterable[Mapping[str, object]], source: str = "<records>"
    ) -> ShadeCatalog:
        entries = [
            parse_shade_record(record, f"{source}:{idx}")
            for idx, record in enumerate(records, start=1)
        ]
        return cls(entries)

    def entries(self) -> tuple[ShadeEntry, ...]:
        return self._entries

    def lab_of(self, entry: ShadeEntry) -> LABColor:
        lab = self._lab_by_entry.get(entry)
        if lab is None:
            # Foreign entries are converted on demand and not retained.
            return rgb_to_lab(hex_to_rgb(entry.hex))
        return lab

    def lab_matrix(self) -> np.ndarray:
        """Read-only ``(N, 3)`` array of LAB values in catalog order."""
        return self._lab

    def __len__(self) -> int:
        return len(self._entries)

    @overload
    def __getitem__(self, index: int) -> ShadeEntry: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[ShadeEntry, ...]: ...

    def __getitem__(self, index):
        return self._entries[index]

    def __iter__(self) -> Iterator[ShadeEntry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"ShadeCatalog({len(self._entries)} entries)"


def load_catalog(path_like: str | Path) -> ShadeCatalog:
    path = Path(path_like)
    if not path.exists():
        raise FileNotFoundError(f"catalog file does not exist: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        records = _read_csv(path)
    elif suffix == ".json":
        records = _read_json(path)
    else:
        raise InvalidColorInput(
            f"unsupported catalog format '{path.suffix}'. Use .csv or .json"
        )

    catalog = ShadeCatalog.from_records(records, source=str(path))
    if not catalog:
        raise EmptyCatalogError(f"catalog has no entries: {path}")

    logger.info("loaded %d foundation shades from %s", len(catalog), path)
    return catalog


def cached_catalog(path_like: str | Path) -> ShadeCatalog:
    """Load a catalog file once per process and share it read-only.

    Keyed by the resolved path. Failed loads are not cached.
    """
    return _load_resolved(Path(path_like).resolve())


def default_catalog() -> ShadeCatalog:
    return cached_catalog(DEFAULT_CATALOG_PATH)


@lru_cache(maxsize=16)
def _load_resolved(path: Path) -> ShadeCatalog:
    return load_catalog(path)


def parse_shade_record(record: Mapping[str, object], location: str) -> ShadeEntry:
    if not isinstance(record, Mapping):
        raise InvalidColorInput(f"{location}: expected an object with brand/shade/hex")

    normalized = {
        str(key).strip().lower(): value
        for key, value in record.items()
        if key is not None
    }

    fields: dict[str, str] = {}
    for name in ("brand", "shade", "hex"):
        value = normalized.get(name)
        text = str(value).strip() if value is not None else ""
        if not text:
            raise InvalidColorInput(f"{location}: missing required field '{name}'")
        fields[name] = text

    try:
        rgb = hex_to_rgb(fields["hex"])
    except InvalidColorInput as exc:
        raise InvalidColorInput(f"{location}: {exc}") from exc

    return ShadeEntry(brand=fields["brand"], shade=fields["shade"], hex=rgb_to_hex(rgb))


def _read_csv(path: Path) -> list[dict[str, str]]:
    with path.open("r", encoding="utf-8", newline="") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []
        return list(reader)


def _read_json(path: Path) -> list[Mapping[str, object]]:
    payload = json.loads(path.read_text(encoding="utf-8"))

    if isinstance(payload, dict):
        records = payload.get("shades")
        if not isinstance(records, list):
            raise InvalidColorInput(
                f"json catalog at {path} must be a list or include a 'shades' list"
            )
        return records
    if isinstance(payload, list):
        return payload
    raise InvalidColorInput(
        f"json catalog at {path} must be a list or object with 'shades'"
    )

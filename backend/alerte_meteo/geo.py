# alerte_meteo/geo.py
# ------------------------------------------------------------
# Wilaya name -> coordinates lookup.
#
# Names reach us typed by hand in several spellings
# ("Béjaïa" / "Bejaia", "M’Sila" / "M'sila" / "M-Sila"), so
# matching goes through normalize_region_name(). The capital is
# stored as "Alger" in the dataset but older alerts say "Algiers".
# ------------------------------------------------------------

from __future__ import annotations

import json
import re
import unicodedata
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .config import settings
from .models import WilayaDataset, WilayaGeoEntry

BUNDLED_DATASET = Path(__file__).parent / "data" / "wilayas.json"

# normalized spelling -> normalized canonical name
REGION_ALIASES: Dict[str, str] = {
    "algiers": "alger",
    "el djazair": "alger",
    "al djazair": "alger",
}

_NON_ALNUM = re.compile(r"[^0-9a-z]+")


def normalize_region_name(name: Optional[str]) -> str:
    """
    Lowercase, strip accents, turn hyphens/apostrophes/punctuation
    into single spaces.

        "Bordj Bou Arréridj" -> "bordj bou arreridj"
        "M’Sila"             -> "m sila"
    """
    s = unicodedata.normalize("NFD", (name or "").lower())
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    return _NON_ALNUM.sub(" ", s).strip()


def region_key(name: Optional[str]) -> str:
    """Normalized name with aliases folded onto their canonical spelling."""
    n = normalize_region_name(name)
    return REGION_ALIASES.get(n, n)


class RegionIndex:
    """
    Case/diacritic/punctuation-insensitive index over the dataset.
    """

    def __init__(self, entries: Iterable[WilayaGeoEntry]):
        self._by_key: Dict[str, WilayaGeoEntry] = {}
        for e in entries:
            # first entry wins on duplicate keys
            self._by_key.setdefault(region_key(e.name), e)

    @classmethod
    def from_dataset(cls, dataset: WilayaDataset) -> "RegionIndex":
        return cls(dataset.regions)

    def __len__(self) -> int:
        return len(self._by_key)

    def lookup(self, name: Optional[str]) -> Optional[WilayaGeoEntry]:
        key = region_key(name)
        if not key:
            return None
        return self._by_key.get(key)

    def resolve_many(self, names: Iterable[str]) -> List[WilayaGeoEntry]:
        """
        Matched entries in input order; unknown names are skipped,
        repeated matches are returned once.
        """
        out: List[WilayaGeoEntry] = []
        seen = set()
        for name in names:
            e = self.lookup(name)
            if e is not None and e.name not in seen:
                seen.add(e.name)
                out.append(e)
        return out


def load_dataset(path: Optional[str | Path] = None) -> WilayaDataset:
    """
    Read a {"regions": [...]} document from disk.
    """
    p = Path(path) if path else BUNDLED_DATASET
    with p.open(encoding="utf-8") as fh:
        return WilayaDataset.model_validate(json.load(fh))


@lru_cache(maxsize=1)
def get_dataset() -> WilayaDataset:
    """Configured dataset (settings.wilayas_path) or the bundled one."""
    return load_dataset(settings.wilayas_path or None)

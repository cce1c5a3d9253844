"""
Viewport Synchronizer

Keeps the map framed on the farm. Whenever a farm with a non-empty boundary
is written to the store, the bounding box of its vertices is computed and
handed to the map surface.
"""

import math
import threading
from dataclasses import dataclass, asdict
from typing import Callable, Dict, Iterable, Optional
import logging

from core.analytics import viewport_geometry
from core.models import Coordinate
from core.store import ABSENT, DatasetKind, DatasetStore

log = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
# BOUNDING BOX
# ═══════════════════════════════════════════════════════════════════════════
@dataclass(frozen=True)
class BoundingBox:
    """
    Geographic bounding box in decimal degrees (WGS84).
    """
    min_latitude: float   # Southern edge
    max_latitude: float   # Northern edge
    min_longitude: float  # Western edge
    max_longitude: float  # Eastern edge

    @property
    def center_latitude(self) -> float:
        return (self.min_latitude + self.max_latitude) / 2

    @property
    def center_longitude(self) -> float:
        return (self.min_longitude + self.max_longitude) / 2

    @property
    def area_sq_km(self) -> float:
        """Approximate area in square kilometers."""
        lat_km = (self.max_latitude - self.min_latitude) * 111  # 1 degree ≈ 111 km
        lon_km = (self.max_longitude - self.min_longitude) * 111 * math.cos(math.radians(self.center_latitude))
        return lat_km * lon_km

    @property
    def is_degenerate(self) -> bool:
        return self.min_latitude == self.max_latitude or self.min_longitude == self.max_longitude

    def contains(self, lat: float, lon: float) -> bool:
        return (self.min_latitude <= lat <= self.max_latitude and
                self.min_longitude <= lon <= self.max_longitude)

    def zoom_level(self, max_zoom: int = 18) -> float:
        """Web-map zoom that fits the box in roughly one 256px tile width."""
        span = max(self.max_latitude - self.min_latitude, self.max_longitude - self.min_longitude)
        if span <= 0:
            return float(max_zoom)
        return float(min(max_zoom, max(0.0, math.log2(360.0 / span))))

    def to_dict(self) -> Dict:
        return asdict(self)


def compute_bounds(coordinates: Iterable[Coordinate]) -> Optional[BoundingBox]:
    """
    Smallest box enclosing every (longitude, latitude) vertex.

    Returns:
        The bounds, or None when there are no vertices
    """
    points = list(coordinates or [])
    if not points:
        return None
    lons = [lon for lon, _ in points]
    lats = [lat for _, lat in points]
    return BoundingBox(
        min_latitude=min(lats),
        max_latitude=max(lats),
        min_longitude=min(lons),
        max_longitude=max(lons),
    )


# ═══════════════════════════════════════════════════════════════════════════
# SYNCHRONIZER
# ═══════════════════════════════════════════════════════════════════════════
class ViewportSynchronizer:
    """
    Refits the map whenever farm geometry is written.

    ``on_fit`` is the map surface's "fit bounds" request. It is never called
    for an absent farm or an empty boundary.
    """

    def __init__(self, store: DatasetStore, on_fit: Optional[Callable[[BoundingBox], None]] = None):
        self.store = store
        self.on_fit = on_fit
        self._lock = threading.RLock()
        self._bounds: Optional[BoundingBox] = None
        self.fit_count = 0
        self._unsubscribe = store.subscribe(self._on_write)

    @property
    def current_bounds(self) -> Optional[BoundingBox]:
        with self._lock:
            return self._bounds

    def _on_write(self, kind: DatasetKind, value):
        if kind == DatasetKind.FARM:
            self._fit(value)

    def sync(self) -> Optional[BoundingBox]:
        """Recompute from whatever farm is in the store now."""
        return self._fit(self.store.get(DatasetKind.FARM))

    def _fit(self, farm) -> Optional[BoundingBox]:
        if farm is ABSENT:
            return None
        bounds = compute_bounds(viewport_geometry(farm))
        if bounds is None:
            log.debug("Farm has no boundary; viewport left unchanged")
            return None
        with self._lock:
            self._bounds = bounds
            self.fit_count += 1
        log.info(f"Viewport fitted to {farm.name}: "
                 f"({bounds.center_latitude:.4f}, {bounds.center_longitude:.4f})")
        if self.on_fit is not None:
            self.on_fit(bounds)
        return bounds

    def close(self):
        self._unsubscribe()

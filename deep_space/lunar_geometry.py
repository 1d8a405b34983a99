"""
Lunar Orbit Geometry

The lunar perturbation terms need the Moon's node, its inclination to the
equator and the argument of lunar perigee at the satellite epoch. These depend
only on the epoch day, so they are computed once per day value and shared by
every satellite initialized at that epoch.

Caching policy:
    LunarGeometryCache holds a single entry keyed by the epoch day count
    (days since 1900 January 0.5). An entry is reused only on an exact key
    match, so a cached value is never stale; a different epoch evicts it.
    Entries are frozen and safe to read from any thread.
"""

import math
import threading
from dataclasses import dataclass
from typing import Optional

from deep_space.constants import TWOPI, ZCOSIS, ZSINIS
from deep_space.logging_config import get_logger

logger = get_logger(__name__)


def actan(sinx: float, cosx: float) -> float:
    """Two-argument arctangent returning an angle in [0, 2π)."""
    value = math.atan2(sinx, cosx)
    if value < 0.0:
        value += TWOPI
    return value


@dataclass(frozen=True)
class LunarGeometry:
    """Lunar orbit orientation and solar/lunar mean anomalies at an epoch day"""

    day: float
    zcosil: float  # cos/sin of lunar inclination to the equator
    zsinil: float
    zcoshl: float  # cos/sin of the lunar node on the equator
    zsinhl: float
    zcosgl: float  # cos/sin of the lunar argument of perigee
    zsingl: float
    zmol: float  # lunar mean anomaly (rad)
    zmos: float  # solar mean anomaly (rad)


def compute_lunar_geometry(day: float) -> LunarGeometry:
    """
    Evaluate the lunar geometry for an epoch.

    Args:
        day: Days since 1900 January 0.5

    Returns:
        LunarGeometry for that day
    """
    xnodce = 4.5236020 - 9.2422029e-4 * day
    stem = math.sin(xnodce)
    ctem = math.cos(xnodce)
    zcosil = 0.91375164 - 0.03568096 * ctem
    zsinil = math.sqrt(1.0 - zcosil * zcosil)
    zsinhl = 0.089683511 * stem / zsinil
    zcoshl = math.sqrt(1.0 - zsinhl * zsinhl)
    c = 4.7199672 + 0.22997150 * day
    gam = 5.8351514 + 0.0019443680 * day
    zmol = (c - gam) % TWOPI

    zx = ZSINIS * stem / zsinil
    zy = zcoshl * ctem + ZCOSIS * zsinhl * stem
    zx = gam + actan(zx, zy) - xnodce
    zmos = (6.2565837 + 0.017201977 * day) % TWOPI

    return LunarGeometry(
        day=day,
        zcosil=zcosil,
        zsinil=zsinil,
        zcoshl=zcoshl,
        zsinhl=zsinhl,
        zcosgl=math.cos(zx),
        zsingl=math.sin(zx),
        zmol=zmol,
        zmos=zmos,
    )


class LunarGeometryCache:
    """
    Single-entry lunar geometry cache keyed by epoch day.

    Satellites sharing an epoch share one computation. The cache is guarded
    by a lock so contexts can be initialized from several threads.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entry: Optional[LunarGeometry] = None
        self.hits = 0
        self.misses = 0

    def get(self, day: float) -> LunarGeometry:
        """Return the geometry for ``day``, recomputing only when the day changed."""
        with self._lock:
            entry = self._entry
            if entry is not None and entry.day == day:
                self.hits += 1
                return entry

            entry = compute_lunar_geometry(day)
            self._entry = entry
            self.misses += 1

        logger.debug("lunar_geometry_computed", day=day, zmol=entry.zmol, zmos=entry.zmos)
        return entry

    def clear(self) -> None:
        with self._lock:
            self._entry = None
            self.hits = 0
            self.misses = 0


# Shared by every context unless the caller supplies its own cache
DEFAULT_LUNAR_CACHE = LunarGeometryCache()

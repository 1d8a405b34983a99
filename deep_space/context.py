"""
Perturbation Context

Per-satellite state of the deep-space perturbations. A context is created by
initialize() and then threaded explicitly through every propagate_secular()
and apply_periodic() call for that satellite. Nothing here is shared between
satellites except the read-only LunarGeometry, so independent satellites can
be propagated concurrently, one context per thread.

The resonance regime and all coefficient sets are fixed at creation. Only the
integrator state and the periodic-term cache change afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from deep_space.constants import (
    FASX2,
    FASX4,
    FASX6,
    PERIODIC_REFRESH_MINUTES,
    SAVTSN_UNSET,
    STEP2,
)
from deep_space.lunar_geometry import LunarGeometry


class ResonanceRegime(Enum):
    """Geopotential resonance classification"""

    NONE = "none"
    SYNCHRONOUS = "synchronous"
    TWELVE_HOUR = "twelve_hour"


@dataclass(frozen=True)
class SecularRates:
    """Lunar plus solar secular rates (per minute)"""

    sse: float  # eccentricity
    ssi: float  # inclination
    ssl: float  # mean anomaly
    ssg: float  # argument of perigee
    ssh: float  # node


@dataclass(frozen=True)
class PeriodicAmplitudes:
    """Long-period amplitude coefficients of one perturbing body"""

    e2: float
    e3: float
    i2: float
    i3: float
    l2: float
    l3: float
    l4: float
    gh2: float
    gh3: float
    gh4: float
    h2: float
    h3: float


@dataclass(frozen=True)
class TwelveHourResonance:
    """Geopotential resonance amplitudes for 12-hour, eccentric orbits"""

    d2201: float
    d2211: float
    d3210: float
    d3222: float
    d4410: float
    d4422: float
    d5220: float
    d5232: float
    d5421: float
    d5433: float


@dataclass(frozen=True)
class SynchronousResonance:
    """Geopotential resonance amplitudes and phases for 24-hour orbits"""

    del1: float
    del2: float
    del3: float
    fasx2: float = FASX2
    fasx4: float = FASX4
    fasx6: float = FASX6


@dataclass
class IntegratorState:
    """
    Libration angle and mean motion integrated on a fixed 720 minute grid.

    ``atime`` is the grid time the state refers to; it is only meaningful
    while requests stay on one side of the epoch.
    """

    atime: float = 0.0
    xli: float = 0.0
    xni: float = 0.0
    step_count: int = 0
    restart_count: int = 0

    def restart(self, xli: float, xni: float) -> None:
        """Return to the epoch state."""
        self.atime = 0.0
        self.xli = xli
        self.xni = xni
        self.restart_count += 1

    def advance(self, delt: float, xndot: float, xnddt: float, xldot: float) -> None:
        """Take one second-order Taylor step of size ``delt``."""
        self.xli = self.xli + xldot * delt + xndot * STEP2
        self.xni = self.xni + xndot * delt + xnddt * STEP2
        self.atime = self.atime + delt
        self.step_count += 1


@dataclass
class PeriodicCache:
    """Lunar/solar periodic sums last evaluated at ``savtsn`` minutes"""

    savtsn: float = SAVTSN_UNSET
    pe: float = 0.0
    pinc: float = 0.0
    pl: float = 0.0
    sghs: float = 0.0
    sghl: float = 0.0
    shs: float = 0.0
    shl: float = 0.0
    refresh_count: int = 0


@dataclass
class PerturbationContext:
    """
    Deep-space state of one satellite.

    Epoch fields mirror the element set the context was initialized from;
    the near-earth rates needed later (perigee rate) are kept alongside.
    """

    eccentricity: float
    inclination: float
    argument_of_perigee: float
    mean_motion: float
    sin_inclination: float
    cos_inclination: float
    perigee_rate: float
    gmst: float
    geometry: LunarGeometry
    secular: SecularRates
    solar: PeriodicAmplitudes
    lunar: PeriodicAmplitudes
    regime: ResonanceRegime = ResonanceRegime.NONE
    twelve_hour: Optional[TwelveHourResonance] = None
    synchronous: Optional[SynchronousResonance] = None
    xlamo: float = 0.0
    bfact: float = 0.0
    xfact: float = 0.0
    integrator: IntegratorState = field(default_factory=IntegratorState)
    periodic: PeriodicCache = field(default_factory=PeriodicCache)
    periodic_refresh_minutes: float = PERIODIC_REFRESH_MINUTES

    @property
    def is_resonant(self) -> bool:
        return self.regime is not ResonanceRegime.NONE

    @property
    def is_synchronous(self) -> bool:
        return self.regime is ResonanceRegime.SYNCHRONOUS

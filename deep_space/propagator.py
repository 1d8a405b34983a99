"""
Deep-Space Mean Element Propagator

Reference driver for the deep-space perturbations. For each requested time it

1. applies the near-earth (zonal) secular rates to the epoch mean elements,
2. calls propagate_secular() (lunar/solar secular terms, resonance),
3. calls apply_periodic() (lunar/solar periodic terms),

and returns the resulting mean elements. Converting them to position and
velocity is left to the near-earth theory.

Each DeepSpacePropagator owns one PerturbationContext, so a fleet of
satellites can be propagated concurrently with one propagator per worker.
"""

import math
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, Optional, Sequence

import numpy as np
from sgp4.model import Satrec

from deep_space.config import DEEP_SPACE_PERIOD_MINUTES, DEFAULT_SETTINGS, DeepSpaceSettings
from deep_space.context import PerturbationContext
from deep_space.elements import DerivedInputs, OrbitalElements
from deep_space.epoch import EpochLike
from deep_space.errors import ConfigurationError
from deep_space.initializer import initialize
from deep_space.logging_config import get_logger
from deep_space.lunar_geometry import LunarGeometryCache
from deep_space.periodic import apply_periodic
from deep_space.secular import propagate_secular
from deep_space.zonal import zonal_secular_rates

logger = get_logger(__name__)


class DeepSpacePropagator:
    """
    Mean element propagation of one deep-space satellite.

    Attributes:
        name: Display name
        epoch_elements: Epoch mean elements (Brouwer mean motion)
        derived: Epoch quantities from the near-earth theory
        context: Deep-space perturbation context
    """

    def __init__(
        self,
        elements: OrbitalElements,
        derived: DerivedInputs,
        epoch: EpochLike,
        *,
        name: Optional[str] = None,
        lunar_cache: Optional[LunarGeometryCache] = None,
        settings: Optional[DeepSpaceSettings] = None,
    ):
        self.name = name or "SATELLITE"
        self.epoch = epoch
        self.epoch_elements = elements.copy()
        self.derived = derived
        self.context: PerturbationContext = initialize(
            self.epoch_elements,
            derived,
            epoch,
            lunar_cache=lunar_cache,
            settings=settings,
        )
        self._lock = threading.Lock()

    @classmethod
    def from_tle(
        cls,
        line1: str,
        line2: str,
        name: Optional[str] = None,
        *,
        lunar_cache: Optional[LunarGeometryCache] = None,
        settings: Optional[DeepSpaceSettings] = None,
    ) -> "DeepSpacePropagator":
        """
        Create a propagator from a two-line element set.

        The sgp4 library parses the TLE and supplies the near-earth epoch
        quantities. Its pure-Python Satrec is used because the accelerated
        sgp4.api.Satrec does not expose the un-Kozai mean motion.

        Raises:
            ValueError: the TLE cannot be parsed
            ConfigurationError: the orbit is not a deep-space orbit
        """
        try:
            satrec = Satrec.twoline2rv(line1, line2)
        except Exception as e:
            raise ValueError(f"Failed to load satellite: {e}") from e
        if satrec.error != 0:
            raise ValueError(f"Failed to load satellite: sgp4 error code {satrec.error}")
        if not (math.isfinite(satrec.no_unkozai) and satrec.no_unkozai > 0.0):
            raise ValueError(f"Failed to load satellite: invalid mean motion {satrec.no_unkozai}")

        period = 2.0 * math.pi / satrec.no_unkozai
        if period < DEEP_SPACE_PERIOD_MINUTES:
            logger.error("near_earth_orbit_rejected", satnum=satrec.satnum, period_minutes=period)
            raise ConfigurationError(
                f"Satellite {satrec.satnum} has a {period:.1f} min period; "
                f"deep-space perturbations apply from {DEEP_SPACE_PERIOD_MINUTES:.0f} min"
            )

        return cls(
            OrbitalElements.from_satrec(satrec),
            DerivedInputs.from_satrec(satrec),
            (satrec.jdsatepoch, satrec.jdsatepochF),
            name=name or f"SAT_{satrec.satnum}",
            lunar_cache=lunar_cache,
            settings=settings,
        )

    @classmethod
    def from_elements(
        cls,
        *,
        eccentricity: float,
        inclination: float,
        mean_anomaly: float,
        raan: float,
        argument_of_perigee: float,
        mean_motion: float,
        epoch: EpochLike,
        name: Optional[str] = None,
        lunar_cache: Optional[LunarGeometryCache] = None,
        settings: Optional[DeepSpaceSettings] = None,
    ) -> "DeepSpacePropagator":
        """
        Create a propagator from mean elements.

        Angles are in radians and ``mean_motion`` is the Kozai mean motion
        in rad/min, as published in a TLE. The near-earth epoch quantities
        come from zonal_secular_rates().
        """
        rates = zonal_secular_rates(mean_motion, eccentricity, inclination)
        elements = OrbitalElements(
            eccentricity=eccentricity,
            inclination=inclination,
            mean_anomaly=mean_anomaly,
            raan=raan,
            argument_of_perigee=argument_of_perigee,
            mean_motion=rates.mean_motion,
        )
        return cls(
            elements,
            DerivedInputs.from_zonal(elements, rates),
            epoch,
            name=name,
            lunar_cache=lunar_cache,
            settings=settings,
        )

    def mean_elements(self, t: float) -> OrbitalElements:
        """
        Mean elements ``t`` minutes after epoch.

        Args:
            t: Minutes since epoch (may be negative)

        Returns:
            New OrbitalElements; the epoch elements are not modified
        """
        elements = self.epoch_elements.copy()
        elements.mean_anomaly = elements.mean_anomaly + self.derived.mean_anomaly_rate * t
        elements.argument_of_perigee = elements.argument_of_perigee + self.derived.perigee_rate * t
        elements.raan = elements.raan + self.derived.node_rate * t

        with self._lock:
            propagate_secular(self.context, elements, t)
            apply_periodic(self.context, elements, t)
        return elements

    def mean_elements_batch(self, times: Iterable[float]) -> np.ndarray:
        """
        Mean elements at several times.

        Requests are evaluated in the given order; monotonic sequences reuse
        the resonance integration of the previous request.

        Returns:
            Array of shape (len(times), 6) in ELEMENT_FIELDS order
        """
        times = np.asarray(list(times), dtype=float).ravel()
        result = np.empty((times.size, 6))
        for row, t in enumerate(times):
            result[row] = self.mean_elements(float(t)).as_array()
        return result

    def __repr__(self):
        return f"DeepSpacePropagator(name={self.name!r}, regime={self.context.regime.value!r})"


def propagate_fleet(
    propagators: Sequence[DeepSpacePropagator],
    times: Iterable[float],
    max_workers: Optional[int] = None,
) -> Dict[str, np.ndarray]:
    """
    Propagate independent satellites concurrently.

    Args:
        propagators: One propagator per satellite; names must be unique
        times: Minutes since each satellite's epoch
        max_workers: Thread pool size (default: DEFAULT_SETTINGS.max_workers)

    Returns:
        Mapping of propagator name to its mean_elements_batch() result
    """
    names = [propagator.name for propagator in propagators]
    if len(set(names)) != len(names):
        raise ValueError("Propagator names must be unique")

    times = np.asarray(list(times), dtype=float)
    workers = max_workers or DEFAULT_SETTINGS.max_workers

    results: Dict[str, np.ndarray] = {}
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            executor.submit(propagator.mean_elements_batch, times): propagator.name
            for propagator in propagators
        }
        for future in as_completed(futures):
            results[futures[future]] = future.result()

    logger.info("fleet_propagated", satellites=len(results), epochs=int(times.size), workers=workers)
    return results

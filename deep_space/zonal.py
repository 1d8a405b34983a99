"""
Zonal-Harmonic Secular Rates

Reference stand-in for the near-earth collaborator of the deep-space
perturbations: recovers the Brouwer ("un-Kozai") mean motion and semi-major
axis from a Kozai mean motion and evaluates the first-order J2 secular rates
of mean anomaly, argument of perigee and right ascension of the node.

Production drivers supply these quantities from their own near-earth theory
(see DerivedInputs.from_satrec); this module lets the package be driven from
bare mean elements.

References:
- Hoots, F. R., & Roehrich, R. L. (1980). "Spacetrack Report No. 3"
- Vallado, D. A., et al. (2006). "Revisiting Spacetrack Report #3." AIAA 2006-6753
"""

import math
from dataclasses import dataclass

from deep_space.config import DEEP_SPACE_PERIOD_MINUTES, J2, XKE
from deep_space.logging_config import get_logger

logger = get_logger(__name__)

CK2 = 0.5 * J2  # Earth radii^2
X2O3 = 2.0 / 3.0

# Numerical stability thresholds
MIN_MEAN_MOTION = 1e-12  # Minimum mean motion (rad/min)
MAX_ECCENTRICITY = 0.9999  # Maximum eccentricity


@dataclass(frozen=True)
class ZonalRates:
    """Brouwer mean motion, semi-major axis and J2 secular rates"""

    mean_motion: float  # rad/min
    semi_major_axis: float  # Earth radii
    mean_anomaly_rate: float  # rad/min, includes the mean motion
    perigee_rate: float  # rad/min
    node_rate: float  # rad/min

    @property
    def period_minutes(self) -> float:
        return 2.0 * math.pi / self.mean_motion

    @property
    def is_deep_space(self) -> bool:
        return self.period_minutes >= DEEP_SPACE_PERIOD_MINUTES


def zonal_secular_rates(mean_motion_kozai: float, eccentricity: float, inclination: float) -> ZonalRates:
    """
    Recover Brouwer elements and first-order J2 rates.

    Args:
        mean_motion_kozai: Kozai mean motion as published in a TLE (rad/min)
        eccentricity: Mean eccentricity
        inclination: Mean inclination (rad)

    Returns:
        ZonalRates for the element set

    Raises:
        ValueError: mean motion is not positive or eccentricity is outside [0, 1)
    """
    if mean_motion_kozai < MIN_MEAN_MOTION:
        raise ValueError(f"Mean motion is too small for propagation: {mean_motion_kozai}")
    if not 0.0 <= eccentricity <= MAX_ECCENTRICITY:
        raise ValueError(f"Eccentricity must be in [0, {MAX_ECCENTRICITY}]: {eccentricity}")

    cosio = math.cos(inclination)
    theta2 = cosio * cosio
    x3thm1 = 3.0 * theta2 - 1.0
    betao2 = 1.0 - eccentricity * eccentricity
    betao = math.sqrt(betao2)

    # Un-Kozai the mean motion
    a1 = math.pow(XKE / mean_motion_kozai, X2O3)
    del1 = 1.5 * CK2 * x3thm1 / (a1 * a1 * betao * betao2)
    ao = a1 * (1.0 - del1 * (0.5 * X2O3 + del1 * (1.0 + 134.0 / 81.0 * del1)))
    delo = 1.5 * CK2 * x3thm1 / (ao * ao * betao * betao2)
    xnodp = mean_motion_kozai / (1.0 + delo)
    aodp = ao / (1.0 - delo)

    # First-order secular rates
    po = aodp * betao2
    pardt1 = 3.0 * CK2 * xnodp / (po * po)
    xmdt1 = 0.5 * pardt1 * betao * x3thm1
    xgdt1 = -0.5 * pardt1 * (1.0 - 5.0 * theta2)
    xhdt1 = -pardt1 * cosio

    rates = ZonalRates(
        mean_motion=xnodp,
        semi_major_axis=aodp,
        mean_anomaly_rate=xnodp + xmdt1,
        perigee_rate=xgdt1,
        node_rate=xhdt1,
    )
    logger.debug(
        "zonal_rates",
        mean_motion=xnodp,
        semi_major_axis=aodp,
        period_minutes=rates.period_minutes,
    )
    return rates

"""
Deep-Space Periodic Corrections (DPPER)

Adds the long-period lunar and solar terms to the mean elements produced by
propagate_secular(). The sums are functions of the solar and lunar mean
anomalies only, so they are re-evaluated when the request moves more than
``periodic_refresh_minutes`` away from the last evaluation and reused
otherwise.

For epoch inclinations of 0.2 rad and above the corrections are added to the
elements directly. Below that the node and perigee corrections are applied in
Lyddane's form, which avoids dividing by sin(i).
"""

import math
from typing import Tuple

from deep_space.constants import LYDDANE_INCLINATION, PI, TWOPI, ZEL, ZES, ZNL, ZNS
from deep_space.context import PeriodicAmplitudes, PeriodicCache, PerturbationContext
from deep_space.elements import OrbitalElements
from deep_space.logging_config import get_logger
from deep_space.lunar_geometry import actan

logger = get_logger(__name__)


def body_periodics(
    amplitudes: PeriodicAmplitudes, zm: float, ze: float
) -> Tuple[float, float, float, float, float]:
    """
    Periodic sums of one perturbing body.

    Args:
        amplitudes: Amplitude coefficients of the body
        zm: Mean anomaly of the body at the requested time (rad)
        ze: Eccentricity of the body's orbit

    Returns:
        (de, di, dl, dgh, dh)
    """
    zf = zm + 2.0 * ze * math.sin(zm)
    sinzf = math.sin(zf)
    f2 = 0.5 * sinzf * sinzf - 0.25
    f3 = -0.5 * sinzf * math.cos(zf)
    a = amplitudes
    return (
        a.e2 * f2 + a.e3 * f3,
        a.i2 * f2 + a.i3 * f3,
        a.l2 * f2 + a.l3 * f3 + a.l4 * sinzf,
        a.gh2 * f2 + a.gh3 * f3 + a.gh4 * sinzf,
        a.h2 * f2 + a.h3 * f3,
    )


def refresh_periodics(context: PerturbationContext, t: float) -> PeriodicCache:
    """Re-evaluate the cached sums when ``t`` is far enough from the last evaluation."""
    cache = context.periodic
    if abs(cache.savtsn - t) < context.periodic_refresh_minutes:
        return cache

    geometry = context.geometry
    ses, sis, sls, cache.sghs, cache.shs = body_periodics(context.solar, geometry.zmos + ZNS * t, ZES)
    sel, sil, sll, cache.sghl, cache.shl = body_periodics(context.lunar, geometry.zmol + ZNL * t, ZEL)
    cache.pe = ses + sel
    cache.pinc = sis + sil
    cache.pl = sls + sll
    cache.savtsn = t
    cache.refresh_count += 1
    logger.debug("periodic_terms_refreshed", t=t, refresh_count=cache.refresh_count)
    return cache


def apply_periodic(context: PerturbationContext, elements: OrbitalElements, t: float) -> None:
    """
    Add the lunar/solar periodic terms at ``t`` to ``elements`` in place.

    Must follow propagate_secular() for the same ``t``.

    Args:
        context: Perturbation context of the satellite
        elements: Mean elements from propagate_secular(), updated in place
        t: Minutes since epoch
    """
    sinis = math.sin(elements.inclination)
    cosis = math.cos(elements.inclination)

    cache = refresh_periodics(context, t)
    pgh = cache.sghs + cache.sghl
    ph = cache.shs + cache.shl
    pinc = cache.pinc
    pl = cache.pl

    elements.inclination = elements.inclination + pinc
    elements.eccentricity = elements.eccentricity + cache.pe

    if context.inclination >= LYDDANE_INCLINATION:
        ph = ph / context.sin_inclination
        pgh = pgh - context.cos_inclination * ph
        elements.argument_of_perigee = elements.argument_of_perigee + pgh
        elements.raan = elements.raan + ph
        elements.mean_anomaly = elements.mean_anomaly + pl
        return

    xnodes = elements.raan % TWOPI
    sinok = math.sin(xnodes)
    cosok = math.cos(xnodes)
    alfdp = sinis * sinok + (ph * cosok + pinc * cosis * sinok)
    betdp = sinis * cosok + (-ph * sinok + pinc * cosis * cosok)
    xls = elements.mean_anomaly + elements.argument_of_perigee + cosis * xnodes
    xls = xls + pl + pgh - pinc * xnodes * sinis

    node = actan(alfdp, betdp)
    # Keep the node on the same branch as the incoming node
    if abs(xnodes - node) > PI:
        node = node + TWOPI if node < xnodes else node - TWOPI

    elements.raan = node
    elements.mean_anomaly = elements.mean_anomaly + pl
    elements.argument_of_perigee = xls - elements.mean_anomaly - math.cos(elements.inclination) * node

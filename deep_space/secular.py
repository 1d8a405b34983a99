"""
Deep-Space Secular Propagation (DPSEC)

Advances the mean elements by the lunar/solar secular rates and, for resonant
orbits, integrates the libration angle and mean motion with a fixed-step
second-order Taylor scheme:

    XLI(t + h) = XLI + XLDOT*h + XNDOT*h^2/2
    XNI(t + h) = XNI + XNDOT*h + XNDDT*h^2/2

with h = +/-720 minutes. The integrator state is kept on the context so a
monotonic sequence of requests only pays for the new interval. A request on
the other side of the epoch, or one that walks back to it, restarts the
integration from the epoch values.
"""

import math
from typing import Tuple

from deep_space.constants import (
    G22,
    G32,
    G44,
    G52,
    G54,
    PI,
    STEPN,
    STEPP,
    THDT,
)
from deep_space.context import PerturbationContext
from deep_space.elements import OrbitalElements
from deep_space.logging_config import get_logger

logger = get_logger(__name__)


def _synchronous_rates(context: PerturbationContext) -> Tuple[float, float]:
    res = context.synchronous
    xli = context.integrator.xli
    xndot = (
        res.del1 * math.sin(xli - res.fasx2)
        + res.del2 * math.sin(2.0 * (xli - res.fasx4))
        + res.del3 * math.sin(3.0 * (xli - res.fasx6))
    )
    xnddt = (
        res.del1 * math.cos(xli - res.fasx2)
        + 2.0 * res.del2 * math.cos(2.0 * (xli - res.fasx4))
        + 3.0 * res.del3 * math.cos(3.0 * (xli - res.fasx6))
    )
    return xndot, xnddt


def _twelve_hour_rates(context: PerturbationContext) -> Tuple[float, float]:
    res = context.twelve_hour
    state = context.integrator
    xli = state.xli
    xomi = context.argument_of_perigee + context.perigee_rate * state.atime
    x2omi = xomi + xomi
    x2li = xli + xli
    xndot = (
        res.d2201 * math.sin(x2omi + xli - G22)
        + res.d2211 * math.sin(xli - G22)
        + res.d3210 * math.sin(xomi + xli - G32)
        + res.d3222 * math.sin(-xomi + xli - G32)
        + res.d4410 * math.sin(x2omi + x2li - G44)
        + res.d4422 * math.sin(x2li - G44)
        + res.d5220 * math.sin(xomi + xli - G52)
        + res.d5232 * math.sin(-xomi + xli - G52)
        + res.d5421 * math.sin(xomi + x2li - G54)
        + res.d5433 * math.sin(-xomi + x2li - G54)
    )
    xnddt = (
        res.d2201 * math.cos(x2omi + xli - G22)
        + res.d2211 * math.cos(xli - G22)
        + res.d3210 * math.cos(xomi + xli - G32)
        + res.d3222 * math.cos(-xomi + xli - G32)
        + res.d5220 * math.cos(xomi + xli - G52)
        + res.d5232 * math.cos(-xomi + xli - G52)
        + 2.0
        * (
            res.d4410 * math.cos(x2omi + x2li - G44)
            + res.d4422 * math.cos(x2li - G44)
            + res.d5421 * math.cos(xomi + x2li - G54)
            + res.d5433 * math.cos(-xomi + x2li - G54)
        )
    )
    return xndot, xnddt


def dot_terms(context: PerturbationContext) -> Tuple[float, float, float]:
    """
    Derivatives of the resonant pair at the current integrator state.

    Returns:
        (XNDOT, XNDDT, XLDOT); XNDDT is already scaled by XLDOT
    """
    if context.is_synchronous:
        xndot, xnddt = _synchronous_rates(context)
    else:
        xndot, xnddt = _twelve_hour_rates(context)
    xldot = context.integrator.xni + context.xfact
    return xndot, xnddt * xldot, xldot


def _needs_restart(atime: float, t: float) -> bool:
    return atime == 0.0 or (t >= 0.0 and atime < 0.0) or (t < 0.0 and atime >= 0.0)


def integrate_resonance(context: PerturbationContext, t: float) -> Tuple[float, float]:
    """
    Integrate the libration angle and mean motion to ``t`` minutes from epoch.

    Args:
        context: Resonant perturbation context (integrator state is updated)
        t: Minutes since epoch

    Returns:
        (XL, XN): libration angle and mean motion at ``t``
    """
    state = context.integrator

    while True:
        if _needs_restart(state.atime, t):
            if state.atime != 0.0:
                logger.debug("integrator_epoch_restart", t=t, atime=state.atime)
            state.restart(context.xlamo, context.mean_motion)
            break
        if abs(t) >= abs(state.atime):
            break
        # Walk back toward the epoch one step at a time
        delt = STEPN if t >= 0.0 else STEPP
        state.advance(delt, *dot_terms(context))

    delt = STEPP if t >= 0.0 else STEPN
    while abs(t - state.atime) >= STEPP:
        state.advance(delt, *dot_terms(context))

    ft = t - state.atime
    xndot, xnddt, xldot = dot_terms(context)
    xn = state.xni + xndot * ft + xnddt * ft * ft * 0.5
    xl = state.xli + xldot * ft + xndot * ft * ft * 0.5
    return xl, xn


def propagate_secular(context: PerturbationContext, elements: OrbitalElements, t: float) -> None:
    """
    Apply the deep-space secular effects at ``t`` minutes from epoch.

    ``elements`` must already carry the near-earth secular update for ``t``:
    its mean anomaly, perigee and node are advanced in place, eccentricity
    and inclination are recomputed from their epoch values. On resonant
    orbits the mean anomaly is replaced by the integrated libration and the
    mean motion by the integrated mean motion.

    Args:
        context: Perturbation context of the satellite
        elements: Mean elements, updated in place
        t: Minutes since epoch
    """
    secular = context.secular
    elements.mean_anomaly = elements.mean_anomaly + secular.ssl * t
    elements.argument_of_perigee = elements.argument_of_perigee + secular.ssg * t
    elements.raan = elements.raan + secular.ssh * t
    elements.eccentricity = context.eccentricity + secular.sse * t
    elements.inclination = context.inclination + secular.ssi * t

    if elements.inclination < 0.0:
        elements.inclination = -elements.inclination
        elements.raan = elements.raan + PI
        elements.argument_of_perigee = elements.argument_of_perigee - PI

    if not context.is_resonant:
        return

    xl, xn = integrate_resonance(context, t)
    temp = -elements.raan + context.gmst + t * THDT
    if context.is_synchronous:
        elements.mean_anomaly = xl - elements.argument_of_perigee + temp
    else:
        elements.mean_anomaly = xl + temp + temp
    elements.mean_motion = xn

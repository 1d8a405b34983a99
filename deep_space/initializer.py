"""
Deep-Space Initialization (DPINIT)

Builds the PerturbationContext of one satellite from its epoch elements:

1. Resolve the epoch to ds50 and Greenwich sidereal time.
2. Fetch the lunar orbit geometry for the epoch day (shared cache).
3. Evaluate the lunar/solar amplitude formulas, solar first then lunar, and
   accumulate the secular rates.
4. Classify the geopotential resonance regime from the mean motion.
5. For resonant orbits, evaluate the regime's resonance coefficients and
   seed the libration integrator.

References:
- Hoots, F. R., & Roehrich, R. L. (1980). "Spacetrack Report No. 3", DEEP
- Vallado, D. A., et al. (2006). "Revisiting Spacetrack Report #3." AIAA 2006-6753
"""

import math
from dataclasses import dataclass
from typing import Optional

from deep_space.config import DEFAULT_SETTINGS, DeepSpaceSettings
from deep_space.constants import (
    C1L,
    C1SS,
    ECC_BREAK_G520,
    ECC_BREAK_HIGH,
    ECC_BREAK_LOW,
    NODE_TERM_MIN_INCLINATION,
    Q22,
    Q31,
    Q33,
    ROOT22,
    ROOT32,
    ROOT44,
    ROOT52,
    ROOT54,
    SYNC_BAND_HIGH,
    SYNC_BAND_LOW,
    THDT,
    TWELVE_HOUR_BAND_HIGH,
    TWELVE_HOUR_BAND_LOW,
    TWELVE_HOUR_MIN_ECCENTRICITY,
    ZCOSGS,
    ZCOSHS,
    ZCOSIS,
    ZEL,
    ZES,
    ZNL,
    ZNS,
    ZSINGS,
    ZSINHS,
    ZSINIS,
)
from deep_space.context import (
    PerturbationContext,
    PeriodicAmplitudes,
    ResonanceRegime,
    SecularRates,
    SynchronousResonance,
    TwelveHourResonance,
)
from deep_space.elements import DerivedInputs, OrbitalElements
from deep_space.epoch import EpochLike, resolve_epoch
from deep_space.logging_config import get_logger
from deep_space.lunar_geometry import DEFAULT_LUNAR_CACHE, LunarGeometry, LunarGeometryCache

logger = get_logger(__name__)


@dataclass(frozen=True)
class ThirdBody:
    """
    Constants of a perturbing body for the shared amplitude formulas.

    (zcosg, zsing), (zcosi, zsini) and (zcoshb, zsinhb) are the cosine/sine of
    the body's argument of perigee, inclination and node on the equator.
    """

    name: str
    zcosg: float
    zsing: float
    zcosi: float
    zsini: float
    zcoshb: float
    zsinhb: float
    cc: float
    zn: float
    ze: float


@dataclass(frozen=True)
class ThirdBodyTerms:
    """Secular and long-period amplitudes contributed by one body"""

    se: float
    si: float
    sl: float
    sgh: float
    sh: float
    amplitudes: PeriodicAmplitudes


SUN = ThirdBody(
    name="sun",
    zcosg=ZCOSGS,
    zsing=ZSINGS,
    zcosi=ZCOSIS,
    zsini=ZSINIS,
    zcoshb=ZCOSHS,
    zsinhb=ZSINHS,
    cc=C1SS,
    zn=ZNS,
    ze=ZES,
)


def moon(geometry: LunarGeometry) -> ThirdBody:
    """The Moon's constants at the epoch described by ``geometry``."""
    return ThirdBody(
        name="moon",
        zcosg=geometry.zcosgl,
        zsing=geometry.zsingl,
        zcosi=geometry.zcosil,
        zsini=geometry.zsinil,
        zcoshb=geometry.zcoshl,
        zsinhb=geometry.zsinhl,
        cc=C1L,
        zn=ZNL,
        ze=ZEL,
    )


def third_body_terms(
    body: ThirdBody,
    elements: OrbitalElements,
    derived: DerivedInputs,
) -> ThirdBodyTerms:
    """
    Evaluate the lunar/solar amplitude formulas for one perturbing body.

    Args:
        body: Perturbing body constants
        elements: Epoch mean elements of the satellite
        derived: Epoch quantities from the near-earth theory

    Returns:
        ThirdBodyTerms of that body
    """
    eq = elements.eccentricity
    eqsq = derived.eccentricity_squared
    bsq = derived.one_minus_e2
    rteqsq = derived.sqrt_one_minus_e2
    siniq = derived.sin_inclination
    cosiq = derived.cos_inclination
    sinomo = derived.sin_perigee
    cosomo = derived.cos_perigee
    sinq = math.sin(elements.raan)
    cosq = math.cos(elements.raan)

    # Body node relative to the satellite node
    zcosh = body.zcoshb * cosq + body.zsinhb * sinq
    zsinh = sinq * body.zcoshb - cosq * body.zsinhb
    zcosg, zsing = body.zcosg, body.zsing
    zcosi, zsini = body.zcosi, body.zsini

    a1 = zcosg * zcosh + zsing * zcosi * zsinh
    a3 = -zsing * zcosh + zcosg * zcosi * zsinh
    a7 = -zcosg * zsinh + zsing * zcosi * zcosh
    a8 = zsing * zsini
    a9 = zsing * zsinh + zcosg * zcosi * zcosh
    a10 = zcosg * zsini
    a2 = cosiq * a7 + siniq * a8
    a4 = cosiq * a9 + siniq * a10
    a5 = -siniq * a7 + cosiq * a8
    a6 = -siniq * a9 + cosiq * a10

    x1 = a1 * cosomo + a2 * sinomo
    x2 = a3 * cosomo + a4 * sinomo
    x3 = -a1 * sinomo + a2 * cosomo
    x4 = -a3 * sinomo + a4 * cosomo
    x5 = a5 * sinomo
    x6 = a6 * sinomo
    x7 = a5 * cosomo
    x8 = a6 * cosomo

    z31 = 12.0 * x1 * x1 - 3.0 * x3 * x3
    z32 = 24.0 * x1 * x2 - 6.0 * x3 * x4
    z33 = 12.0 * x2 * x2 - 3.0 * x4 * x4
    z1 = 3.0 * (a1 * a1 + a2 * a2) + z31 * eqsq
    z2 = 6.0 * (a1 * a3 + a2 * a4) + z32 * eqsq
    z3 = 3.0 * (a3 * a3 + a4 * a4) + z33 * eqsq
    z11 = -6.0 * a1 * a5 + eqsq * (-24.0 * x1 * x7 - 6.0 * x3 * x5)
    z12 = -6.0 * (a1 * a6 + a3 * a5) + eqsq * (-24.0 * (x2 * x7 + x1 * x8) - 6.0 * (x3 * x6 + x4 * x5))
    z13 = -6.0 * a3 * a6 + eqsq * (-24.0 * x2 * x8 - 6.0 * x4 * x6)
    z21 = 6.0 * a2 * a5 + eqsq * (24.0 * x1 * x5 - 6.0 * x3 * x7)
    z22 = 6.0 * (a4 * a5 + a2 * a6) + eqsq * (24.0 * (x2 * x5 + x1 * x6) - 6.0 * (x4 * x7 + x3 * x8))
    z23 = 6.0 * a4 * a6 + eqsq * (24.0 * x2 * x6 - 6.0 * x4 * x8)
    z1 = z1 + z1 + bsq * z31
    z2 = z2 + z2 + bsq * z32
    z3 = z3 + z3 + bsq * z33

    s3 = body.cc / elements.mean_motion
    s2 = -0.5 * s3 / rteqsq
    s4 = s3 * rteqsq
    s1 = -15.0 * eq * s4
    s5 = x1 * x3 + x2 * x4
    s6 = x2 * x3 + x1 * x4
    s7 = x2 * x4 - x1 * x3

    zn = body.zn
    sh = -zn * s2 * (z21 + z23)
    if elements.inclination < NODE_TERM_MIN_INCLINATION:
        sh = 0.0

    return ThirdBodyTerms(
        se=s1 * zn * s5,
        si=s2 * zn * (z11 + z13),
        sl=-zn * s3 * (z1 + z3 - 14.0 - 6.0 * eqsq),
        sgh=s4 * zn * (z31 + z33 - 6.0),
        sh=sh,
        amplitudes=PeriodicAmplitudes(
            e2=2.0 * s1 * s6,
            e3=2.0 * s1 * s7,
            i2=2.0 * s2 * z12,
            i3=2.0 * s2 * (z13 - z11),
            l2=-2.0 * s3 * z2,
            l3=-2.0 * s3 * (z3 - z1),
            l4=-2.0 * s3 * (-21.0 - 9.0 * eqsq) * body.ze,
            gh2=2.0 * s4 * z32,
            gh3=2.0 * s4 * (z33 - z31),
            gh4=-18.0 * s4 * body.ze,
            h2=-2.0 * s2 * z22,
            h3=-2.0 * s2 * (z23 - z21),
        ),
    )


def _node_rate(sh: float, siniq: float) -> float:
    # sh is zeroed below NODE_TERM_MIN_INCLINATION, where sin(i) may vanish
    if sh == 0.0:
        return 0.0
    return sh / siniq


def accumulate_secular_rates(
    solar: ThirdBodyTerms, lunar: ThirdBodyTerms, derived: DerivedInputs
) -> SecularRates:
    """Sum the solar and lunar secular rates (solar pass first)."""
    cosiq = derived.cos_inclination
    siniq = derived.sin_inclination

    ssh = _node_rate(solar.sh, siniq)
    ssg = solar.sgh - cosiq * ssh

    lunar_node = _node_rate(lunar.sh, siniq)
    return SecularRates(
        sse=solar.se + lunar.se,
        ssi=solar.si + lunar.si,
        ssl=solar.sl + lunar.sl,
        ssg=ssg + lunar.sgh - cosiq * lunar_node,
        ssh=ssh + lunar_node,
    )


def classify_regime(mean_motion: float, eccentricity: float) -> ResonanceRegime:
    """
    Classify the geopotential resonance of an orbit.

    Synchronous: mean motion strictly inside (0.0034906585, 0.0052359877).
    12-hour: mean motion in [0.00826, 0.00924] and eccentricity >= 0.5.
    Everything else is non-resonant.
    """
    if SYNC_BAND_LOW < mean_motion < SYNC_BAND_HIGH:
        return ResonanceRegime.SYNCHRONOUS
    if (
        TWELVE_HOUR_BAND_LOW <= mean_motion <= TWELVE_HOUR_BAND_HIGH
        and eccentricity >= TWELVE_HOUR_MIN_ECCENTRICITY
    ):
        return ResonanceRegime.TWELVE_HOUR
    return ResonanceRegime.NONE


def twelve_hour_resonance(elements: OrbitalElements, derived: DerivedInputs) -> TwelveHourResonance:
    """Geopotential resonance coefficients for 12-hour orbits."""
    eq = elements.eccentricity
    eqsq = derived.eccentricity_squared
    eoc = eq * eqsq

    g201 = -0.306 - (eq - 0.64) * 0.440
    if eq <= ECC_BREAK_LOW:
        g211 = 3.616 - 13.247 * eq + 16.290 * eqsq
        g310 = -19.302 + 117.390 * eq - 228.419 * eqsq + 156.591 * eoc
        g322 = -18.9068 + 109.7927 * eq - 214.6334 * eqsq + 146.5816 * eoc
        g410 = -41.122 + 242.694 * eq - 471.094 * eqsq + 313.953 * eoc
        g422 = -146.407 + 841.880 * eq - 1629.014 * eqsq + 1083.435 * eoc
        g520 = -532.114 + 3017.977 * eq - 5740.0 * eqsq + 3708.276 * eoc
    else:
        g211 = -72.099 + 331.819 * eq - 508.738 * eqsq + 266.724 * eoc
        g310 = -346.844 + 1582.851 * eq - 2415.925 * eqsq + 1246.113 * eoc
        g322 = -342.585 + 1554.908 * eq - 2366.899 * eqsq + 1215.972 * eoc
        g410 = -1052.797 + 4758.686 * eq - 7193.992 * eqsq + 3651.957 * eoc
        g422 = -3581.69 + 16178.11 * eq - 24462.77 * eqsq + 12422.52 * eoc
        if eq <= ECC_BREAK_G520:
            g520 = 1464.74 - 4664.75 * eq + 3763.64 * eqsq
        else:
            g520 = -5149.66 + 29936.92 * eq - 54087.36 * eqsq + 31324.56 * eoc

    if eq < ECC_BREAK_HIGH:
        g533 = -919.2277 + 4988.61 * eq - 9064.77 * eqsq + 5542.21 * eoc
        g521 = -822.71072 + 4568.6173 * eq - 8491.4146 * eqsq + 5337.524 * eoc
        g532 = -853.666 + 4690.25 * eq - 8624.77 * eqsq + 5341.4 * eoc
    else:
        g533 = -37995.78 + 161616.52 * eq - 229838.2 * eqsq + 109377.94 * eoc
        g521 = -51752.104 + 218913.95 * eq - 309468.16 * eqsq + 146349.42 * eoc
        g532 = -40023.88 + 170470.89 * eq - 242699.48 * eqsq + 115605.82 * eoc

    siniq = derived.sin_inclination
    cosiq = derived.cos_inclination
    cosq2 = derived.cos2_inclination
    sini2 = siniq * siniq
    f220 = 0.75 * (1.0 + 2.0 * cosiq + cosq2)
    f221 = 1.5 * sini2
    f321 = 1.875 * siniq * (1.0 - 2.0 * cosiq - 3.0 * cosq2)
    f322 = -1.875 * siniq * (1.0 + 2.0 * cosiq - 3.0 * cosq2)
    f441 = 35.0 * sini2 * f220
    f442 = 39.3750 * sini2 * sini2
    f522 = 9.84375 * siniq * (
        sini2 * (1.0 - 2.0 * cosiq - 5.0 * cosq2) + 0.33333333 * (-2.0 + 4.0 * cosiq + 6.0 * cosq2)
    )
    f523 = siniq * (
        4.92187512 * sini2 * (-2.0 - 4.0 * cosiq + 10.0 * cosq2)
        + 6.56250012 * (1.0 + 2.0 * cosiq - 3.0 * cosq2)
    )
    f542 = 29.53125 * siniq * (2.0 - 8.0 * cosiq + cosq2 * (-12.0 + 8.0 * cosiq + 10.0 * cosq2))
    f543 = 29.53125 * siniq * (-2.0 - 8.0 * cosiq + cosq2 * (12.0 + 8.0 * cosiq - 10.0 * cosq2))

    aqnv = 1.0 / derived.semi_major_axis
    xno2 = elements.mean_motion * elements.mean_motion
    ainv2 = aqnv * aqnv
    temp1 = 3.0 * xno2 * ainv2
    temp = temp1 * ROOT22
    d2201 = temp * f220 * g201
    d2211 = temp * f221 * g211
    temp1 = temp1 * aqnv
    temp = temp1 * ROOT32
    d3210 = temp * f321 * g310
    d3222 = temp * f322 * g322
    temp1 = temp1 * aqnv
    temp = 2.0 * temp1 * ROOT44
    d4410 = temp * f441 * g410
    d4422 = temp * f442 * g422
    temp1 = temp1 * aqnv
    temp = temp1 * ROOT52
    d5220 = temp * f522 * g520
    d5232 = temp * f523 * g532
    temp = 2.0 * temp1 * ROOT54
    d5421 = temp * f542 * g521
    d5433 = temp * f543 * g533

    return TwelveHourResonance(
        d2201=d2201,
        d2211=d2211,
        d3210=d3210,
        d3222=d3222,
        d4410=d4410,
        d4422=d4422,
        d5220=d5220,
        d5232=d5232,
        d5421=d5421,
        d5433=d5433,
    )


def synchronous_resonance(elements: OrbitalElements, derived: DerivedInputs) -> SynchronousResonance:
    """Geopotential resonance coefficients for synchronous orbits."""
    eqsq = derived.eccentricity_squared
    siniq = derived.sin_inclination
    cosiq = derived.cos_inclination
    aqnv = 1.0 / derived.semi_major_axis

    g200 = 1.0 + eqsq * (-2.5 + 0.8125 * eqsq)
    g310 = 1.0 + 2.0 * eqsq
    g300 = 1.0 + eqsq * (-6.0 + 6.60937 * eqsq)
    f220 = 0.75 * (1.0 + cosiq) * (1.0 + cosiq)
    f311 = 0.9375 * siniq * siniq * (1.0 + 3.0 * cosiq) - 0.75 * (1.0 + cosiq)
    f330 = 1.0 + cosiq
    f330 = 1.875 * f330 * f330 * f330

    del1 = 3.0 * elements.mean_motion * elements.mean_motion * aqnv * aqnv
    del2 = 2.0 * del1 * f220 * g200 * Q22
    del3 = 3.0 * del1 * f330 * g300 * Q33 * aqnv
    del1 = del1 * f311 * g310 * Q31 * aqnv
    return SynchronousResonance(del1=del1, del2=del2, del3=del3)


def initialize(
    elements: OrbitalElements,
    derived: DerivedInputs,
    epoch: EpochLike,
    *,
    lunar_cache: Optional[LunarGeometryCache] = None,
    settings: Optional[DeepSpaceSettings] = None,
) -> PerturbationContext:
    """
    Create the deep-space perturbation context of one satellite.

    Args:
        elements: Epoch mean elements (Brouwer mean motion); not modified
        derived: Epoch quantities from the near-earth theory
        epoch: Element set epoch (datetime, ISO-8601 string or (jd, fraction))
        lunar_cache: Lunar geometry cache; defaults to the shared cache
        settings: Runtime settings; defaults to DEFAULT_SETTINGS

    Returns:
        Fully initialized PerturbationContext

    Raises:
        ConfigurationError: the epoch cannot be resolved
    """
    settings = settings or DEFAULT_SETTINGS
    info = resolve_epoch(epoch)

    if lunar_cache is None:
        lunar_cache = DEFAULT_LUNAR_CACHE if settings.share_lunar_cache else LunarGeometryCache()
    geometry = lunar_cache.get(info.day)

    solar = third_body_terms(SUN, elements, derived)
    lunar = third_body_terms(moon(geometry), elements, derived)
    secular = accumulate_secular_rates(solar, lunar, derived)

    context = PerturbationContext(
        eccentricity=elements.eccentricity,
        inclination=elements.inclination,
        argument_of_perigee=elements.argument_of_perigee,
        mean_motion=elements.mean_motion,
        sin_inclination=derived.sin_inclination,
        cos_inclination=derived.cos_inclination,
        perigee_rate=derived.perigee_rate,
        gmst=info.gmst,
        geometry=geometry,
        secular=secular,
        solar=solar.amplitudes,
        lunar=lunar.amplitudes,
        regime=classify_regime(elements.mean_motion, elements.eccentricity),
        periodic_refresh_minutes=settings.periodic_refresh_minutes,
    )

    if context.regime is ResonanceRegime.TWELVE_HOUR:
        context.twelve_hour = twelve_hour_resonance(elements, derived)
        context.xlamo = elements.mean_anomaly + 2.0 * elements.raan - 2.0 * info.gmst
        bfact = derived.mean_anomaly_rate + derived.node_rate + derived.node_rate - THDT - THDT
        context.bfact = bfact + secular.ssl + secular.ssh + secular.ssh
    elif context.regime is ResonanceRegime.SYNCHRONOUS:
        context.synchronous = synchronous_resonance(elements, derived)
        context.xlamo = elements.mean_anomaly + elements.raan + elements.argument_of_perigee - info.gmst
        xpidot = derived.perigee_rate + derived.node_rate
        bfact = derived.mean_anomaly_rate + xpidot - THDT
        context.bfact = bfact + secular.ssl + secular.ssg + secular.ssh

    if context.is_resonant:
        context.xfact = context.bfact - elements.mean_motion
        context.integrator.xli = context.xlamo
        context.integrator.xni = elements.mean_motion

    logger.info(
        "perturbation_context_initialized",
        regime=context.regime.value,
        mean_motion=elements.mean_motion,
        eccentricity=elements.eccentricity,
        day=info.day,
    )
    return context

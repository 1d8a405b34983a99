"""
Deep-Space Perturbation Package

Lunar/solar gravity and Earth-geopotential resonance effects on the mean
elements of deep-space satellites (orbital period of 225 minutes or more),
as used by the SGP8/SDP8 orbit models.

Modules:
    initializer: Per-satellite perturbation context (DPINIT)
    secular: Secular effects and resonance integration (DPSEC)
    periodic: Lunar/solar periodic corrections (DPPER)
    lunar_geometry: Epoch lunar orbit geometry and its cache
    propagator: Mean element propagation driver

References:
    Hoots, F. R., & Roehrich, R. L. (1980). "Spacetrack Report No. 3"
    Vallado, D. A., Crawford, P., Hujsak, R., & Kelso, T. S. (2006).
    Revisiting Spacetrack Report #3. AIAA 2006-6753.
"""

from deep_space.context import PerturbationContext, ResonanceRegime
from deep_space.elements import DerivedInputs, OrbitalElements
from deep_space.errors import ConfigurationError, DeepSpaceError
from deep_space.initializer import initialize
from deep_space.periodic import apply_periodic
from deep_space.propagator import DeepSpacePropagator, propagate_fleet
from deep_space.secular import propagate_secular

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "DeepSpaceError",
    "DeepSpacePropagator",
    "DerivedInputs",
    "OrbitalElements",
    "PerturbationContext",
    "ResonanceRegime",
    "apply_periodic",
    "initialize",
    "propagate_fleet",
    "propagate_secular",
]

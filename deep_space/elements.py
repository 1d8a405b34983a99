"""
Orbital Element Containers

OrbitalElements is the caller-owned mean element set that the deep-space
routines update in place. DerivedInputs bundles the quantities the near-earth
theory has already computed at epoch and hands to the initializer; it is
validated once, at construction, with pydantic.

Units: radians, rad/min, Earth radii.
"""

import math
from dataclasses import asdict, dataclass, replace
from typing import Dict

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from deep_space.zonal import ZonalRates

ELEMENT_FIELDS = (
    "eccentricity",
    "inclination",
    "mean_anomaly",
    "raan",
    "argument_of_perigee",
    "mean_motion",
)


@dataclass
class OrbitalElements:
    """
    Mean orbital elements, mutated in place by the deep-space routines.

    Attributes:
        eccentricity: Mean eccentricity
        inclination: Mean inclination (rad)
        mean_anomaly: Mean anomaly (rad)
        raan: Right ascension of the ascending node (rad)
        argument_of_perigee: Argument of perigee (rad)
        mean_motion: Brouwer mean motion (rad/min)
    """

    eccentricity: float
    inclination: float
    mean_anomaly: float
    raan: float
    argument_of_perigee: float
    mean_motion: float

    @classmethod
    def from_satrec(cls, satrec) -> "OrbitalElements":
        """Epoch mean elements of a pure-Python sgp4.model.Satrec."""
        return cls(
            eccentricity=satrec.ecco,
            inclination=satrec.inclo,
            mean_anomaly=satrec.mo,
            raan=satrec.nodeo,
            argument_of_perigee=satrec.argpo,
            mean_motion=satrec.no_unkozai,
        )

    def copy(self) -> "OrbitalElements":
        return replace(self)

    def as_array(self) -> np.ndarray:
        """Elements in ELEMENT_FIELDS order."""
        return np.array([getattr(self, name) for name in ELEMENT_FIELDS], dtype=float)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


class DerivedInputs(BaseModel):
    """
    Epoch quantities supplied by the near-earth theory.

    The trigonometric and eccentricity functions are passed rather than
    recomputed so the deep-space terms use exactly the values the near-earth
    theory used.
    """

    model_config = ConfigDict(frozen=True)

    eccentricity_squared: float = Field(ge=0.0, lt=1.0)
    sin_inclination: float = Field(ge=-1.0, le=1.0)
    cos_inclination: float = Field(ge=-1.0, le=1.0)
    sqrt_one_minus_e2: float = Field(gt=0.0, le=1.0)
    semi_major_axis: float = Field(gt=0.0, description="Earth radii")
    cos2_inclination: float = Field(ge=0.0, le=1.0)
    sin_perigee: float = Field(ge=-1.0, le=1.0)
    cos_perigee: float = Field(ge=-1.0, le=1.0)
    one_minus_e2: float = Field(gt=0.0, le=1.0)
    mean_anomaly_rate: float = Field(description="rad/min, includes the mean motion")
    perigee_rate: float = Field(description="rad/min")
    node_rate: float = Field(description="rad/min")

    @classmethod
    def from_elements(
        cls,
        elements: OrbitalElements,
        semi_major_axis: float,
        mean_anomaly_rate: float,
        perigee_rate: float,
        node_rate: float,
    ) -> "DerivedInputs":
        """Compute the trigonometric quantities from epoch mean elements."""
        e2 = elements.eccentricity * elements.eccentricity
        cosi = math.cos(elements.inclination)
        return cls(
            eccentricity_squared=e2,
            sin_inclination=math.sin(elements.inclination),
            cos_inclination=cosi,
            sqrt_one_minus_e2=math.sqrt(1.0 - e2),
            semi_major_axis=semi_major_axis,
            cos2_inclination=cosi * cosi,
            sin_perigee=math.sin(elements.argument_of_perigee),
            cos_perigee=math.cos(elements.argument_of_perigee),
            one_minus_e2=1.0 - e2,
            mean_anomaly_rate=mean_anomaly_rate,
            perigee_rate=perigee_rate,
            node_rate=node_rate,
        )

    @classmethod
    def from_zonal(cls, elements: OrbitalElements, rates: ZonalRates) -> "DerivedInputs":
        return cls.from_elements(
            elements,
            semi_major_axis=rates.semi_major_axis,
            mean_anomaly_rate=rates.mean_anomaly_rate,
            perigee_rate=rates.perigee_rate,
            node_rate=rates.node_rate,
        )

    @classmethod
    def from_satrec(cls, satrec) -> "DerivedInputs":
        """
        Derived quantities from an initialized sgp4.model.Satrec.

        The sgp4 library's near-earth initialization (J2, J2^2 and J4 rates,
        un-Kozai'd semi-major axis) acts as the collaborator here.
        """
        return cls.from_elements(
            OrbitalElements.from_satrec(satrec),
            semi_major_axis=satrec.a,
            mean_anomaly_rate=satrec.mdot,
            perigee_rate=satrec.argpdot,
            node_rate=satrec.nodedot,
        )

"""
Deep-Space Configuration and Constants

This module contains physical constants, reference element sets and the
runtime settings used throughout the deep-space perturbation package.

Constants:
    WGS-72 gravitational constants as specified by Vallado et al. (2006, AAS 06-675),
    the same set the SGP8/SDP8 near-earth theory is fitted against.

Reference TLE Data:
    Hardcoded deep-space element sets for demonstrations and testing, one per
    resonance regime (synchronous, 12-hour, non-resonant) plus a near-circular
    12-hour GPS-like set that stays outside the 12-hour resonance.

Runtime Settings:
    DeepSpaceSettings is read from environment variables:
    - DEEP_SPACE_PERIODIC_REFRESH_MINUTES: staleness bound of the periodic-term cache
    - DEEP_SPACE_SHARE_LUNAR_CACHE: share lunar geometry across satellites
    - DEEP_SPACE_MAX_WORKERS: thread pool size for fleet propagation
    - DEEP_SPACE_LOG_LEVEL / DEEP_SPACE_LOG_JSON: applied by logging_config.configure_from_settings()

References:
    Hoots, F. R., & Roehrich, R. L. (1980). "Spacetrack Report No. 3"
"""

import math
import os
from typing import Dict, Any

from pydantic import BaseModel, ConfigDict, Field

from deep_space.constants import PERIODIC_REFRESH_MINUTES

# WGS-72 Gravitational Constants (per Vallado et al. 2006, AAS 06-675)
EARTH_RADIUS_KM: float = 6378.135  # Earth equatorial radius (km)
GRAVITATIONAL_PARAMETER: float = 398600.8  # Earth gravitational parameter (km³/s²)
J2: float = 0.001082616  # Second zonal harmonic coefficient
XKE: float = 60.0 / math.sqrt(EARTH_RADIUS_KM**3 / GRAVITATIONAL_PARAMETER)  # sqrt(GM) in ER^1.5/min

# Orbits with a period of at least this many minutes use the deep-space theory
DEEP_SPACE_PERIOD_MINUTES: float = 225.0

# Reference deep-space element sets, one per resonance regime
REFERENCE_TLES: Dict[str, Dict[str, Any]] = {
    'geostationary': {
        'name': 'GEO TEST',
        'norad_id': 33333,
        'line1': '1 33333U 08999A   23259.50000000  .00000000  00000-0  00000-0 0  9996',
        'line2': '2 33333   0.0500 100.0000 0001000  90.0000 270.0000  1.00273791 99998',
        'regime': 'synchronous',
    },
    'molniya': {
        'name': 'MOLNIYA TEST',
        'norad_id': 40296,
        'line1': '1 40296U 14075A   23259.50000000 -.00000100  00000-0  00000-0 0  9996',
        'line2': '2 40296  62.8000 250.0000 7000000 270.0000  20.0000  2.00580000 99995',
        'regime': 'twelve_hour',
    },
    'gps': {  # 12 hour period but near-circular, so not resonant
        'name': 'GPS TEST',
        'norad_id': 24876,
        'line1': '1 24876U 97035A   23259.50000000  .00000000  00000-0  00000-0 0  9997',
        'line2': '2 24876  55.4000 120.0000 0050000  50.0000 310.0000  2.00561000 99990',
        'regime': 'none',
    },
    '08195': {  # Vallado et al. (2006) verification set, 12 hour resonant
        'name': 'MOLNIYA 2-14',
        'norad_id': 8195,
        'line1': '1 08195U 75081A   06176.33215444  .00000099  00000-0  11873-3 0   813',
        'line2': '2 08195  64.1586 279.0717 6877146 264.7651  20.2257  2.00491383225656',
        'regime': 'twelve_hour',
    },
    '11801': {  # Vallado et al. (2006) verification set, deep space non-resonant
        'name': 'TDRSS 3 R/B',
        'norad_id': 11801,
        'line1': '1 11801U          80230.29629788  .00000096  00000-0  00000-0 0    13',
        'line2': '2 11801  46.7916 230.4354 7318036  47.4722  10.4117  2.28537848    13',
        'regime': 'none',
    },
}


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).strip().lower() in ('1', 'true', 'yes', 'on')


class DeepSpaceSettings(BaseModel):
    """Runtime settings with validation"""

    model_config = ConfigDict(frozen=True)

    periodic_refresh_minutes: float = Field(
        default=PERIODIC_REFRESH_MINUTES, gt=0.0,
        description="Lunar/solar periodic terms are reused while the request stays within this many minutes",
    )
    share_lunar_cache: bool = Field(
        default=True,
        description="Share lunar geometry between satellites with the same epoch",
    )
    max_workers: int = Field(default=8, ge=1)
    log_level: str = Field(default='WARNING', pattern='^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$')
    log_json: bool = Field(default=False)

    @classmethod
    def from_env(cls) -> 'DeepSpaceSettings':
        """Build settings from DEEP_SPACE_* environment variables."""
        return cls(
            periodic_refresh_minutes=float(
                os.getenv('DEEP_SPACE_PERIODIC_REFRESH_MINUTES', str(PERIODIC_REFRESH_MINUTES))
            ),
            share_lunar_cache=_env_bool('DEEP_SPACE_SHARE_LUNAR_CACHE', True),
            max_workers=int(os.getenv('DEEP_SPACE_MAX_WORKERS', '8')),
            log_level=os.getenv('DEEP_SPACE_LOG_LEVEL', 'WARNING').upper(),
            log_json=_env_bool('DEEP_SPACE_LOG_JSON', False),
        )


DEFAULT_SETTINGS = DeepSpaceSettings()

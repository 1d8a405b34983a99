"""
Deep-Space Theory Constants

Numeric literals of the lunar/solar and geopotential-resonance theory used by
the SGP8/SDP8 deep-space perturbations (Hoots & Roehrich, Spacetrack Report
No. 3, DEEP subroutine). Values are copied exactly; do not round them.

Units: radians, minutes, Earth radii.
"""

import math

PI = math.pi
TWOPI = 2.0 * math.pi

# Solar perturbation constants
ZNS = 1.19459e-5  # solar mean motion (rad/min)
C1SS = 2.9864797e-6
ZES = 0.01675  # solar eccentricity

# Lunar perturbation constants
ZNL = 1.5835218e-4  # lunar mean motion (rad/min)
C1L = 4.7968065e-7
ZEL = 0.05490  # lunar eccentricity

# Solar geometry relative to the equator (fixed)
ZCOSIS = 0.91744867
ZSINIS = 0.39785416
ZSINGS = -0.98088458
ZCOSGS = 0.1945905
ZCOSHS = 1.0
ZSINHS = 0.0

# Synchronous resonance amplitudes
Q22 = 1.7891679e-6
Q31 = 2.1460748e-6
Q33 = 2.2123015e-7

# 12-hour resonance phase constants
G22 = 5.7686396
G32 = 0.95240898
G44 = 1.8014998
G52 = 1.0508330
G54 = 4.4108898

# 12-hour resonance amplitudes
ROOT22 = 1.7891679e-6
ROOT32 = 3.7393792e-7
ROOT44 = 7.3636953e-9
ROOT52 = 1.1428639e-7
ROOT54 = 2.1765803e-9

# Earth rotation rate (rad/min)
THDT = 4.3752691e-3

# Synchronous resonance phases
FASX2 = 0.13130908
FASX4 = 2.8843198
FASX6 = 0.37448087

# Resonance bands (rad/min). The synchronous band is open on both ends,
# the 12-hour band is closed on both ends.
SYNC_BAND_LOW = 0.0034906585
SYNC_BAND_HIGH = 0.0052359877
TWELVE_HOUR_BAND_LOW = 8.26e-3
TWELVE_HOUR_BAND_HIGH = 9.24e-3
TWELVE_HOUR_MIN_ECCENTRICITY = 0.5

# Eccentricity breakpoints of the 12-hour polynomial fits
ECC_BREAK_LOW = 0.65
ECC_BREAK_HIGH = 0.7
ECC_BREAK_G520 = 0.715

# Inclination thresholds (rad)
NODE_TERM_MIN_INCLINATION = 5.2359877e-2
LYDDANE_INCLINATION = 0.2

# Integrator step sizes (min, min^2 / 2)
STEPP = 720.0
STEPN = -720.0
STEP2 = 259200.0

# Periodic terms are re-evaluated once the request moves this far (min)
PERIODIC_REFRESH_MINUTES = 30.0

# Sentinel "last evaluation time" that forces the first refresh
SAVTSN_UNSET = 1.0e20

# Offset from days-since-1950 to days-since-1900 Jan 0.5
DAY_OFFSET_1900 = 18261.5

# Julian date of 1950 January 0.0
JD_1950_JAN_0 = 2433281.5

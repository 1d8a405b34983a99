"""
Deep-Space Perturbation Validation Suite

This module provides systematic validation of the deep-space perturbations:
1. Reference scenarios (synchronous, 12-hour Molniya, low-earth input)
2. Behavioural properties (determinism, epoch restart, periodic continuity)
3. Cross-validation of the epoch coefficients with the sgp4 library, whose
   deep-space initialization implements the same lunar/solar theory

References:
    Hoots, F. R., & Roehrich, R. L. (1980). "Spacetrack Report No. 3"

    Vallado, D. A., Crawford, P., Hujsak, R., & Kelso, T. S. (2006).
    Revisiting Spacetrack Report #3. AIAA 2006-6753.
"""

import math
import unittest
from datetime import datetime, timezone

import numpy as np
from sgp4.model import Satrec

from deep_space.config import REFERENCE_TLES
from deep_space.constants import ECC_BREAK_HIGH, ROOT54
from deep_space.context import ResonanceRegime
from deep_space.elements import DerivedInputs, OrbitalElements
from deep_space.initializer import initialize
from deep_space.lunar_geometry import LunarGeometryCache
from deep_space.periodic import apply_periodic
from deep_space.propagator import DeepSpacePropagator
from deep_space.secular import propagate_secular
from deep_space.zonal import zonal_secular_rates

EPOCH = datetime(2023, 9, 16, 12, 0, 0, tzinfo=timezone.utc)

TWELVE_HOUR_TERMS = (
    "d2201", "d2211", "d3210", "d3222", "d4410",
    "d4422", "d5220", "d5232", "d5421", "d5433",
)


def angle_difference(a, b):
    return (a - b + math.pi) % (2.0 * math.pi) - math.pi


class DeepSpaceValidationSuite(unittest.TestCase):
    """Scenario and property validation of the deep-space perturbations"""

    def setUp(self):
        """Initialize reference propagators"""
        self.geo = DeepSpacePropagator.from_tle(
            REFERENCE_TLES["geostationary"]["line1"], REFERENCE_TLES["geostationary"]["line2"]
        )
        self.molniya = DeepSpacePropagator.from_tle(
            REFERENCE_TLES["molniya"]["line1"], REFERENCE_TLES["molniya"]["line2"]
        )

    def test_synchronous_scenario(self):
        """Geostationary orbit: synchronous resonance changes the mean motion"""
        self.assertEqual(self.geo.context.regime, ResonanceRegime.SYNCHRONOUS)
        self.assertIsNotNone(self.geo.context.synchronous)

        n0 = self.geo.epoch_elements.mean_motion
        for days in (1.0, 10.0, 30.0):
            elements = self.geo.mean_elements(days * 1440.0)
            self.assertNotEqual(elements.mean_motion, n0)
            self.assertLess(abs(elements.mean_motion - n0) / n0, 1e-3)

        self.assertEqual(self.geo.context.integrator.step_count, 60)

    def test_twelve_hour_scenario(self):
        """Molniya orbit at e = 0.7 uses the high-eccentricity coefficient fits"""
        context = self.molniya.context
        self.assertEqual(context.regime, ResonanceRegime.TWELVE_HOUR)
        self.assertGreaterEqual(context.eccentricity, ECC_BREAK_HIGH)

        e = context.eccentricity
        eqsq = self.molniya.derived.eccentricity_squared
        eoc = e * eqsq
        cosi = context.cos_inclination
        sini = context.sin_inclination
        cosq2 = cosi * cosi
        aqnv = 1.0 / self.molniya.derived.semi_major_axis
        n = context.mean_motion

        g521 = -51752.104 + 218913.95 * e - 309468.16 * eqsq + 146349.42 * eoc
        f542 = 29.53125 * sini * (2.0 - 8.0 * cosi + cosq2 * (-12.0 + 8.0 * cosi + 10.0 * cosq2))
        expected = 2.0 * (3.0 * n * n * aqnv ** 5) * ROOT54 * f542 * g521
        self.assertTrue(math.isclose(context.twelve_hour.d5421, expected, rel_tol=1e-10))

        elements = self.molniya.mean_elements(30 * 1440.0)
        self.assertNotEqual(elements.mean_motion, self.molniya.epoch_elements.mean_motion)

    def test_low_earth_scenario(self):
        """A low-earth mean motion is non-resonant: only the linear update runs"""
        inclination = math.radians(51.6)
        rates = zonal_secular_rates(0.06, 0.001, inclination)
        elements = OrbitalElements(0.001, inclination, 0.2, 1.0, 2.0, 0.06)
        derived = DerivedInputs.from_zonal(elements, rates)
        context = initialize(elements, derived, EPOCH, lunar_cache=LunarGeometryCache())
        self.assertEqual(context.regime, ResonanceRegime.NONE)

        t = 1440.0
        result = elements.copy()
        propagate_secular(context, result, t)
        secular = context.secular

        self.assertEqual(result.mean_anomaly, elements.mean_anomaly + secular.ssl * t)
        self.assertEqual(result.argument_of_perigee, elements.argument_of_perigee + secular.ssg * t)
        self.assertEqual(result.raan, elements.raan + secular.ssh * t)
        self.assertEqual(result.eccentricity, elements.eccentricity + secular.sse * t)
        self.assertEqual(result.inclination, elements.inclination + secular.ssi * t)
        self.assertEqual(result.mean_motion, 0.06)
        self.assertEqual(context.integrator.step_count, 0)

    def test_determinism(self):
        """Identical inputs give identical outputs"""
        times = [0.0, 1000.0, 20000.0, -5000.0, 300.0]
        first = DeepSpacePropagator.from_tle(
            REFERENCE_TLES["08195"]["line1"], REFERENCE_TLES["08195"]["line2"]
        ).mean_elements_batch(times)
        second = DeepSpacePropagator.from_tle(
            REFERENCE_TLES["08195"]["line1"], REFERENCE_TLES["08195"]["line2"]
        ).mean_elements_batch(times)
        np.testing.assert_allclose(first, second, rtol=0.0, atol=1e-9)

    def test_epoch_restart(self):
        """Requests across the epoch match a fresh propagator"""
        self.molniya.mean_elements(100.0)
        restarted = self.molniya.mean_elements(-50.0)

        fresh = DeepSpacePropagator.from_tle(
            REFERENCE_TLES["molniya"]["line1"], REFERENCE_TLES["molniya"]["line2"]
        ).mean_elements(-50.0)
        np.testing.assert_allclose(restarted.as_array(), fresh.as_array(), rtol=0.0, atol=1e-12)

    def test_integration_cost_is_linear(self):
        """A monotonic year of daily requests takes one step per 720 minutes"""
        times = np.arange(1.0, 366.0) * 1440.0
        self.geo.mean_elements_batch(times)
        self.assertEqual(self.geo.context.integrator.step_count, 730)

    def test_periodic_refresh_bound(self):
        """Periodic sums are never older than the refresh interval"""
        context = self.molniya.context
        for t in np.arange(0.0, 600.0, 7.0):
            self.molniya.mean_elements(float(t))
            self.assertLess(abs(context.periodic.savtsn - t), context.periodic_refresh_minutes)

    def test_lyddane_continuity(self):
        """Periodic corrections are continuous across the 0.2 rad switch"""
        results = []
        for inclination in (0.2 - 1e-7, 0.2 + 1e-7):
            propagator = DeepSpacePropagator.from_elements(
                eccentricity=0.01,
                inclination=inclination,
                mean_anomaly=0.5,
                raan=2.0,
                argument_of_perigee=1.0,
                mean_motion=0.0262,
                epoch=EPOCH,
            )
            results.append(propagator.mean_elements(1440.0))

        below, above = results
        self.assertAlmostEqual(below.eccentricity, above.eccentricity, delta=1e-8)
        self.assertAlmostEqual(below.mean_anomaly, above.mean_anomaly, delta=1e-7)
        self.assertLess(abs(angle_difference(below.raan, above.raan)), 1e-4)
        self.assertLess(abs(angle_difference(below.argument_of_perigee, above.argument_of_perigee)), 1e-4)

    def test_periodic_requires_secular_first(self):
        """apply_periodic() works on the output of propagate_secular() for the same t"""
        context = self.geo.context
        elements = self.geo.epoch_elements.copy()
        propagate_secular(context, elements, 720.0)
        before = elements.copy()
        apply_periodic(context, elements, 720.0)
        self.assertEqual(context.periodic.savtsn, 720.0)
        self.assertNotEqual(elements.eccentricity, before.eccentricity)


class SGP4CrossValidation(unittest.TestCase):
    """Cross-validate epoch coefficients against the sgp4 library"""

    def _pair(self, key):
        tle = REFERENCE_TLES[key]
        satrec = Satrec.twoline2rv(tle["line1"], tle["line2"])
        context = initialize(
            OrbitalElements.from_satrec(satrec),
            DerivedInputs.from_satrec(satrec),
            (satrec.jdsatepoch, satrec.jdsatepochF),
            lunar_cache=LunarGeometryCache(),
        )
        return satrec, context

    def _assert_secular_rates(self, satrec, context):
        secular = context.secular
        np.testing.assert_allclose(secular.sse, satrec.dedt, rtol=1e-9)
        np.testing.assert_allclose(secular.ssi, satrec.didt, rtol=1e-9)
        np.testing.assert_allclose(secular.ssl, satrec.dmdt, rtol=1e-9)
        np.testing.assert_allclose(secular.ssg, satrec.domdt, rtol=1e-9)
        np.testing.assert_allclose(secular.ssh, satrec.dnodt, rtol=1e-9, atol=1e-20)

    def test_synchronous(self):
        satrec, context = self._pair("geostationary")
        self.assertEqual(satrec.irez, 1)
        self.assertEqual(context.regime, ResonanceRegime.SYNCHRONOUS)
        self._assert_secular_rates(satrec, context)

        for name in ("del1", "del2", "del3"):
            np.testing.assert_allclose(getattr(context.synchronous, name), getattr(satrec, name), rtol=1e-9)
        self.assertAlmostEqual(context.xfact, satrec.xfact, delta=1e-10)
        self.assertLess(abs(angle_difference(context.xlamo, satrec.xlamo)), 1e-9)

    def test_twelve_hour(self):
        for key in ("molniya", "08195"):
            satrec, context = self._pair(key)
            self.assertEqual(satrec.irez, 2, msg=key)
            self.assertEqual(context.regime, ResonanceRegime.TWELVE_HOUR, msg=key)
            self._assert_secular_rates(satrec, context)

            for name in TWELVE_HOUR_TERMS:
                np.testing.assert_allclose(
                    getattr(context.twelve_hour, name), getattr(satrec, name), rtol=1e-9, err_msg=f"{key} {name}"
                )
            self.assertAlmostEqual(context.xfact, satrec.xfact, delta=1e-10, msg=key)
            self.assertLess(abs(angle_difference(context.xlamo, satrec.xlamo)), 1e-9, msg=key)

    def test_non_resonant(self):
        for key in ("11801", "gps"):
            satrec, context = self._pair(key)
            self.assertEqual(satrec.irez, 0, msg=key)
            self.assertEqual(context.regime, ResonanceRegime.NONE, msg=key)
            self._assert_secular_rates(satrec, context)


if __name__ == "__main__":
    unittest.main()

"""
Deep-Space Perturbation Demonstration

This script demonstrates the key capabilities of the deep-space perturbation package:
- Resonance classification of reference deep-space element sets
- Lunar/solar secular rates and resonance coefficients at epoch
- Mean element propagation over a span of days
- Incremental resonance integration for monotonic time sequences
- Concurrent propagation of a small fleet
- Visualization of mean element evolution

Usage:
    python demo.py [--days N] [--step-hours H] [--plot] [--verbose] [--json]

Arguments:
    --days: Propagation span in days (default 30)
    --step-hours: Output spacing in hours (default 12)
    --plot: Save a plot of the mean element evolution
    --verbose: Enable debug logging
    --json: Emit JSON log lines

References:
    Hoots, F. R., & Roehrich, R. L. (1980). "Spacetrack Report No. 3"
"""

import argparse
import logging
import math
from typing import Dict

import matplotlib.pyplot as plt
import numpy as np

from deep_space import DeepSpacePropagator, propagate_fleet
from deep_space.config import REFERENCE_TLES, DeepSpaceSettings
from deep_space.elements import ELEMENT_FIELDS
from deep_space.logging_config import configure_from_settings, get_logger

logger = get_logger(__name__)


def load_reference_propagators() -> Dict[str, DeepSpacePropagator]:
    """Create one propagator per reference TLE."""
    propagators = {}
    for key, tle in REFERENCE_TLES.items():
        propagator = DeepSpacePropagator.from_tle(tle["line1"], tle["line2"], tle["name"])
        propagators[key] = propagator
        logger.info(
            f"{tle['name']:<14} NORAD {tle['norad_id']:>5}  regime={propagator.context.regime.value}"
        )
    return propagators


def describe_context(propagator: DeepSpacePropagator) -> None:
    """
    Report the epoch quantities of one satellite.

    Parameters
    ----------
    propagator : DeepSpacePropagator
        Initialized propagator
    """
    context = propagator.context
    secular = context.secular
    logger.info(f"{propagator.name}")
    logger.info(f"  Mean motion:  {context.mean_motion:.9f} rad/min")
    logger.info(f"  Eccentricity: {context.eccentricity:.7f}")
    logger.info(f"  Inclination:  {math.degrees(context.inclination):.4f} deg")
    logger.info(f"  dE/dt  {secular.sse:+.6e} /min")
    logger.info(f"  dI/dt  {secular.ssi:+.6e} rad/min")
    logger.info(f"  dM/dt  {secular.ssl:+.6e} rad/min")
    logger.info(f"  dw/dt  {secular.ssg:+.6e} rad/min")
    logger.info(f"  dO/dt  {secular.ssh:+.6e} rad/min")
    if context.is_resonant:
        logger.info(f"  Resonance drift XFACT {context.xfact:+.6e} rad/min")


def tabulate(propagator: DeepSpacePropagator, times: np.ndarray) -> np.ndarray:
    """
    Print mean elements at the requested times.

    Parameters
    ----------
    propagator : DeepSpacePropagator
        Propagator to evaluate
    times : ndarray
        Minutes since epoch

    Returns
    -------
    ndarray
        Mean elements, one row per time
    """
    elements = propagator.mean_elements_batch(times)
    logger.info(f"{'t (days)':>9} {'e':>10} {'i (deg)':>9} {'w (deg)':>9} {'O (deg)':>9} {'n (rad/min)':>13}")
    for t, row in zip(times, elements):
        e, inc, _, raan, argp, n = row
        logger.info(
            f"{t / 1440.0:9.2f} {e:10.7f} {math.degrees(inc):9.4f} "
            f"{math.degrees(argp) % 360.0:9.4f} {math.degrees(raan) % 360.0:9.4f} {n:13.9f}"
        )
    return elements


def demonstrate_incremental_integration(line1: str, line2: str, times: np.ndarray) -> None:
    """Compare integrator work for a monotonic sequence against a single request."""
    monotonic = DeepSpacePropagator.from_tle(line1, line2)
    monotonic.mean_elements_batch(times)

    single = DeepSpacePropagator.from_tle(line1, line2)
    single.mean_elements(float(times[-1]))

    logger.info(
        f"Integrator steps: {monotonic.context.integrator.step_count} for {len(times)} "
        f"monotonic requests, {single.context.integrator.step_count} for one request at "
        f"t={times[-1]:.0f} min"
    )


def plot_evolution(results: Dict[str, np.ndarray], times: np.ndarray, output_file: str) -> None:
    """
    Plot eccentricity, inclination and mean motion against time.

    Parameters
    ----------
    results : dict
        Mean elements per satellite name
    times : ndarray
        Minutes since epoch
    output_file : str
        Image path
    """
    columns = {name: index for index, name in enumerate(ELEMENT_FIELDS)}
    time_days = times / 1440.0

    fig, axes = plt.subplots(3, 1, figsize=(12, 10), sharex=True)
    for name, elements in results.items():
        axes[0].plot(time_days, elements[:, columns["eccentricity"]], label=name)
        axes[1].plot(time_days, np.degrees(elements[:, columns["inclination"]]), label=name)
        axes[2].plot(time_days, elements[:, columns["mean_motion"]], label=name)

    axes[0].set_ylabel("Eccentricity")
    axes[1].set_ylabel("Inclination (deg)")
    axes[2].set_ylabel("Mean motion (rad/min)")
    axes[2].set_xlabel("Time (days)")
    axes[0].set_title("Deep-Space Mean Element Evolution")
    for ax in axes:
        ax.grid(True, alpha=0.3)
    axes[0].legend(loc="best")

    plt.tight_layout()
    plt.savefig(output_file, dpi=150, bbox_inches="tight")
    logger.info(f"Saved mean element plot to {output_file}")
    plt.close(fig)


def main() -> None:
    """Main demonstration entry point."""
    parser = argparse.ArgumentParser(description="Deep-Space Perturbation Demonstration")
    parser.add_argument("--days", type=float, default=30.0, help="Propagation span in days")
    parser.add_argument("--step-hours", type=float, default=12.0, help="Output spacing in hours")
    parser.add_argument("--plot", action="store_true", help="Save a plot of the mean elements")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--json", action="store_true", help="Emit JSON log lines")

    args = parser.parse_args()

    settings = DeepSpaceSettings.from_env()
    overrides = {}
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    elif logging.getLevelName(settings.log_level) > logging.INFO:
        # The report itself is logged at INFO
        overrides["log_level"] = "INFO"
    if args.json:
        overrides["log_json"] = True
    configure_from_settings(settings.model_copy(update=overrides))

    logger.info("Deep-Space Perturbation Demonstration")
    logger.info("=" * 60)

    times = np.arange(0.0, args.days * 1440.0 + 1.0, args.step_hours * 60.0)

    propagators = load_reference_propagators()
    for propagator in propagators.values():
        logger.info("")
        describe_context(propagator)
        tabulate(propagator, times[:: max(1, len(times) // 10)])

    logger.info("")
    molniya = REFERENCE_TLES["molniya"]
    demonstrate_incremental_integration(molniya["line1"], molniya["line2"], times)

    logger.info("")
    fleet = [
        DeepSpacePropagator.from_tle(tle["line1"], tle["line2"], tle["name"])
        for tle in REFERENCE_TLES.values()
    ]
    results = propagate_fleet(fleet, times, max_workers=settings.max_workers)

    if args.plot:
        plot_evolution(results, times, "deep_space_mean_elements.png")

    logger.info("=" * 60)
    logger.info("Demonstration complete")


if __name__ == "__main__":
    main()

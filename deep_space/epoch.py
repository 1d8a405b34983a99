"""
Epoch Resolution

Converts a calendar epoch into the two time quantities the deep-space
initializer needs: days since 1950 January 0.0 (ds50) and Greenwich mean
sidereal time. Julian dates and sidereal time come from the sgp4 library so
they agree with the near-earth theory's own bookkeeping.

Accepted epochs:
- datetime (naive values are taken as UTC)
- ISO-8601 string, e.g. "2023-09-16T12:00:00Z"
- (jd, fraction) pair, as stored on an sgp4 Satrec
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Tuple, Union

from sgp4.api import jday
from sgp4.propagation import gstime

from deep_space.constants import DAY_OFFSET_1900, JD_1950_JAN_0
from deep_space.errors import ConfigurationError
from deep_space.logging_config import get_logger

logger = get_logger(__name__)

EpochLike = Union[datetime, str, Tuple[float, float]]


@dataclass(frozen=True)
class EpochInfo:
    """Resolved epoch: ds50 (days) and Greenwich mean sidereal time (rad)"""

    ds50: float
    gmst: float

    @property
    def julian_date(self) -> float:
        return self.ds50 + JD_1950_JAN_0

    @property
    def day(self) -> float:
        """Days since 1900 January 0.5, the lunar-geometry cache key."""
        return self.ds50 + DAY_OFFSET_1900


def _julian_date(epoch: EpochLike) -> Tuple[float, float]:
    if isinstance(epoch, str):
        epoch = datetime.fromisoformat(epoch.strip().replace("Z", "+00:00"))

    if isinstance(epoch, datetime):
        if epoch.tzinfo is not None:
            epoch = epoch.astimezone(timezone.utc)
        return jday(
            epoch.year,
            epoch.month,
            epoch.day,
            epoch.hour,
            epoch.minute,
            epoch.second + epoch.microsecond / 1e6,
        )

    if isinstance(epoch, (tuple, list)) and len(epoch) == 2:
        jd, fr = float(epoch[0]), float(epoch[1])
        if not (math.isfinite(jd) and math.isfinite(fr)):
            raise ValueError("Julian date must be finite")
        return jd, fr

    raise TypeError(f"Unsupported epoch type: {type(epoch).__name__}")


def resolve_epoch(epoch: EpochLike) -> EpochInfo:
    """
    Resolve an epoch to ds50 and Greenwich mean sidereal time.

    Args:
        epoch: datetime, ISO-8601 string or (jd, fraction) pair

    Returns:
        EpochInfo

    Raises:
        ConfigurationError: the epoch cannot be resolved
    """
    try:
        jd, fr = _julian_date(epoch)
    except (TypeError, ValueError, OverflowError) as exc:
        logger.error("epoch_unresolvable", epoch=repr(epoch), error=str(exc))
        raise ConfigurationError(f"Invalid epoch: {epoch!r}") from exc

    ds50 = jd + fr - JD_1950_JAN_0
    return EpochInfo(ds50=ds50, gmst=gstime(ds50 + JD_1950_JAN_0))

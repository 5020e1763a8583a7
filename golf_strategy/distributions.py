"""
Per-club distribution builder.
Turns grouped shot history into carry/offline profiles and extrapolates
dispersion for clubs that only have an estimated carry.
"""

import logging
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .config import (
    MIN_SHOTS_FOR_DISTRIBUTION, DEFAULT_STD_OFFLINE, STD_FLOOR_YARDS,
    MIN_EXTRAPOLATED_STD, IMPUTED_CARRY_CV, IMPUTED_OFFLINE_CV,
)
from .models import ClubShotGroup, ClubDistribution

logger = logging.getLogger(__name__)


def _sample_std(values: Sequence[float]) -> float:
    if len(values) <= 1:
        return 0.0
    return float(np.std(values, ddof=1))


def linear_predict(points: Sequence[Tuple[float, float]], x: float) -> float:
    """
    Ordinary least squares fit of (x, y) points, evaluated at x.

    A single point predicts its own y; when every x is (nearly) the same the
    slope is undefined and the mean of y is returned instead.
    """
    n = len(points)
    if n == 0:
        return 0.0
    xs = np.array([p[0] for p in points], dtype=float)
    ys = np.array([p[1] for p in points], dtype=float)

    sum_x = xs.sum()
    sum_y = ys.sum()
    denom = n * float((xs * xs).sum()) - sum_x * sum_x
    if abs(denom) < 1e-10:
        return float(sum_y / n)
    slope = (n * float((xs * ys).sum()) - sum_x * sum_y) / denom
    intercept = (sum_y - slope * sum_x) / n
    return float(intercept + slope * x)


def estimate_dispersion(carry: float, real_dists: List[ClubDistribution]) -> Dict[str, float]:
    """
    Estimate bias and dispersion for a club known only by its carry.
    Regresses against the real clubs when at least two exist, otherwise
    falls back to a fixed coefficient of variation.
    """
    if len(real_dists) >= 2:
        return {
            "mean_offline": linear_predict([(d.mean_carry, d.mean_offline) for d in real_dists], carry),
            "std_carry": max(
                MIN_EXTRAPOLATED_STD,
                linear_predict([(d.mean_carry, d.std_carry) for d in real_dists], carry),
            ),
            "std_offline": max(
                MIN_EXTRAPOLATED_STD,
                linear_predict([(d.mean_carry, d.std_offline) for d in real_dists], carry),
            ),
        }

    return {
        "mean_offline": 0.0,
        "std_carry": carry * IMPUTED_CARRY_CV,
        "std_offline": carry * IMPUTED_OFFLINE_CV,
    }


def build_distributions(groups: List[ClubShotGroup]) -> List[ClubDistribution]:
    """Build per-club carry/offline distributions from shot groups."""
    distributions: List[ClubDistribution] = []
    real_dists: List[ClubDistribution] = []

    for group in groups:
        if group.imputed or len(group.shots) < MIN_SHOTS_FOR_DISTRIBUTION:
            continue

        carries = [s.carry_yards for s in group.shots]
        offlines = [s.offline_yards for s in group.shots if s.offline_yards is not None]

        dist = ClubDistribution(
            club_id=group.club_id,
            club_name=group.club_name,
            mean_carry=float(np.mean(carries)),
            std_carry=max(STD_FLOOR_YARDS, _sample_std(carries)),
            mean_offline=float(np.mean(offlines)) if offlines else 0.0,
            std_offline=max(STD_FLOOR_YARDS, _sample_std(offlines)) if offlines else DEFAULT_STD_OFFLINE,
        )
        distributions.append(dist)
        real_dists.append(dist)

    for group in groups:
        if not group.imputed or not group.shots:
            continue
        carry = group.shots[0].carry_yards
        if carry <= 0:
            continue

        est = estimate_dispersion(carry, real_dists)
        distributions.append(ClubDistribution(
            club_id=group.club_id,
            club_name=group.club_name,
            mean_carry=float(carry),
            std_carry=max(STD_FLOOR_YARDS, est["std_carry"]),
            mean_offline=est["mean_offline"],
            std_offline=max(STD_FLOOR_YARDS, est["std_offline"]),
        ))

    logger.debug(
        f"Built {len(distributions)} distributions "
        f"({len(real_dists)} measured, {len(distributions) - len(real_dists)} imputed)"
    )
    return distributions

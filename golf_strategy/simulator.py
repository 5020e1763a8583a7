"""
Monte Carlo distance model for the Golf Strategy Optimizer.
Simulates club sequences against a scalar remaining distance, ignoring
course geometry, and ranks the candidate sequences by expected strokes.
"""

import logging
import math
from typing import List, Optional, Tuple

import numpy as np

from .config import (
    get_config, HOLE_THRESHOLD_YARDS, MIN_CHIP_THRESHOLD_YARDS, CHIP_THRESHOLD_FRACTION,
    FLAT_PUTTS, PUTT_LOG_COEFFICIENT, MIN_PUTTS, MAX_PUTTS, MAX_SHOTS_PER_HOLE,
    SINGLE_CLUB_MAX_DISTANCE, TWO_CLUB_MAX_DISTANCE, SINGLE_CLUB_TOLERANCE,
    TWO_CLUB_TOLERANCE, LONG_HOLE_TOLERANCE, TOP_APPROACHES,
    GRIP_DOWN_YARDS_PER_INCH, MAX_GRIP_DOWN_INCHES,
)
from .geo import round_half_up
from .models import ClubDistribution, ClubRef, ApproachStrategy

logger = logging.getLogger(__name__)


# ============================================================================
# Shared sampling and scoring helpers
# ============================================================================

def gaussian_sample(rng: np.random.Generator, mu: float, sigma: float) -> float:
    """Box-Muller Gaussian sample drawn from the supplied generator."""
    u1 = 1.0 - rng.random()  # (0, 1], keeps log() finite
    u2 = rng.random()
    z = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
    return mu + sigma * z


def expected_putts(distance_yards: float) -> float:
    """Log-curve putting model fitted to strokes-gained data."""
    if distance_yards <= 1:
        return MIN_PUTTS
    return min(MAX_PUTTS, max(MIN_PUTTS, 1.0 + PUTT_LOG_COEFFICIENT * math.log(distance_yards)))


def greedy_club(target: float, clubs: List[ClubDistribution]) -> ClubDistribution:
    """Club whose mean carry is closest to the target (first wins ties)."""
    best = clubs[0]
    best_diff = abs(best.mean_carry - target)
    for club in clubs[1:]:
        diff = abs(club.mean_carry - target)
        if diff < best_diff:
            best_diff = diff
            best = club
    return best


def chip_threshold(clubs: List[ClubDistribution]) -> float:
    """Distance inside which a full swing is no longer simulated."""
    shortest = min(c.mean_carry for c in clubs)
    return max(MIN_CHIP_THRESHOLD_YARDS, shortest * CHIP_THRESHOLD_FRACTION)


def grip_down_advice(club: ClubDistribution, target: float) -> Optional[Tuple[int, int]]:
    """
    (inches, effective carry) when the club flies past the target by at least
    half a grip-down increment, else None.
    """
    overshoot = club.mean_carry - target
    if overshoot < GRIP_DOWN_YARDS_PER_INCH / 2:
        return None
    inches = int(math.floor(overshoot / GRIP_DOWN_YARDS_PER_INCH + 0.5))
    inches = max(1, min(MAX_GRIP_DOWN_INCHES, inches))
    effective = round_half_up(club.mean_carry - inches * GRIP_DOWN_YARDS_PER_INCH)
    return inches, effective


# ============================================================================
# Distance model
# ============================================================================

class DistanceSimulator:
    """Monte Carlo simulation over remaining distance only."""

    def __init__(self, n_trials: int = None, rng: Optional[np.random.Generator] = None):
        """Initialize simulator."""
        self.config = get_config()
        self.n_trials = n_trials or self.config.default_trials
        self._rng = rng if rng is not None else self.config.make_rng()

    def _shot(self, remaining: float, club: ClubDistribution) -> float:
        carry = gaussian_sample(self._rng, club.mean_carry, club.std_carry)
        offline = gaussian_sample(self._rng, club.mean_offline, club.std_offline)
        # True geometric remaining distance, not naive subtraction
        return math.sqrt((remaining - carry) ** 2 + offline ** 2)

    def simulate_strategy(
        self,
        distance: float,
        plan: List[ClubDistribution],
        all_clubs: List[ClubDistribution],
        trials: int,
    ) -> float:
        """Mean strokes (including chips and putts) for a planned club sequence."""
        threshold = chip_threshold(all_clubs)
        total_strokes = 0.0

        for _ in range(trials):
            remaining = distance
            strokes = 0

            for club in plan:
                remaining = self._shot(remaining, club)
                strokes += 1
                if remaining <= threshold:
                    break

            # Greedy continuation if not near the green yet
            while remaining > threshold and strokes < MAX_SHOTS_PER_HOLE:
                remaining = self._shot(remaining, greedy_club(remaining, all_clubs))
                strokes += 1

            if HOLE_THRESHOLD_YARDS < remaining <= threshold:
                strokes += 1  # Chip
            total_strokes += strokes + FLAT_PUTTS

        return total_strokes / trials

    def _candidates(
        self, distance: float, clubs: List[ClubDistribution]
    ) -> List[List[ClubDistribution]]:
        """Club sequences whose combined carry lands near the distance."""
        candidates = []

        if distance <= SINGLE_CLUB_MAX_DISTANCE:
            for c in clubs:
                if abs(c.mean_carry - distance) < SINGLE_CLUB_TOLERANCE:
                    candidates.append([c])
        elif distance <= TWO_CLUB_MAX_DISTANCE:
            for c1 in clubs:
                if c1.mean_carry >= distance:
                    continue
                for c2 in clubs:
                    if abs(c1.mean_carry + c2.mean_carry - distance) < TWO_CLUB_TOLERANCE:
                        candidates.append([c1, c2])
        else:
            for c1 in clubs:
                if c1.mean_carry >= distance:
                    continue
                # Two shots: going for it
                for c2 in clubs:
                    if abs(c1.mean_carry + c2.mean_carry - distance) < LONG_HOLE_TOLERANCE:
                        candidates.append([c1, c2])
                # Three shots: first two must not overshoot
                for c2 in clubs:
                    sum12 = c1.mean_carry + c2.mean_carry
                    if sum12 >= distance:
                        continue
                    for c3 in clubs:
                        if abs(sum12 + c3.mean_carry - distance) < LONG_HOLE_TOLERANCE:
                            candidates.append([c1, c2, c3])

        return candidates

    def _label(self, distance: float, plan: List[ClubDistribution]) -> Tuple[str, Optional[str]]:
        names = [c.club_name for c in plan]
        final = plan[-1]
        leg_target = distance - sum(c.mean_carry for c in plan[:-1])
        advice = grip_down_advice(final, leg_target)
        tip = None
        if advice:
            inches, effective = advice
            names[-1] = f'{final.club_name} (grip {inches}" down → {effective})'
            tip = f'Grip {inches}" down on {final.club_name} for {effective}'
        return " → ".join(names), tip

    def find_best_approaches(
        self,
        distance: float,
        clubs: List[ClubDistribution],
        trials: int = None,
    ) -> List[ApproachStrategy]:
        """
        Find the best club sequences for a remaining distance.

        Plan depth depends on distance: one club up to 225 yards, two clubs
        up to 425, two or three clubs beyond. Returns at most three
        strategies sorted by expected strokes; empty when nothing fits.
        """
        if not clubs or distance <= 0:
            return []

        candidates = self._candidates(distance, clubs)
        if not candidates:
            logger.debug(f"No club sequence within tolerance of {distance:.0f}y")
            return []

        n = trials or self.n_trials
        # Scale down trials for large candidate sets to keep total work bounded
        effective_trials = max(
            self.config.min_trials,
            min(n, self.config.max_simulated_shots // len(candidates)),
        )
        logger.info(
            f"Simulating {len(candidates)} candidates x {effective_trials:,} trials for {distance:.0f}y"
        )

        results = []
        for plan in candidates:
            label, tip = self._label(distance, plan)
            results.append(ApproachStrategy(
                clubs=[ClubRef(c.club_id, c.club_name) for c in plan],
                expected_strokes=self.simulate_strategy(distance, plan, clubs, effective_trials),
                label=label,
                tip=tip,
            ))

        results.sort(key=lambda r: r.expected_strokes)
        return results[:TOP_APPROACHES]


def find_best_approaches(
    distance: float,
    clubs: List[ClubDistribution],
    trials: int = None,
    rng: Optional[np.random.Generator] = None,
) -> List[ApproachStrategy]:
    """Module-level shortcut for DistanceSimulator.find_best_approaches."""
    return DistanceSimulator(trials, rng).find_best_approaches(distance, clubs, trials)


def get_simulator(n_trials: int = None, rng: Optional[np.random.Generator] = None) -> DistanceSimulator:
    """Get configured distance simulator instance."""
    return DistanceSimulator(n_trials, rng)

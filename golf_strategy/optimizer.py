"""
Hole and round orchestration for the Golf Strategy Optimizer.
Generates named plans, simulates them, ranks by the chosen mode and rolls
the per-hole winners up into a course game plan.
"""

import asyncio
import logging
from datetime import date
from typing import Callable, List, Optional, Tuple

import numpy as np

from .config import get_config, GREEN_BIRDIE_THRESHOLD, RED_BLOWUP_THRESHOLD
from .geo import haversine_yards, bearing_between, polygon_centroid
from .gps_simulator import GPSSimulator
from .models import (
    Course, CourseHole, ClubDistribution, OptimizedStrategy, StrategyMode,
    ScoreDistribution, HolePlan, GamePlan, ColorCode, HazardType,
)
from .strategy import StrategyGenerator

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

_BUCKETS = ("eagle", "birdie", "par", "bogey", "double", "worse")


def _rank(strategies: List[OptimizedStrategy], mode: StrategyMode) -> List[OptimizedStrategy]:
    if mode == StrategyMode.SAFE:
        return sorted(strategies, key=lambda s: s.blowup_risk)
    return sorted(strategies, key=lambda s: s.expected_strokes)


def optimize_hole(
    hole: CourseHole,
    tee_box: str,
    distributions: List[ClubDistribution],
    mode: StrategyMode = StrategyMode.SCORING,
    trials: int = None,
    rng: Optional[np.random.Generator] = None,
) -> List[OptimizedStrategy]:
    """
    Simulate every named plan for a hole and rank them.

    Scoring mode sorts by expected strokes, safe mode by blow-up risk.
    Returns an empty list when there are no clubs or no plans.
    """
    if not distributions:
        return []

    plans = StrategyGenerator().generate(hole, tee_box, distributions)
    if not plans:
        return []

    simulator = GPSSimulator(trials, rng)
    results = [simulator.simulate(plan, hole, distributions) for plan in plans]
    return _rank(results, mode)


# ============================================================================
# Hole annotations
# ============================================================================

def color_code_hole(strategy: OptimizedStrategy) -> ColorCode:
    """Green for birdie chances, red for blow-up holes, yellow otherwise."""
    if strategy.score_distribution.birdie > GREEN_BIRDIE_THRESHOLD:
        return ColorCode.GREEN
    if strategy.blowup_risk > RED_BLOWUP_THRESHOLD:
        return ColorCode.RED
    return ColorCode.YELLOW


def compute_carry_to_avoid(hole: CourseHole) -> Optional[int]:
    """Distance from the tee to the nearest hazard vertex, ignoring tree lines."""
    if not hole.hazards:
        return None

    nearest = None
    for hazard in hole.hazards:
        if hazard.type == HazardType.TREES:
            continue
        for point in hazard.polygon:
            d = haversine_yards(hole.tee, point)
            if nearest is None or d < nearest:
                nearest = d
    return nearest


def compute_miss_side(hole: CourseHole) -> Optional[str]:
    """Favor the side of the tee-to-pin line with fewer hazards."""
    if not hole.hazards:
        return None

    heading = bearing_between(hole.tee, hole.pin)
    left = right = 0
    for hazard in hole.hazards:
        if not hazard.is_active:
            continue
        relative = (bearing_between(hole.tee, polygon_centroid(hazard.polygon)) - heading + 360) % 360
        if 0 < relative < 180:
            right += 1
        else:
            left += 1

    if left > right:
        return "Favor right"
    if right > left:
        return "Favor left"
    return None


def aggregate_score_distribution(holes: List[HolePlan]) -> ScoreDistribution:
    """Per-bucket mean of the chosen strategies' score distributions."""
    if not holes:
        return ScoreDistribution()
    n = len(holes)
    return ScoreDistribution(**{
        bucket: sum(getattr(h.strategy.score_distribution, bucket) for h in holes) / n
        for bucket in _BUCKETS
    })


# ============================================================================
# Game plan
# ============================================================================

class GamePlanBuilder:
    """Walks a course hole by hole and assembles a game plan."""

    def __init__(
        self,
        course: Course,
        tee_box: str,
        distributions: List[ClubDistribution],
        mode: StrategyMode = StrategyMode.SCORING,
        trials: int = None,
        rng: Optional[np.random.Generator] = None,
        key_hole_count: int = None,
    ):
        config = get_config()
        self.course = course
        self.tee_box = tee_box
        self.distributions = distributions
        self.mode = mode
        self.trials = trials
        self._rng = rng if rng is not None else config.make_rng()
        self.key_hole_count = config.key_hole_count if key_hole_count is None else key_hole_count

        self.holes: List[HolePlan] = []
        self._spreads: List[Tuple[int, float]] = []

    def plan_hole(self, hole: CourseHole) -> Optional[HolePlan]:
        """Optimize one hole and record it; None when it has no strategies."""
        strategies = optimize_hole(
            hole, self.tee_box, self.distributions, self.mode, self.trials, self._rng
        )
        if len(strategies) >= 2:
            strokes = [s.expected_strokes for s in strategies]
            spread = max(strokes) - min(strokes)
        else:
            spread = 0.0
        self._spreads.append((hole.hole_number, spread))

        if not strategies:
            logger.warning(f"Hole {hole.hole_number}: no strategies, skipped")
            return None

        top = strategies[0]
        plan = HolePlan(
            hole_number=hole.hole_number,
            par=hole.par,
            yardage=hole.scorecard_yardage(self.tee_box),
            plays_like_yardage=hole.plays_like_for(self.tee_box),
            strategy=top,
            color_code=color_code_hole(top),
            carry_to_avoid=compute_carry_to_avoid(hole),
            miss_side=compute_miss_side(hole),
            strategy_spread=spread,
        )
        self.holes.append(plan)
        logger.debug(
            f"Hole {hole.hole_number}: {top.strategy_name} xS={top.expected_strokes:.2f} "
            f"({plan.color_code.value})"
        )
        return plan

    def key_holes(self) -> List[int]:
        """Holes where strategy choice matters most, in hole order."""
        ranked = sorted(self._spreads, key=lambda s: s[1], reverse=True)
        return sorted(number for number, _ in ranked[:self.key_hole_count])

    def build(self) -> GamePlan:
        total_expected = sum(h.strategy.expected_strokes for h in self.holes)
        total_plays_like = sum(
            h.plays_like_yardage if h.plays_like_yardage is not None else h.yardage
            for h in self.holes
        )
        logger.info(
            f"Game plan for {self.course.name}: {len(self.holes)} holes, "
            f"{total_expected:.1f} expected strokes"
        )
        return GamePlan(
            course_name=self.course.name,
            tee_box=self.tee_box,
            mode=self.mode,
            date=date.today().isoformat(),
            total_expected=total_expected,
            breakdown=aggregate_score_distribution(self.holes),
            key_holes=self.key_holes(),
            total_plays_like=total_plays_like,
            holes=list(self.holes),
        )


def generate_game_plan(
    course: Course,
    tee_box: str,
    distributions: List[ClubDistribution],
    mode: StrategyMode = StrategyMode.SCORING,
    on_progress: Optional[ProgressCallback] = None,
    trials: int = None,
    rng: Optional[np.random.Generator] = None,
    key_hole_count: int = None,
) -> GamePlan:
    """
    Build a game plan for every hole on the course.
    `on_progress(holes_completed, total_holes)` is called after each hole.
    """
    builder = GamePlanBuilder(course, tee_box, distributions, mode, trials, rng, key_hole_count)
    total = len(course.holes)
    logger.info(f"Planning {total} holes from the {tee_box or 'default'} tees ({mode.value} mode)")

    for i, hole in enumerate(course.holes):
        builder.plan_hole(hole)
        if on_progress:
            on_progress(i + 1, total)

    return builder.build()


async def generate_game_plan_async(
    course: Course,
    tee_box: str,
    distributions: List[ClubDistribution],
    mode: StrategyMode = StrategyMode.SCORING,
    on_progress: Optional[ProgressCallback] = None,
    trials: int = None,
    rng: Optional[np.random.Generator] = None,
    key_hole_count: int = None,
) -> GamePlan:
    """Same as generate_game_plan, yielding to the event loop between holes."""
    builder = GamePlanBuilder(course, tee_box, distributions, mode, trials, rng, key_hole_count)
    total = len(course.holes)

    for i, hole in enumerate(course.holes):
        builder.plan_hole(hole)
        if on_progress:
            on_progress(i + 1, total)
        await asyncio.sleep(0)

    return builder.build()

"""
GPS-aware Monte Carlo engine for the Golf Strategy Optimizer.
Walks a named plan shot by shot over real hole geometry, applying hazard
penalties, and summarizes the resulting score distribution.
"""

import logging
from typing import List, Optional, Sequence

import numpy as np

from .config import (
    get_config, HOLE_THRESHOLD_YARDS, MAX_SHOTS_PER_HOLE,
    HAZARD_DROP_BACK_YARDS, CHIP_PROXIMITY_YARDS, BIAS_DEADBAND_YARDS,
    CARRY_NOTE_MIN_YARDS, CARRY_NOTE_BEYOND_YARDS, CARRY_NOTE_CORRIDOR_DEG,
    TIP_HAZARD_RADIUS_YARDS,
)
from .geo import (
    haversine_yards, project_point, bearing_between, polygon_centroid, normalize_angle,
    round_half_up,
)
from .models import (
    LatLng, CourseHole, HazardFeature, ClubDistribution, ClubRef, NamedStrategyPlan,
    OptimizedStrategy, ScoreDistribution, AimPoint,
)
from .simulator import gaussian_sample, expected_putts, greedy_club, chip_threshold
from .strategy import check_hazards

logger = logging.getLogger(__name__)


def compensate_for_bias(target, shot_bearing: float, club: ClubDistribution) -> LatLng:
    """
    Offset an aim point against the player's lateral bias.
    A club that misses 8y right on average is aimed 8y left so the expected
    landing ends up on the intended target.
    """
    if abs(club.mean_offline) <= BIAS_DEADBAND_YARDS:
        return LatLng(target.lat, target.lng)
    return project_point(target, shot_bearing + 90, -club.mean_offline)


def compute_score_distribution(scores: Sequence[float], par: int) -> ScoreDistribution:
    """Bucket trial scores relative to par and normalize."""
    dist = ScoreDistribution()
    if not scores:
        return dist
    counts = {"eagle": 0, "birdie": 0, "par": 0, "bogey": 0, "double": 0, "worse": 0}
    for score in scores:
        diff = round_half_up(score) - par
        if diff <= -2:
            counts["eagle"] += 1
        elif diff == -1:
            counts["birdie"] += 1
        elif diff == 0:
            counts["par"] += 1
        elif diff == 1:
            counts["bogey"] += 1
        elif diff == 2:
            counts["double"] += 1
        else:
            counts["worse"] += 1

    n = len(scores)
    return ScoreDistribution(**{bucket: count / n for bucket, count in counts.items()})


def compute_carry_note(
    origin,
    carry: float,
    bearing: float,
    hazards: Sequence[HazardFeature],
) -> Optional[str]:
    """
    Describe clearance over the farthest hazard along the shot path.
    Only hazards between 20 yards and carry + 50 yards away, within 35
    degrees of the shot line, are considered.
    """
    best_note = None
    best_dist = 0

    for hazard in hazards:
        if not hazard.is_active:
            continue
        centroid = polygon_centroid(hazard.polygon)
        dist = haversine_yards(origin, centroid)
        if dist > carry + CARRY_NOTE_BEYOND_YARDS or dist < CARRY_NOTE_MIN_YARDS:
            continue

        angle_diff = abs(normalize_angle(bearing_between(origin, centroid) - bearing))
        if angle_diff > CARRY_NOTE_CORRIDOR_DEG:
            continue

        if dist > best_dist:
            best_dist = dist
            clearance = round_half_up(carry - dist)
            if clearance >= 0:
                best_note = f"+{clearance}y past {hazard.label}"
            else:
                best_note = f"{clearance}y short of {hazard.label}"

    return best_note


def generate_caddy_tip(
    origin,
    aim_pos,
    target,
    club: ClubDistribution,
    hazards: Sequence[HazardFeature],
    is_approach: bool,
) -> str:
    """Plain-language aim instruction for one planned shot."""
    shot_bearing = bearing_between(origin, target)

    aim_shift = normalize_angle(bearing_between(origin, aim_pos) - shot_bearing)
    aim_side = "left" if aim_shift < -1 else "right" if aim_shift > 1 else None

    if club.mean_offline > 1:
        ball_works = "works right"
    elif club.mean_offline < -1:
        ball_works = "works left"
    else:
        ball_works = None

    # Nearest hazard on each side of the target
    nearby = []
    for hazard in hazards:
        if not hazard.is_active:
            continue
        centroid = polygon_centroid(hazard.polygon)
        dist_to_target = haversine_yards(target, centroid)
        if dist_to_target > TIP_HAZARD_RADIUS_YARDS:
            continue
        side = "right" if normalize_angle(bearing_between(origin, centroid) - shot_bearing) >= 0 else "left"
        if is_approach:
            desc = f"{side} {hazard.label}"
        else:
            desc = f"{side} {hazard.label} at {haversine_yards(origin, centroid)}y"
        nearby.append((dist_to_target, side, desc))
    nearby.sort(key=lambda h: h[0])
    by_side = {}
    for _, side, desc in nearby:
        by_side.setdefault(side, desc)

    if is_approach:
        if not aim_side:
            return "Straight at the pin"
        avoiding = next((desc for side, desc in by_side.items() if side != aim_side), None)
        if avoiding:
            return f"Aim {aim_side} of the {avoiding}" + (f", {ball_works} to the pin" if ball_works else "")
        return f"Start {aim_side}, {ball_works} toward the pin" if ball_works else "Aim at the pin"

    if not aim_side and not ball_works:
        return "Down the center"

    if by_side and aim_side:
        same = by_side.get(aim_side)
        opposite = by_side.get("right" if aim_side == "left" else "left")
        if same and ball_works:
            return f"Start at the {same}, {ball_works} to the fairway"
        if opposite:
            return f"Aim {aim_side} of the {opposite}" + (f", {ball_works} to the fairway" if ball_works else "")

    if aim_side and ball_works:
        return f"Start {aim_side} side, {ball_works} to center"

    return "Down the center"


class GPSSimulator:
    """Monte Carlo simulation of named plans over hole geometry."""

    def __init__(self, n_trials: int = None, rng: Optional[np.random.Generator] = None):
        """Initialize simulator."""
        config = get_config()
        self.n_trials = n_trials or config.default_trials
        self._rng = rng if rng is not None else config.make_rng()

    def _fire(self, position: LatLng, aim, club: ClubDistribution, hazards) -> tuple:
        """
        Hit one shot from `position` toward `aim`.
        Returns (landing, penalty strokes).
        """
        carry = gaussian_sample(self._rng, club.mean_carry, club.std_carry)
        offline = gaussian_sample(self._rng, club.mean_offline, club.std_offline)

        raw_bearing = bearing_between(position, aim)
        compensated = compensate_for_bias(aim, raw_bearing, club)
        shot_bearing = bearing_between(position, compensated)

        landing = project_point(position, shot_bearing, carry)
        if abs(offline) > BIAS_DEADBAND_YARDS:
            landing = project_point(landing, shot_bearing + 90, offline)

        hazard = check_hazards(landing, hazards)
        if hazard is None:
            return landing, 0
        # Drop back toward where the shot came from
        landing = project_point(landing, bearing_between(landing, position), HAZARD_DROP_BACK_YARDS)
        return landing, hazard.penalty

    def _play_trial(self, plan, tee, pin, hazards, distributions, threshold) -> float:
        position = tee
        strokes = 0

        for shot in plan.shots:
            position, penalty = self._fire(position, shot.aim_point, shot.club_dist, hazards)
            strokes += 1 + penalty
            if haversine_yards(position, pin) <= threshold:
                break

        dist_to_pin = haversine_yards(position, pin)
        while dist_to_pin > threshold and strokes < MAX_SHOTS_PER_HOLE:
            club = greedy_club(dist_to_pin, distributions)
            position, penalty = self._fire(position, pin, club, hazards)
            strokes += 1 + penalty
            dist_to_pin = haversine_yards(position, pin)

        if HOLE_THRESHOLD_YARDS < dist_to_pin <= threshold:
            return strokes + 1 + expected_putts(CHIP_PROXIMITY_YARDS)
        return strokes + expected_putts(dist_to_pin)

    def _aim_points(self, plan: NamedStrategyPlan, tee: LatLng, hazards) -> List[AimPoint]:
        """Where to actually aim each planned shot (bias compensated)."""
        aim_points = []
        aim_from = tee
        for i, shot in enumerate(plan.shots):
            club = shot.club_dist
            bearing = bearing_between(aim_from, shot.aim_point)
            position = compensate_for_bias(shot.aim_point, bearing, club)
            aim_points.append(AimPoint(
                position=position,
                club_name=club.club_name,
                shot_number=i + 1,
                carry=round_half_up(club.mean_carry),
                carry_note=compute_carry_note(aim_from, club.mean_carry, bearing, hazards),
                tip=generate_caddy_tip(
                    aim_from, position, shot.aim_point, club, hazards,
                    is_approach=(i == len(plan.shots) - 1),
                ),
            ))
            # Next shot fires from the expected landing, which is the target
            aim_from = shot.aim_point
        return aim_points

    def simulate(
        self,
        plan: NamedStrategyPlan,
        hole: CourseHole,
        distributions: List[ClubDistribution],
        trials: int = None,
    ) -> OptimizedStrategy:
        """Run a plan over the hole and summarize expected score and risk."""
        n = trials or self.n_trials
        tee = LatLng(hole.tee.lat, hole.tee.lng)
        pin = LatLng(hole.pin.lat, hole.pin.lng)
        threshold = chip_threshold(distributions)

        scores = np.array([
            self._play_trial(plan, tee, pin, hole.hazards, distributions, threshold)
            for _ in range(n)
        ])

        score_dist = compute_score_distribution(scores.tolist(), hole.par)
        result = OptimizedStrategy(
            clubs=[ClubRef(s.club_dist.club_id, s.club_dist.club_name) for s in plan.shots],
            expected_strokes=float(np.mean(scores)),
            std_strokes=float(np.std(scores)),
            label=" → ".join(f"{s.club_dist.club_name} ({round_half_up(s.club_dist.mean_carry)})" for s in plan.shots),
            strategy_name=plan.name,
            strategy_type=plan.type,
            score_distribution=score_dist,
            blowup_risk=score_dist.blowup,
            aim_points=self._aim_points(plan, tee, hole.hazards),
        )

        logger.debug(
            f"Hole {hole.hole_number} {plan.name}: xS={result.expected_strokes:.2f}, "
            f"blow-up={result.blowup_risk*100:.1f}% over {n:,} trials"
        )
        return result


def simulate_hole_gps(
    plan: NamedStrategyPlan,
    hole: CourseHole,
    distributions: List[ClubDistribution],
    trials: int = None,
    rng: Optional[np.random.Generator] = None,
) -> OptimizedStrategy:
    """Module-level shortcut for GPSSimulator.simulate."""
    return GPSSimulator(trials, rng).simulate(plan, hole, distributions, trials)


def get_gps_simulator(n_trials: int = None, rng: Optional[np.random.Generator] = None) -> GPSSimulator:
    """Get configured GPS simulator instance."""
    return GPSSimulator(n_trials, rng)

"""
Strategy generator for the Golf Strategy Optimizer.
Builds two or three named shot plans per hole from real course geometry.
"""

import logging
from typing import List, Optional, Sequence

from .config import (
    AGGRESSIVE_SHIFT_YARDS, LAYUP_CARRY_GAP_YARDS,
    BAIL_OUT_OFFSET_YARDS, SAFE_LANDING_OFFSETS, PAR5_MID_FRACTION, BIAS_DEADBAND_YARDS,
)
from .geo import (
    haversine_yards, project_point, bearing_between, point_in_polygon, polygon_centroid,
)
from .models import (
    LatLng, CourseHole, HazardFeature, ClubDistribution, NamedStrategyPlan,
    PlannedShot, StrategyType,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Club and geometry helpers
# ============================================================================

def check_hazards(point, hazards: Sequence[HazardFeature]) -> Optional[HazardFeature]:
    """First hazard whose polygon contains the point, or None."""
    for hazard in hazards:
        if not hazard.is_active:
            continue
        if point_in_polygon(point, hazard.polygon):
            return hazard
    return None


def closest_club(target: float, dists: List[ClubDistribution]) -> Optional[ClubDistribution]:
    """Club whose mean carry is closest to the target."""
    if not dists:
        return None
    return min(dists, key=lambda d: abs(d.mean_carry - target))


def longest_club(dists: List[ClubDistribution]) -> ClubDistribution:
    return max(dists, key=lambda d: d.mean_carry)


def shift_toward(origin, toward, yards: float) -> LatLng:
    """Move a point `yards` along the bearing to another point."""
    return project_point(origin, bearing_between(origin, toward), yards)


def expected_landing(origin, shot_bearing: float, club: ClubDistribution) -> LatLng:
    """Mean landing spot for a club, including its lateral bias."""
    landing = project_point(origin, shot_bearing, club.mean_carry)
    if abs(club.mean_offline) > BIAS_DEADBAND_YARDS:
        landing = project_point(landing, shot_bearing + 90, club.mean_offline)
    return landing


def center_line_point(
    center_line: Sequence,
    origin,
    target_dist: float,
    fallback_bearing: float,
) -> LatLng:
    """
    Point `target_dist` yards along the center line.
    Falls back to projecting along `fallback_bearing` when the line is too
    short to measure or does not reach that far.
    """
    if len(center_line) < 2:
        return project_point(origin, fallback_bearing, target_dist)

    cum_dist = 0.0
    prev = center_line[0]
    for point in center_line[1:]:
        seg_dist = haversine_yards(prev, point)
        if cum_dist + seg_dist >= target_dist:
            fraction = (target_dist - cum_dist) / seg_dist if seg_dist > 0 else 0.0
            return LatLng(
                prev.lat + (point.lat - prev.lat) * fraction,
                prev.lng + (point.lng - prev.lng) * fraction,
            )
        cum_dist += seg_dist
        prev = point

    # Past the end of the center line
    return project_point(prev, fallback_bearing, target_dist - cum_dist)


def find_safe_landing(target, heading: float, hazards: Sequence[HazardFeature]) -> LatLng:
    """
    Nudge a target out of any hazard it sits in.
    Tries perpendicular shifts of 10/20/30 yards left, then right; keeps the
    original target when every shift is still wet.
    """
    target = LatLng(target.lat, target.lng)
    if not hazards or check_hazards(target, hazards) is None:
        return target
    for direction in (-1, 1):
        for offset in SAFE_LANDING_OFFSETS:
            shifted = project_point(target, heading + 90, direction * offset)
            if check_hazards(shifted, hazards) is None:
                return shifted
    return target


# ============================================================================
# Generator
# ============================================================================

class StrategyGenerator:
    """Named strategy plans per hole, branching on par."""

    def generate(
        self,
        hole: CourseHole,
        tee_box: str,
        distributions: List[ClubDistribution],
    ) -> List[NamedStrategyPlan]:
        """
        Generate candidate plans for a hole.
        Returns an empty list when there are no clubs, no playing distance
        or the par is not 3, 4 or 5.
        """
        if not distributions:
            return []

        distance = hole.distance_for(tee_box)
        if distance <= 0:
            return []

        tee = LatLng(hole.tee.lat, hole.tee.lng)
        pin = LatLng(hole.pin.lat, hole.pin.lng)
        # Stored heading is advisory; always measure the live line
        heading = bearing_between(tee, pin)

        if hole.par == 3:
            plans = self._par3(hole, tee, pin, heading, distance, distributions)
        elif hole.par == 4:
            plans = self._par4(hole, tee, pin, heading, distributions)
        elif hole.par == 5:
            plans = self._par5(hole, tee, pin, heading, distance, distributions)
        else:
            logger.debug(f"Hole {hole.hole_number}: no strategies for par {hole.par}")
            return []

        logger.debug(
            f"Hole {hole.hole_number}: generated {', '.join(p.name for p in plans)}"
        )
        return plans

    def _par3(self, hole, tee, pin, heading, distance, dists) -> List[NamedStrategyPlan]:
        plans = []

        pin_club = closest_club(distance, dists)
        plans.append(NamedStrategyPlan(
            name="Pin Hunting",
            type=StrategyType.SCORING,
            shots=[PlannedShot(pin_club, pin)],
        ))

        if len(hole.green) >= 3:
            green_center = polygon_centroid(hole.green)
        elif len(hole.fairway) >= 3:
            green_center = polygon_centroid(hole.fairway)
        else:
            green_center = project_point(tee, heading, distance)
        center_club = closest_club(haversine_yards(tee, green_center), dists)
        plans.append(NamedStrategyPlan(
            name="Center Green",
            type=StrategyType.BALANCED,
            shots=[PlannedShot(center_club, green_center)],
        ))

        # Bail away from the hazard nearest the pin
        nearest_dist = float("inf")
        nearest_bearing = None
        for hazard in hole.hazards:
            if not hazard.is_active:
                continue
            centroid = polygon_centroid(hazard.polygon)
            d = haversine_yards(pin, centroid)
            if d < nearest_dist:
                nearest_dist = d
                nearest_bearing = bearing_between(pin, centroid)
        if nearest_bearing is None:
            bail_point = project_point(pin, heading + 90, BAIL_OUT_OFFSET_YARDS)
        else:
            bail_point = project_point(pin, nearest_bearing + 180, BAIL_OUT_OFFSET_YARDS)
        bail_club = closest_club(haversine_yards(tee, bail_point), dists)
        plans.append(NamedStrategyPlan(
            name="Bail Out",
            type=StrategyType.SAFE,
            shots=[PlannedShot(bail_club, bail_point)],
        ))

        return plans

    def _two_shot_plan(self, name, type_, tee, pin, heading, target, dists) -> NamedStrategyPlan:
        """Tee shot to a target, then the club that best covers what is left."""
        club1 = closest_club(haversine_yards(tee, target), dists)
        landing = expected_landing(tee, heading, club1)
        club2 = closest_club(haversine_yards(landing, pin), dists)
        return NamedStrategyPlan(
            name=name,
            type=type_,
            shots=[PlannedShot(club1, target), PlannedShot(club2, pin)],
        )

    def _par4(self, hole, tee, pin, heading, dists) -> List[NamedStrategyPlan]:
        longest = longest_club(dists)

        if hole.targets:
            raw_target = hole.targets[0].coordinate
        else:
            raw_target = center_line_point(hole.center_line, tee, longest.mean_carry, heading)
        conserv_target = find_safe_landing(raw_target, heading, hole.hazards)
        conservative = self._two_shot_plan(
            "Conservative", StrategyType.BALANCED, tee, pin, heading, conserv_target, dists
        )

        agg_target = find_safe_landing(
            shift_toward(conserv_target, pin, AGGRESSIVE_SHIFT_YARDS), heading, hole.hazards
        )
        aggressive = self._two_shot_plan(
            "Aggressive", StrategyType.SCORING, tee, pin, heading, agg_target, dists
        )

        mid_clubs = [d for d in dists if d.mean_carry < longest.mean_carry - LAYUP_CARRY_GAP_YARDS]
        layup_club = longest_club(mid_clubs) if mid_clubs else longest
        layup_target = find_safe_landing(
            center_line_point(hole.center_line, tee, layup_club.mean_carry, heading),
            heading,
            hole.hazards,
        )
        layup_landing = expected_landing(tee, heading, layup_club)
        approach = closest_club(haversine_yards(layup_landing, pin), dists)
        layup = NamedStrategyPlan(
            name="Layup",
            type=StrategyType.SAFE,
            shots=[PlannedShot(layup_club, layup_target), PlannedShot(approach, pin)],
        )

        return [conservative, aggressive, layup]

    def _par5(self, hole, tee, pin, heading, distance, dists) -> List[NamedStrategyPlan]:
        longest = longest_club(dists)
        cl = hole.center_line

        # Conservative 3-shot: course waypoints or equal thirds
        segment = distance / 3
        if len(hole.targets) >= 2:
            raw1, raw2 = hole.targets[0].coordinate, hole.targets[1].coordinate
        else:
            raw1 = center_line_point(cl, tee, segment, heading)
            raw2 = center_line_point(cl, tee, segment * 2, heading)
        wp1 = find_safe_landing(raw1, heading, hole.hazards)
        wp2 = find_safe_landing(raw2, heading, hole.hazards)

        c3_club1 = closest_club(haversine_yards(tee, wp1), dists)
        c3_landing1 = expected_landing(tee, heading, c3_club1)
        c3_club2 = closest_club(haversine_yards(c3_landing1, wp2), dists)
        c3_landing2 = expected_landing(c3_landing1, bearing_between(c3_landing1, wp2), c3_club2)
        c3_club3 = closest_club(haversine_yards(c3_landing2, pin), dists)
        three_shot = NamedStrategyPlan(
            name="Conservative 3-Shot",
            type=StrategyType.BALANCED,
            shots=[
                PlannedShot(c3_club1, wp1),
                PlannedShot(c3_club2, wp2),
                PlannedShot(c3_club3, pin),
            ],
        )

        # Go-for-it: longest club, then whatever reaches
        drive_target = find_safe_landing(
            center_line_point(cl, tee, longest.mean_carry, heading), heading, hole.hazards
        )
        drive_landing = expected_landing(tee, heading, longest)
        go_club2 = closest_club(haversine_yards(drive_landing, pin), dists)
        go_for_it = NamedStrategyPlan(
            name="Go-For-It",
            type=StrategyType.SCORING,
            shots=[PlannedShot(longest, drive_target), PlannedShot(go_club2, pin)],
        )

        # Safe layup: longest club, mid club to 55% of what remains, approach
        mid_club = closest_club((distance - longest.mean_carry) * PAR5_MID_FRACTION, dists)
        second_bearing = bearing_between(drive_landing, pin)
        layup_target = project_point(drive_landing, second_bearing, mid_club.mean_carry)
        layup_landing = expected_landing(drive_landing, second_bearing, mid_club)
        wedge = closest_club(haversine_yards(layup_landing, pin), dists)
        safe_layup = NamedStrategyPlan(
            name="Safe Layup",
            type=StrategyType.SAFE,
            shots=[
                PlannedShot(longest, drive_target),
                PlannedShot(mid_club, layup_target),
                PlannedShot(wedge, pin),
            ],
        )

        return [three_shot, go_for_it, safe_layup]


def generate_named_strategies(
    hole: CourseHole,
    tee_box: str,
    distributions: List[ClubDistribution],
) -> List[NamedStrategyPlan]:
    """Module-level shortcut for StrategyGenerator.generate."""
    return StrategyGenerator().generate(hole, tee_box, distributions)


def get_strategy_generator() -> StrategyGenerator:
    """Get strategy generator instance."""
    return StrategyGenerator()

"""
Tests for strategy.py - Named strategy generation.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from golf_strategy.geo import haversine_yards, project_point, bearing_between, normalize_angle
from golf_strategy.models import LatLng, StrategyType
from golf_strategy.strategy import (
    check_hazards, closest_club, center_line_point, find_safe_landing, generate_named_strategies,
    get_strategy_generator,
)

from conftest import TEE, TEE_BOX, make_hole, make_box_hazard


def by_name(plans):
    return {p.name: p for p in plans}


class TestHelpers:
    """Tests for hazard and geometry helpers."""

    def test_check_hazards_hit(self):
        hazard = make_box_hazard(project_point(TEE, 0, 200), 10, 10)
        assert check_hazards(project_point(TEE, 0, 200), [hazard]) is hazard

    def test_check_hazards_miss(self):
        hazard = make_box_hazard(project_point(TEE, 0, 200), 10, 10)
        assert check_hazards(project_point(TEE, 0, 250), [hazard]) is None
        assert check_hazards(TEE, []) is None

    def test_check_hazards_skips_small_polygons(self):
        hazard = make_box_hazard(project_point(TEE, 0, 200), 10, 10)
        hazard.polygon = hazard.polygon[:2]
        assert check_hazards(project_point(TEE, 0, 200), [hazard]) is None

    def test_closest_club(self, full_bag):
        assert closest_club(160, full_bag).club_id == "iron7"
        assert closest_club(160, []) is None

    def test_center_line_without_line(self):
        """Test projection along the fallback bearing."""
        p = center_line_point([], TEE, 200, 0)
        assert abs(haversine_yards(TEE, p) - 200) <= 1

    def test_center_line_interpolates(self):
        pin = project_point(TEE, 0, 400)
        p = center_line_point([TEE, pin], TEE, 250, 0)
        assert abs(haversine_yards(TEE, p) - 250) <= 1
        assert p.lng == pytest.approx(TEE.lng)

    def test_center_line_past_end(self):
        pin = project_point(TEE, 0, 400)
        p = center_line_point([TEE, pin], TEE, 450, 0)
        assert abs(haversine_yards(TEE, p) - 450) <= 1

    def test_find_safe_landing_clear_target(self):
        target = project_point(TEE, 0, 250)
        assert find_safe_landing(target, 0, []) == LatLng(target.lat, target.lng)

    def test_find_safe_landing_nudges_left_first(self):
        """Test that a wet target moves to the nearest dry side shift."""
        target = project_point(TEE, 0, 250)
        hazard = make_box_hazard(target, 5, 20)
        safe = find_safe_landing(target, 0, [hazard])
        assert check_hazards(safe, [hazard]) is None
        assert safe.lng < target.lng
        assert abs(haversine_yards(target, safe) - 10) <= 1

    def test_find_safe_landing_gives_up(self):
        """Test that a hazard wider than every shift keeps the target."""
        target = project_point(TEE, 0, 250)
        hazard = make_box_hazard(target, 60, 20)
        assert find_safe_landing(target, 0, [hazard]) == LatLng(target.lat, target.lng)


class TestGenerate:
    """Tests for generate_named_strategies."""

    def test_no_distributions(self, par4_hole):
        assert generate_named_strategies(par4_hole, TEE_BOX, []) == []

    def test_zero_distance(self, full_bag):
        hole = make_hole(4, 400)
        hole.yardages = {TEE_BOX: 0}
        assert generate_named_strategies(hole, TEE_BOX, full_bag) == []

    def test_unsupported_par(self, full_bag):
        assert generate_named_strategies(make_hole(6, 650), TEE_BOX, full_bag) == []

    def test_par3_strategies(self, par3_hole, full_bag):
        plans = by_name(generate_named_strategies(par3_hole, TEE_BOX, full_bag))
        assert set(plans) == {"Pin Hunting", "Center Green", "Bail Out"}
        assert all(len(p.shots) == 1 for p in plans.values())
        assert plans["Pin Hunting"].type == StrategyType.SCORING
        assert plans["Pin Hunting"].shots[0].aim_point == LatLng(par3_hole.pin.lat, par3_hole.pin.lng)
        assert plans["Pin Hunting"].shots[0].club_dist.club_id == "iron7"

    def test_par3_bail_out_without_hazards(self, par3_hole, full_bag):
        """Test that the bail-out sits 15 yards right of the pin."""
        plans = by_name(generate_named_strategies(par3_hole, TEE_BOX, full_bag))
        bail = plans["Bail Out"].shots[0].aim_point
        assert abs(haversine_yards(par3_hole.pin, bail) - 15) <= 1
        assert bearing_between(par3_hole.pin, bail) == pytest.approx(90, abs=1)

    def test_par3_bail_out_away_from_hazard(self, full_bag):
        """Test that the bail-out goes opposite the hazard nearest the pin."""
        hole = make_hole(3, 165)
        hazard_center = project_point(hole.pin, 90, 20)
        hole.hazards = [make_box_hazard(hazard_center, 5, 5)]
        plans = by_name(generate_named_strategies(hole, TEE_BOX, full_bag))
        bail = plans["Bail Out"].shots[0].aim_point
        assert abs(normalize_angle(bearing_between(hole.pin, bail) - 270)) < 2

    def test_par3_center_green_uses_green(self, full_bag):
        hole = make_hole(3, 165)
        green_center = project_point(hole.pin, 0, 8)
        hole.green = make_box_hazard(green_center, 12, 12).polygon
        plans = by_name(generate_named_strategies(hole, TEE_BOX, full_bag))
        aim = plans["Center Green"].shots[0].aim_point
        assert haversine_yards(aim, green_center) <= 1

    def test_par4_strategies(self, par4_hole, full_bag):
        plans = by_name(generate_named_strategies(par4_hole, TEE_BOX, full_bag))
        assert set(plans) == {"Conservative", "Aggressive", "Layup"}
        pin = LatLng(par4_hole.pin.lat, par4_hole.pin.lng)
        for plan in plans.values():
            assert len(plan.shots) == 2
            assert plan.shots[-1].aim_point == pin
        assert plans["Layup"].type == StrategyType.SAFE
        assert plans["Layup"].shots[0].club_dist.club_id == "wood3"

    def test_par4_conservative_uses_target(self, par4_with_target, full_bag):
        plans = by_name(generate_named_strategies(par4_with_target, TEE_BOX, full_bag))
        aim = plans["Conservative"].shots[0].aim_point
        assert aim.lat == pytest.approx(par4_with_target.targets[0].coordinate.lat)

    def test_par4_aggressive_closer_to_pin(self, par4_with_target, full_bag):
        plans = by_name(generate_named_strategies(par4_with_target, TEE_BOX, full_bag))
        pin = par4_with_target.pin
        conservative = haversine_yards(plans["Conservative"].shots[0].aim_point, pin)
        aggressive = haversine_yards(plans["Aggressive"].shots[0].aim_point, pin)
        assert aggressive < conservative

    def test_heading_ignores_stored_value(self, par4_hole, full_bag):
        """Test that a wrong stored heading does not move aim points."""
        par4_hole.heading = 90
        plans = by_name(generate_named_strategies(par4_hole, TEE_BOX, full_bag))
        aim = plans["Conservative"].shots[0].aim_point
        assert aim.lng == pytest.approx(TEE.lng, abs=1e-5)
        assert aim.lat > TEE.lat

    def test_aim_points_ignore_bias(self, par4_hole, full_bag):
        """Test that plans aim at targets; bias is handled at simulation time."""
        for club in full_bag:
            club.mean_offline = 10
        plans = by_name(generate_named_strategies(par4_hole, TEE_BOX, full_bag))
        assert plans["Conservative"].shots[0].aim_point.lng == pytest.approx(TEE.lng, abs=1e-5)

    def test_par5_strategies(self, par5_hole, full_bag):
        plans = by_name(generate_named_strategies(par5_hole, TEE_BOX, full_bag))
        assert set(plans) == {"Conservative 3-Shot", "Go-For-It", "Safe Layup"}
        assert len(plans["Conservative 3-Shot"].shots) == 3
        assert len(plans["Go-For-It"].shots) == 2
        assert len(plans["Safe Layup"].shots) == 3
        assert plans["Go-For-It"].shots[0].club_dist.club_id == "driver"

    def test_factory(self, par4_hole, full_bag):
        assert len(get_strategy_generator().generate(par4_hole, TEE_BOX, full_bag)) == 3

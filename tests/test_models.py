"""
Tests for models.py - Loading documents into dataclasses.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from golf_strategy.models import (
    LatLng, Coordinate, Shot, ClubShotGroup, HazardFeature, HazardType, CourseHole, Course,
    CourseDataError, ScoreDistribution,
)


class TestCoordinates:
    """Tests for LatLng and Coordinate parsing."""

    def test_latlng_from_dict(self):
        p = LatLng.from_dict({"lat": 33.1, "lng": -117.2})
        assert p == LatLng(33.1, -117.2)

    def test_latlng_from_pair(self):
        assert LatLng.from_dict([33.1, -117.2]) == LatLng(33.1, -117.2)

    def test_latlng_non_numeric(self):
        """Test that a non-numeric coordinate is rejected."""
        with pytest.raises(CourseDataError):
            LatLng.from_dict({"lat": "north", "lng": -117.2})

    def test_latlng_non_numeric_pair(self):
        with pytest.raises(CourseDataError):
            LatLng.from_dict(["a", -117.2])

    def test_latlng_missing_field(self):
        with pytest.raises(CourseDataError):
            LatLng.from_dict({"lat": 33.1})

    def test_coordinate_elevation(self):
        c = Coordinate.from_dict({"lat": 33.0, "lng": -117.0, "elevation": 12.5})
        assert c.elevation == 12.5
        assert Coordinate.from_dict([33.0, -117.0]).elevation == 0.0


class TestShotData:
    """Tests for shot and shot-group parsing."""

    def test_shot_camel_case(self):
        shot = Shot.from_dict({"carryYards": 150, "offlineYards": -3})
        assert shot.carry_yards == 150
        assert shot.offline_yards == -3

    def test_shot_without_offline(self):
        assert Shot.from_dict({"carry_yards": 150}).offline_yards is None

    def test_shot_non_numeric_offline(self):
        """Test that a text offline value is rejected."""
        with pytest.raises(CourseDataError):
            Shot.from_dict({"carryYards": 150, "offlineYards": "left"})

    def test_group_requires_club_id(self):
        with pytest.raises(CourseDataError):
            ClubShotGroup.from_dict({"clubName": "7 Iron", "shots": []})

    def test_group_imputed(self):
        group = ClubShotGroup.from_dict({
            "clubId": "wood3", "clubName": "3 Wood", "imputed": True,
            "shots": [{"carryYards": 235}],
        })
        assert group.imputed is True
        assert group.shots[0].carry_yards == 235


class TestCourse:
    """Tests for hole and course parsing."""

    def test_course_from_dict(self, sample_course_data):
        """Test a full course document."""
        course = Course.from_dict(sample_course_data)
        assert course.name == "Test Links"
        assert len(course.holes) == 2

        hole = course.holes[0]
        assert hole.par == 4
        assert hole.tee.elevation == 10
        assert hole.yardages == {"blue": 400, "white": 380}
        assert hole.hazards[0].type == HazardType.WATER
        assert hole.hazards[0].label == "water"
        assert hole.hazards[1].type == "waste_area"
        assert hole.hazards[1].is_active is False

    def test_missing_pin(self):
        with pytest.raises(CourseDataError):
            CourseHole.from_dict({"holeNumber": 1, "par": 4, "tee": [33.0, -117.0]})

    def test_bad_par(self):
        with pytest.raises(CourseDataError):
            CourseHole.from_dict({"par": "four", "tee": [33.0, -117.0], "pin": [33.003, -117.0]})

    @pytest.mark.parametrize("field, value", [
        ("holeNumber", "one"),
        ("heading", "north"),
        ("yardages", {"blue": "long"}),
        ("playsLikeYards", {"blue": None}),
        ("yardages", [400]),
    ])
    def test_bad_numeric_fields(self, field, value):
        """Test that malformed hole numbers, headings and yardages raise CourseDataError."""
        data = {"par": 4, "tee": [33.0, -117.0], "pin": [33.003, -117.0], field: value}
        with pytest.raises(CourseDataError):
            CourseHole.from_dict(data)

    def test_hole_entry_must_be_object(self):
        with pytest.raises(CourseDataError):
            Course.from_dict({"name": "Broken", "holes": ["first"]})

    def test_course_data_error_is_value_error(self):
        assert issubclass(CourseDataError, ValueError)

    def test_distance_prefers_plays_like(self, sample_course_data):
        """Test plays-like, then scorecard, then first listed yardage."""
        hole = Course.from_dict(sample_course_data).holes[0]
        assert hole.distance_for("blue") == 395
        assert hole.distance_for("white") == 380
        assert hole.distance_for("gold") == 400

    def test_distance_measured_without_yardages(self, sample_course_data):
        """Test that a hole with no yardages measures tee to pin."""
        data = sample_course_data["holes"][0]
        data.pop("yardages")
        data.pop("playsLikeYards")
        hole = CourseHole.from_dict(data)
        assert abs(hole.distance_for("blue") - 400) <= 1


class TestHazardLabels:
    """Tests for hazard naming in notes."""

    def test_active_needs_three_points(self):
        points = [[33.0, -117.0], [33.001, -117.0], [33.001, -116.999]]
        assert HazardFeature.from_dict({"type": "water", "polygon": points}).is_active is True
        assert HazardFeature.from_dict({"type": "water", "polygon": points[:2]}).is_active is False

    def test_bunker_variants(self):
        assert HazardFeature(HazardType.GREENSIDE_BUNKER).label == "bunker"
        assert HazardFeature(HazardType.FAIRWAY_BUNKER).label == "bunker"

    def test_ob(self):
        assert HazardFeature(HazardType.OB).label == "OB"


class TestScoreDistribution:
    """Tests for ScoreDistribution helpers."""

    def test_total_and_blowup(self):
        d = ScoreDistribution(birdie=0.1, par=0.5, bogey=0.25, double=0.1, worse=0.05)
        assert d.total == pytest.approx(1.0)
        assert d.blowup == pytest.approx(0.15)

"""
Shared pytest fixtures for Golf Strategy Optimizer tests.
"""

import os
import sys
from pathlib import Path
from unittest.mock import patch

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from golf_strategy.geo import project_point
from golf_strategy.models import (
    ClubDistribution, Coordinate, CourseHole, HazardFeature, HazardType, HoleTarget, LatLng,
)

TEE = Coordinate(33.0, -117.0)
TEE_BOX = "blue"


def make_club(club_id, name, carry, std_carry, mean_offline=0.0, std_offline=5.0):
    return ClubDistribution(club_id, name, carry, std_carry, mean_offline, std_offline)


def make_hole(par=4, distance=400, hazards=None, targets=None, center_line=None, hole_number=1):
    """A hole running due north from TEE with the pin `distance` yards out."""
    pin = project_point(TEE, 0, distance)
    return CourseHole(
        hole_number=hole_number,
        par=par,
        tee=TEE,
        pin=Coordinate(pin.lat, pin.lng),
        yardages={TEE_BOX: distance},
        center_line=center_line or [],
        targets=targets or [],
        hazards=hazards or [],
    )


def make_box_hazard(center, half_width, half_depth, hazard_type=HazardType.WATER, penalty=1.0):
    """Rectangle around `center`, `half_depth` yards north/south and `half_width` east/west."""
    north = project_point(center, 0, half_depth)
    south = project_point(center, 180, half_depth)
    east = project_point(center, 90, half_width)
    west = project_point(center, 270, half_width)
    polygon = [
        LatLng(south.lat, west.lng),
        LatLng(south.lat, east.lng),
        LatLng(north.lat, east.lng),
        LatLng(north.lat, west.lng),
    ]
    return HazardFeature(type=hazard_type, polygon=polygon, penalty=penalty)


@pytest.fixture(autouse=True)
def clean_env():
    """Keep local GOLF_STRATEGY_* settings out of the tests."""
    with patch.dict(os.environ, {
        "GOLF_STRATEGY_TRIALS": "",
        "GOLF_STRATEGY_MIN_TRIALS": "",
        "GOLF_STRATEGY_MAX_WORK": "",
        "GOLF_STRATEGY_MODE": "",
        "GOLF_STRATEGY_KEY_HOLES": "",
        "GOLF_STRATEGY_TEE_BOX": "",
        "GOLF_STRATEGY_SEED": "",
    }, clear=False):
        yield


@pytest.fixture
def rng():
    """Seeded generator for reproducible simulations."""
    return np.random.default_rng(42)


@pytest.fixture
def three_clubs():
    """Driver, 7 iron and sand wedge."""
    return [
        make_club("driver", "Driver", 275, 12, std_offline=8),
        make_club("iron7", "7 Iron", 165, 6),
        make_club("sw", "SW", 85, 3, std_offline=3),
    ]


@pytest.fixture
def full_bag():
    """A realistic seven-club set."""
    return [
        make_club("driver", "Driver", 275, 12, std_offline=8),
        make_club("wood3", "3 Wood", 235, 10, std_offline=7),
        make_club("iron5", "5 Iron", 195, 7, std_offline=6),
        make_club("iron7", "7 Iron", 165, 6),
        make_club("iron9", "9 Iron", 135, 5, std_offline=4),
        make_club("pw", "PW", 115, 4, std_offline=3),
        make_club("sw", "SW", 85, 3, std_offline=3),
    ]


@pytest.fixture
def par4_hole():
    """400-yard par 4 with no hazards."""
    return make_hole(4, 400)


@pytest.fixture
def par4_with_target():
    """400-yard par 4 with a waypoint 60% of the way to the pin."""
    target = project_point(TEE, 0, 240)
    return make_hole(4, 400, targets=[HoleTarget(0, Coordinate(target.lat, target.lng))])


@pytest.fixture
def par3_hole():
    return make_hole(3, 165)


@pytest.fixture
def par5_hole():
    return make_hole(5, 540)


@pytest.fixture
def sample_course_data():
    """Course document in the camelCase shape the loaders accept."""
    pin1 = project_point(TEE, 0, 400)
    pin2 = project_point(TEE, 90, 165)
    return {
        "name": "Test Links",
        "holes": [
            {
                "holeNumber": 1,
                "par": 4,
                "tee": {"lat": TEE.lat, "lng": TEE.lng, "elevation": 10},
                "pin": {"lat": pin1.lat, "lng": pin1.lng, "elevation": 5},
                "yardages": {"blue": 400, "white": 380},
                "playsLikeYards": {"blue": 395},
                "hazards": [
                    {
                        "type": "water",
                        "name": "Pond",
                        "penalty": 1,
                        "polygon": [[33.001, -117.001], [33.001, -116.999], [33.002, -116.999]],
                    },
                    {"type": "waste_area", "polygon": []},
                ],
            },
            {
                "holeNumber": 2,
                "par": 3,
                "tee": [TEE.lat, TEE.lng],
                "pin": [pin2.lat, pin2.lng],
                "yardages": {"blue": 165},
            },
        ],
    }

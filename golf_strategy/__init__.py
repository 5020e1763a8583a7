"""
Golf Strategy Optimizer
Monte Carlo club and target selection from a player's shot history.
"""

__version__ = "1.0.0"

from .models import (
    LatLng, Coordinate, Shot, ClubShotGroup, ClubDistribution, HazardFeature, HazardType,
    CourseHole, Course, ApproachStrategy, OptimizedStrategy, ScoreDistribution, AimPoint,
    HolePlan, GamePlan, LandingZone, StrategyMode, StrategyType, ColorCode, CourseDataError,
)
from .config import get_config
from .distributions import build_distributions
from .simulator import DistanceSimulator, find_best_approaches, get_simulator
from .strategy import StrategyGenerator, generate_named_strategies, get_strategy_generator
from .gps_simulator import GPSSimulator, simulate_hole_gps, get_gps_simulator
from .optimizer import optimize_hole, generate_game_plan, generate_game_plan_async
from .landing_zones import compute_landing_zones, compute_landing_zones_from_aim_points

__all__ = [
    # Models
    "LatLng", "Coordinate", "Shot", "ClubShotGroup", "ClubDistribution", "HazardFeature",
    "HazardType", "CourseHole", "Course", "ApproachStrategy", "OptimizedStrategy",
    "ScoreDistribution", "AimPoint", "HolePlan", "GamePlan", "LandingZone",
    "StrategyMode", "StrategyType", "ColorCode", "CourseDataError",
    # Config
    "get_config",
    # Core classes
    "DistanceSimulator", "StrategyGenerator", "GPSSimulator",
    # Operations
    "build_distributions", "find_best_approaches", "generate_named_strategies",
    "simulate_hole_gps", "optimize_hole", "generate_game_plan", "generate_game_plan_async",
    "compute_landing_zones", "compute_landing_zones_from_aim_points",
    # Factory functions
    "get_simulator", "get_strategy_generator", "get_gps_simulator",
]

"""
Configuration management for the Golf Strategy Optimizer.
Includes the simulation constants the engine is calibrated against.
"""

import os
from typing import List, Optional
from dataclasses import dataclass, field

import numpy as np
from dotenv import load_dotenv


# Load environment variables from .env file
load_dotenv()


# Simulation budget
DEFAULT_TRIALS = 2000
MIN_TRIALS = 500
MAX_SIMULATED_SHOTS = 400_000  # Ceiling on total simulated shots per 1-D search
MAX_SHOTS_PER_HOLE = 8  # Trial ends here even if the ball is not near the green

# Green / chipping model (yards)
HOLE_THRESHOLD_YARDS = 10  # Within this = on the green
MIN_CHIP_THRESHOLD_YARDS = 10
CHIP_THRESHOLD_FRACTION = 0.5  # Of the shortest club's mean carry
CHIP_PROXIMITY_YARDS = 3  # Assumed proximity after a chip
FLAT_PUTTS = 2  # Distance model putts

# Putting curve fitted to strokes-gained data
PUTT_LOG_COEFFICIENT = 0.42
MIN_PUTTS = 1.0
MAX_PUTTS = 3.0

# Distribution building
MIN_SHOTS_FOR_DISTRIBUTION = 3
DEFAULT_STD_OFFLINE = 5.0  # No lateral data recorded
STD_FLOOR_YARDS = 0.5
MIN_EXTRAPOLATED_STD = 2.0
IMPUTED_CARRY_CV = 0.04
IMPUTED_OFFLINE_CV = 0.05

# Distance-model candidate tolerances (yards)
SINGLE_CLUB_MAX_DISTANCE = 225
TWO_CLUB_MAX_DISTANCE = 425
SINGLE_CLUB_TOLERANCE = 40
TWO_CLUB_TOLERANCE = 60
LONG_HOLE_TOLERANCE = 80
TOP_APPROACHES = 3

# Grip-down guidance
GRIP_DOWN_YARDS_PER_INCH = 5
MAX_GRIP_DOWN_INCHES = 3

# Hazards
MIN_HAZARD_POINTS = 3
HAZARD_DROP_BACK_YARDS = 5
BIAS_DEADBAND_YARDS = 0.5  # Lateral bias / miss ignored at or below this

# Strategy generation (yards)
AGGRESSIVE_SHIFT_YARDS = 12
LAYUP_CARRY_GAP_YARDS = 20
BAIL_OUT_OFFSET_YARDS = 15
SAFE_LANDING_OFFSETS = (10, 20, 30)
PAR5_MID_FRACTION = 0.55

# Carry notes
CARRY_NOTE_MIN_YARDS = 20
CARRY_NOTE_BEYOND_YARDS = 50
CARRY_NOTE_CORRIDOR_DEG = 35
TIP_HAZARD_RADIUS_YARDS = 50

# Round plan
DEFAULT_KEY_HOLES = 4
GREEN_BIRDIE_THRESHOLD = 0.15
RED_BLOWUP_THRESHOLD = 0.20

VALID_MODES = ("scoring", "safe")


def _env_int(name: str, default: Optional[int], invalid: Optional[List[str]] = None) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        if invalid is not None:
            invalid.append(f"{name} must be an integer, got {raw!r}")
        return default


@dataclass
class Config:
    """Application configuration."""
    # Simulation settings
    default_trials: int = DEFAULT_TRIALS
    min_trials: int = MIN_TRIALS
    max_simulated_shots: int = MAX_SIMULATED_SHOTS

    # Strategy settings
    default_mode: str = "scoring"
    key_hole_count: int = DEFAULT_KEY_HOLES
    default_tee_box: str = ""

    # Reproducible runs (None = fresh entropy)
    seed: Optional[int] = None

    # Environment overrides that could not be parsed
    invalid_env: List[str] = field(default_factory=list, repr=False)

    def __post_init__(self):
        """Load overrides from environment."""
        self.default_trials = _env_int("GOLF_STRATEGY_TRIALS", self.default_trials, self.invalid_env)
        self.min_trials = _env_int("GOLF_STRATEGY_MIN_TRIALS", self.min_trials, self.invalid_env)
        self.max_simulated_shots = _env_int("GOLF_STRATEGY_MAX_WORK", self.max_simulated_shots, self.invalid_env)
        self.key_hole_count = _env_int("GOLF_STRATEGY_KEY_HOLES", self.key_hole_count, self.invalid_env)
        self.seed = _env_int("GOLF_STRATEGY_SEED", self.seed, self.invalid_env)
        self.default_mode = os.getenv("GOLF_STRATEGY_MODE", self.default_mode).strip().lower() or "scoring"
        self.default_tee_box = os.getenv("GOLF_STRATEGY_TEE_BOX", self.default_tee_box).strip()

    def validate_config(self) -> List[str]:
        """
        Check configuration values.
        Returns a list of error messages (empty if valid).
        """
        errors = list(self.invalid_env)
        if self.default_trials <= 0:
            errors.append("GOLF_STRATEGY_TRIALS must be a positive integer")
        if self.min_trials <= 0:
            errors.append("GOLF_STRATEGY_MIN_TRIALS must be a positive integer")
        if self.max_simulated_shots < self.min_trials:
            errors.append("GOLF_STRATEGY_MAX_WORK must be at least GOLF_STRATEGY_MIN_TRIALS")
        if self.default_mode not in VALID_MODES:
            errors.append(f"GOLF_STRATEGY_MODE must be one of {', '.join(VALID_MODES)}")
        if self.key_hole_count < 0:
            errors.append("GOLF_STRATEGY_KEY_HOLES cannot be negative")
        return errors

    def make_rng(self) -> np.random.Generator:
        """Random generator for a simulation run, seeded when configured."""
        return np.random.default_rng(self.seed)


def get_config() -> Config:
    """Get application configuration."""
    return Config()

"""
Data models for the Golf Strategy Optimizer.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .config import MIN_HAZARD_POINTS


class CourseDataError(ValueError):
    """Raised when a bag or course document cannot be turned into models."""


class StrategyMode(Enum):
    """Ranking objective for a hole or round."""
    SCORING = "scoring"  # Lowest expected strokes
    SAFE = "safe"        # Lowest blow-up risk


class StrategyType(Enum):
    """Qualitative flavor of a named plan."""
    SCORING = "scoring"
    SAFE = "safe"
    BALANCED = "balanced"


class ColorCode(Enum):
    """Traffic-light rating for a planned hole."""
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class HazardType(Enum):
    """Known hazard kinds."""
    BUNKER = "bunker"
    FAIRWAY_BUNKER = "fairway_bunker"
    GREENSIDE_BUNKER = "greenside_bunker"
    WATER = "water"
    OB = "ob"
    TREES = "trees"
    ROUGH = "rough"

    @property
    def label(self) -> str:
        """Short name used in notes and tips."""
        if self in (HazardType.BUNKER, HazardType.FAIRWAY_BUNKER, HazardType.GREENSIDE_BUNKER):
            return "bunker"
        if self == HazardType.OB:
            return "OB"
        return self.value


def _to_float(value: Any, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise CourseDataError(f"'{name}' must be numeric, got {value!r}")


def _to_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise CourseDataError(f"'{name}' must be an integer, got {value!r}")


def _yardage_map(value: Any, name: str) -> Dict[str, int]:
    if not isinstance(value, dict):
        raise CourseDataError(f"'{name}' must map tee boxes to yards, got {value!r}")
    return {str(k): _to_int(v, f"{name}.{k}") for k, v in value.items()}


def _number(data: Dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return _to_float(data[key], key)
    if default is None:
        raise CourseDataError(f"Missing required field '{keys[0]}'")
    return default


# ============================================================================
# Geometry
# ============================================================================

@dataclass(frozen=True)
class LatLng:
    """A latitude/longitude pair in decimal degrees."""
    lat: float
    lng: float

    @classmethod
    def from_dict(cls, data: Any) -> "LatLng":
        if isinstance(data, (list, tuple)) and len(data) >= 2:
            return cls(_to_float(data[0], "lat"), _to_float(data[1], "lng"))
        if not isinstance(data, dict):
            raise CourseDataError(f"Expected a coordinate, got {data!r}")
        return cls(_number(data, "lat"), _number(data, "lng", "lon"))

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class Coordinate(LatLng):
    """A point with elevation in meters (tee, pin, waypoints)."""
    elevation: float = 0.0

    @classmethod
    def from_dict(cls, data: Any) -> "Coordinate":
        point = LatLng.from_dict(data)
        elevation = _number(data, "elevation", default=0.0) if isinstance(data, dict) else 0.0
        return cls(point.lat, point.lng, elevation)

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng, "elevation": self.elevation}


def _polygon(data: Optional[List]) -> List[LatLng]:
    return [LatLng.from_dict(p) for p in (data or [])]


# ============================================================================
# Shot data
# ============================================================================

@dataclass
class Shot:
    """A single recorded (or synthetic) shot."""
    carry_yards: float
    offline_yards: Optional[float] = None  # +right / -left

    @classmethod
    def from_dict(cls, data: Dict) -> "Shot":
        if not isinstance(data, dict):
            raise CourseDataError(f"Expected a shot, got {data!r}")
        offline = data.get("offlineYards", data.get("offline_yards"))
        return cls(
            carry_yards=_number(data, "carryYards", "carry_yards", "carry"),
            offline_yards=_to_float(offline, "offlineYards") if offline is not None else None,
        )


@dataclass
class ClubShotGroup:
    """Shots grouped per club, as supplied by the yardage book."""
    club_id: str
    club_name: str
    shots: List[Shot] = field(default_factory=list)
    imputed: bool = False  # Estimated carry only, no real shots

    @classmethod
    def from_dict(cls, data: Dict) -> "ClubShotGroup":
        club_id = data.get("clubId", data.get("club_id"))
        if not club_id:
            raise CourseDataError("Shot group is missing 'clubId'")
        return cls(
            club_id=str(club_id),
            club_name=str(data.get("clubName", data.get("club_name", club_id))),
            shots=[Shot.from_dict(s) for s in data.get("shots", [])],
            imputed=bool(data.get("imputed", False)),
        )


@dataclass
class ClubDistribution:
    """Carry and lateral dispersion profile for one club (yards)."""
    club_id: str
    club_name: str
    mean_carry: float
    std_carry: float
    mean_offline: float = 0.0  # Signed lateral bias, +right / -left
    std_offline: float = 5.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ClubRef:
    """Club identity as reported in results."""
    club_id: str
    club_name: str


# ============================================================================
# Course geometry
# ============================================================================

@dataclass
class HazardFeature:
    """A penalty area on the hole."""
    type: Union[HazardType, str]
    polygon: List[LatLng] = field(default_factory=list)
    penalty: float = 1.0
    name: str = ""

    @property
    def label(self) -> str:
        if isinstance(self.type, HazardType):
            return self.type.label
        return str(self.type)

    @property
    def is_active(self) -> bool:
        """Polygons with fewer than three vertices never register a hit."""
        return len(self.polygon) >= MIN_HAZARD_POINTS

    @classmethod
    def from_dict(cls, data: Dict) -> "HazardFeature":
        raw_type = str(data.get("type", "bunker"))
        try:
            hazard_type: Union[HazardType, str] = HazardType(raw_type)
        except ValueError:
            hazard_type = raw_type
        return cls(
            type=hazard_type,
            polygon=_polygon(data.get("polygon")),
            penalty=_number(data, "penalty", default=1.0),
            name=str(data.get("name", "")),
        )


@dataclass
class HoleTarget:
    """A named waypoint on the hole (e.g. a layup zone)."""
    index: int
    coordinate: Coordinate

    @classmethod
    def from_dict(cls, data: Dict) -> "HoleTarget":
        return cls(
            index=_to_int(data.get("index", 0), "index"),
            coordinate=Coordinate.from_dict(data.get("coordinate", data)),
        )


@dataclass
class CourseHole:
    """Geometry and scoring data for one hole."""
    hole_number: int
    par: int
    tee: Coordinate
    pin: Coordinate
    heading: float = 0.0  # Advisory only
    yardages: Dict[str, int] = field(default_factory=dict)
    plays_like_yards: Optional[Dict[str, int]] = None
    center_line: List[LatLng] = field(default_factory=list)
    targets: List[HoleTarget] = field(default_factory=list)
    hazards: List[HazardFeature] = field(default_factory=list)
    fairway: List[LatLng] = field(default_factory=list)
    green: List[LatLng] = field(default_factory=list)
    notes: Optional[str] = None

    def scorecard_yardage(self, tee_box: str) -> int:
        """Scorecard yardage for the tee box (first listed if unknown)."""
        if tee_box in self.yardages:
            return self.yardages[tee_box]
        return next(iter(self.yardages.values()), 0)

    def plays_like_for(self, tee_box: str) -> Optional[int]:
        if self.plays_like_yards and tee_box in self.plays_like_yards:
            return self.plays_like_yards[tee_box]
        return None

    def distance_for(self, tee_box: str) -> float:
        """Playing distance: plays-like, scorecard, or measured tee-to-pin."""
        plays_like = self.plays_like_for(tee_box)
        if plays_like is not None:
            return plays_like
        if self.yardages:
            return self.scorecard_yardage(tee_box)
        from .geo import haversine_yards
        return haversine_yards(self.tee, self.pin)

    @classmethod
    def from_dict(cls, data: Dict) -> "CourseHole":
        if not isinstance(data, dict):
            raise CourseDataError(f"Expected a hole, got {data!r}")
        if "tee" not in data or "pin" not in data:
            raise CourseDataError(f"Hole {data.get('holeNumber', '?')} needs both 'tee' and 'pin'")
        plays_like = data.get("playsLikeYards", data.get("plays_like_yards"))
        return cls(
            hole_number=_to_int(data.get("holeNumber", data.get("hole_number", 1)), "holeNumber"),
            par=_to_int(data.get("par", 4), "par"),
            tee=Coordinate.from_dict(data["tee"]),
            pin=Coordinate.from_dict(data["pin"]),
            heading=_to_float(data.get("heading") or 0.0, "heading"),
            yardages=_yardage_map(data.get("yardages") or {}, "yardages"),
            plays_like_yards=_yardage_map(plays_like, "playsLikeYards") if plays_like else None,
            center_line=_polygon(data.get("centerLine", data.get("center_line"))),
            targets=[HoleTarget.from_dict(t) for t in data.get("targets", [])],
            hazards=[HazardFeature.from_dict(h) for h in data.get("hazards", [])],
            fairway=_polygon(data.get("fairway")),
            green=_polygon(data.get("green")),
            notes=data.get("notes"),
        )


@dataclass
class Course:
    """A course as a list of holes."""
    name: str
    holes: List[CourseHole] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict) -> "Course":
        return cls(
            name=str(data.get("name", "Unnamed Course")),
            holes=[CourseHole.from_dict(h) for h in data.get("holes", [])],
        )


# ============================================================================
# Plans and results
# ============================================================================

@dataclass
class PlannedShot:
    """One leg of a plan: which club, aimed where."""
    club_dist: ClubDistribution
    aim_point: LatLng


@dataclass
class NamedStrategyPlan:
    """A candidate plan for a hole, produced and consumed in one pass."""
    name: str
    type: StrategyType
    shots: List[PlannedShot] = field(default_factory=list)


@dataclass
class ApproachStrategy:
    """Distance-model recommendation."""
    clubs: List[ClubRef]
    expected_strokes: float
    label: str
    tip: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clubs": [asdict(c) for c in self.clubs],
            "expected_strokes": self.expected_strokes,
            "label": self.label,
            "tip": self.tip,
        }


@dataclass
class ScoreDistribution:
    """Probability of each score relative to par."""
    eagle: float = 0.0
    birdie: float = 0.0
    par: float = 0.0
    bogey: float = 0.0
    double: float = 0.0
    worse: float = 0.0

    @property
    def total(self) -> float:
        return self.eagle + self.birdie + self.par + self.bogey + self.double + self.worse

    @property
    def blowup(self) -> float:
        """P(double bogey or worse)."""
        return self.double + self.worse

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass
class AimPoint:
    """Where to aim a planned shot."""
    position: LatLng
    club_name: str
    shot_number: int
    carry: int  # Mean carry, yards
    carry_note: Optional[str] = None  # e.g. "+20y past bunker"
    tip: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": self.position.to_dict(),
            "club_name": self.club_name,
            "shot_number": self.shot_number,
            "carry": self.carry,
            "carry_note": self.carry_note,
            "tip": self.tip,
        }


@dataclass
class OptimizedStrategy:
    """A simulated named plan."""
    clubs: List[ClubRef]
    expected_strokes: float
    label: str
    strategy_name: str
    strategy_type: StrategyType
    score_distribution: ScoreDistribution
    blowup_risk: float
    aim_points: List[AimPoint] = field(default_factory=list)
    std_strokes: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clubs": [asdict(c) for c in self.clubs],
            "expected_strokes": self.expected_strokes,
            "std_strokes": self.std_strokes,
            "label": self.label,
            "strategy_name": self.strategy_name,
            "strategy_type": self.strategy_type.value,
            "score_distribution": self.score_distribution.to_dict(),
            "blowup_risk": self.blowup_risk,
            "aim_points": [a.to_dict() for a in self.aim_points],
        }


@dataclass
class HolePlan:
    """The chosen strategy for one hole of a round."""
    hole_number: int
    par: int
    yardage: int
    plays_like_yardage: Optional[int]
    strategy: OptimizedStrategy
    color_code: ColorCode
    carry_to_avoid: Optional[int] = None
    miss_side: Optional[str] = None
    strategy_spread: float = 0.0  # Worst minus best expected strokes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hole_number": self.hole_number,
            "par": self.par,
            "yardage": self.yardage,
            "plays_like_yardage": self.plays_like_yardage,
            "strategy": self.strategy.to_dict(),
            "color_code": self.color_code.value,
            "carry_to_avoid": self.carry_to_avoid,
            "miss_side": self.miss_side,
            "strategy_spread": self.strategy_spread,
        }


@dataclass
class GamePlan:
    """A course-level plan assembled hole by hole."""
    course_name: str
    tee_box: str
    mode: StrategyMode
    date: str
    total_expected: float
    breakdown: ScoreDistribution
    key_holes: List[int]
    total_plays_like: int
    holes: List[HolePlan] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "course_name": self.course_name,
            "tee_box": self.tee_box,
            "mode": self.mode.value,
            "date": self.date,
            "total_expected": self.total_expected,
            "breakdown": self.breakdown.to_dict(),
            "key_holes": list(self.key_holes),
            "total_plays_like": self.total_plays_like,
            "holes": [h.to_dict() for h in self.holes],
        }


@dataclass
class LandingZone:
    """1σ / 2σ landing ellipses around a shot's expected landing."""
    club_name: str
    center: LatLng
    sigma1: List[LatLng] = field(default_factory=list)
    sigma2: List[LatLng] = field(default_factory=list)

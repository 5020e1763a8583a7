"""
Landing-zone ellipses for a recommended strategy.
"""

from typing import List, Optional

from .config import BIAS_DEADBAND_YARDS
from .geo import ellipse_boundary, project_point
from .models import ApproachStrategy, ClubDistribution, LandingZone, LatLng, OptimizedStrategy

SIGMA_MULTIPLIERS = (1, 2)
ELLIPSE_POINTS = 36


def _zone(club_name: str, center: LatLng, bearing: float, club: ClubDistribution) -> LandingZone:
    rings = [
        ellipse_boundary(center, bearing, k * club.std_carry, k * club.std_offline, ELLIPSE_POINTS)
        for k in SIGMA_MULTIPLIERS
    ]
    return LandingZone(club_name=club_name, center=center, sigma1=rings[0], sigma2=rings[1])


def compute_landing_zones(
    strategy: Optional[ApproachStrategy],
    distributions: List[ClubDistribution],
    tee,
    bearing: float,
) -> List[LandingZone]:
    """
    Chain mean landings from the tee along a fixed bearing.
    Each club starts from the previous club's landing center; clubs without
    a distribution are skipped.
    """
    if strategy is None or not distributions:
        return []

    by_id = {d.club_id: d for d in distributions}
    zones = []
    position = LatLng(tee.lat, tee.lng)

    for ref in strategy.clubs:
        club = by_id.get(ref.club_id)
        if club is None:
            continue
        center = project_point(position, bearing, club.mean_carry)
        if abs(club.mean_offline) > BIAS_DEADBAND_YARDS:
            center = project_point(center, bearing + 90, club.mean_offline)
        zones.append(_zone(club.club_name, center, bearing, club))
        position = center

    return zones


def compute_landing_zones_from_aim_points(
    strategy: OptimizedStrategy,
    distributions: List[ClubDistribution],
    heading: float,
) -> List[LandingZone]:
    """Ellipses centered on a simulated strategy's aim points."""
    by_name = {d.club_name: d for d in distributions}
    zones = []
    for aim in strategy.aim_points:
        club = by_name.get(aim.club_name)
        if club is None:
            continue
        zones.append(_zone(aim.club_name, aim.position, heading, club))
    return zones

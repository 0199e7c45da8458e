"""Location verifier - compares a student's position with the classroom."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rollcall.session_store import AttendanceSession

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000.0
# Coordinates this close on both axes are treated as the same spot (~100m)
SAME_SPOT_DEGREES = 0.001


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two coordinates, in meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.atan2(math.sqrt(a), math.sqrt(1 - a))


@dataclass
class LocationVerification:
    """Outcome of a location check.

    Attributes:
        verified: Whether the student is close enough.
        message: Human-readable explanation.
        distance_m: Distance from the reference point in meters.
        allowed_radius_m: Radius accepted without a GPS tolerance warning.
        within_tolerance_only: True when accepted only thanks to the GPS tolerance band.
    """

    verified: bool
    message: str
    distance_m: float
    allowed_radius_m: float
    within_tolerance_only: bool = False


class LocationVerifier:
    """Advisory check layered on top of marking; never changes session state."""

    def __init__(self, radius_m: float = 100.0, tolerance_m: float = 500.0) -> None:
        """Initialize the verifier.

        Args:
            radius_m: Distance accepted outright.
            tolerance_m: Distance accepted with a GPS accuracy warning.
        """
        if tolerance_m < radius_m:
            raise ValueError("tolerance_m must not be smaller than radius_m")
        self.radius_m = radius_m
        self.tolerance_m = tolerance_m

    def distance(self, lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        if abs(lat1 - lat2) < SAME_SPOT_DEGREES and abs(lon1 - lon2) < SAME_SPOT_DEGREES:
            return 0.0
        return haversine_m(lat1, lon1, lat2, lon2)

    def verify(
        self, session: AttendanceSession, latitude: float, longitude: float
    ) -> LocationVerification:
        """Check a submitted coordinate pair against the session's reference point.

        Sessions without a reference point cannot be checked and pass.
        """
        if session.latitude is None or session.longitude is None:
            logger.info("Session %s has no reference point; location accepted", session.id)
            return LocationVerification(
                verified=True,
                message="No classroom location set for this session.",
                distance_m=0.0,
                allowed_radius_m=self.radius_m,
            )

        distance = self.distance(latitude, longitude, session.latitude, session.longitude)
        logger.debug("Distance to session %s reference point: %.1fm", session.id, distance)

        if distance <= self.radius_m:
            return LocationVerification(
                verified=True,
                message=f"Location verified! You are {distance:.1f} meters from the classroom.",
                distance_m=distance,
                allowed_radius_m=self.radius_m,
            )
        if distance <= self.tolerance_m:
            logger.warning(
                "Accepting location for session %s within GPS tolerance (%.1fm)",
                session.id,
                distance,
            )
            return LocationVerification(
                verified=True,
                message=(
                    f"Location verified with GPS tolerance! Distance: {distance:.1f} meters "
                    "(GPS accuracy may vary)."
                ),
                distance_m=distance,
                allowed_radius_m=self.radius_m,
                within_tolerance_only=True,
            )
        return LocationVerification(
            verified=False,
            message=(
                f"You are too far from the classroom ({distance:.1f} meters away). "
                "Please move closer."
            ),
            distance_m=distance,
            allowed_radius_m=self.radius_m,
        )

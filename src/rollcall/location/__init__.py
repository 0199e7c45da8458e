"""Location verification - advisory distance checks against a session's reference point."""

from rollcall.location.exceptions import LocationRejectedError
from rollcall.location.verifier import LocationVerification, LocationVerifier, haversine_m

__all__ = ["LocationRejectedError", "LocationVerification", "LocationVerifier", "haversine_m"]

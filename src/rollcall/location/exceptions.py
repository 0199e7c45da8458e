"""Exceptions for location verification."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rollcall.location.verifier import LocationVerification


class LocationRejectedError(Exception):
    """A submitted location is too far from the session's reference point."""

    def __init__(self, verification: LocationVerification) -> None:
        super().__init__(verification.message)
        self.verification = verification
